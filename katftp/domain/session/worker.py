"""
Single-thread executor for session operations
"""
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable


class SessionWorker:
    """
    Runs blocking session operations off the presentation thread.
    
    There is exactly one worker thread, so operations submitted here never
    overlap on the same Session.
    """
    
    def __init__(self, name: str = "katftp-session"):
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)
    
    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """Queue fn(*args, **kwargs) behind any operation already running"""
        return self._executor.submit(fn, *args, **kwargs)
    
    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=True)
    
    def __enter__(self) -> "SessionWorker":
        return self
    
    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.shutdown()
