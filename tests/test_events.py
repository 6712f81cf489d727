"""
Tests for the event bus and the presentation projection
"""
import pytest

from katftp.core.events import EventBus
from katftp.domain.auth import AuthKind
from katftp.domain.session import ConnectionState, Session, SessionWorker, project


class TestEventBus:
    """Publish / subscribe"""
    
    def test_subscriber_receives_matching_events(self):
        bus = EventBus()
        received = []
        bus.subscribe(received.append, name="a")
        
        bus.publish("a", value=1)
        bus.publish("b", value=2)
        
        assert [e.metadata["value"] for e in received] == [1]
    
    def test_wildcard_subscriber(self):
        bus = EventBus()
        received = []
        bus.subscribe(received.append)
        
        bus.publish("a")
        bus.publish("b")
        
        assert [e.name for e in received] == ["a", "b"]
    
    def test_unsubscribe(self):
        bus = EventBus()
        received = []
        unsubscribe = bus.subscribe(received.append)
        
        unsubscribe()
        unsubscribe()
        bus.publish("a")
        
        assert received == []
    
    def test_failing_subscriber_does_not_block_others(self):
        bus = EventBus()
        received = []
        
        def broken(event):
            raise RuntimeError("boom")
        
        bus.subscribe(broken)
        bus.subscribe(received.append)
        bus.publish("a")
        
        assert len(received) == 1
    
    def test_history_is_bounded(self):
        bus = EventBus(history_size=3)
        for i in range(5):
            bus.publish("tick", i=i)
        
        assert [e.metadata["i"] for e in bus.get_events("tick")] == [2, 3, 4]
        
        bus.clear()
        assert bus.get_events() == []


class _Client:
    def close(self):
        pass


class _SFTP:
    def close(self):
        pass


class TestProject:
    """Connection state -> available actions"""
    
    def test_disconnected(self):
        view = project(ConnectionState.DISCONNECTED)
        
        assert not view.connected
        assert view.can_connect
        assert not view.can_disconnect
        assert not view.can_browse
        assert not view.can_transfer
        assert view.status_text == "Not connected"
    
    def test_connecting(self):
        view = project(ConnectionState.CONNECTING)
        
        assert not view.connected
        assert not view.can_connect
        assert not view.can_transfer
    
    def test_connected(self):
        session = Session("example.com", 22, "alice", AuthKind.KEY, _Client(), _SFTP())
        
        view = project(ConnectionState.CONNECTED, session)
        
        assert view.connected
        assert view.can_disconnect
        assert view.can_browse
        assert view.can_transfer
        assert view.status_text == "Connected to alice@example.com:22 (key)"
    
    def test_connected_without_session(self):
        assert not project(ConnectionState.CONNECTED, None).connected


class TestSessionWorker:
    """Single background thread"""
    
    def test_runs_in_submission_order(self):
        order = []
        with SessionWorker() as worker:
            futures = [worker.submit(order.append, i) for i in range(5)]
            for f in futures:
                f.result(timeout=5)
        
        assert order == [0, 1, 2, 3, 4]
    
    def test_exceptions_surface_through_future(self):
        with SessionWorker() as worker:
            future = worker.submit(int, "not a number")
            with pytest.raises(ValueError):
                future.result(timeout=5)
