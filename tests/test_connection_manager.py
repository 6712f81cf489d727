"""
Tests for the connection lifecycle
"""
import socket

import paramiko
import pytest

from katftp.core.client import RemoteClient, RejectUnknownHostPolicy
from katftp.core.events import CONNECTION_STATE
from katftp.core.exceptions import (
    AuthError,
    DialError,
    HostKeyError,
    KeyReadError,
    NotConnectedError,
)
from katftp.domain.auth import AuthKind
from katftp.domain.session import ConnectionManager, ConnectionState


def _free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class TestInitialState:
    """Fresh manager"""
    
    def test_not_connected(self, manager):
        assert manager.state == ConnectionState.DISCONNECTED
        assert manager.session is None
        assert not manager.is_connected()
    
    def test_disconnect_when_not_connected(self, manager, client_factory):
        manager.disconnect()
        assert client_factory.calls == []


class TestConnect:
    """Successful connects"""
    
    def test_password_connect(self, manager, client_factory):
        session = manager.connect("example.com", "alice", "secret", port=2222)
        
        assert manager.is_connected()
        assert manager.state == ConnectionState.CONNECTED
        assert session.address == "alice@example.com:2222"
        assert session.auth_kind == AuthKind.PASSWORD
        
        client = client_factory.clients[0]
        assert client.credentials == {"password": "secret"}
        assert client.config["host"] == "example.com"
        assert client.config["port"] == 2222
        assert client.config["accept_unknown_hosts"] is False
        assert client_factory.calls == ["client.connect", "client.open_sftp"]
    
    def test_key_connect(self, manager, client_factory, tmp_path):
        key_path = tmp_path / "id_rsa"
        paramiko.RSAKey.generate(2048).write_private_key_file(str(key_path))
        
        session = manager.connect_with_key("example.com", "alice", str(key_path))
        
        assert session.auth_kind == AuthKind.KEY
        assert isinstance(client_factory.clients[0].credentials["pkey"], paramiko.RSAKey)
    
    def test_reconnect_closes_previous_session(self, manager, client_factory):
        first = manager.connect("one.example.com", "alice", "secret")
        second = manager.connect("two.example.com", "bob", "secret")
        
        assert not first.connected
        assert second.connected
        assert manager.session is second
        assert client_factory.calls == [
            "client.connect", "client.open_sftp",
            "sftp.close", "client.close",
            "client.connect", "client.open_sftp",
        ]


class TestConnectFailures:
    """Failed connects leave the manager disconnected"""
    
    def test_refused_port(self, event_bus):
        manager = ConnectionManager(timeout=5, event_bus=event_bus)
        with pytest.raises(DialError):
            manager.connect("127.0.0.1", "alice", "secret", port=_free_port())
        
        assert not manager.is_connected()
        assert manager.state == ConnectionState.DISCONNECTED
    
    def test_missing_key_never_dials(self, manager, client_factory, tmp_path):
        with pytest.raises(KeyReadError):
            manager.connect_with_key("example.com", "alice", str(tmp_path / "missing"))
        
        assert client_factory.clients == []
        assert manager.state == ConnectionState.DISCONNECTED
    
    def test_missing_key_keeps_existing_session(self, manager, tmp_path):
        session = manager.connect("example.com", "alice", "secret")
        
        with pytest.raises(KeyReadError):
            manager.connect_with_key("other.example.com", "alice", str(tmp_path / "missing"))
        
        assert manager.session is session
        assert session.connected
    
    def test_auth_failure(self, manager, client_factory):
        client_factory.connect_error = AuthError("Authentication failed")
        
        with pytest.raises(AuthError):
            manager.connect("example.com", "alice", "wrong")
        
        assert not manager.is_connected()
        assert client_factory.calls == ["client.connect", "client.close"]
    
    def test_sftp_failure_closes_client(self, manager, client_factory):
        client_factory.sftp_error = DialError("Failed to create SFTP client")
        
        with pytest.raises(DialError):
            manager.connect("example.com", "alice", "secret")
        
        assert manager.session is None
        assert client_factory.calls == ["client.connect", "client.open_sftp", "client.close"]
    
    def test_interrupted_dial_closes_client(self, manager, client_factory, event_bus):
        client_factory.connect_error = KeyboardInterrupt()
        
        with pytest.raises(KeyboardInterrupt):
            manager.connect("example.com", "alice", "secret")
        
        assert manager.session is None
        assert manager.state == ConnectionState.DISCONNECTED
        assert client_factory.calls == ["client.connect", "client.close"]
        states = [e.metadata["state"] for e in event_bus.get_events(CONNECTION_STATE)]
        assert states[-1] == ConnectionState.DISCONNECTED
    
    def test_client_construction_failure(self, manager, client_factory):
        client_factory.factory_error = RuntimeError("bad client config")
        
        with pytest.raises(RuntimeError):
            manager.connect("example.com", "alice", "secret")
        
        assert manager.session is None
        assert manager.state == ConnectionState.DISCONNECTED
        assert client_factory.calls == []


class TestDisconnect:
    """Closing sessions"""
    
    def test_closes_sftp_before_transport(self, manager, client_factory, session):
        manager.disconnect()
        
        assert client_factory.calls[-2:] == ["sftp.close", "client.close"]
        assert not session.connected
        assert manager.session is None
        assert manager.state == ConnectionState.DISCONNECTED
    
    def test_close_errors_are_swallowed(self, manager, client_factory, session):
        client = client_factory.clients[0]
        client.sftp.fail["close"] = OSError("channel gone")
        client.close_error = EOFError()
        
        manager.disconnect()
        
        assert not manager.is_connected()
        assert client_factory.calls[-2:] == ["sftp.close", "client.close"]
    
    def test_second_disconnect_is_noop(self, manager, client_factory, session):
        manager.disconnect()
        calls = list(client_factory.calls)
        manager.disconnect()
        assert client_factory.calls == calls
    
    def test_closed_session_refuses_sftp(self, manager, session):
        manager.disconnect()
        with pytest.raises(NotConnectedError):
            session.sftp
    
    def test_context_manager_disconnects(self, client_factory, event_bus):
        with ConnectionManager(client_factory=client_factory, event_bus=event_bus) as manager:
            manager.connect("example.com", "alice", "secret")
        assert not manager.is_connected()


class TestStateEvents:
    """State transitions are published"""
    
    def test_connect_and_disconnect_events(self, manager, event_bus):
        manager.connect("example.com", "alice", "secret")
        manager.disconnect()
        
        states = [e.metadata["state"] for e in event_bus.get_events(CONNECTION_STATE)]
        assert states == [
            ConnectionState.CONNECTING,
            ConnectionState.CONNECTED,
            ConnectionState.DISCONNECTED,
        ]
    
    def test_failed_connect_events(self, manager, client_factory, event_bus):
        client_factory.connect_error = DialError("refused")
        with pytest.raises(DialError):
            manager.connect("example.com", "alice", "secret")
        
        states = [e.metadata["state"] for e in event_bus.get_events(CONNECTION_STATE)]
        assert states == [ConnectionState.CONNECTING, ConnectionState.DISCONNECTED]


class TestRemoteClient:
    """Host key policy selection"""
    
    def test_rejects_unknown_hosts_by_default(self):
        client = RemoteClient("example.com", "alice")
        assert isinstance(client.client._policy, RejectUnknownHostPolicy)
    
    def test_opt_in_accepts_unknown_hosts(self):
        client = RemoteClient("example.com", "alice", accept_unknown_hosts=True)
        assert isinstance(client.client._policy, paramiko.AutoAddPolicy)
    
    def test_reject_policy_raises_host_key_error(self):
        key = paramiko.RSAKey.generate(2048)
        with pytest.raises(HostKeyError):
            RejectUnknownHostPolicy().missing_host_key(None, "example.com", key)
