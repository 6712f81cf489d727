"""
Tests for credential strategies and private key loading
"""
import paramiko
import pytest

from katftp.core.exceptions import KeyParseError, KeyReadError
from katftp.domain.auth import AuthKind, KeyAuth, PasswordAuth, load_private_key


@pytest.fixture(scope="module")
def rsa_key():
    return paramiko.RSAKey.generate(2048)


class TestPasswordAuth:
    """Password strategy"""
    
    def test_prepare_returns_password_kwargs(self):
        auth = PasswordAuth("hunter2")
        assert auth.kind == AuthKind.PASSWORD
        assert auth.prepare() == {"password": "hunter2"}
    
    def test_password_hidden_from_repr(self):
        assert "hunter2" not in repr(PasswordAuth("hunter2"))


class TestLoadPrivateKey:
    """Private key file parsing"""
    
    def test_missing_file(self, tmp_path):
        with pytest.raises(KeyReadError):
            load_private_key(str(tmp_path / "nope"))
    
    def test_directory_is_unreadable(self, tmp_path):
        with pytest.raises(KeyReadError):
            load_private_key(str(tmp_path))
    
    def test_garbage_content(self, tmp_path):
        path = tmp_path / "id_garbage"
        path.write_text("this is not a key\n")
        with pytest.raises(KeyParseError):
            load_private_key(str(path))
    
    def test_binary_content(self, tmp_path):
        path = tmp_path / "id_binary"
        path.write_bytes(b"\xff\xfe\x00\x81" * 16)
        with pytest.raises(KeyParseError):
            load_private_key(str(path))
    
    def test_rsa_key(self, tmp_path, rsa_key):
        path = tmp_path / "id_rsa"
        rsa_key.write_private_key_file(str(path))
        
        key = load_private_key(str(path))
        
        assert isinstance(key, paramiko.RSAKey)
        assert key.get_fingerprint() == rsa_key.get_fingerprint()
    
    def test_encrypted_key_without_passphrase(self, tmp_path, rsa_key):
        path = tmp_path / "id_rsa_enc"
        rsa_key.write_private_key_file(str(path), password="opensesame")
        with pytest.raises(KeyParseError, match="passphrase"):
            load_private_key(str(path))
    
    def test_encrypted_key_with_passphrase(self, tmp_path, rsa_key):
        path = tmp_path / "id_rsa_enc"
        rsa_key.write_private_key_file(str(path), password="opensesame")
        key = load_private_key(str(path), passphrase="opensesame")
        assert key.get_fingerprint() == rsa_key.get_fingerprint()


class TestKeyAuth:
    """Key strategy"""
    
    def test_prepare_returns_pkey(self, tmp_path, rsa_key):
        path = tmp_path / "id_rsa"
        rsa_key.write_private_key_file(str(path))
        
        auth = KeyAuth(str(path))
        credentials = auth.prepare()
        
        assert auth.kind == AuthKind.KEY
        assert set(credentials) == {"pkey"}
        assert isinstance(credentials["pkey"], paramiko.RSAKey)
    
    def test_prepare_fails_on_missing_key(self, tmp_path):
        with pytest.raises(KeyReadError):
            KeyAuth(str(tmp_path / "missing")).prepare()
