"""
Tests for client configuration
"""
import os
import pytest
from unittest.mock import patch

from daemon_rpc.config import ClientConfig, DEFAULT_HOST


class TestClientConfig:
    """Test client configuration"""

    def test_default_values(self):
        """Test default config values"""
        config = ClientConfig.default()
        assert config.host == DEFAULT_HOST == "http://localhost:8232"
        assert config.user == ""
        assert config.password == ""
        assert config.timeout_seconds == 30.0
        assert config.enable_tracing is True

    def test_config_from_env(self):
        """Test config creation from environment"""
        with patch.dict(os.environ, {
            "DAEMON_RPC_HOST": "http://10.0.0.5:18232",
            "DAEMON_RPC_USER": "rpcuser",
            "DAEMON_RPC_PASS": "rpcpass",
            "DAEMON_RPC_TIMEOUT": "2.5",
            "DAEMON_RPC_TRACING": "false",
        }):
            config = ClientConfig.from_env()
            assert config.host == "http://10.0.0.5:18232"
            assert config.user == "rpcuser"
            assert config.password == "rpcpass"
            assert config.timeout_seconds == 2.5
            assert config.enable_tracing is False

    def test_config_from_empty_env(self):
        """Test missing variables fall back to defaults"""
        with patch.dict(os.environ, {}, clear=True):
            assert ClientConfig.from_env() == ClientConfig.default()

    def test_custom_prefix(self):
        with patch.dict(os.environ, {"ZCASH_HOST": "http://zcash:8232"}, clear=True):
            assert ClientConfig.from_env(prefix="ZCASH_").host == "http://zcash:8232"

    @pytest.mark.parametrize("timeout", ["soon", "0", "-1"])
    def test_invalid_timeout(self, timeout):
        """Test error on invalid timeout"""
        with patch.dict(os.environ, {"DAEMON_RPC_TIMEOUT": timeout}):
            with pytest.raises(ValueError, match="Invalid DAEMON_RPC_TIMEOUT"):
                ClientConfig.from_env()

    def test_config_to_dict_hides_password(self):
        """Test config serialization to dictionary"""
        config_dict = ClientConfig(user="u", password="secret").to_dict()
        assert "password" not in config_dict
        assert "secret" not in config_dict.values()
        assert config_dict["has_password"] is True
        assert config_dict["user"] == "u"
