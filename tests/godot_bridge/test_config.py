"""
Tests for bridge configuration
"""
import os
from unittest.mock import patch

import pytest

from godot_bridge.config import (
    BridgeConfig,
    ProxyConfig,
    ReconnectPolicy,
    ServerConfig,
    TelemetryConfig,
    TransportType,
)


class TestBridgeConfig:
    """Test Godot connection configuration"""

    def test_default_values(self):
        config = BridgeConfig()
        assert config.url == "ws://localhost:8090/mcp_godot"
        assert config.connect_timeout == 10.0
        assert config.call_timeout == 10.0
        assert config.reconnect_policy == ReconnectPolicy.PASSIVE

    def test_from_env(self):
        with patch.dict(os.environ, {
            "GODOT_HOST": "10.0.0.5",
            "GODOT_PORT": "9000",
            "GODOT_PATH": "bridge",
            "GODOT_CALL_TIMEOUT": "2.5",
            "GODOT_RECONNECT": "ACTIVE",
        }):
            config = BridgeConfig.from_env()
            assert config.url == "ws://10.0.0.5:9000/bridge"
            assert config.call_timeout == 2.5
            assert config.reconnect_policy == ReconnectPolicy.ACTIVE

    def test_reconnect_factor_and_ping_interval(self):
        with patch.dict(os.environ, {"GODOT_RECONNECT_FACTOR": "1.0", "GODOT_PING_INTERVAL": "5"}):
            config = BridgeConfig.from_env()
            assert config.reconnect_factor == 1.0
            assert config.ping_interval == 5.0
            assert config.to_dict()["reconnect_factor"] == 1.0

    def test_ping_interval_disabled(self):
        with patch.dict(os.environ, {"GODOT_PING_INTERVAL": "none"}):
            assert BridgeConfig.from_env().ping_interval is None

    def test_reconnect_factor_below_one(self):
        with patch.dict(os.environ, {"GODOT_RECONNECT_FACTOR": "0.5"}):
            with pytest.raises(ValueError, match="GODOT_RECONNECT_FACTOR"):
                BridgeConfig.from_env()

    def test_tcp_url(self):
        with patch.dict(os.environ, {"GODOT_TRANSPORT": "tcp", "GODOT_PORT": "6005"}):
            config = BridgeConfig.from_env()
            assert config.transport == TransportType.TCP
            assert config.url == "tcp://localhost:6005"

    def test_invalid_port(self):
        with patch.dict(os.environ, {"GODOT_PORT": "eighty"}):
            with pytest.raises(ValueError, match="must be an integer"):
                BridgeConfig.from_env()
        with patch.dict(os.environ, {"GODOT_PORT": "70000"}):
            with pytest.raises(ValueError, match="out of range"):
                BridgeConfig.from_env()

    def test_invalid_timeout(self):
        with patch.dict(os.environ, {"GODOT_CONNECT_TIMEOUT": "0"}):
            with pytest.raises(ValueError, match="must be positive"):
                BridgeConfig.from_env()

    def test_unsupported_transport(self):
        with patch.dict(os.environ, {"GODOT_TRANSPORT": "carrier-pigeon"}):
            with pytest.raises(ValueError, match="Unsupported transport"):
                BridgeConfig.from_env()

    def test_unsupported_reconnect_policy(self):
        with patch.dict(os.environ, {"GODOT_RECONNECT": "sometimes"}):
            with pytest.raises(ValueError, match="Unsupported reconnect policy"):
                BridgeConfig.from_env()


class TestServerConfig:
    """Test top-level configuration"""

    def test_telemetry_enabled_by_endpoint(self):
        with patch.dict(os.environ, {"OTEL_EXPORTER_OTLP_ENDPOINT": "collector:4317"}, clear=True):
            config = TelemetryConfig.from_env()
            assert config.enabled is True
            assert config.otlp_endpoint == "collector:4317"

    def test_telemetry_disabled_by_default(self):
        with patch.dict(os.environ, {}, clear=True):
            assert TelemetryConfig.from_env().enabled is False

    def test_proxy_from_env(self):
        with patch.dict(os.environ, {"PROXY_HOST": "0.0.0.0", "PROXY_PORT": "3100"}):
            config = ProxyConfig.from_env()
            assert (config.host, config.port) == ("0.0.0.0", 3100)

    def test_to_dict(self):
        with patch.dict(os.environ, {"GODOT_LOG_LEVEL": "debug"}, clear=True):
            config = ServerConfig.from_env()
        data = config.to_dict()
        assert data["url"] == "ws://localhost:8090/mcp_godot"
        assert data["proxy"] == "127.0.0.1:3000"
        assert data["log_level"] == "DEBUG"
        assert data["telemetry_enabled"] is False
