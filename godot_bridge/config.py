"""
Configuration settings for the Godot bridge
"""
import os
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from enum import Enum


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

DEFAULT_GODOT_HOST = "localhost"
DEFAULT_GODOT_PORT = 8090
DEFAULT_GODOT_PATH = "/mcp_godot"
DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_CALL_TIMEOUT = 10.0


class TransportType(Enum):
    """Supported transports to the Godot editor plugin"""
    WEBSOCKET = "websocket"
    TCP = "tcp"


class ReconnectPolicy(Enum):
    """What the connection manager does after an unexpected close"""
    PASSIVE = "passive"  # wait for the next call
    ACTIVE = "active"  # schedule reconnect attempts in the background


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw, 10)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def _env_interval(name: str, default: Optional[float]) -> Optional[float]:
    """Like _env_float, but "0" or "none" disables the interval"""
    raw = os.getenv(name)
    if raw is not None and raw.strip().lower() in ("0", "none", "off"):
        return None
    return _env_float(name, default)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class BridgeConfig:
    """Connection settings for the Godot editor endpoint"""
    host: str = DEFAULT_GODOT_HOST
    port: int = DEFAULT_GODOT_PORT
    path: str = DEFAULT_GODOT_PATH
    transport: TransportType = TransportType.WEBSOCKET
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    call_timeout: float = DEFAULT_CALL_TIMEOUT
    reconnect_policy: ReconnectPolicy = ReconnectPolicy.PASSIVE
    reconnect_delay: float = 5.0
    reconnect_max_delay: float = 60.0
    reconnect_factor: float = 2.0
    ping_interval: Optional[float] = 20.0

    @property
    def url(self) -> str:
        """Endpoint URL for the configured transport"""
        if self.transport == TransportType.TCP:
            return f"tcp://{self.host}:{self.port}"
        path = self.path if self.path.startswith("/") else f"/{self.path}"
        return f"ws://{self.host}:{self.port}{path}"

    @classmethod
    def from_env(cls) -> "BridgeConfig":
        """Create config from environment variables"""
        port = _env_int("GODOT_PORT", DEFAULT_GODOT_PORT)
        if not 0 < port < 65536:
            raise ValueError(f"GODOT_PORT out of range: {port}")

        transport = os.getenv("GODOT_TRANSPORT", TransportType.WEBSOCKET.value).strip().lower()
        reconnect = os.getenv("GODOT_RECONNECT", ReconnectPolicy.PASSIVE.value).strip().lower()
        try:
            transport_type = TransportType(transport)
        except ValueError:
            raise ValueError(f"Unsupported transport: {transport}")
        try:
            reconnect_policy = ReconnectPolicy(reconnect)
        except ValueError:
            raise ValueError(f"Unsupported reconnect policy: {reconnect}")

        # 1.0 gives a fixed delay between attempts
        reconnect_factor = _env_float("GODOT_RECONNECT_FACTOR", 2.0)
        if reconnect_factor < 1.0:
            raise ValueError(f"GODOT_RECONNECT_FACTOR must be >= 1.0, got {reconnect_factor}")

        return cls(
            host=os.getenv("GODOT_HOST", DEFAULT_GODOT_HOST),
            port=port,
            path=os.getenv("GODOT_PATH", DEFAULT_GODOT_PATH),
            transport=transport_type,
            connect_timeout=_env_float("GODOT_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT),
            call_timeout=_env_float("GODOT_CALL_TIMEOUT", DEFAULT_CALL_TIMEOUT),
            reconnect_policy=reconnect_policy,
            reconnect_delay=_env_float("GODOT_RECONNECT_DELAY", 5.0),
            reconnect_max_delay=_env_float("GODOT_RECONNECT_MAX_DELAY", 60.0),
            reconnect_factor=reconnect_factor,
            ping_interval=_env_interval("GODOT_PING_INTERVAL", 20.0),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "url": self.url,
            "transport": self.transport.value,
            "connect_timeout": self.connect_timeout,
            "call_timeout": self.call_timeout,
            "reconnect_policy": self.reconnect_policy.value,
            "reconnect_delay": self.reconnect_delay,
            "reconnect_max_delay": self.reconnect_max_delay,
            "reconnect_factor": self.reconnect_factor,
            "ping_interval": self.ping_interval,
        }


@dataclass
class TelemetryConfig:
    """OpenTelemetry export settings"""
    enabled: bool = False
    service_name: str = "mcp-godot"
    otlp_endpoint: str = "localhost:4317"
    export_interval_ms: int = 5000

    @classmethod
    def from_env(cls) -> "TelemetryConfig":
        endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
        return cls(
            enabled=_env_bool("GODOT_TELEMETRY", bool(endpoint)),
            service_name=os.getenv("OTEL_SERVICE_NAME", "mcp-godot"),
            otlp_endpoint=endpoint or "localhost:4317",
        )


@dataclass
class ProxyConfig:
    """HTTP proxy listen address"""
    host: str = "127.0.0.1"
    port: int = 3000

    @classmethod
    def from_env(cls) -> "ProxyConfig":
        return cls(
            host=os.getenv("PROXY_HOST", "127.0.0.1"),
            port=_env_int("PROXY_PORT", 3000),
        )


@dataclass
class ServerConfig:
    """Top-level configuration for the MCP server and the HTTP proxy"""
    bridge: BridgeConfig = field(default_factory=BridgeConfig)
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)
    proxy: ProxyConfig = field(default_factory=ProxyConfig)
    log_level: str = "INFO"

    @classmethod
    def default(cls) -> "ServerConfig":
        """Create default configuration"""
        return cls()

    @classmethod
    def from_env(cls) -> "ServerConfig":
        return cls(
            bridge=BridgeConfig.from_env(),
            telemetry=TelemetryConfig.from_env(),
            proxy=ProxyConfig.from_env(),
            log_level=os.getenv("GODOT_LOG_LEVEL", "INFO").upper(),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = self.bridge.to_dict()
        data.update({
            "telemetry_enabled": self.telemetry.enabled,
            "service_name": self.telemetry.service_name,
            "proxy": f"{self.proxy.host}:{self.proxy.port}",
            "log_level": self.log_level,
        })
        return data
