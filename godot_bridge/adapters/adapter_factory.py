"""
Adapter factory

Builds transports for the configured connection type.
"""

from typing import Callable

from godot_bridge.adapters.adapter_interface import TransportInterface
from godot_bridge.adapters.tcp.transport import LineTransport
from godot_bridge.adapters.websocket.transport import WebSocketTransport
from godot_bridge.config import BridgeConfig, TransportType


class AdapterFactory:
    """Adapter factory, used to create transport instances"""

    @staticmethod
    def create_transport(config: BridgeConfig) -> TransportInterface:
        """Create a fresh, unopened transport

        Args:
            config: Bridge configuration

        Returns:
            TransportInterface: transport instance

        Raises:
            ValueError: invalid transport type
        """
        if config.transport == TransportType.WEBSOCKET:
            return WebSocketTransport(config.url, ping_interval=config.ping_interval)
        elif config.transport == TransportType.TCP:
            return LineTransport(config.host, config.port)
        else:
            raise ValueError(f"Invalid transport type: {config.transport}")

    @staticmethod
    def transport_factory(config: BridgeConfig) -> Callable[[], TransportInterface]:
        """Return a zero-argument factory; every connect attempt gets a new transport"""
        # Fail fast on bad configuration instead of on the first connect
        AdapterFactory.create_transport(config)
        return lambda: AdapterFactory.create_transport(config)
