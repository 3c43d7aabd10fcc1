"""
HTTP proxy for the Godot bridge

Lets tools that cannot speak MCP (scripts, curl, other editors) drive Godot
through plain HTTP. The proxy keeps one connection open and reconnects in the
background when Godot goes away.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from godot_bridge.commands.handler import GodotCommandHandler
from godot_bridge.commands.types import COMMAND_CATALOG, Command, CommandResponse
from godot_bridge.config import LOG_FORMAT, ReconnectPolicy, ServerConfig
from godot_bridge.errors import ErrorType
from godot_bridge.rpc.client import GodotClient
from godot_bridge.telemetry import setup_telemetry

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorType.REMOTE: 200,
    ErrorType.TIMEOUT: 504,
    ErrorType.CONNECTION: 503,
    ErrorType.SEND: 500,
}


class ExecuteRequest(BaseModel):
    method: Optional[str] = None
    params: Dict[str, Any] = Field(default_factory=dict)


def create_app(client: GodotClient) -> FastAPI:
    """Build the proxy application around a client"""
    handler = GodotCommandHandler(client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client.connection.reconnect_policy = ReconnectPolicy.ACTIVE
        logger.info("Starting Godot HTTP proxy")
        await client.start()
        try:
            yield
        finally:
            await client.stop()
            logger.info("Godot HTTP proxy stopped")

    app = FastAPI(
        title="Godot Bridge Proxy",
        description="HTTP access to the Godot editor",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health():
        return {"status": "ok", "connected": client.is_connected}

    @app.get("/commands")
    async def commands():
        return {"commands": COMMAND_CATALOG}

    @app.post("/execute")
    async def execute(request: ExecuteRequest):
        if not request.method:
            rejected = CommandResponse(success=False, error="Method is required",
                                       error_type=ErrorType.INVALID_PARAMETER)
            return JSONResponse(status_code=400, content=rejected.to_dict())
        if not client.is_connected:
            rejected = CommandResponse(success=False, error="Godot connection not available",
                                       error_type=ErrorType.CONNECTION)
            return JSONResponse(status_code=503, content=rejected.to_dict())

        response = await handler.handle(Command(type=request.method, params=request.params))
        status_code = 200
        if not response.success:
            status_code = ERROR_STATUS.get(response.error_type, 500)
        return JSONResponse(status_code=status_code, content=response.to_dict())

    return app


def main(config: Optional[ServerConfig] = None) -> None:
    config = config or ServerConfig.from_env()
    logging.basicConfig(level=config.log_level, format=LOG_FORMAT, stream=sys.stderr)
    setup_telemetry(config.telemetry)

    app = create_app(GodotClient(config.bridge))
    logger.info(f"Godot HTTP proxy listening on {config.proxy.host}:{config.proxy.port}")
    uvicorn.run(app, host=config.proxy.host, port=config.proxy.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
