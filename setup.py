from setuptools import setup, find_packages

setup(
    name="mcp_godot_bridge",
    version="0.1.0",
    description="MCP Godot Bridge - MCP server and HTTP proxy for the Godot editor",
    author="MCP Godot Team",
    packages=find_packages(include=["godot_bridge", "godot_bridge.*"]),
    install_requires=[
        "websockets>=13.0",
        "mcp>=1.3.0,<2",
        "fastapi>=0.100.0",
        "uvicorn>=0.23.0",
        "pydantic>=2.0.0",
        "opentelemetry-api>=1.14.0",
        "opentelemetry-sdk>=1.14.0",
        "opentelemetry-exporter-otlp>=1.14.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov",
            "httpx",
            "black",
            "isort",
            "pylint",
        ],
    },
    entry_points={
        "console_scripts": [
            "mcp-godot=godot_bridge.server.app:main",
            "mcp-godot-proxy=godot_bridge.proxy.app:main",
        ],
    },
    python_requires=">=3.10",
)
