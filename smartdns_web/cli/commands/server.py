"""Server commands."""

import click
import uvicorn

from smartdns_web.cli.utils import info
from smartdns_web.core.settings import get_app_settings, get_logging_settings


@click.command()
@click.option("--host", default=None, help="Host to bind (default: APP_HOST)")
@click.option("--port", default=None, type=int, help="Port to bind (default: APP_PORT)")
@click.option("--reload/--no-reload", default=False, help="Enable auto-reload on code changes")
@click.option(
    "--access-log/--no-access-log",
    default=True,
    help="Enable uvicorn access logging",
)
def serve(host: str | None, port: int | None, reload: bool, access_log: bool) -> None:
    """Run the HTTP API with uvicorn."""
    settings = get_app_settings()
    host = host or settings.host
    port = port or settings.port

    info(f"Server will run at: http://{host}:{port}{settings.api_prefix}")
    info(f"Environment: {settings.environment}")

    uvicorn.run(
        "smartdns_web.app.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        access_log=access_log,
        log_level=get_logging_settings().level.lower(),
    )
