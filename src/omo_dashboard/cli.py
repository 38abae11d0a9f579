"""CLI entry point for omo-dashboard."""

import logging
import os

import click
import uvicorn

from .config import get_log_level, get_project_root, get_storage_root
from .dashboard import StaticDashboardStore
from .server import create_app


@click.group()
def main():
    """Read-only dashboard over an OpenCode session store."""
    pass


@main.command()
@click.option("--port", default=8080, help="Port to serve on.")
@click.option("--host", default="127.0.0.1", help="Host to bind to.")
@click.option(
    "--storage-root",
    type=click.Path(file_okay=False),
    default=None,
    help="OpenCode storage directory (default: $OMO_DASHBOARD_STORAGE_ROOT or ~/.local/share/opencode/storage).",
)
@click.option(
    "--project-root",
    type=click.Path(file_okay=False),
    default=None,
    help="Project whose sessions are listed (default: $OMO_DASHBOARD_PROJECT_ROOT or the current directory).",
)
@click.option(
    "--log-level",
    type=click.Choice(["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"], case_sensitive=False),
    default=None,
    help="Logging level (default: $OMO_DASHBOARD_LOG_LEVEL or INFO).",
)
def serve(port: int, host: str, storage_root, project_root, log_level):
    """Start the web interface."""
    logging.basicConfig(
        level=(log_level or get_log_level()).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    storage_root = storage_root or get_storage_root()
    project_root = os.path.abspath(project_root) if project_root else get_project_root()

    app = create_app(StaticDashboardStore(), storage_root=storage_root, project_root=project_root)
    click.echo(f"Starting omo-dashboard on http://{host}:{port}")
    click.echo(f"  storage: {storage_root}")
    click.echo(f"  project: {project_root}")
    uvicorn.run(app, host=host, port=port, reload=False)
