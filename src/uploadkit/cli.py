#!/usr/bin/env python3
"""
Command line entry point for uploadkit.
"""

import asyncio
import os
import sys
from pathlib import Path

import click
import uvicorn

from uploadkit import __version__
from uploadkit.logging import configure_logging, get_logger
from uploadkit.storage import StorageException, UploadedFile, create_storage_provider
from uploadkit.storage.naming import content_type_for

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="uploadkit")
@click.option("--debug", is_flag=True, default=False, help="Human-readable debug logs")
def cli(debug: bool) -> None:
    """uploadkit CLI - upload and remove files on the configured storage backend."""
    configure_logging(debug=debug)


@cli.command()
@click.argument("source")
@click.option(
    "--content-type",
    default=None,
    help="MIME type of a local file (guessed from its name by default)",
)
def upload(source: str, content_type: str | None) -> None:
    """Upload SOURCE (a URL or a local file) and print its public URL."""

    async def do_upload() -> str:
        provider = create_storage_provider()

        if source.startswith(("http://", "https://", "data:")):
            return await provider.upload_simple(source)

        path = Path(source)
        buffer = path.read_bytes()
        stored = await provider.upload_file(
            UploadedFile(
                buffer=buffer,
                mimetype=content_type or content_type_for(path.name),
                originalname=path.name,
                size=len(buffer),
            )
        )
        return stored.url

    try:
        url = asyncio.run(do_upload())
    except (StorageException, OSError) as e:
        logger.error("Upload failed", source=source, error=str(e))
        click.echo(f"✗ Upload failed: {e}", err=True)
        sys.exit(1)

    click.echo(url)


@cli.command()
@click.argument("reference")
def remove(reference: str) -> None:
    """Remove REFERENCE (a public URL or a bare filename), best-effort."""
    try:
        provider = create_storage_provider()
    except StorageException as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    asyncio.run(provider.remove_file(reference))
    click.echo(f"✓ Removed {reference}")


@cli.command()
@click.option("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
@click.option("--port", default=8088, type=int, help="Port to bind to (default: 8088)")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: info)",
)
def serve(host: str, port: int, reload: bool, log_level: str) -> None:
    """Start the uploadkit API server."""
    configure_logging(debug=(log_level == "debug"), level=log_level)

    logger.info("Starting uploadkit API server", host=host, port=port, reload=reload)

    # The app module reads its settings at import time
    if log_level == "debug":
        os.environ["UPLOADKIT_DEBUG"] = "true"
    os.environ.setdefault("UPLOADKIT_LOG_LEVEL", log_level)

    try:
        uvicorn.run(
            "uploadkit.api.app:app",
            host=host,
            port=port,
            reload=reload,
            log_level=log_level,
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested by user")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
