# cli.py
import logging
import sys
from pathlib import Path
from typing import Optional

import click
import pydantic
import requests
from dotenv import load_dotenv

from board_proxy.config.settings import Settings, get_settings

# Configure logging
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Load settings, optionally from a specific .env file first.

    Raises:
        FileNotFoundError: if ``env_file`` is given but does not exist
        pydantic.ValidationError: if required configuration is missing
    """
    if env_file:
        env_path = Path(env_file)
        if not env_path.exists():
            raise FileNotFoundError(f"Environment file not found: {env_path}")
        load_dotenv(env_path, override=True)
    # Clear the settings cache and return fresh instance
    get_settings.cache_clear()
    return get_settings()


def _settings_or_exit(env_file: Optional[str]) -> Settings:
    try:
        return load_settings(env_file)
    except FileNotFoundError as e:
        configure_logging("INFO")
        logger.error(str(e))
        sys.exit(1)
    except pydantic.ValidationError as e:
        configure_logging("INFO")
        missing = ", ".join(str(err["loc"][0]).upper() for err in e.errors() if err.get("loc"))
        logger.error(f"Invalid configuration ({missing}); refusing to start")
        sys.exit(1)


@click.group()
def cli():
    """Board proxy: forward uploads and item creation to monday.com"""
    pass


@cli.command()
@click.option("--host", default=None, help="Interface to bind (defaults to HOST or 0.0.0.0)")
@click.option("--port", default=None, type=int, help="Port to listen on (defaults to PORT or 4000)")
@click.option("--env-file", default=None, help="Load this .env file before reading settings")
def serve(host, port, env_file):
    """Run the proxy with uvicorn"""
    import uvicorn
    from board_proxy.main import create_app

    settings = _settings_or_exit(env_file)
    configure_logging(settings.log_level)

    bind_host = host or settings.host
    bind_port = port or settings.port
    logger.info(f"Server running on port {bind_port}")
    uvicorn.run(
        create_app(settings),
        host=bind_host,
        port=bind_port,
        log_level=settings.log_level.lower(),
    )


@cli.command()
@click.option("--env-file", default=None, help="Load this .env file before reading settings")
def show_config(env_file):
    """Show current configuration"""
    settings = _settings_or_exit(env_file)

    print("Current Configuration:")
    for key, value in settings.redacted().items():
        print(f"  {key}: {value}")


@cli.command()
@click.option("--url", default=None, help="Base URL of a running proxy (defaults to http://localhost:PORT)")
@click.option("--timeout", default=5.0, show_default=True, help="Seconds to wait for a response")
def healthcheck(url, timeout):
    """Probe /health of a running proxy; exit 0 when it answers OK"""
    if url is None:
        port = Settings.model_fields["port"].default
        try:
            port = get_settings().port
        except pydantic.ValidationError:
            pass
        url = f"http://localhost:{port}"

    target = f"{url.rstrip('/')}/health"
    try:
        response = requests.get(target, timeout=timeout)
    except requests.exceptions.RequestException as e:
        print(f"❌ {target} unreachable: {e}")
        sys.exit(1)

    if response.status_code == 200 and response.text == "OK":
        print(f"✅ {target} OK")
        return
    print(f"❌ {target} answered {response.status_code}: {response.text[:200]}")
    sys.exit(1)


if __name__ == "__main__":
    cli()
