"""
Module: adv_client.cli
Purpose: Command-line interface for the adversarial demo client
Dependencies: click, pathlib

Terminal counterpart of the web UI: probe the service, generate an
adversarial example for one image, or start the web UI.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from adv_client import __version__
from adv_client.config import get_config
from adv_client.core import AdversarialSession
from adv_client.errors import AdversarialClientError, PreconditionError, ValidationError
from adv_client.utils.encoding import decode_base64


@click.group()
@click.version_option(version=__version__, prog_name="adv-client")
@click.option("--verbose", "-v", is_flag=True, help="Show log output")
def cli(verbose: bool):
    """
    Adversarial Demo Client - compare predictions before and after an FGSM attack.

    Examples:

    \b
      # Is the generation service up?
      adv-client status

    \b
      # Perturb a digit with epsilon 0.25 and save the result
      adv-client generate digit_7.png --epsilon 0.25 --output adv_7.png

    \b
      # Start the web UI
      adv-client serve --port 3000
    """
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING)


@cli.command()
def status():
    """
    Probe the generation service once and print its status.

    Exits with status 1 when the service is not reachable.
    """
    session = AdversarialSession()
    result = asyncio.run(session.initialize())
    click.echo(f"Backend ({session.client.base_url}): {result.display}")
    if not result.is_connected:
        sys.exit(1)


@cli.command()
@click.argument("image", type=click.Path(path_type=Path))
@click.option(
    "--epsilon", "-e",
    type=float,
    default=None,
    help="Attack strength, clamped to [0, 0.5] (default: 0.1)"
)
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Where to save the adversarial image (PNG)"
)
def generate(image: Path, epsilon: Optional[float], output: Optional[Path]):
    """
    Generate an adversarial example for IMAGE.

    IMAGE: Path to a digit image (ideally 28x28 grayscale)

    \b
    Examples:
      adv-client generate digit_7.png
      adv-client generate digit_7.png -e 0.3 -o adv_7.png
    """
    session = AdversarialSession()
    try:
        session.ingestor.ingest(image)
        if epsilon is not None:
            session.parameters.set_strength(epsilon)

        click.echo(f"🎯 Attacking: {image}")
        click.echo(f"   Epsilon: {session.parameters.strength:.2f}")

        backend = asyncio.run(session.initialize())
        if not backend.is_connected:
            click.echo(f"⚠️  {backend.display}", err=True)

        result = asyncio.run(session.generate())

        click.echo("✓ Adversarial example generated!")
        click.echo(f"  Original prediction:    {result.original_label}")
        click.echo(f"  Adversarial prediction: {result.adversarial_label}")

        if output:
            if result.adversarial_image_encoding is None:
                click.echo("  (service returned no image, nothing saved)")
            else:
                output.parent.mkdir(parents=True, exist_ok=True)
                output.write_bytes(decode_base64(result.adversarial_image_encoding))
                click.echo(f"  Saved to: {output}")

    except (ValidationError, PreconditionError) as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)
    except (AdversarialClientError, ValueError, OSError) as e:
        click.echo(f"✗ Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option("--host", default=None, help="Host to bind to (default: 127.0.0.1)")
@click.option("--port", "-p", type=int, default=None, help="Port to listen on (default: 3000)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Start the web UI."""
    from adv_client.server import run_server

    run_server(host=host, port=port, reload=reload or None)


@cli.command()
def info():
    """
    Display the effective configuration.

    Shows:
    - Generation service endpoints and timeouts
    - Epsilon bounds and default
    - Web UI address
    """
    config = get_config()
    click.echo("=== Adversarial Demo Client Info ===\n")

    click.echo("--- Generation service ---")
    click.echo(f"Liveness:   GET  {config.get_service_url('probe')}")
    click.echo(f"Generation: POST {config.get_service_url('generate')}")
    click.echo(f"Timeouts:   probe {config.get_timeout('probe')}s, generate {config.get_timeout('generate')}s")

    low, high = config.get_strength_bounds()
    click.echo("\n--- Epsilon ---")
    click.echo(f"Range: [{low}, {high}] step {config.strength['step']}, default {config.strength['default']}")

    click.echo("\n--- Web UI ---")
    click.echo(f"Address: http://{config.ui['host']}:{config.ui['port']}")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
