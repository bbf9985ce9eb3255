"""Command-line interface for spectrum-viewer.

This module provides the Click-based CLI for launching the viewer.
"""

import logging
import os

import click


@click.command()
@click.option("--port", "-p", default=8080, help="Port to run the server on")
@click.option("--host", "-H", default="127.0.0.1", help="Host to bind to")
@click.option("--open/--no-open", "-o/-n", "open_browser", default=True, help="Open browser automatically")
@click.option("--dark/--light", default=True, help="Use dark mode (default) or light mode")
@click.option("--demo", default=None, metavar="PEPTIDE", help="Show a synthetic spectrum of PEPTIDE")
@click.option("--mirror", default=None, metavar="PEPTIDE", help="With --demo, mirror a second peptide below")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging level",
)
def main(port, host, open_browser, dark, demo, mirror, log_level):
    """spectrum-viewer - Interactive annotated fragment spectrum viewer.

    \b
    Examples:
        spectrum-viewer --demo PEPTIDEKR
        spectrum-viewer --demo PEPTIDEKR --mirror PEPTIDEKK
    """
    logging.basicConfig(level=log_level.upper(), format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    if mirror and not demo:
        raise click.UsageError("--mirror needs --demo")

    # Import here to avoid slow startup for --help
    from nicegui import ui

    from spectrum_viewer import app
    from spectrum_viewer.demo import RESIDUE_MASSES, histogram_density, load_demo

    if demo:
        demo = demo.upper()
        mirror = mirror.upper() if mirror else None
        for peptide in filter(None, (demo, mirror)):
            unknown = set(peptide) - set(RESIDUE_MASSES)
            if unknown or len(peptide) < 2:
                raise click.BadParameter(f"Not a peptide: {peptide}")
        app.configure(lambda viewer: load_demo(viewer, demo, mirror), histogram_density)

    # Store dark mode preference
    os.environ["SPECTRUM_VIEWER_DARK_MODE"] = "1" if dark else "0"

    ui.run(
        title="spectrum-viewer",
        host=host,
        port=port,
        reload=False,
        show=open_browser,
        dark=dark,
    )


if __name__ == "__main__":
    main()
