"""Entry point for running spectrum-viewer as a module.

Usage:
    python -m spectrum_viewer [options]
"""

from spectrum_viewer.cli import main

if __name__ in {"__main__", "__mp_main__"}:
    main()
