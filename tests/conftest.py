"""Shared fixtures for spectrum-viewer tests."""

import pytest

from spectrum_viewer.core.models import Peak
from spectrum_viewer.viewer import SpectrumViewer


def make_peaks(key: str = "first") -> list[Peak]:
    """Small annotated peak list; positions refer to the peptide ``key``."""
    return [
        Peak(100.0, 200.0, "b", (key, 0), "b1"),
        Peak(250.0, 1000.0, "y", (key, 3), "y1"),
        Peak(400.0, 500.0),
        Peak(500.1, 800.0, "b", (key, 1), "b2"),
        Peak(502.3, 400.0, "y", (key, 2), "y2"),
        Peak(900.0, 50.0, "a", (key, 1), "a2"),
    ]


@pytest.fixture
def viewer():
    """Viewer with a single 800x400 pane over (0, 1000, 1000)."""
    viewer = SpectrumViewer()
    viewer.session.load_pane(
        "single", make_peaks("single"), 1000.0, 1000.0, 800.0, width=800, height=400
    )
    return viewer


@pytest.fixture
def mirrored():
    """Viewer with a first/second pane pair; the second has twice the intensity."""
    viewer = SpectrumViewer()
    viewer.session.load_pane(
        "first", make_peaks("first"), 1000.0, 1000.0, 800.0, role="first", width=800, height=400
    )
    viewer.session.load_pane(
        "second", make_peaks("second"), 1000.0, 2000.0, 1600.0, role="second", width=800, height=400
    )
    return viewer
