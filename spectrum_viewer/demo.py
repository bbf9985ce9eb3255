"""Synthetic annotated spectra for trying out the viewer without data files.

Builds a b/y ladder for a peptide with random intensities, adds unassigned
noise peaks, and computes the matching error points. The density estimator
returns an SVG histogram of the error values.
"""

import asyncio
from typing import Optional

import numpy as np

from spectrum_viewer.core.models import ErrorPoint, Peak, UnassignedError
from spectrum_viewer.viewer import SpectrumViewer

PROTON = 1.007276
WATER = 18.010565

# Monoisotopic residue masses
RESIDUE_MASSES = {
    "G": 57.02146, "A": 71.03711, "S": 87.03203, "P": 97.05276, "V": 99.06841,
    "T": 101.04768, "C": 103.00919, "L": 113.08406, "I": 113.08406, "N": 114.04293,
    "D": 115.02694, "Q": 128.05858, "K": 128.09496, "E": 129.04259, "M": 131.04049,
    "H": 137.05891, "F": 147.06841, "R": 156.10111, "Y": 163.06333, "W": 186.07931,
}

# Offsets of the other backbone series relative to b (N-terminal) or y (C-terminal)
SERIES_OFFSETS = {
    "a": ("b", -27.994915),
    "b": ("b", 0.0),
    "c": ("b", 17.026549),
    "x": ("y", 25.979265),
    "y": ("y", 0.0),
    "z": ("y", -16.018724),
}


def theoretical_ions(sequence: str) -> dict[str, list[tuple[float, str, int]]]:
    """Singly charged a/b/c/x/y/z ions as (m/z, label, residue index) per series."""
    masses = [RESIDUE_MASSES[r] for r in sequence]
    n = len(masses)
    ions: dict[str, list[tuple[float, str, int]]] = {s: [] for s in SERIES_OFFSETS}
    for i in range(1, n):
        b = sum(masses[:i]) + PROTON
        y = sum(masses[n - i:]) + WATER + PROTON
        for series, (base, offset) in SERIES_OFFSETS.items():
            if base == "b":
                ions[series].append((b + offset, f"{series}{i}", i - 1))
            else:
                ions[series].append((y + offset, f"{series}{i}", n - i))
    return ions


def _closest(mz: float, ions: dict[str, list[tuple[float, str, int]]]) -> tuple[dict, dict]:
    abs_errors = {}
    rel_errors = {}
    for series, series_ions in ions.items():
        theo, label, _ = min(series_ions, key=lambda ion: abs(mz - ion[0]))
        abs_errors[series] = UnassignedError(mz - theo, label)
        rel_errors[series] = UnassignedError((mz - theo) / theo * 1e6, label)
    return abs_errors, rel_errors


def synthetic_spectrum(
    sequence: str, pane_id: str, seed: int = 0, noise_peaks: int = 40
) -> tuple[list[Peak], list[ErrorPoint]]:
    """Generate annotated peaks and their error points.

    Args:
        sequence: Peptide sequence (one-letter codes)
        pane_id: Pane the peaks belong to (used for residue positions)
        seed: Random seed
        noise_peaks: Number of unassigned peaks to add

    Returns:
        Tuple of (peaks sorted by m/z, error points in the same order)
    """
    rng = np.random.default_rng(seed)
    ions = theoretical_ions(sequence)
    max_mz = max(mz for series in ions.values() for mz, _, _ in series)

    peaks = []
    points = []
    for series in ("b", "y"):
        for theo, label, index in ions[series]:
            ppm = float(rng.normal(0, 3))
            mz = theo * (1 + ppm / 1e6)
            peaks.append(Peak(mz, float(rng.uniform(0.1, 1.0) * 1e6), series, (pane_id, index), label))
            abs_errors, rel_errors = _closest(mz, ions)
            points.append(ErrorPoint(mz, peaks[-1].intensity, mz - theo, ppm, abs_errors, rel_errors))

    for mz in rng.uniform(100, max_mz, noise_peaks):
        mz = float(mz)
        peaks.append(Peak(mz, float(rng.uniform(0.01, 0.4) * 1e6)))
        abs_errors, rel_errors = _closest(mz, ions)
        points.append(ErrorPoint(mz, peaks[-1].intensity, None, None, abs_errors, rel_errors))

    order = np.argsort([p.mz for p in peaks])
    return [peaks[i] for i in order], [points[i] for i in order]


async def histogram_density(values: list[float]) -> str:
    """Stand-in density estimator: an SVG histogram of the error values."""
    await asyncio.sleep(0)
    if not values:
        return ""
    counts, _ = np.histogram(values, bins=30)
    width, height = 300, 60
    bar = width / len(counts)
    peak = counts.max() or 1
    bars = "".join(
        f'<rect x="{i * bar:.1f}" y="{height - c / peak * height:.1f}" '
        f'width="{bar - 1:.1f}" height="{c / peak * height:.1f}" fill="#1f77b4"/>'
        for i, c in enumerate(counts)
    )
    return f'<svg width="{width}" height="{height}">{bars}</svg>'


def load_demo(viewer: SpectrumViewer, sequence: str = "PEPTIDEKR", mirror: Optional[str] = None) -> None:
    """Load a synthetic spectrum (and optionally a mirrored one) into a viewer.

    Args:
        viewer: Viewer to load into
        sequence: Peptide of the first pane
        mirror: Peptide of a second, mirrored pane
    """
    panes = [("first" if mirror else "single", sequence)]
    if mirror:
        panes.append(("second", mirror))

    all_points = []
    for seed, (role, peptide) in enumerate(panes):
        pane_id = role
        peaks, points = synthetic_spectrum(peptide, pane_id, seed=seed)
        max_all = max(p.intensity for p in peaks)
        max_assigned = max(p.intensity for p in peaks if p.assigned)
        viewer.session.load_pane(
            pane_id,
            peaks,
            initial_max_mz=max(p.mz for p in peaks) * 1.05,
            initial_max_intensity=max_all * 1.05,
            initial_max_intensity_assigned=max_assigned * 1.05,
            role=role,
            sequence=peptide,
        )
        if not all_points:
            all_points = points
    viewer.session.load_error_points(all_points)
