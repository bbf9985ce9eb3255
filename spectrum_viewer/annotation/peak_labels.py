"""Label, m/z and cut-off visibility of peaks."""

from typing import Iterable

from spectrum_viewer.core.models import Pane, Peak


def update_peak_labels(pane: Pane, label_percent: float, mz_percent: float) -> None:
    """Recompute which peaks show their fragment label and m/z.

    A label is shown for peaks in the top ``label_percent`` of the visible
    intensity range; 0 disables labels entirely. Peaks above the visible
    maximum are marked as cut.

    Args:
        pane: Pane whose peaks to update
        label_percent: Percentage of the intensity range that gets labels
        mz_percent: Percentage of the intensity range that gets m/z labels
    """
    max_intensity = pane.max_intensity
    label_threshold = (100 - label_percent) / 100 * max_intensity
    mz_threshold = (100 - mz_percent) / 100 * max_intensity

    for peak in pane.peaks:
        peak.show_label = label_percent != 0 and peak.intensity >= label_threshold
        peak.show_mz = mz_percent != 0 and peak.intensity >= mz_threshold
        peak.cut = peak.intensity > max_intensity


def toggle_forced_label(peak: Peak, mode: str) -> bool:
    """Apply a click on a peak in the given force-show mode.

    Args:
        peak: Clicked peak
        mode: "label", "mz", "hide" or "none"

    Returns:
        True if the peak changed
    """
    if mode == "label":
        peak.label_forced = not peak.label_visible
    elif mode == "mz":
        peak.mz_forced = not peak.mz_visible
    elif mode == "hide":
        if not peak.label_visible and not peak.mz_visible:
            return False
        peak.label_forced = False
        peak.mz_forced = False
    else:
        return False
    return True


def clear_forced_labels(peaks: Iterable[Peak]) -> None:
    """Drop every manual label override."""
    for peak in peaks:
        peak.label_forced = None
        peak.mz_forced = None
