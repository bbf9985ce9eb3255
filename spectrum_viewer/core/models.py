"""Data model for panes, peaks, selections, distances, and error points.

Peaks, panes, and error points compare by identity (``eq=False``): two
peaks with the same m/z are still different peaks, which matters for the
distance tool ("same peak twice" cancels) and for highlight bookkeeping.
"""

from dataclasses import dataclass, field
from typing import NamedTuple, Optional

from spectrum_viewer.core.config import DEFAULTS

# (peptide key, residue index); the key is usually the id of the pane
# whose peptide the residue belongs to
SequencePosition = tuple[str, int]


@dataclass(eq=False)
class Peak:
    """A single peak of a pane."""

    mz: float
    intensity: float
    ion_series: Optional[str] = None  # None for unassigned peaks
    position: Optional[SequencePosition] = None
    label: str = ""  # Fragment label, e.g. "b3", "y5++"
    pane_id: str = ""
    # Number of active permanent highlight reasons
    n: int = 0
    colour: Optional[str] = None  # Highlight colour of the latest permanent toggle
    temporary: bool = False  # Hover/focus highlight, only shown while n == 0
    # Derived each time labels are recomputed
    show_label: bool = False
    show_mz: bool = False
    cut: bool = False
    # Manual overrides from clicking a peak; None = follow the thresholds
    label_forced: Optional[bool] = None
    mz_forced: Optional[bool] = None

    @property
    def assigned(self) -> bool:
        """True if the peak was annotated with an ion series."""
        return self.ion_series is not None

    @property
    def highlighted(self) -> bool:
        """True if the peak is drawn highlighted."""
        return self.n > 0 or self.temporary

    @property
    def label_visible(self) -> bool:
        """Fragment label visibility, manual override first."""
        if self.label_forced is not None:
            return self.label_forced
        return self.show_label

    @property
    def mz_visible(self) -> bool:
        """m/z label visibility, manual override first."""
        if self.mz_forced is not None:
            return self.mz_forced
        return self.show_mz


@dataclass
class SelectionRect:
    """Rubber-band selection rectangle in pane surface pixels.

    ``offset_y`` is measured from the top for top-anchored (first/single)
    panes and from the bottom for bottom-anchored (second) panes.
    """

    anchor: str = "top"
    left: float = 0.0
    width: float = 0.0
    offset_y: float = 0.0
    height: float = 0.0
    hidden: bool = True
    linked: bool = False

    def place(self, left: float, width: float, offset_y: float, surface_height: float) -> None:
        """Move the rectangle; it always extends to the baseline."""
        self.left = left
        self.width = width
        self.offset_y = offset_y
        self.height = surface_height - offset_y

    @property
    def top(self) -> float:
        """Top edge in top-down surface pixels."""
        if self.anchor == "top":
            return self.offset_y
        return 0.0


@dataclass(eq=False)
class DistanceAnnotation:
    """A measured m/z distance between two peaks."""

    start_mz: float
    end_mz: float
    intensity: float
    label: str
    pane_id: str = ""

    @property
    def distance(self) -> float:
        return self.end_mz - self.start_mz


@dataclass(eq=False)
class Pane:
    """One rendered spectrum and its viewport.

    Invariant: ``0 <= min_mz < max_mz`` and ``max_intensity > 0``. The
    viewport fields are only mutated by the viewport model.
    """

    pane_id: str
    initial_max_mz: float
    initial_max_intensity: float
    initial_max_intensity_assigned: float
    role: str = "single"
    peaks: list[Peak] = field(default_factory=list)
    # Peptide shown in the residue bar; peak positions index into it
    sequence: str = ""
    width: float = DEFAULTS.PLOT_WIDTH
    height: float = DEFAULTS.PLOT_HEIGHT
    # Viewport
    min_mz: float = 0.0
    max_mz: float = field(init=False)
    max_intensity: float = field(init=False)
    zoomed: bool = False
    last_max_intensity: Optional[float] = None
    # Is anything highlighted in this pane
    highlighted: bool = False
    distances: list[DistanceAnnotation] = field(default_factory=list)
    selection: SelectionRect = field(default_factory=SelectionRect)
    # Axis tick texts, maintained by the axis renderer
    x_ticks: list[str] = field(default_factory=list)
    y_ticks: list[str] = field(default_factory=list)
    # Min/max text of the error graph x-axis
    error_axis_text: tuple[str, str] = ("", "")

    def __post_init__(self):
        self.max_mz = self.initial_max_mz
        self.max_intensity = self.initial_max_intensity
        self.selection.anchor = "bottom" if self.role == "second" else "top"
        for peak in self.peaks:
            peak.pane_id = self.pane_id

    @property
    def mz_span(self) -> float:
        return self.max_mz - self.min_mz

    @property
    def viewport(self) -> tuple[float, float, float]:
        """Current (min_mz, max_mz, max_intensity)."""
        return (self.min_mz, self.max_mz, self.max_intensity)


class UnassignedError(NamedTuple):
    """Error to the closest theoretical ion of one series."""

    value: float
    fragment: str = ""


@dataclass(eq=False)
class ErrorPoint:
    """One point of the error graph (one per peak)."""

    mz: float
    intensity: float = 0.0
    assigned_abs: Optional[float] = None  # Da
    assigned_rel: Optional[float] = None  # ppm
    unassigned_abs: dict[str, UnassignedError] = field(default_factory=dict)
    unassigned_rel: dict[str, UnassignedError] = field(default_factory=dict)
    # Derived by the error graph projector
    y: Optional[float] = None
    label: str = ""
    hidden: bool = False

    @property
    def assigned(self) -> bool:
        return self.assigned_abs is not None or self.assigned_rel is not None


@dataclass
class DragGesture:
    """An in-progress rubber-band drag."""

    pane_id: str
    start_x: float
    linked_pane_id: Optional[str] = None


@dataclass
class SuspendedGesture:
    """A drag that left its pane and can be resumed on re-entry."""

    pane_id: str
    start_x: float
    linked_pane_id: Optional[str] = None
