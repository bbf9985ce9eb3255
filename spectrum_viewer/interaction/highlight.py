"""Reference-counted peak highlighting.

Two channels exist. Permanent highlights are click toggled and counted
per peak in ``Peak.n``; a peak can be covered by several permanent
sources at once (its ion series and its sequence position, say) and stays
highlighted until every one of them is switched off. Temporary highlights
(hover/focus) only show on peaks with ``n == 0`` and never touch ``n``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from spectrum_viewer.core.config import (
    C_TERMINAL_SERIES,
    HIGHLIGHT_COLOURS,
    N_TERMINAL_SERIES,
    PEAK_COLOUR_MODES,
    REMOVE_COLOUR,
)
from spectrum_viewer.core.models import Peak, SequencePosition
from spectrum_viewer.core.state import ViewerSession

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Selector:
    """A highlight group, resolved against the current peaks on every use.

    Selectors are hashable and compare by value, so the same group built
    twice (e.g. by two legend entries) shares one permanent state.
    """

    kind: str
    value: Any = None

    @classmethod
    def ion_series(cls, name: str) -> "Selector":
        return cls("series", name)

    @classmethod
    def n_terminal(cls) -> "Selector":
        return cls("n_terminal")

    @classmethod
    def c_terminal(cls) -> "Selector":
        return cls("c_terminal")

    @classmethod
    def position(cls, index: int, key: Optional[str] = None) -> "Selector":
        """Peaks at a residue index; across all panes unless ``key`` is given."""
        return cls("position", (key, index))

    @classmethod
    def pane(cls, pane_id: str) -> "Selector":
        return cls("pane", pane_id)

    def matches(self, peak: Peak) -> bool:
        if self.kind == "series":
            return peak.ion_series == self.value
        if self.kind == "n_terminal":
            return peak.ion_series in N_TERMINAL_SERIES
        if self.kind == "c_terminal":
            return peak.ion_series in C_TERMINAL_SERIES
        if self.kind == "position":
            if peak.position is None:
                return False
            key, index = self.value
            return peak.position[1] == index and (key is None or peak.position[0] == key)
        if self.kind == "pane":
            return peak.pane_id == self.value
        return False

    def resolve(self, peaks: Iterable[Peak]) -> list[Peak]:
        """Return the peaks currently in this group."""
        return [peak for peak in peaks if self.matches(peak)]


class HighlightEngine:
    """Applies highlight toggles to the peaks of a session."""

    def __init__(self, session: ViewerSession):
        self.session = session

    def is_on(self, selector: Selector) -> bool:
        """Current permanent state of a highlight source."""
        return self.session.permanent_highlights.get(selector, False)

    def toggle(
        self,
        selector: Selector,
        permanent: bool,
        state: bool,
        colour: Optional[str] = None,
    ) -> list[Peak]:
        """Switch a highlight source on or off.

        Args:
            selector: Group of peaks the request applies to
            permanent: True for click toggles, False for hover/focus
            state: Requested state
            colour: Highlight colour name for permanent requests;
                "remove" only ever switches off

        Returns:
            The peaks the selector resolved to
        """
        if colour == REMOVE_COLOUR:
            state = False
            colour = None
        if colour is not None and colour not in HIGHLIGHT_COLOURS:
            logger.debug("Unknown highlight colour %r, using default", colour)
            colour = "default"

        peaks = selector.resolve(self.session.all_peaks())

        if permanent:
            was_on = self.is_on(selector)
            if was_on != state:
                if state:
                    self.session.permanent_highlights[selector] = True
                else:
                    self.session.permanent_highlights.pop(selector, None)
                for peak in peaks:
                    if state:
                        peak.n += 1
                        peak.colour = colour or "default"
                        peak.temporary = False
                    else:
                        peak.n = max(0, peak.n - 1)
                        if peak.n == 0:
                            peak.colour = None
            elif state and colour is not None:
                # Recolour an active source without counting it twice
                for peak in peaks:
                    peak.colour = colour
        elif not self.is_on(selector):
            for peak in peaks:
                if peak.n == 0:
                    peak.temporary = state

        self._update_containers(peaks, state)
        self.session.emit_highlight_changed()
        return peaks

    def _update_containers(self, peaks: list[Peak], state: bool) -> None:
        touched = {peak.pane_id for peak in peaks}
        for pane in self.session.panes.values():
            pane.highlighted = (state and pane.pane_id in touched) or any(
                peak.n > 0 for peak in pane.peaks
            )

    def select_range(
        self, key: str, start: int, end: int, colour: Optional[str] = None
    ) -> None:
        """Permanently highlight every residue position between two residues.

        Args:
            key: Peptide key the residues belong to
            start: Index of the first residue
            end: Index of the last residue (inclusive, any order)
            colour: Highlight colour; "remove" clears the range
        """
        colour = colour or self.session.highlight_colour
        state = colour != REMOVE_COLOUR
        for index in range(min(start, end), max(start, end) + 1):
            self.toggle(Selector.position(index, key), True, state, colour)

    def sequence_press(self, position: SequencePosition) -> None:
        """Mouse pressed on a residue of the sequence display."""
        self.session.sequence_range_start = position

    def sequence_release(self, position: SequencePosition) -> None:
        """Mouse released on a residue; toggles one residue or a range."""
        start = self.session.sequence_range_start
        self.session.sequence_range_start = None
        colour = self.session.highlight_colour
        key, index = position

        if start is None or start == position:
            selector = Selector.position(index, key)
            if colour == REMOVE_COLOUR:
                self.toggle(selector, True, False)
            elif self.is_on(selector) and self._colour_of(selector) != colour:
                self.toggle(selector, True, True, colour)
            else:
                self.toggle(selector, True, not self.is_on(selector), colour)
        elif start[0] == key:
            self.select_range(key, start[1], index, colour)
        else:
            logger.debug("Ignoring residue range across peptides %s -> %s", start, position)

    def _colour_of(self, selector: Selector) -> Optional[str]:
        for peak in selector.resolve(self.session.all_peaks()):
            return peak.colour
        return None

    def set_colour(self, colour: str) -> None:
        """Choose the colour used by subsequent residue toggles."""
        if colour != REMOVE_COLOUR and colour not in HIGHLIGHT_COLOURS:
            raise ValueError(f"Unknown highlight colour: {colour}")
        self.session.highlight_colour = colour
        self.session.emit_display_options_changed("highlight_colour", colour)

    def set_peak_colour_mode(self, mode: str) -> None:
        """Colour unhighlighted peaks by ion series, by peptide, or not at all."""
        if mode not in PEAK_COLOUR_MODES:
            raise ValueError(f"Unknown peak colour mode: {mode}")
        self.session.peak_colour_mode = mode
        self.session.emit_display_options_changed("peak_colour_mode", mode)

    def clear_all(self) -> None:
        """Switch off every highlight source."""
        self.session.permanent_highlights = {}
        for peak in self.session.all_peaks():
            peak.n = 0
            peak.colour = None
            peak.temporary = False
        for pane in self.session.panes.values():
            pane.highlighted = False
        self.session.emit_highlight_changed()
