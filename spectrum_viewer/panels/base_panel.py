"""Base panel class for all UI panels.

All panels inherit from BasePanel and receive a reference to the shared
ViewerSession, so every panel sees the same panes and interaction state.
"""

from abc import ABC, abstractmethod
from typing import Optional

from nicegui import ui

from spectrum_viewer.core.state import ViewerSession


class BasePanel(ABC):
    """Abstract base class for all UI panels.

    Each panel:
    1. Receives a reference to ViewerSession (shared, never copied)
    2. Creates its own UI elements in build()
    3. Subscribes to relevant events
    4. Updates its display when events fire
    """

    def __init__(
        self,
        session: ViewerSession,
        panel_id: str,
        name: str,
        icon: str,
    ):
        """Initialize panel with session reference.

        Args:
            session: ViewerSession instance (shared reference, not a copy)
            panel_id: Unique identifier for this panel
            name: Display name for the panel header
            icon: Material icon name for the panel
        """
        self.session = session
        self.panel_id = panel_id
        self.name = name
        self.icon = icon
        self.expansion: Optional[ui.expansion] = None
        self._is_built = False

    @abstractmethod
    def build(self, container: ui.element) -> ui.expansion:
        """Build the panel UI inside the given container.

        Must:
        1. Create a ui.expansion with self.name and self.icon
        2. Subscribe to relevant events from self.session
        3. Return the expansion element

        Args:
            container: Parent element to build panel in

        Returns:
            The expansion element created
        """

    @abstractmethod
    def update(self) -> None:
        """Refresh the panel display from the current session."""

    @abstractmethod
    def _has_data(self) -> bool:
        """Check if this panel has data to display."""

    def set_visibility(self, visible: bool) -> None:
        if self.expansion is not None:
            self.expansion.set_visibility(visible)

    def update_visibility(self) -> None:
        """Show the panel only while it has data."""
        self.set_visibility(self._has_data())


class PanelManager:
    """Keeps track of the panels built into one page."""

    def __init__(self, session: ViewerSession, container: ui.element):
        """Initialize panel manager.

        Args:
            session: ViewerSession shared by the panels
            container: UI container holding all panels
        """
        self.session = session
        self.container = container
        self.panels: dict[str, BasePanel] = {}

    def register(self, panel: BasePanel) -> None:
        self.panels[panel.panel_id] = panel

    def update_visibility(self) -> None:
        """Update visibility of all registered panels."""
        for panel in self.panels.values():
            panel.update_visibility()
