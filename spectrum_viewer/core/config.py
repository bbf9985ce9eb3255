"""Configuration constants, ion series tables, and default settings."""

# Ion series colors for spectrum annotation
ION_COLORS = {
    "a": "#2ca02c",  # Green
    "b": "#1f77b4",  # Blue
    "c": "#9467bd",  # Purple
    "d": "#17becf",  # Cyan
    "v": "#bcbd22",  # Olive
    "w": "#e7969c",  # Rose
    "x": "#8c564b",  # Brown
    "y": "#d62728",  # Red
    "z": "#e377c2",  # Pink
    "precursor": "#ff7f0e",  # Orange
    "other": "#7f7f7f",  # Gray
}

# Color used for peaks without an assigned ion series
UNASSIGNED_COLOR = "#b0b0b0"

# Fragment series grouped by the terminus they contain
N_TERMINAL_SERIES = ("a", "b", "c", "d", "v")
C_TERMINAL_SERIES = ("w", "x", "y", "z")

# Series offered as error graph filters, in tie-break order
ERROR_GRAPH_SERIES = ("a", "b", "c", "x", "y", "z")

# Colours a sequence position can be highlighted with
HIGHLIGHT_COLOURS = {
    "default": "#ffd54f",
    "red": "#e53935",
    "green": "#43a047",
    "blue": "#1e88e5",
    "yellow": "#fdd835",
    "purple": "#8e24aa",
}

# Pseudo colour that only removes a highlight
REMOVE_COLOUR = "remove"

# Pane roles; "first" and "second" form a mirrored pair
PANE_ROLES = ("single", "first", "second")

# Peak colouring: by ion series, by the peptide a fragment belongs to, or plain
PEAK_COLOUR_MODES = ("ion", "peptide", "none")

# Peptide colours by first appearance of the peptide, for the "peptide" colouring mode
PEPTIDE_COLOURS = ("#1f77b4", "#d62728", "#2ca02c", "#9467bd")

# Modes for clicking a peak to force its labels
FORCE_SHOW_MODES = ("none", "label", "mz", "hide")


# Default display settings
class DEFAULTS:
    """Default configuration values."""

    # Pane surface dimensions
    PLOT_WIDTH = 1100
    PLOT_HEIGHT = 400

    # Margins around the pane surface
    MARGIN_LEFT = 80
    MARGIN_RIGHT = 20
    MARGIN_TOP = 20
    MARGIN_BOTTOM = 40

    # Axis ticks
    X_TICKS = 5
    Y_TICKS = 5
    MIN_TICKS = 2

    # Drag selections narrower than this fraction of the width are clicks
    MIN_DRAG_FRACTION = 0.005

    # Wheel gestures
    WHEEL_INTENSITY_FACTOR = 0.0005  # per unit of deltaY
    MIN_INTENSITY_FACTOR = 0.1
    WHEEL_PAN_SCALE = 1 / 10000
    WHEEL_ZOOM_SCALE = 5 / 10000

    # Keyboard zoom step (fraction of the m/z range)
    KEY_ZOOM_STEP = 0.05

    # Peak labels shown for the top N percent of the intensity range
    LABEL_PERCENT = 90
    MZ_PERCENT = 0

    # Display options
    SHOW_UNASSIGNED = True
    Y_SQRT = False
    Y_PERCENTAGE = False
    FORCE_SHOW_MODE = "none"
    HIGHLIGHT_COLOUR = "default"
    PEAK_COLOUR_MODE = "ion"

    # Error graph
    ERROR_RELATIVE = True
    ERROR_ASSIGNED_MODE = True
    ERROR_SHOW_ASSIGNED = False
    ERROR_Y_MIN = -20.0
    ERROR_Y_MAX = 20.0
    ERROR_GRAPH_HEIGHT = 200

    # Colors
    AXIS_COLOR = "#888888"
    SELECTION_COLOR = "rgba(0, 200, 255, 0.15)"
    SELECTION_STROKE = "#00c8ff"
    DISTANCE_COLOR = "#ff8800"
    DIMMED_OPACITY = 0.3
