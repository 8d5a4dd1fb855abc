# SafeImage — UI Styles

"""
Color palette and per-state display metadata for SafeImageWidget.
Material grey/blue/orange shades, matching common mobile image placeholders.
"""

from dataclasses import dataclass
from typing import Dict

from safe_image.core.models import VisualState


# Color palette
COLORS = {
    # Greys
    "grey_100": "#F5F5F5",
    "grey_200": "#EEEEEE",
    "grey_300": "#E0E0E0",
    "grey_400": "#BDBDBD",

    # Retry indicator
    "blue_200": "#90CAF9",
    "blue_600": "#1E88E5",

    # Offline indicator
    "orange_200": "#FFCC80",
    "orange_600": "#FB8C00",

    # Profile header avatar ring
    "white": "#FFFFFF",
}


@dataclass
class StateInfo:
    """Information about a visual state for rendering."""
    label: str          # Text drawn inside the indicator ("" for none)
    background: str     # Fill color
    border: str         # Border color ("" for none)
    foreground: str     # Icon/text color
    description: str    # Accessible description


STATE_DEFINITIONS: Dict[VisualState, StateInfo] = {
    VisualState.LOADING: StateInfo(
        label="",
        background=COLORS["grey_300"],
        border="",
        foreground=COLORS["grey_100"],
        description="Image loading",
    ),
    VisualState.RETRY_PENDING: StateInfo(
        label="Retry",          # Completed as "Retry n/m"
        background=COLORS["grey_100"],
        border=COLORS["blue_200"],
        foreground=COLORS["blue_600"],
        description="Image failed to load, retrying",
    ),
    VisualState.OFFLINE: StateInfo(
        label="No Connection",
        background=COLORS["grey_100"],
        border=COLORS["orange_200"],
        foreground=COLORS["orange_600"],
        description="No network connection",
    ),
    VisualState.FALLBACK: StateInfo(
        label="",
        background=COLORS["grey_200"],
        border="",
        foreground=COLORS["grey_400"],
        description="Image unavailable",
    ),
    VisualState.SUCCESS: StateInfo(
        label="",
        background="",
        border="",
        foreground="",
        description="Image loaded",
    ),
}


def state_info(state: VisualState) -> StateInfo:
    """UI metadata for a visual state."""
    return STATE_DEFINITIONS[state]
