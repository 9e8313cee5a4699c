"""Placement of the result panel relative to the anchor point.

All values are viewport pixels. The caller measures the panel at
``provisional_width()`` with unlimited height, then passes the measured size to
``compute_panel_layout``.
"""

from typing import Optional

from .models import PanelLayout, Point, Size

ANCHOR_GAP = 15
EDGE_MARGIN = 10
VIEWPORT_WIDTH_RATIO = 0.8
ABOVE_MIN_SPACE = 300
# Scrolling fallback: fixed top inset, bottom inset, anchor clearance
SCROLL_TOP = 20
SCROLL_BOTTOM_INSET = 20
SCROLL_ANCHOR_CLEARANCE = 40
MAX_HEIGHT_PERCENT = 80


def provisional_width(viewport: Size, max_width: float) -> float:
    return min(viewport.width * VIEWPORT_WIDTH_RATIO, max_width)


def compute_panel_layout(anchor: Point, content: Size, viewport: Size,
                         max_width: float) -> PanelLayout:
    """Pick panel position, width and optional max height.

    Horizontal: right of the anchor, flipped left when it would overflow.
    Vertical: below the anchor; above it when there is clearly more room there;
    otherwise a height-capped scrolling panel in the half of the viewport away
    from the anchor.
    """
    width = provisional_width(viewport, max_width)
    actual_width = content.width
    actual_height = content.height

    x = anchor.x + ANCHOR_GAP
    if x + actual_width > viewport.width:
        x = max(EDGE_MARGIN, anchor.x - actual_width - ANCHOR_GAP)

    y = anchor.y + ANCHOR_GAP
    max_height: Optional[float] = None

    space_below = viewport.height - y
    space_above = anchor.y - EDGE_MARGIN

    if actual_height > space_below:
        if space_above > space_below and space_above >= min(ABOVE_MIN_SPACE, actual_height / 2):
            y = max(EDGE_MARGIN, anchor.y - actual_height - ANCHOR_GAP)
            if y + actual_height > viewport.height - EDGE_MARGIN:
                # Taller than the whole viewport: keep it on screen and scroll
                max_height = max(0.0, viewport.height - y - EDGE_MARGIN)
        elif anchor.y > viewport.height / 2:
            y = SCROLL_TOP
            max_height = _capped_height(anchor.y - SCROLL_ANCHOR_CLEARANCE, viewport.height)
        else:
            y = anchor.y + ANCHOR_GAP
            max_height = _capped_height(viewport.height - y - SCROLL_BOTTOM_INSET, viewport.height)

    return PanelLayout(x=x, y=y, width=width, max_height=max_height)


def _capped_height(available: float, viewport_height: float) -> float:
    percent = min(MAX_HEIGHT_PERCENT, available / viewport_height * 100) if viewport_height > 0 else 0
    return max(0.0, percent / 100 * viewport_height)


def panel_bottom(layout: PanelLayout, content: Size) -> float:
    height = content.height if layout.max_height is None else min(content.height, layout.max_height)
    return layout.y + height
