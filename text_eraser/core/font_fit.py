"""
Font size fitting utilities.

Given a recovered text string and the box it occupied on the slide (inches),
estimate a point size that keeps the text inside the box without rendering it.
"""

from __future__ import annotations

from ..constants import MAX_FONT_PT, MIN_FONT_PT

POINTS_PER_INCH = 72
HEIGHT_FACTOR = 0.75
CHAR_WIDTH_FACTOR = 0.8


def fit_font_size_pt(
    text: str,
    box_w_in: float,
    box_h_in: float,
    *,
    min_pt: int = MIN_FONT_PT,
    max_pt: int = MAX_FONT_PT,
) -> float:
    """
    Compute a fitting font size in points.

    - Height bound: 75% of the box height.
    - Width bound: box width divided by an average glyph advance of 0.8em,
      counting at least two characters so short labels don't explode.
    - Result clamped to [min_pt, max_pt].
    """
    text_len = max(len(text or ""), 1)
    box_h_pt = max(float(box_h_in), 0.0) * POINTS_PER_INCH
    box_w_pt = max(float(box_w_in), 0.0) * POINTS_PER_INCH

    by_height = box_h_pt * HEIGHT_FACTOR
    by_width = box_w_pt / (max(text_len, 2) * CHAR_WIDTH_FACTOR)

    size = min(by_height, by_width)
    size = min(size, max_pt)
    return max(size, min_pt)
