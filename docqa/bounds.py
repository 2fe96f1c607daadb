"""Scale located term rectangles to display pixels and drop overlapping duplicates."""

from typing import Dict, List, Mapping, Sequence, Tuple

from docqa.models.bounds import LocatedTerm, MergedBound, Rectangle

POINT_TO_PIXEL_RATIO = 96 / 72
BOUNDS_PADDING = 2


def point_to_pixel(value: float) -> float:
    return value * POINT_TO_PIXEL_RATIO


def scale_rectangle(rect: Rectangle) -> Rectangle:
    """Convert a point-unit rectangle to pixels and pad it for display."""
    return Rectangle(
        x=point_to_pixel(rect.x) - BOUNDS_PADDING,
        y=point_to_pixel(rect.y) - BOUNDS_PADDING,
        width=point_to_pixel(rect.width) + BOUNDS_PADDING,
        height=point_to_pixel(rect.height) + BOUNDS_PADDING,
    )


def scale_bounds(located: Mapping[int, Sequence[LocatedTerm]]) -> Dict[int, List[MergedBound]]:
    """Scale and pad every located term, page by page, without deduplicating."""
    return {
        page: [
            MergedBound(term=item.term, page=item.page, rectangle=scale_rectangle(item.rectangle))
            for item in items
        ]
        for page, items in located.items()
    }


def merge_bounds(bounds: Mapping[int, Sequence[MergedBound]]) -> Dict[int, List[MergedBound]]:
    """
    Keep one bound per rounded (x, y) origin on each page: the widest.

    On equal width the first candidate wins. Output keeps the order in which
    each origin was first seen, so merging a merged set returns it unchanged.

    Args:
        bounds: Scaled bounds per page.

    Returns:
        Deduplicated bounds per page.
    """
    merged: Dict[int, List[MergedBound]] = {}
    for page, items in bounds.items():
        widest: Dict[Tuple[int, int], MergedBound] = {}
        for item in items:
            key = item.origin_key()
            existing = widest.get(key)
            if existing is None or item.rectangle.width > existing.rectangle.width:
                widest[key] = item
        merged[page] = list(widest.values())
    return merged


def process_bounds(located: Mapping[int, Sequence[LocatedTerm]]) -> Dict[int, List[MergedBound]]:
    """Scale located terms to pixels, then merge overlapping matches."""
    return merge_bounds(scale_bounds(located))
