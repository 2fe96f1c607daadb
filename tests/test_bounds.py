"""Tests for pixel scaling and merging of located term bounds."""

import pytest

from docqa.bounds import merge_bounds, process_bounds, scale_bounds, scale_rectangle
from docqa.models.bounds import LocatedTerm, MergedBound, Rectangle


def _bound(term, x, y, width, page=0, height=10.0):
    return MergedBound(term=term, page=page, rectangle=Rectangle(x=x, y=y, width=width, height=height))


class TestScaling:
    """Point to pixel conversion."""

    def test_scale_rectangle(self):
        """96/72 scaling with the origin moved out and the size grown by the padding."""
        scaled = scale_rectangle(Rectangle(x=72, y=72, width=72, height=36))
        assert scaled.x == pytest.approx(94.0)
        assert scaled.y == pytest.approx(94.0)
        assert scaled.width == pytest.approx(98.0)
        assert scaled.height == pytest.approx(50.0)

    def test_scale_bounds_keeps_every_match(self):
        """Scaling alone does not deduplicate."""
        located = {
            0: [
                LocatedTerm(term="John", page=0, rectangle=Rectangle(x=10, y=10, width=20, height=8)),
                LocatedTerm(term="John Smith", page=0, rectangle=Rectangle(x=10, y=10, width=50, height=8)),
            ]
        }
        assert len(scale_bounds(located)[0]) == 2


class TestMerging:
    """Deduplication of overlapping bounds."""

    def test_widest_bound_wins(self):
        """Bounds sharing a rounded origin collapse to the widest."""
        merged = merge_bounds({0: [_bound("John", 94.2, 50.0, 30), _bound("John Smith", 94.4, 50.3, 80)]})
        assert [b.term for b in merged[0]] == ["John Smith"]

    def test_first_wins_on_equal_width(self):
        """On a width tie the earlier bound is kept."""
        merged = merge_bounds({0: [_bound("first", 10, 10, 40), _bound("second", 10, 10, 40)]})
        assert [b.term for b in merged[0]] == ["first"]

    def test_distinct_origins_are_kept(self):
        """Bounds at different positions all survive, in first-seen order."""
        merged = merge_bounds({0: [_bound("a", 10, 10, 5), _bound("b", 10, 40, 5), _bound("c", 60, 10, 5)]})
        assert [b.term for b in merged[0]] == ["a", "b", "c"]

    def test_pages_are_independent(self):
        """The same origin on two pages is not a collision."""
        merged = merge_bounds({
            0: [_bound("a", 10, 10, 5, page=0)],
            1: [_bound("b", 10, 10, 5, page=1)],
        })
        assert len(merged[0]) == 1 and len(merged[1]) == 1

    def test_merge_is_idempotent(self):
        """Merging an already merged set changes nothing."""
        bounds = {0: [_bound("x", 10, 10, 5), _bound("xy", 10.3, 9.8, 9), _bound("z", 30, 30, 4)]}
        once = merge_bounds(bounds)
        assert merge_bounds(once) == once


class TestProcessBounds:
    """Scaling followed by merging."""

    def test_overlapping_matches_merge_after_scaling(self):
        """Two searches hitting the same spot give one pixel-scaled bound."""
        located = {
            2: [
                LocatedTerm(term="Smith", page=2, rectangle=Rectangle(x=72, y=72, width=30, height=12)),
                LocatedTerm(term="Smith Jr", page=2, rectangle=Rectangle(x=72, y=72, width=48, height=12)),
            ]
        }
        result = process_bounds(located)
        assert list(result) == [2]
        assert len(result[2]) == 1
        bound = result[2][0]
        assert bound.term == "Smith Jr"
        assert bound.rectangle.x == pytest.approx(94.0)
        assert bound.rectangle.width == pytest.approx(66.0)
