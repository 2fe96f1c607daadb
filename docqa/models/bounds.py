"""Geometry models for sensitive terms located on document pages."""

from pydantic import BaseModel, Field


class Rectangle(BaseModel):
    """Axis-aligned box with a top-left origin."""

    model_config = {"frozen": True}

    x: float
    y: float
    width: float
    height: float


class LocatedTerm(BaseModel):
    """A raw occurrence of a term on a page, in document point units."""

    model_config = {"frozen": True}

    term: str = Field(description="The searched term")
    page: int = Field(ge=0, description="Zero-based page index")
    rectangle: Rectangle


class MergedBound(BaseModel):
    """A deduplicated, pixel-scaled occurrence of a term.

    At most one MergedBound exists per rounded (x, y) origin on a page: the
    widest of the colliding candidates.
    """

    model_config = {"frozen": True}

    term: str
    page: int = Field(ge=0)
    rectangle: Rectangle

    def origin_key(self):
        """Rounded (x, y) key used to detect overlapping matches."""
        return (round(self.rectangle.x), round(self.rectangle.y))
