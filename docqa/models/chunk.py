"""Chunk model for text segments cut from a loaded document."""

from pydantic import BaseModel, Field, field_validator


class Chunk(BaseModel):
    """An ordered, trimmed segment of extracted document text."""

    model_config = {"frozen": True}

    text: str = Field(description="Trimmed, non-empty chunk text")
    ordinal: int = Field(ge=0, description="Zero-based position in the source sequence")

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("chunk text must not be blank")
        return value.strip()


class SimilarityResult(BaseModel):
    """A chunk scored against a query vector (cosine similarity, higher is closer)."""

    model_config = {"frozen": True}

    chunk_text: str
    score: float
