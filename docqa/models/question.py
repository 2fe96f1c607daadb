"""Question request models accepted by the question workflow."""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field, field_validator

from .bounds import MergedBound


def _parse_page_range(page_range: str) -> Optional[List[int]]:
    """Return page numbers for "3" or "1-5", or None when malformed."""
    text = page_range.strip()
    if text.isdigit():
        page = int(text)
        return [page] if page > 0 else None
    parts = text.split("-")
    if len(parts) == 2 and parts[0].strip().isdigit() and parts[1].strip().isdigit():
        start, end = int(parts[0]), int(parts[1])
        if 0 < start <= end:
            return list(range(start, end + 1))
    return None


class QuestionConfig(BaseModel):
    """One question to ask about a document, with optional retrieval overrides."""

    model_config = {"populate_by_name": True}

    question_text: str = Field(alias="QuestionText", description="Question sent to the model; blank questions are skipped")
    question_text_for_embedding: Optional[str] = Field(
        default=None,
        alias="QuestionTextForEmbedding",
        description="Alternative text used for the similarity search",
    )
    system_message: Optional[str] = Field(
        default=None, alias="SystemMessage", description="Replaces the default answering instruction"
    )
    page_range: Optional[str] = Field(
        default=None, alias="PageRange", description='Single page ("1") or inclusive range ("1-5")'
    )
    chunk_size: Optional[int] = Field(default=None, alias="ChunkSize", ge=100, le=10000)
    question_id: Optional[str] = Field(default=None, alias="questionId")
    top_n: Optional[int] = Field(default=None, alias="topN", ge=1, le=20)
    lookup_values: List[str] = Field(default_factory=list, alias="lookupValues")
    is_look_up: bool = Field(default=False, alias="isLookUp")

    @field_validator("page_range")
    @classmethod
    def _page_range_format(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        if _parse_page_range(value) is None:
            raise ValueError(f"invalid page range: {value!r}")
        return value.strip()

    @field_validator("lookup_values", mode="before")
    @classmethod
    def _lookup_values_default(cls, value):
        return value or []

    def get_page_numbers(self) -> List[int]:
        """Pages selected by page_range (1-based), empty when unrestricted."""
        if not self.page_range:
            return []
        return _parse_page_range(self.page_range) or []

    def effective_embedding_text(self) -> str:
        if self.question_text_for_embedding and self.question_text_for_embedding.strip():
            return self.question_text_for_embedding
        return self.question_text

    def effective_chunk_size(self, default_chunk_size: int = 4000) -> int:
        return self.chunk_size if self.chunk_size is not None else default_chunk_size

    def effective_top_n(self, default_top_n: int = 5) -> int:
        return self.top_n if self.top_n is not None else default_top_n


class MatterTypeConfig(BaseModel):
    """Questions grouped under one matter type."""

    questions: List[QuestionConfig] = Field(default_factory=list)

    def is_valid(self) -> bool:
        return bool(self.questions) and all(q.question_text.strip() for q in self.questions)


class MatterTypesRequest(BaseModel):
    """Nested request shape: {"MatterTypes": {"<name>": {"questions": [...]}}}."""

    model_config = {"populate_by_name": True}

    matter_types: Dict[str, MatterTypeConfig] = Field(default_factory=dict, alias="MatterTypes")

    def get_all_questions(self) -> List[QuestionConfig]:
        return [
            q
            for config in self.matter_types.values()
            for q in config.questions
            if q.question_text.strip()
        ]

    def get_questions_for_matter_type(self, matter_type: str) -> List[QuestionConfig]:
        config = self.matter_types.get(matter_type)
        if config is None:
            return []
        return [q for q in config.questions if q.question_text.strip()]

    def is_valid(self) -> bool:
        return bool(self.matter_types) and all(mt.is_valid() for mt in self.matter_types.values())


class QuestionAnswer(BaseModel):
    """Answer produced for one QuestionConfig."""

    question_id: Optional[str] = None
    question: str
    answer: str
    bounds: Dict[int, List[MergedBound]] = Field(
        default_factory=dict, description="Located lookup values per page (lookup questions only)"
    )


class ProcessingResult(BaseModel):
    """Outcome of running the question workflow over one document."""

    summary: str
    answers: List[QuestionAnswer] = Field(default_factory=list)
    questions_count: int = 0
