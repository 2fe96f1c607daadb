"""Data models for chunks, messages, located bounds, results and question requests."""

from .chunk import Chunk, SimilarityResult
from .message import Message, Role
from .bounds import Rectangle, LocatedTerm, MergedBound
from .result import OperationResult, ResultStatus
from .question import (
    QuestionConfig,
    MatterTypeConfig,
    MatterTypesRequest,
    QuestionAnswer,
    ProcessingResult,
)

__all__ = [
    "Chunk",
    "SimilarityResult",
    "Message",
    "Role",
    "Rectangle",
    "LocatedTerm",
    "MergedBound",
    "OperationResult",
    "ResultStatus",
    "QuestionConfig",
    "MatterTypeConfig",
    "MatterTypesRequest",
    "QuestionAnswer",
    "ProcessingResult",
]
