"""Runtime settings for chunking, retrieval and provider error handling."""

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_CHUNK_SIZE = 4000
DEFAULT_TOP_N = 5
DEFAULT_MIN_SCORE = 0.5
DEFAULT_CONTEXT_TOP_N = 2


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class DocQASettings:
    """Settings shared by the answerer, the question workflow and the CLI."""

    chunk_size: int = DEFAULT_CHUNK_SIZE  # Max characters per chunk
    top_n: int = DEFAULT_TOP_N  # Chunks retrieved per question
    min_score: float = DEFAULT_MIN_SCORE  # Cosine threshold for question answering
    context_top_n: int = DEFAULT_CONTEXT_TOP_N  # Chunks used by answer_with_context
    raise_provider_errors: bool = False  # Strict mode: completion failures raise instead of returning ""
    llm_model: Optional[str] = None  # None = provider default
    llm_temperature: float = 0.0
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate configuration."""
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if self.top_n <= 0 or self.context_top_n <= 0:
            raise ValueError("top_n and context_top_n must be positive")
        if not -1.0 <= self.min_score <= 1.0:
            raise ValueError("min_score must be a cosine similarity in [-1, 1]")

    @classmethod
    def from_env(cls) -> "DocQASettings":
        """Build settings from DOCQA_* environment variables (call load_dotenv() first)."""
        return cls(
            chunk_size=int(os.getenv("DOCQA_CHUNK_SIZE", DEFAULT_CHUNK_SIZE)),
            top_n=int(os.getenv("DOCQA_TOP_N", DEFAULT_TOP_N)),
            min_score=float(os.getenv("DOCQA_MIN_SCORE", DEFAULT_MIN_SCORE)),
            context_top_n=int(os.getenv("DOCQA_CONTEXT_TOP_N", DEFAULT_CONTEXT_TOP_N)),
            raise_provider_errors=_env_bool("DOCQA_RAISE_PROVIDER_ERRORS", False),
            llm_model=os.getenv("DOCQA_LLM_MODEL") or None,
            llm_temperature=float(os.getenv("DOCQA_LLM_TEMPERATURE", "0.0")),
            log_level=os.getenv("DOCQA_LOG_LEVEL", "INFO").upper(),
        )
