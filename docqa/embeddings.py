"""Default embedding provider for chunk and question text.

OpenAI ``text-embedding-3-small`` is used when OPENAI_API_KEY is set,
otherwise a local sentence-transformers model. The client is created on
first use and shared afterwards.
"""

import logging
import os
from typing import List, Optional, Tuple

from docqa.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

OPENAI_MODEL = "text-embedding-3-small"
LOCAL_MODEL = "all-MiniLM-L6-v2"

# (model name, client) once resolved
_backend: Optional[Tuple[str, object]] = None


def _resolve_backend() -> Tuple[str, object]:
    global _backend
    if _backend is None:
        api_key = os.getenv("OPENAI_API_KEY", "").strip()
        if api_key:
            from openai import OpenAI

            _backend = (OPENAI_MODEL, OpenAI(api_key=api_key))
        else:
            from sentence_transformers import SentenceTransformer

            _backend = (LOCAL_MODEL, SentenceTransformer(LOCAL_MODEL))
        logger.info("Embedding backend: %s", _backend[0])
    return _backend


def embed_text(text: str) -> List[float]:
    """Embed one non-blank string with the active backend."""
    if not text or not text.strip():
        raise InvalidArgumentError("Text to embed cannot be null or whitespace.")
    model, client = _resolve_backend()
    if model == OPENAI_MODEL:
        response = client.embeddings.create(input=text.strip(), model=model)
        return list(response.data[0].embedding)
    vector = client.encode(text.strip(), convert_to_numpy=True, normalize_embeddings=True)
    return vector.tolist()
