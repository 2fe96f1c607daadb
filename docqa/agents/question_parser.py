"""Parse question payloads into QuestionConfig lists."""

import json
import logging
from typing import List

from pydantic import ValidationError

from docqa.errors import InvalidArgumentError
from docqa.models.question import MatterTypesRequest, QuestionConfig

logger = logging.getLogger(__name__)


def parse_questions(payload: str) -> List[QuestionConfig]:
    """
    Turn a question payload into questions.

    Accepted shapes, tried in order:
    - a JSON array of question objects: ``[{"QuestionText": ...}, ...]``
    - the nested ``{"MatterTypes": {"<name>": {"questions": [...]}}}`` object
    - a JSON array of plain question strings
    - anything else non-blank is one raw question

    Args:
        payload: Raw payload text.

    Returns:
        Questions with non-blank text, in payload order.

    Raises:
        InvalidArgumentError: The payload is JSON of a known shape but a
            question fails validation (e.g. topN out of range).
    """
    if not payload or not payload.strip():
        return []
    trimmed = payload.strip()

    try:
        if trimmed.startswith("[{"):
            items = json.loads(trimmed)
            return [
                q for q in (QuestionConfig.model_validate(item) for item in items)
                if q.question_text.strip()
            ]

        questions: List[QuestionConfig] = []
        if trimmed.startswith("{"):
            data = json.loads(trimmed)
            if isinstance(data, dict):
                questions = MatterTypesRequest.model_validate(data).get_all_questions()

        if not questions and trimmed.startswith("["):
            items = json.loads(trimmed)
            questions = [
                QuestionConfig(question_text=item)
                for item in items
                if isinstance(item, str) and item.strip()
            ]
    except json.JSONDecodeError as e:
        logger.warning("Failed to parse JSON question payload, treating as raw string: %s", e)
        return [QuestionConfig(question_text=trimmed)]
    except ValidationError as e:
        raise InvalidArgumentError(f"Invalid question payload: {e}") from e

    if not questions:
        questions = [QuestionConfig(question_text=trimmed)]
    return questions
