"""Whole-document summary built from one completion per chunk."""

import logging
from typing import Iterable, List, Union

from docqa.conversation import ConversationHistory, ConversationSession
from docqa.errors import require_text
from docqa.models.chunk import Chunk
from docqa.models.message import Message
from docqa.models.result import OperationResult

logger = logging.getLogger(__name__)

SUMMARY_SYSTEM_PROMPT = (
    "You are a helpful assistant. Your task is to analyze the provided text and generate short "
    "summary. Always respond in proper HTML format, but do not include <html>, <head>, or <body> tags."
)
NO_SUMMARY_MESSAGE = "No summary could be generated."


class IterativeSummarizer:
    """Summarizes chunks one at a time and joins the partial summaries.

    The request history never grows past the system prompt plus the chunk
    being summarized. A failing chunk is skipped; the rest are still tried.
    """

    def __init__(self, session: ConversationSession, system_prompt: str = SUMMARY_SYSTEM_PROMPT):
        self.session = session
        self.system_prompt = require_text(system_prompt, "System prompt")

    def summarize_result(self, chunks: Iterable[Union[str, Chunk]]) -> OperationResult:
        """
        Summarize each chunk in order.

        Args:
            chunks: Chunk records or texts, in ordinal order.

        Returns:
            OperationResult whose text is the space-joined partial summaries,
            or NO_SUMMARY_MESSAGE (empty_state) when no chunk produced output.
        """
        history = ConversationHistory([Message.system(self.system_prompt)])
        partials: List[str] = []
        attempted = failed = 0

        for chunk in chunks:
            text = chunk.text if isinstance(chunk, Chunk) else chunk
            if not text or not text.strip():
                continue
            attempted += 1
            history.append(Message.user(text))
            try:
                result = self.session.send(history.messages)
            finally:
                history.pop_last()
            if not result.is_ok:
                failed += 1
                logger.warning("Skipping chunk %d in summary: %s", attempted, result.error)
                continue
            if result.text.strip():
                partials.append(result.text)

        logger.info(
            "Summarized %d chunks: %d produced output, %d failed", attempted, len(partials), failed
        )
        if not partials:
            return OperationResult.empty_state(NO_SUMMARY_MESSAGE)
        return OperationResult.ok(" ".join(partials))

    def summarize(self, chunks: Iterable[Union[str, Chunk]]) -> str:
        return self.summarize_result(chunks).text
