"""Retrieval-augmented question answering over one loaded document."""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from docqa.bounds import process_bounds
from docqa.chunking import chunk_document
from docqa.config import DocQASettings
from docqa.conversation import ConversationSession
from docqa.document_processor import DocumentProcessor, DocumentSource
from docqa.errors import InvalidArgumentError, ProviderFailure, require_text
from docqa.models.bounds import MergedBound
from docqa.models.chunk import Chunk
from docqa.models.result import OperationResult
from docqa.retrieval_index import Embedder, RetrievalIndex
from docqa.summarizer import IterativeSummarizer

logger = logging.getLogger(__name__)

NO_CONTENT_MESSAGE = "No content available for analysis."
NO_DOCUMENT_MESSAGE = "No document content available to answer questions."
NO_RELEVANT_CONTENT_MESSAGE = "No relevant content found to answer your question."
NO_QUICK_SUMMARY_MESSAGE = "No summary generated."

ANSWER_INSTRUCTION = (
    "You are a helpful assistant. Use the provided PDF document pages and pick a precise page to "
    "answer the user question, provide a reference at the bottom of the content with page numbers "
    "like ex: Reference: [20,21,23]."
)
SUGGESTIONS_PROMPT = (
    "You are a helpful assistant. Your task is to analyze the provided text and generate 3 short "
    "diverse questions and each question should not exceed 10 words"
)
QUICK_SUMMARY_PROMPT = (
    "You are a helpful assistant. Your task is to analyze the provided text and generate a concise summary."
)
PII_PROMPT_HEADER = (
    "I have a block of text containing various pieces of information. Please help me identify and "
    "extract any Personally Identifiable Information (PII) present in the text. The PII categories "
    "I am interested in are:"
)
PII_PROMPT_FOOTER = (
    "Please provide the extracted information as a plain list, separated by commas, without any "
    "prefix or numbering or extra content."
)

# Chunks sent as context by the whole-document prompts (suggestions, quick summary)
CONTEXT_CHUNK_LIMIT = 10


def build_sensitive_terms_prompt(categories: Iterable[str]) -> str:
    """Build the PII extraction instruction listing one category per line."""
    lines = [PII_PROMPT_HEADER]
    lines.extend(c for c in categories if c and c.strip())
    lines.append(PII_PROMPT_FOOTER)
    return "\n".join(lines) + "\n"


def parse_sensitive_terms(answer: str) -> List[str]:
    """Split a free-text answer on newlines and commas; trim and de-duplicate ignoring case."""
    seen = set()
    terms: List[str] = []
    for part in answer.replace(",", "\n").split("\n"):
        term = part.strip()
        if not term or term.casefold() in seen:
            continue
        seen.add(term.casefold())
        terms.append(term)
    return terms


class DocumentQA:
    """Answers questions about the currently loaded document.

    Loading a document chunks its text blocks and rebuilds the retrieval
    index. Questions are embedded, matched against the index and forwarded
    with the best chunks to the completion provider. Provider failures are
    reported through the returned text (see OperationResult) unless the
    session runs in strict mode.
    """

    def __init__(
        self,
        embedder: Embedder,
        session: ConversationSession,
        processor: Optional[DocumentProcessor] = None,
        settings: Optional[DocQASettings] = None,
    ):
        self.embedder = embedder
        self.session = session
        self.processor = processor
        self.settings = settings or DocQASettings()
        self.index = RetrievalIndex(embedder)
        self.summarizer = IterativeSummarizer(session)

    @classmethod
    def from_settings(cls, settings: Optional[DocQASettings] = None) -> "DocumentQA":
        """Wire the default providers: local/OpenAI embeddings and a Gemini/Groq chat model."""
        from docqa.embeddings import embed_text
        from docqa.model_provider import create_completion_provider

        settings = settings or DocQASettings.from_env()
        provider = create_completion_provider(model_name=settings.llm_model, temperature=settings.llm_temperature)
        session = ConversationSession(provider, raise_on_error=settings.raise_provider_errors)
        return cls(embed_text, session, DocumentProcessor(), settings)

    # Document lifecycle

    def load_document(self, blocks: Sequence[str], max_chunk_size: Optional[int] = None) -> int:
        """
        Chunk extracted text blocks and rebuild the retrieval index.

        Args:
            blocks: Raw text blocks from the document extractor, in order.
            max_chunk_size: Chunk size override; defaults to settings.chunk_size.

        Returns:
            Number of indexed chunks.

        Raises:
            ProviderFailure: An embedding call failed; the index is left empty.
        """
        if blocks is None:
            raise InvalidArgumentError("Extracted blocks cannot be null.")
        size = max_chunk_size if max_chunk_size is not None else self.settings.chunk_size
        chunks: List[Chunk] = []
        for block in blocks:
            if block and block.strip():
                chunks.extend(chunk_document(block, size, start_ordinal=len(chunks)))
        count = self.index.build(chunks)
        logger.info("Loaded document: %d blocks, %d chunks (chunk size %d)", len(blocks), count, size)
        return count

    def load_text(self, document: str, max_chunk_size: Optional[int] = None) -> int:
        """Load a single plain-text document."""
        require_text(document, "Document content")
        return self.load_document([document], max_chunk_size)

    def scoped(self, blocks: Sequence[str], max_chunk_size: Optional[int] = None) -> "DocumentQA":
        """Return a new DocumentQA sharing these providers, loaded with the given blocks."""
        scoped = DocumentQA(self.embedder, self.session, self.processor, self.settings)
        scoped.load_document(blocks, max_chunk_size)
        return scoped

    def clear_document(self) -> None:
        self.index.clear()

    def chunk_count(self) -> int:
        return len(self.index)

    @property
    def chunks(self) -> List[Chunk]:
        return self.index.chunks

    # Strict-mode aware helpers

    def _failure(self, action: str, error: str) -> OperationResult:
        if self.session.raise_on_error:
            raise ProviderFailure(action, error)
        return OperationResult.failure(error, text=f"{action}: {error}")

    def _complete(self, prompt: str, system_role: str) -> OperationResult:
        result = self.session.complete_result(prompt, system_role=system_role)
        if result.is_failure and self.session.raise_on_error:
            raise ProviderFailure("Error getting AI completion", result.error)
        return result

    def _embed_query(self, text: str):
        try:
            return self.index.embed_query(text), None
        except Exception as e:
            logger.exception("Failed to embed question")
            return None, str(e) or e.__class__.__name__

    def _complete_over_chunks(self, system_prompt: str) -> OperationResult:
        """One stateless call: system_prompt as system message, the first chunks as user message."""
        require_text(system_prompt, "System prompt")
        if self.index.is_empty:
            return OperationResult.empty_state(NO_CONTENT_MESSAGE)
        combined = " ".join(self.index.keys()[:CONTEXT_CHUNK_LIMIT])
        return self._complete(combined, system_role=system_prompt)

    # Question answering

    def answer_result(
        self,
        question: str,
        top_n: Optional[int] = None,
        min_score: Optional[float] = None,
        system_message: Optional[str] = None,
        embedding_text: Optional[str] = None,
    ) -> OperationResult:
        """
        Answer a question from the chunks scoring at least min_score.

        Args:
            question: User question sent to the model.
            top_n: Maximum chunks used as context (default settings.top_n).
            min_score: Similarity threshold (default settings.min_score).
            system_message: Replaces the default answering instruction.
            embedding_text: Text embedded for the search instead of the question.

        Returns:
            OperationResult with the answer or the no-relevant-content sentinel.
        """
        require_text(question, "Question")
        if self.index.is_empty:
            return OperationResult.empty_state(NO_RELEVANT_CONTENT_MESSAGE)

        query_vector, error = self._embed_query(embedding_text or question)
        if error is not None:
            return self._failure("Error getting answer", error)

        results = self.index.find_closest_with_score(
            query_vector,
            top_n=self.settings.top_n if top_n is None else top_n,
            min_score=self.settings.min_score if min_score is None else min_score,
        )
        if not results:
            return OperationResult.empty_state(NO_RELEVANT_CONTENT_MESSAGE)

        pages = "".join(f"{result.chunk_text}\n" for result in results)
        system_prompt = f"{system_message or ANSWER_INSTRUCTION} Pages: {pages}"
        return self._complete(question, system_role=system_prompt)

    def answer(self, question: str, **kwargs) -> str:
        """Answer a question; see answer_result for the keyword overrides."""
        return self.answer_result(question, **kwargs).text

    def answer_with_context(self, system_prompt: str, question: str, top_n: Optional[int] = None) -> str:
        """
        Answer using the plain closest-chunks lookup (no similarity threshold).

        The hits are appended to system_prompt as ``" Context: a --- b"``.
        """
        require_text(question, "Question")
        require_text(system_prompt, "System prompt")
        if self.index.is_empty:
            return NO_DOCUMENT_MESSAGE

        query_vector, error = self._embed_query(question)
        if error is not None:
            return self._failure("Error getting answer", error).text

        hits = self.index.find_closest(query_vector, top_n=self.settings.context_top_n if top_n is None else top_n)
        if not hits:
            return NO_RELEVANT_CONTENT_MESSAGE
        contextual_prompt = system_prompt + " Context: " + " --- ".join(hits)
        return self._complete(question, system_role=contextual_prompt).text

    def answer_with_suggestions(self, question: str) -> str:
        """Answer a question and append three suggested follow-up questions."""
        require_text(question, "Question")
        answer = self.answer(question)
        suggestions = self.suggest_questions()
        return f"{answer}\n\nSuggestions:\n{suggestions}"

    # Whole-document prompts

    def summarize_result(self) -> OperationResult:
        if self.index.is_empty:
            return OperationResult.empty_state(NO_CONTENT_MESSAGE)
        try:
            return self.summarizer.summarize_result(self.index.chunks)
        except Exception as e:
            logger.exception("Document summary failed")
            return self._failure("Error generating document summary", str(e))

    def summarize(self) -> str:
        """Summarize every chunk and join the partial summaries."""
        return self.summarize_result().text

    def quick_summary(self) -> str:
        """Summarize the first chunks in a single completion call."""
        result = self._complete_over_chunks(QUICK_SUMMARY_PROMPT)
        return result.text if result.text.strip() else NO_QUICK_SUMMARY_MESSAGE

    def suggest_questions_result(self) -> OperationResult:
        return self._complete_over_chunks(SUGGESTIONS_PROMPT)

    def suggest_questions(self) -> str:
        """Ask for three short, diverse questions about the loaded content."""
        return self.suggest_questions_result().text

    # Sensitive information

    def extract_sensitive_terms(self, text: str, categories: Sequence[str]) -> List[str]:
        """
        Ask the model for PII of the given categories found in text.

        Args:
            text: Text to scan.
            categories: PII categories, e.g. "Names", "Email addresses".

        Returns:
            Distinct terms (case-insensitive), in the order the model listed them.
        """
        if not text or not text.strip():
            return []
        if not categories or not any(c and c.strip() for c in categories):
            return []

        prompt = build_sensitive_terms_prompt(categories)
        result = self._complete(text, system_role=prompt)
        if not result.text.strip():
            return []
        terms = parse_sensitive_terms(result.text.strip())
        logger.info("Extracted %d sensitive terms for %d categories", len(terms), len(categories))
        return terms

    def find_text_bounds(self, data: DocumentSource, terms: Sequence[str]) -> Dict[int, List[MergedBound]]:
        """Locate terms in a PDF and return merged, pixel-scaled bounds per page."""
        if self.processor is None:
            raise InvalidArgumentError("A document processor is required to locate text.")
        if terms is None:
            raise InvalidArgumentError("Terms cannot be null.")
        return process_bounds(self.processor.locate(data, terms))
