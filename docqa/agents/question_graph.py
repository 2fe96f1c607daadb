"""LangGraph workflow: load a document, summarize it and answer configured questions."""

import logging
from typing import Dict, List, Optional, Tuple, TypedDict

from langgraph.graph import END, StateGraph

from docqa.document_processor import PDF_MEDIA_TYPE, DocumentProcessor
from docqa.document_qa import DocumentQA
from docqa.errors import DocQAError
from docqa.models.bounds import MergedBound
from docqa.models.question import ProcessingResult, QuestionAnswer, QuestionConfig

logger = logging.getLogger(__name__)


class QuestionState(TypedDict, total=False):
    """State for the question workflow."""
    data: bytes
    media_type: str
    questions: List[QuestionConfig]
    blocks: List[str]
    summary: str
    answers: List[QuestionAnswer]
    result: ProcessingResult
    error: str


class DocumentQuestionGraph:
    """LangGraph workflow answering a batch of questions about one document."""

    def __init__(
        self,
        assistant: DocumentQA,
        processor: Optional[DocumentProcessor] = None,
        iterative_summary: bool = False,
    ):
        """
        Initialize the question graph.

        Args:
            assistant: Answerer whose index holds the loaded document.
            processor: Document extractor (defaults to the assistant's, or a new one).
            iterative_summary: Summarize chunk by chunk instead of one call over the first chunks.
        """
        self.assistant = assistant
        self.processor = processor or assistant.processor or DocumentProcessor()
        if assistant.processor is None:
            assistant.processor = self.processor
        self.iterative_summary = iterative_summary

        # Build the graph
        self.graph = self._build_graph()

    def _build_graph(self):
        """Build the LangGraph workflow."""
        workflow = StateGraph(QuestionState)

        # Add nodes
        workflow.add_node("load_document", self._load_document)
        workflow.add_node("summarize", self._summarize)
        workflow.add_node("answer_questions", self._answer_questions)
        workflow.add_node("build_result", self._build_result)

        # Define the flow
        workflow.set_entry_point("load_document")
        workflow.add_edge("load_document", "summarize")
        workflow.add_edge("summarize", "answer_questions")
        workflow.add_edge("answer_questions", "build_result")
        workflow.add_edge("build_result", END)

        return workflow.compile()

    def _load_document(self, state: QuestionState) -> QuestionState:
        """Extract text blocks and rebuild the assistant's index."""
        try:
            blocks = self.processor.extract(state["data"], state.get("media_type", PDF_MEDIA_TYPE))
            state["blocks"] = blocks
            count = self.assistant.load_document(blocks)
            logger.info("Document loaded: %d blocks, %d chunks", len(blocks), count)
        except DocQAError as e:
            logger.exception("Loading document failed")
            state["error"] = f"Error loading document: {e}"
        return state

    def _summarize(self, state: QuestionState) -> QuestionState:
        if state.get("error"):
            return state
        try:
            if self.iterative_summary:
                state["summary"] = self.assistant.summarize()
            else:
                state["summary"] = self.assistant.quick_summary()
        except DocQAError as e:
            logger.exception("Summarizing document failed")
            state["summary"] = f"Error generating summary: {e}"
        return state

    def _answer_questions(self, state: QuestionState) -> QuestionState:
        """Answer every question, isolating failures per question."""
        if state.get("error"):
            return state

        settings = self.assistant.settings
        pages: Optional[Dict[int, str]] = None
        scoped: Dict[Tuple[Tuple[int, ...], int], DocumentQA] = {}
        answers: List[QuestionAnswer] = []

        for question in state.get("questions") or []:
            try:
                target = self.assistant
                page_numbers = tuple(question.get_page_numbers())
                chunk_size = question.effective_chunk_size(settings.chunk_size)
                if page_numbers or chunk_size != settings.chunk_size:
                    key = (page_numbers, chunk_size)
                    if key not in scoped:
                        blocks = state.get("blocks") or []
                        if page_numbers:
                            if pages is None:
                                pages = self._pages(state)
                            blocks = [pages[p] for p in page_numbers if p in pages]
                        scoped[key] = self.assistant.scoped(blocks, chunk_size)
                    target = scoped[key]

                answer = target.answer(
                    question.question_text,
                    top_n=question.effective_top_n(settings.top_n),
                    system_message=question.system_message,
                    embedding_text=question.question_text_for_embedding,
                )
            except DocQAError as e:
                logger.exception("Answering question %r failed", question.question_id or question.question_text)
                answer = f"Error getting answer: {e}"

            try:
                bounds = self._lookup_bounds(state, question)
            except DocQAError as e:
                logger.warning("Locating lookup values for question %r failed: %s", question.question_id, e)
                bounds = {}

            answers.append(QuestionAnswer(
                question_id=question.question_id,
                question=question.question_text,
                answer=answer,
                bounds=bounds,
            ))

        state["answers"] = answers
        return state

    def _pages(self, state: QuestionState) -> Dict[int, str]:
        if state.get("media_type", PDF_MEDIA_TYPE).lower() != PDF_MEDIA_TYPE:
            return {}
        return self.processor.extract_pages(state["data"])

    def _lookup_bounds(self, state: QuestionState, question: QuestionConfig) -> Dict[int, List[MergedBound]]:
        if not (question.is_look_up and question.lookup_values):
            return {}
        if state.get("media_type", PDF_MEDIA_TYPE).lower() != PDF_MEDIA_TYPE:
            return {}
        return self.assistant.find_text_bounds(state["data"], question.lookup_values)

    def _build_result(self, state: QuestionState) -> QuestionState:
        if state.get("error"):
            return state
        answers = state.get("answers") or []
        state["result"] = ProcessingResult(
            summary=state.get("summary", ""),
            answers=answers,
            questions_count=len(state.get("questions") or []),
        )
        return state

    def run(self, data: bytes, questions: List[QuestionConfig], media_type: str = PDF_MEDIA_TYPE) -> ProcessingResult:
        """
        Load a document, summarize it and answer the questions.

        Args:
            data: Document bytes.
            questions: Questions to answer.
            media_type: Declared media type of data.

        Returns:
            ProcessingResult with the summary and one answer per question.
        """
        initial_state: QuestionState = {
            "data": data,
            "media_type": media_type,
            "questions": list(questions),
            "blocks": [],
            "summary": "",
            "answers": [],
            "error": "",
        }

        result = self.graph.invoke(initial_state)

        if result.get("error"):
            raise DocQAError(result["error"])

        return result["result"]
