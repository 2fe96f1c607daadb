"""Workflow modules for batch question answering."""

from .question_parser import parse_questions
from .question_graph import DocumentQuestionGraph

__all__ = ["parse_questions", "DocumentQuestionGraph"]
