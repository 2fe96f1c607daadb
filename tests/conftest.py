"""Pytest configuration and fixtures."""

import pytest

from docqa.config import DocQASettings
from docqa.conversation import ConversationSession
from docqa.document_processor import DocumentProcessor
from docqa.document_qa import DocumentQA
from tests.helpers import KeywordEmbedder, ScriptedProvider, build_pdf

KEYWORDS = ["refund", "shipping", "customer", "john"]


@pytest.fixture
def embedder():
    """Keyword embedder over a small vocabulary."""
    return KeywordEmbedder(KEYWORDS)


@pytest.fixture
def provider():
    """Completion provider with no scripted replies."""
    return ScriptedProvider()


@pytest.fixture
def session(provider):
    return ConversationSession(provider)


@pytest.fixture
def settings():
    return DocQASettings()


@pytest.fixture
def assistant(embedder, session, settings):
    """DocumentQA wired to the fakes, with no document loaded."""
    return DocumentQA(embedder, session, DocumentProcessor(), settings)


@pytest.fixture(scope="session")
def sample_pdf():
    """Two-page PDF: a refund request naming a customer, then a shipping note."""
    return build_pdf(
        {
            1: "Customer John Smith requested a refund.",
            2: "Shipping to john@example.com is free.",
        },
        annotations={1: "Reviewer note: verify refund"},
    )
