"""Fake providers and document builders shared by the tests."""

from typing import Callable, Dict, Iterable, List, Optional, Sequence

import fitz

from docqa.models.message import Message


class KeywordEmbedder:
    """Deterministic embedder: one dimension per keyword, 1.0 when the text mentions it."""

    def __init__(self, keywords: Sequence[str], fail_on: Iterable[str] = ()):
        self.keywords = [k.lower() for k in keywords]
        self.fail_on = set(fail_on)
        self.calls: List[str] = []

    def __call__(self, text: str) -> List[float]:
        self.calls.append(text)
        if text in self.fail_on:
            raise RuntimeError(f"embedding service unavailable for {text!r}")
        lowered = text.lower()
        return [1.0 if keyword in lowered else 0.0 for keyword in self.keywords]


class ScriptedProvider:
    """Completion provider that records every request and replies from a script.

    ``replies`` are consumed in call order; an Exception instance in the
    script is raised instead of returned. After the script runs out,
    ``default`` builds the reply.
    """

    def __init__(self, replies: Optional[Sequence] = None, default: Optional[Callable[[List[Message]], str]] = None):
        self.replies = list(replies or [])
        self.default = default or (lambda messages: f"reply {len(messages)}")
        self.calls: List[List[Message]] = []

    def __call__(self, messages: Sequence[Message]) -> str:
        self.calls.append(list(messages))
        if self.replies:
            reply = self.replies.pop(0)
            if isinstance(reply, Exception):
                raise reply
            return reply
        return self.default(list(messages))

    @property
    def call_count(self) -> int:
        return len(self.calls)


def sentence_document(sentences: int, sentence_length: int = 50) -> str:
    """Build text made of equal-length sentences, each ending in a period."""
    words = "word " * ((sentence_length - 5) // 5)
    sentence = (words + "endx.").rjust(sentence_length, "w")
    return sentence * sentences


def build_pdf(pages: Dict[int, str], annotations: Optional[Dict[int, str]] = None) -> bytes:
    """Create an in-memory PDF with one line of text per page (1-based keys)."""
    doc = fitz.open()
    for number in sorted(pages):
        page = doc.new_page()
        page.insert_text((72, 72), pages[number], fontsize=12)
        if annotations and number in annotations:
            page.add_text_annot((300, 72), annotations[number])
    data = doc.tobytes()
    doc.close()
    return data
