"""Tests for the chunk-by-chunk summarizer."""

from docqa.conversation import ConversationSession
from docqa.models.chunk import Chunk
from docqa.models.result import ResultStatus
from docqa.summarizer import NO_SUMMARY_MESSAGE, SUMMARY_SYSTEM_PROMPT, IterativeSummarizer
from tests.helpers import ScriptedProvider


def _summarizer(provider):
    return IterativeSummarizer(ConversationSession(provider))


class TestIterativeSummarizer:
    """Tests for IterativeSummarizer."""

    def test_one_request_per_chunk(self):
        """Each request holds only the system prompt and the current chunk."""
        provider = ScriptedProvider(["<p>A</p>", "<p>B</p>", "<p>C</p>"])

        summary = _summarizer(provider).summarize(["alpha", "beta", "gamma"])

        assert summary == "<p>A</p> <p>B</p> <p>C</p>"
        assert provider.call_count == 3
        for request, chunk in zip(provider.calls, ["alpha", "beta", "gamma"]):
            assert len(request) == 2, "History should not accumulate across chunks"
            assert request[0].content == SUMMARY_SYSTEM_PROMPT
            assert request[1].content == chunk

    def test_failed_chunk_is_skipped(self):
        """A failure on one chunk does not stop the remaining chunks."""
        provider = ScriptedProvider(["one", RuntimeError("rate limited"), "three", "four"])

        result = _summarizer(provider).summarize_result(
            [Chunk(text=t, ordinal=i) for i, t in enumerate(["c1", "c2", "c3", "c4"])]
        )

        assert provider.call_count == 4, "All chunks should be attempted"
        assert result.status == ResultStatus.OK
        assert result.text == "one three four"

    def test_empty_outputs_are_dropped(self):
        """Blank partial summaries are not joined in."""
        provider = ScriptedProvider(["first", "   ", "third"])
        assert _summarizer(provider).summarize(["a", "b", "c"]) == "first third"

    def test_no_output_returns_sentinel(self):
        """When every chunk fails the fixed message is returned."""
        provider = ScriptedProvider([RuntimeError("down"), ""])

        result = _summarizer(provider).summarize_result(["a", "b"])

        assert result.status == ResultStatus.EMPTY_STATE
        assert result.text == NO_SUMMARY_MESSAGE

    def test_no_chunks_returns_sentinel(self):
        """Nothing to summarize gives the fixed message without provider calls."""
        provider = ScriptedProvider()
        assert _summarizer(provider).summarize([]) == NO_SUMMARY_MESSAGE
        assert provider.call_count == 0
