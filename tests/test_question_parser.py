"""Tests for question payload parsing and question models."""

import json

import pytest
from pydantic import ValidationError

from docqa.agents import parse_questions
from docqa.errors import InvalidArgumentError
from docqa.models.question import MatterTypesRequest, QuestionConfig


class TestQuestionConfig:
    """Tests for QuestionConfig."""

    def test_aliases_and_defaults(self):
        """Payload field names map onto the model; unset overrides fall back."""
        q = QuestionConfig.model_validate({"QuestionText": "Who signed?", "questionId": "q1", "lookupValues": None})
        assert q.question_text == "Who signed?"
        assert q.question_id == "q1"
        assert q.lookup_values == []
        assert q.effective_top_n(5) == 5
        assert q.effective_chunk_size(4000) == 4000
        assert q.effective_embedding_text() == "Who signed?"

    @pytest.mark.parametrize("page_range,pages", [("3", [3]), ("1-4", [1, 2, 3, 4]), (" 2 - 2 ", [2]), (None, [])])
    def test_page_numbers(self, page_range, pages):
        q = QuestionConfig(question_text="Q", page_range=page_range)
        assert q.get_page_numbers() == pages

    @pytest.mark.parametrize("page_range", ["0", "5-2", "a-b", "1,3"])
    def test_invalid_page_range(self, page_range):
        with pytest.raises(ValidationError):
            QuestionConfig(question_text="Q", page_range=page_range)

    @pytest.mark.parametrize("field,value", [("top_n", 0), ("top_n", 21), ("chunk_size", 99), ("chunk_size", 10001)])
    def test_range_limits(self, field, value):
        with pytest.raises(ValidationError):
            QuestionConfig(question_text="Q", **{field: value})

    def test_embedding_text_override(self):
        q = QuestionConfig(question_text="Who?", question_text_for_embedding="signatory name")
        assert q.effective_embedding_text() == "signatory name"


class TestMatterTypes:
    """Tests for the nested request shape."""

    def test_questions_per_matter_type(self):
        request = MatterTypesRequest.model_validate({
            "MatterTypes": {
                "Lease": {"questions": [{"QuestionText": "Rent?"}, {"QuestionText": "Term?"}]},
                "Loan": {"questions": [{"QuestionText": "Rate?"}]},
            }
        })
        assert [q.question_text for q in request.get_all_questions()] == ["Rent?", "Term?", "Rate?"]
        assert [q.question_text for q in request.get_questions_for_matter_type("Loan")] == ["Rate?"]
        assert request.get_questions_for_matter_type("Unknown") == []
        assert request.is_valid()

    def test_empty_request_is_invalid(self):
        assert not MatterTypesRequest().is_valid()


class TestParseQuestions:
    """Tests for parse_questions."""

    def test_array_of_objects(self):
        payload = json.dumps([{"QuestionText": "Rent?", "topN": 3}, {"QuestionText": "Term?"}])
        questions = parse_questions(payload)
        assert [q.question_text for q in questions] == ["Rent?", "Term?"]
        assert questions[0].top_n == 3

    def test_matter_types_object(self):
        payload = json.dumps({"MatterTypes": {"Lease": {"questions": [{"QuestionText": "Rent?"}]}}})
        assert [q.question_text for q in parse_questions(payload)] == ["Rent?"]

    def test_array_of_strings(self):
        questions = parse_questions('["Who signed?", "  ", "When?"]')
        assert [q.question_text for q in questions] == ["Who signed?", "When?"]

    def test_raw_question(self):
        questions = parse_questions("  What is the rent?  ")
        assert [q.question_text for q in questions] == ["What is the rent?"]

    def test_malformed_json_is_a_raw_question(self):
        """Broken JSON is treated as the question text itself."""
        questions = parse_questions("[{not json")
        assert [q.question_text for q in questions] == ["[{not json"]

    def test_blank_payload(self):
        assert parse_questions("   ") == []

    def test_blank_question_item_is_skipped(self):
        """A blank item in an array of questions is dropped; the rest are kept."""
        payload = json.dumps([{"QuestionText": "Rent?"}, {"QuestionText": ""}, {"QuestionText": "Term?"}])
        assert [q.question_text for q in parse_questions(payload)] == ["Rent?", "Term?"]

    def test_invalid_question_rejected(self):
        """Known shapes with out-of-range values raise InvalidArgumentError."""
        with pytest.raises(InvalidArgumentError):
            parse_questions(json.dumps([{"QuestionText": "Rent?", "topN": 50}]))
