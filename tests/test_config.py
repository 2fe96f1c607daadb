"""Tests for settings loading."""

import pytest

from docqa.config import DocQASettings


class TestDocQASettings:
    """Tests for DocQASettings."""

    def test_defaults(self, monkeypatch):
        for name in ("DOCQA_CHUNK_SIZE", "DOCQA_TOP_N", "DOCQA_MIN_SCORE", "DOCQA_RAISE_PROVIDER_ERRORS"):
            monkeypatch.delenv(name, raising=False)
        settings = DocQASettings.from_env()
        assert settings.chunk_size == 4000
        assert settings.top_n == 5
        assert settings.min_score == 0.5
        assert settings.context_top_n == 2
        assert settings.raise_provider_errors is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("DOCQA_CHUNK_SIZE", "2000")
        monkeypatch.setenv("DOCQA_MIN_SCORE", "0.3")
        monkeypatch.setenv("DOCQA_RAISE_PROVIDER_ERRORS", "true")
        monkeypatch.setenv("DOCQA_LOG_LEVEL", "debug")
        settings = DocQASettings.from_env()
        assert settings.chunk_size == 2000
        assert settings.min_score == 0.3
        assert settings.raise_provider_errors is True
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("kwargs", [{"chunk_size": 0}, {"top_n": 0}, {"min_score": 1.5}])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            DocQASettings(**kwargs)
