"""Unit tests for TraversalConfig."""

import pytest

from pointerprint import TraversalConfig
from pointerprint.config import DEFAULT_MAX_DEPTH


class TestTraversalConfig:
    def test_default_depth_is_five(self):
        assert DEFAULT_MAX_DEPTH == 5
        assert TraversalConfig().max_depth == 5

    def test_zero_allowed(self):
        assert TraversalConfig(max_depth=0).max_depth == 0

    def test_negative_rejected(self):
        with pytest.raises(ValueError, match="max_depth must be >= 0"):
            TraversalConfig(max_depth=-1)


class TestFromEnv:
    def test_unset_uses_defaults(self, monkeypatch):
        monkeypatch.delenv("PP_MAX_DEPTH", raising=False)
        assert TraversalConfig.from_env() == TraversalConfig()

    def test_reads_depth(self, monkeypatch):
        monkeypatch.setenv("PP_MAX_DEPTH", " 3 ")
        assert TraversalConfig.from_env().max_depth == 3

    def test_non_integer(self, monkeypatch):
        monkeypatch.setenv("PP_MAX_DEPTH", "deep")
        with pytest.raises(ValueError, match="PP_MAX_DEPTH must be an integer"):
            TraversalConfig.from_env()

    def test_negative(self, monkeypatch):
        monkeypatch.setenv("PP_MAX_DEPTH", "-2")
        with pytest.raises(ValueError):
            TraversalConfig.from_env()
