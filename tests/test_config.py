"""Tests for configuration helpers."""

import pytest

from whisper_autosub.config import WHISPER_MODELS, validate_model
from whisper_autosub.errors import UsageError


class TestValidateModel:
    @pytest.mark.parametrize("name", WHISPER_MODELS)
    def test_known_models(self, name):
        assert validate_model(name) == name

    def test_unknown_model_lists_choices(self):
        with pytest.raises(UsageError) as excinfo:
            validate_model("gigantic")
        message = str(excinfo.value)
        assert "gigantic" in message
        for name in WHISPER_MODELS:
            assert name in message
