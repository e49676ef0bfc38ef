"""Tests for session history and request validation rules."""

import pytest

from logo_studio.core.errors import InputValidationError
from logo_studio.core.history import HISTORY_LIMIT, GenerationHistory
from logo_studio.core.types import GenerationRequest, GenerationResult, HistoryEntry, Mode
from logo_studio.core.validation import (
    CREATE_NEEDS_INPUT,
    MODERNIZE_NEEDS_IMAGE,
    TOO_MANY_IMAGES,
    validate_request,
)


def entry(prompt="", mode=Mode.CREATE, created_at=1.0):
    result = GenerationResult("data:image/png;base64,QUJD", mode, prompt, created_at)
    return HistoryEntry(result=result)


class TestGenerationHistory:
    def test_default_limit(self):
        assert GenerationHistory().limit == HISTORY_LIMIT == 10

    def test_newest_first_and_bounded(self):
        history = GenerationHistory()
        for index in range(12):
            history.append(entry(f"idea {index}", created_at=float(index)))

        labels = [item.label for item in history]
        assert len(history) == 10
        assert labels[0] == "idea 11"
        assert labels[-1] == "idea 2"

    def test_clear(self):
        history = GenerationHistory()
        history.append(entry())
        history.clear()
        assert history.entries == ()

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            GenerationHistory(limit=0)


class TestHistoryEntry:
    def test_label_falls_back_to_mode_name(self):
        assert entry("", Mode.MODERNIZE).label == "Brand Revival"
        assert entry("  ", Mode.CREATE).label == "Forge Identity"

    def test_id_is_millisecond_timestamp(self):
        assert entry(created_at=1700000000.25).id == "1700000000250"


class TestValidateRequest:
    def test_modernize_requires_image(self):
        with pytest.raises(InputValidationError) as exc_info:
            validate_request(GenerationRequest(Mode.MODERNIZE, "make it modern"))
        assert exc_info.value.message == MODERNIZE_NEEDS_IMAGE

    def test_create_requires_prompt_or_image(self):
        with pytest.raises(InputValidationError) as exc_info:
            validate_request(GenerationRequest(Mode.CREATE, "   "))
        assert exc_info.value.message == CREATE_NEEDS_INPUT

    def test_create_with_image_only(self):
        validate_request(GenerationRequest(Mode.CREATE, "", ("data:image/png;base64,QUJD",)))

    def test_create_with_prompt_only(self):
        validate_request(GenerationRequest(Mode.CREATE, "a fox"))

    def test_too_many_images(self):
        images = ("data:image/png;base64,QUJD",) * 6
        with pytest.raises(InputValidationError) as exc_info:
            validate_request(GenerationRequest(Mode.MODERNIZE, "", images))
        assert exc_info.value.message == TOO_MANY_IMAGES
