"""Tests for settings validation."""

import pytest
from pydantic import ValidationError

from reparai.config.settings import Settings


def test_defaults():
    settings = Settings()
    assert settings.funnel_confidence_threshold == 0.7
    assert settings.funnel_max_questions == 5
    assert settings.generation_timeout == 15.0


def test_log_level_is_normalized():
    assert Settings(log_level="debug").log_level == "DEBUG"


def test_invalid_log_level():
    with pytest.raises(ValidationError):
        Settings(log_level="verbose")


@pytest.mark.parametrize("threshold", [0.0, 1.5])
def test_threshold_must_be_in_unit_interval(threshold):
    with pytest.raises(ValidationError):
        Settings(funnel_confidence_threshold=threshold)


def test_domain_cap_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(funnel_domain_max_questions={"casa": 0})


def test_timeouts_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(generation_timeout=0)
