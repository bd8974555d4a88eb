"""Pytest configuration and shared fixtures for the astvisit test suite."""

import logging

import pytest
from utils import answer_program, nested_ternary_program, shorthand_program

from astvisit.rules import rule_registry

# Configure Hypothesis for property-based testing
try:
    from hypothesis import Phase, Verbosity, settings

    settings.register_profile("ci", max_examples=200, verbosity=Verbosity.verbose)
    settings.register_profile("dev", max_examples=50)
    settings.register_profile(
        "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
    )

    import os

    settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))
except ImportError:
    # Hypothesis not installed; property tests will be skipped
    pass


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "fuzzing: Property-based tests driven by Hypothesis")


@pytest.fixture
def answer_tree():
    """``var answer = 6 * 7;``"""
    return answer_program()


@pytest.fixture
def nested_ternary_tree():
    """``condition ? truthyCondition ? a : b : falsyCondition;``"""
    return nested_ternary_program()


@pytest.fixture
def shorthand_tree():
    """``var coords = { x };``"""
    return shorthand_program()


@pytest.fixture
def clean_rule_registry():
    """Reset the global rule registry around a test."""
    rule_registry.clear()
    yield rule_registry
    rule_registry.clear()


@pytest.fixture
def debug_logging(caplog):
    """Capture astvisit debug logs."""
    caplog.set_level(logging.DEBUG, logger="astvisit")
    return caplog
