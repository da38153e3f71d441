"""Tests for logging context propagation."""

import pytest

from license_scanner.logging.context import (
    clear_log_context,
    get_log_context,
    log_context,
    pop_log_context,
    push_log_context,
)


@pytest.fixture(autouse=True)
def clean_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


def test_empty_context():
    """Test that context starts empty."""
    assert get_log_context() == {}


def test_push_single_field():
    """Test pushing a single field to context."""
    token = push_log_context(license_id="MIT")
    assert get_log_context() == {"license_id": "MIT"}
    pop_log_context(token)
    assert get_log_context() == {}


def test_nested_context():
    """Test nested context pushes and pops."""
    token1 = push_log_context(run_id="abc123")
    token2 = push_log_context(file="LICENSE")
    token3 = push_log_context(license_id="Apache-2.0")
    assert get_log_context() == {
        "run_id": "abc123",
        "file": "LICENSE",
        "license_id": "Apache-2.0",
    }

    pop_log_context(token3)
    assert get_log_context() == {"run_id": "abc123", "file": "LICENSE"}

    pop_log_context(token2)
    assert get_log_context() == {"run_id": "abc123"}

    pop_log_context(token1)
    assert get_log_context() == {}


def test_context_override():
    """Test that pushing the same key overwrites the previous value."""
    token1 = push_log_context(license_id="MIT")
    token2 = push_log_context(license_id="ISC")
    assert get_log_context() == {"license_id": "ISC"}

    pop_log_context(token2)
    assert get_log_context() == {"license_id": "MIT"}

    pop_log_context(token1)


def test_context_manager_nested():
    """Test nested context managers."""
    with log_context(file="COPYING"):
        with log_context(license_id="GPL-2.0"):
            assert get_log_context() == {"file": "COPYING", "license_id": "GPL-2.0"}

        assert get_log_context() == {"file": "COPYING"}

    assert get_log_context() == {}


def test_context_manager_exception():
    """Test that context is restored even when an exception occurs."""
    with pytest.raises(ValueError):
        with log_context(license_id="MIT"):
            raise ValueError("Test exception")

    assert get_log_context() == {}


def test_context_isolation():
    """Test that get_log_context returns a copy, not the actual dict."""
    token = push_log_context(license_id="MIT")

    context = get_log_context()
    context["file"] = "modified"

    assert get_log_context() == {"license_id": "MIT"}
    pop_log_context(token)
