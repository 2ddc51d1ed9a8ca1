import logging

import pytest

from genai_server.core.logging_utils import ROOT_LOGGER_NAME, mask_api_key, setup_logging


def test_setup_logging_adds_console_handler_once() -> None:
    # when
    first = setup_logging("debug")
    handlers_after_first = list(first.handlers)
    second = setup_logging("warning")

    # then
    assert first is second is logging.getLogger(ROOT_LOGGER_NAME)
    assert second.handlers == handlers_after_first
    assert second.level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING


def test_setup_logging_with_unknown_level_falls_back_to_info() -> None:
    # when
    result = setup_logging("chatty")

    # then
    assert result.level == logging.INFO


@pytest.mark.parametrize(
    "api_key, expected",
    [
        ("", "(empty)"),
        ("abc", "****...**** (len=3)"),
        ("short", "****...**** (len=5)"),
        ("12345678", "****...**** (len=8)"),
        ("123456789", "1234...6789 (len=9)"),
        ("AIzaSyA-1234567890abcd", "AIza...abcd (len=22)"),
    ],
)
def test_mask_api_key(api_key: str, expected: str) -> None:
    # then
    assert mask_api_key(api_key) == expected
