"""Tests for tagged, color-coded console output."""

from waymark.logging_utils import (
    LOG_TAG_CHANGE,
    LOG_TAG_INFO,
    LOG_TAG_SUCCESS,
    LOG_TAG_WARNING,
    Color,
    colored,
    log_change,
    log_info,
    log_success,
    log_warning,
)


def test_colored_wraps_text_in_escape_codes(monkeypatch):
    monkeypatch.delenv("WAYMARK_NO_COLOR", raising=False)

    assert colored("hi", Color.BLUE) == f"{Color.BLUE.value}hi{Color.RESET.value}"
    assert colored("hi", Color.GREEN, bold=True) == (
        f"{Color.BOLD.value}{Color.GREEN.value}hi{Color.RESET.value}"
    )


def test_no_color_env_gives_plain_text(monkeypatch):
    monkeypatch.setenv("WAYMARK_NO_COLOR", "1")

    assert colored("hi", Color.YELLOW) == "hi"


def test_loggers_prefix_their_tags(capsys, monkeypatch):
    monkeypatch.setenv("WAYMARK_NO_COLOR", "1")

    log_change("Added relationship")
    log_warning("No relationship found")
    log_success("Arrived")
    log_info("Two exits")

    assert capsys.readouterr().out.splitlines() == [
        f"{LOG_TAG_CHANGE} Added relationship",
        f"{LOG_TAG_WARNING} No relationship found",
        f"{LOG_TAG_SUCCESS} Arrived",
        f"{LOG_TAG_INFO} Two exits",
    ]
