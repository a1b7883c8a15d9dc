"""Tests for settings, structured logging and error reports."""

from __future__ import annotations

import io
import json

import pytest

from waitcase import (
    CombinatorError,
    ErrorCode,
    Event,
    all_of,
    clear_settings_cache,
    get_settings,
    task_to_event,
)
from waitcase.runtime.observability import (
    ConsoleRenderer,
    JsonRenderer,
    configure_from_settings,
    configure_logging,
    get_logger,
    log_context,
)


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> object:
    for var in ("WAITCASE_LOG_LEVEL", "WAITCASE_LOG_FORMAT", "WAITCASE_COMBINATOR_INVALID_LOG_LEVEL",
                "WAITCASE_COMBINATOR_TASK_NAME_PREFIX"):
        monkeypatch.delenv(var, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()
    configure_logging(format="none")


# ─────────────────────────────────────────────────────────────────────────────
# Settings
# ─────────────────────────────────────────────────────────────────────────────


def test_default_settings() -> None:
    settings = get_settings()
    assert settings.logging.level == "INFO"
    assert settings.logging.format == "console"
    assert settings.combinator.invalid_log_level == "WARNING"
    assert settings.combinator.task_name_prefix == "waitcase"
    assert get_settings() is settings


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WAITCASE_LOG_LEVEL", "debug")
    monkeypatch.setenv("WAITCASE_COMBINATOR_INVALID_LOG_LEVEL", "error")
    clear_settings_cache()

    settings = get_settings()
    assert settings.logging.level == "DEBUG"
    assert settings.combinator.invalid_log_level == "ERROR"


# ─────────────────────────────────────────────────────────────────────────────
# Logging
# ─────────────────────────────────────────────────────────────────────────────


def test_invalid_awaitable_is_logged() -> None:
    out = io.StringIO()
    configure_logging(format="json", level="INFO", output=out)

    all_of([Event(), "bogus"])

    entries = [json.loads(line) for line in out.getvalue().splitlines()]
    assert len(entries) == 1
    entry = entries[0]
    assert entry["level"] == "warning"
    assert entry["event"] == "invalid awaitable skipped"
    assert entry["code"] == "INVALID_AWAITABLE"
    assert entry["index"] == 1
    assert entry["kind"] == "str"


@pytest.mark.asyncio
async def test_task_failure_is_reported() -> None:
    out = io.StringIO()
    configure_logging(format="json", level="DEBUG", output=out)

    async def broken() -> None:
        raise KeyError("missing")

    await task_to_event(broken()).wait()

    entries = [json.loads(line) for line in out.getvalue().splitlines()]
    failed = [e for e in entries if e["event"] == "task failed"]
    assert len(failed) == 1
    entry = failed[0]
    assert entry["code"] == "TASK_FAILED"
    assert entry["kind"] == "KeyError"
    assert "missing" in entry["message"]
    assert entry["bridge"].startswith("waitcase-bridge-")
    assert "index" not in entry


def test_raising_subscriber_is_logged() -> None:
    out = io.StringIO()
    configure_logging(format="json", level="INFO", output=out)
    event = Event("clicks")

    def broken() -> None:
        raise RuntimeError("subscriber failed")

    event.subscribe(broken)
    event.emit()

    entry = json.loads(out.getvalue())
    assert entry["level"] == "error"
    assert entry["event"] == "subscriber raised"
    assert entry["logger"] == "waitcase.event"
    assert entry["signal"] == "clicks"
    assert "RuntimeError: subscriber failed" in entry["exc_info"]


def test_invalid_log_level_setting(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WAITCASE_COMBINATOR_INVALID_LOG_LEVEL", "DEBUG")
    clear_settings_cache()
    out = io.StringIO()
    configure_logging(format="json", level="INFO", output=out)

    all_of([Event(), 1])

    assert out.getvalue() == ""


def test_console_renderer() -> None:
    out = io.StringIO()
    log = get_logger("engine", kind="all")
    log = log.bind(size=2)
    configure_logging(format="console", level="DEBUG", output=out, colors=False)

    with log_context(request="r1"):
        log.info("combinator completed")
    log.debug("outside")

    lines = out.getvalue().splitlines()
    assert "[info] combinator completed" in lines[0]
    assert 'kind="all"' in lines[0] and "size=2" in lines[0] and 'request="r1"' in lines[0]
    assert "request" not in lines[1]


def test_level_filtering() -> None:
    out = io.StringIO()
    configure_logging(format="console", level="WARNING", output=out, colors=False)
    log = get_logger("x")

    log.info("hidden")
    log.warning("shown")

    assert "hidden" not in out.getvalue()
    assert "shown" in out.getvalue()


def test_configure_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WAITCASE_LOG_FORMAT", "json")
    clear_settings_cache()
    out = io.StringIO()

    renderer = configure_from_settings(output=out)

    assert isinstance(renderer, JsonRenderer)
    get_logger("cfg").info("hello", n=1)
    assert json.loads(out.getvalue())["n"] == 1


def test_unknown_format() -> None:
    with pytest.raises(ValueError, match="Unknown format"):
        configure_logging(format="xml")


def test_console_renderer_autodetects_colors() -> None:
    assert ConsoleRenderer(output=io.StringIO()).colors is False


# ─────────────────────────────────────────────────────────────────────────────
# Error reports
# ─────────────────────────────────────────────────────────────────────────────


def test_error_report_from_exception() -> None:
    try:
        raise ValueError("broken input")
    except ValueError as exc:
        err = CombinatorError.from_exception(exc, index=2, include_trace=True)

    assert err.code is ErrorCode.TASK_FAILED
    assert err.message == "broken input"
    assert err.kind == "ValueError"
    assert err.details and "ValueError" in err.details
    assert not err.fatal
    assert str(err).startswith("[TASK_FAILED] (entry 2) broken input")


def test_invalid_awaitable_with_broken_repr() -> None:
    class BadRepr:
        def __repr__(self) -> str:
            raise ValueError("no repr")

    err = CombinatorError.invalid_awaitable(BadRepr(), 3)

    assert err.kind == "BadRepr"
    assert err.message.startswith("entry 3 is neither an Event nor a Task")


def test_error_report_is_frozen() -> None:
    err = CombinatorError.invalid_awaitable(object(), 0)
    with pytest.raises(Exception):
        err.index = 3  # type: ignore[misc]
    assert err.model_dump()["code"] == ErrorCode.INVALID_AWAITABLE
