import logging

import pytest

from codrush.features.editor.state import (
    DEFAULT_CODE,
    GENERIC_ERROR_MESSAGE,
    MAX_NOTIFICATIONS,
    RATE_LIMIT_MESSAGE,
    SUCCESS_MESSAGE,
    EditorState,
    FailureKind,
    NotificationKind,
)
from codrush.features.judge0.schemas import Judge0ExecutionResult
from codrush.features.languages.registry import (
    LANGUAGE_OPTIONS,
    UnknownOptionError,
    get_language,
    get_theme,
    languages_for_value,
)


def _result(status_id=3):
    return Judge0ExecutionResult(status={"id": status_id, "description": "Accepted"})


def test_registry_keeps_both_python_entries():
    assert len(LANGUAGE_OPTIONS) == 12
    assert [opt.id for opt in languages_for_value("python")] == [70, 71]
    assert len({opt.id for opt in LANGUAGE_OPTIONS}) == 12


def test_get_language_by_shared_value_picks_first_and_warns(caplog):
    with caplog.at_level(logging.WARNING):
        opt = get_language("python")
    assert opt.id == 70
    assert "shared" in caplog.text


def test_unknown_options_raise():
    with pytest.raises(UnknownOptionError):
        get_language(9999)
    with pytest.raises(UnknownOptionError):
        get_language("brainfuck")
    with pytest.raises(UnknownOptionError):
        get_theme("neon")


def test_theme_builtin_flag():
    assert get_theme("vs-dark").builtin is True
    assert get_theme("light").builtin is True
    assert get_theme("cobalt").builtin is False


def test_defaults():
    state = EditorState()
    assert state.code == DEFAULT_CODE
    assert state.language.value == "javascript"
    assert state.language.id == 63
    assert state.theme.value == "oceanic-next"
    assert state.processing is False
    assert state.output_details is None
    assert state.epoch == 0


def test_user_selections():
    state = EditorState()
    state.set_code("print(1)")
    state.select_language(id=71)
    state.select_theme("cobalt")

    snap = state.snapshot()
    assert snap.code == "print(1)"
    assert snap.language.label == "Python (3.8.1)"
    assert snap.theme.value == "cobalt"


def test_failed_selection_keeps_previous_choice():
    state = EditorState()
    with pytest.raises(UnknownOptionError):
        state.select_language(value="cobol")
    assert state.language.value == "javascript"


def test_apply_result_for_current_epoch():
    state = EditorState()
    epoch = state.begin_submission()
    assert state.processing is True

    assert state.apply_result(epoch, _result()) is True

    assert state.processing is False
    assert state.output_details.status_id == 3
    [note] = state.drain_notifications()
    assert note.kind == NotificationKind.success
    assert note.message == SUCCESS_MESSAGE
    assert state.notifications == []


def test_stale_result_is_discarded():
    state = EditorState()
    first = state.begin_submission()
    second = state.begin_submission()

    assert state.apply_result(first, _result(6)) is False
    assert state.output_details is None
    assert state.processing is True

    assert state.apply_result(second, _result(3)) is True
    assert state.output_details.status_id == 3


def test_failure_notifications():
    state = EditorState()
    epoch = state.begin_submission()
    assert state.submission_failed(epoch, FailureKind.rate_limit) is True
    assert state.processing is False

    epoch = state.begin_submission()
    state.submission_failed(epoch, FailureKind.network)

    rate, generic = state.drain_notifications()
    assert rate.kind == generic.kind == NotificationKind.error
    assert rate.message == RATE_LIMIT_MESSAGE
    assert rate.auto_close_ms == 10000
    assert generic.message == GENERIC_ERROR_MESSAGE
    assert generic.auto_close_ms == 1000


def test_stale_failure_is_ignored():
    state = EditorState()
    first = state.begin_submission()
    state.begin_submission()

    assert state.submission_failed(first, FailureKind.timeout) is False
    assert state.processing is True
    assert state.notifications == []


def test_previous_output_stays_visible_while_recompiling():
    state = EditorState()
    state.apply_result(state.begin_submission(), _result())
    state.begin_submission()
    assert state.output_details is not None


def test_undrained_notifications_keep_only_the_newest():
    state = EditorState()
    for i in range(MAX_NOTIFICATIONS + 5):
        state.notify(NotificationKind.success, f"run {i}")

    notes = state.drain_notifications()
    assert len(notes) == MAX_NOTIFICATIONS
    assert notes[0].message == "run 5"
    assert notes[-1].message == f"run {MAX_NOTIFICATIONS + 4}"
