"""Map execution results and editor state to what the page displays.

Field selection and base64 decoding only; failures were already turned into
notifications by the controller.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from codrush.features.judge0.schemas import (
    STATUS_ACCEPTED,
    STATUS_COMPILATION_ERROR,
    STATUS_TIME_LIMIT_EXCEEDED,
    Judge0ExecutionResult,
    decode_field,
)
from codrush.features.languages.registry import LanguageOption, ThemeOption
from .state import EditorState, Notification

RUN_LABEL = "Run (CTRL+ENTER)"
PROCESSING_LABEL = "Processing..."
TIME_LIMIT_TEXT = "Time Limit Exceeded"


class OutputKind(str, Enum):
    none = "none"
    stdout = "stdout"
    stderr = "stderr"
    compile_error = "compile_error"
    time_limit = "time_limit"


class OutputDetails(BaseModel):
    status: str
    memory: Optional[float] = None
    time: Optional[str] = None


class OutputView(BaseModel):
    output: Optional[str] = None
    output_kind: OutputKind = OutputKind.none
    compile_output: Optional[str] = None
    details: Optional[OutputDetails] = None


class EditorView(BaseModel):
    code: str
    language: LanguageOption
    theme: ThemeOption
    processing: bool
    run_label: str
    run_disabled: bool
    output: OutputView
    notifications: List[Notification] = []


def _nonempty(value: Optional[str]) -> Optional[str]:
    return value if value else None


def render_output(result: Optional[Judge0ExecutionResult]) -> OutputView:
    if result is None:
        return OutputView()

    status_id = result.status_id
    compile_output = _nonempty(decode_field(result.compile_output))
    if status_id == STATUS_COMPILATION_ERROR:
        output, kind = compile_output, OutputKind.compile_error
    elif status_id == STATUS_ACCEPTED:
        output, kind = _nonempty(decode_field(result.stdout)), OutputKind.stdout
    elif status_id == STATUS_TIME_LIMIT_EXCEEDED:
        output, kind = TIME_LIMIT_TEXT, OutputKind.time_limit
    else:
        output, kind = _nonempty(decode_field(result.stderr)), OutputKind.stderr

    return OutputView(
        output=output,
        output_kind=kind,
        compile_output=compile_output if status_id == STATUS_COMPILATION_ERROR else None,
        details=OutputDetails(
            status=result.status_description,
            memory=result.memory,
            time=result.time,
        ),
    )


def render_editor(state: EditorState, *, include_notifications: bool = True) -> EditorView:
    return EditorView(
        code=state.code,
        language=state.language,
        theme=state.theme,
        processing=state.processing,
        run_label=PROCESSING_LABEL if state.processing else RUN_LABEL,
        run_disabled=not state.code,
        output=render_output(state.output_details),
        notifications=state.notifications if include_notifications else [],
    )
