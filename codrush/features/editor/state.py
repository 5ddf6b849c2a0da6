from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from codrush.features.judge0.schemas import Judge0ExecutionResult
from codrush.features.languages.registry import (
    DEFAULT_LANGUAGE,
    DEFAULT_THEME_VALUE,
    LanguageOption,
    ThemeOption,
    find_language,
    get_theme,
)

logger = logging.getLogger(__name__)

DEFAULT_CODE = (
    "const formatter = n => (n < 10 ? ' ' : '') + n;\n\n"
    "for (let i = 1; i < 8; i+=3) {\n"
    "  for (let j = 1; j < 10; j++) {\n"
    "    let results = [i*j, (i+1)*j, (i+2)*j].map(formatter);\n"
    "    let line = [0, 1, 2].map(n => `${i+n} x ${j} = ${results[n]}`).join('\\t\\t');\n"
    "    console.log(line);\n"
    "  }\n"
    "  console.log();\n"
    "}"
)


class NotificationKind(str, Enum):
    success = "success"
    error = "error"


class FailureKind(str, Enum):
    rate_limit = "rate_limit"
    network = "network"
    timeout = "timeout"


class Notification(BaseModel):
    kind: NotificationKind
    message: str
    auto_close_ms: int = 1000


SUCCESS_MESSAGE = "Compiled Successfully!"
GENERIC_ERROR_MESSAGE = "Something went wrong! Please try again."
RATE_LIMIT_MESSAGE = (
    "Quota of 100 requests exceeded for the Day! Please read the blog on freeCodeCamp "
    "to learn how to setup your own RAPID API Judge0!"
)
TIMEOUT_MESSAGE = "Execution is taking too long. Please try again later."

# Undrained notifications beyond this are dropped oldest first.
MAX_NOTIFICATIONS = 20

_FAILURE_NOTIFICATIONS = {
    FailureKind.rate_limit: (RATE_LIMIT_MESSAGE, 10000),
    FailureKind.network: (GENERIC_ERROR_MESSAGE, 1000),
    FailureKind.timeout: (TIMEOUT_MESSAGE, 5000),
}


class UIState(BaseModel):
    code: str
    output_details: Optional[Judge0ExecutionResult] = None
    processing: bool = False
    theme: ThemeOption
    language: LanguageOption
    epoch: int = 0
    notifications: List[Notification] = []


class EditorState:
    """Single source of truth for one editor session.

    All mutation goes through the methods below. Results and failures carry
    the epoch of the submission that produced them; anything older than the
    current epoch is dropped.
    """

    def __init__(
        self,
        code: str = DEFAULT_CODE,
        language: LanguageOption = DEFAULT_LANGUAGE,
        theme: Optional[ThemeOption] = None,
    ) -> None:
        self.code = code
        self.language = language
        self.theme = theme or get_theme(DEFAULT_THEME_VALUE)
        self.processing = False
        self.output_details: Optional[Judge0ExecutionResult] = None
        self.epoch = 0
        self._notifications: List[Notification] = []

    # -- user actions -------------------------------------------------------

    def set_code(self, code: str) -> None:
        self.code = code if code is not None else ""

    def select_language(self, id: Optional[int] = None, value: Optional[str] = None) -> LanguageOption:
        self.language = find_language(id=id, value=value)
        logger.debug("selected language %s (%s)", self.language.value, self.language.id)
        return self.language

    def select_theme(self, value: str) -> ThemeOption:
        self.theme = get_theme(value)
        return self.theme

    # -- execution lifecycle ------------------------------------------------

    def begin_submission(self) -> int:
        self.epoch += 1
        self.processing = True
        return self.epoch

    def is_current(self, epoch: int) -> bool:
        return epoch == self.epoch

    def apply_result(self, epoch: int, result: Judge0ExecutionResult) -> bool:
        if not self.is_current(epoch):
            logger.info("Discarding stale result for epoch %d (current %d)", epoch, self.epoch)
            return False
        self.processing = False
        self.output_details = result
        self.notify(NotificationKind.success, SUCCESS_MESSAGE)
        return True

    def submission_failed(self, epoch: int, kind: FailureKind) -> bool:
        if not self.is_current(epoch):
            logger.info("Ignoring stale %s failure for epoch %d (current %d)", kind.value, epoch, self.epoch)
            return False
        self.processing = False
        message, auto_close_ms = _FAILURE_NOTIFICATIONS[kind]
        self.notify(NotificationKind.error, message, auto_close_ms)
        return True

    # -- notifications ------------------------------------------------------

    def notify(self, kind: NotificationKind, message: str, auto_close_ms: int = 1000) -> None:
        self._notifications.append(Notification(kind=kind, message=message, auto_close_ms=auto_close_ms))
        if len(self._notifications) > MAX_NOTIFICATIONS:
            del self._notifications[:-MAX_NOTIFICATIONS]

    @property
    def notifications(self) -> List[Notification]:
        return list(self._notifications)

    def drain_notifications(self) -> List[Notification]:
        drained, self._notifications = self._notifications, []
        return drained

    def snapshot(self) -> UIState:
        return UIState(
            code=self.code,
            output_details=self.output_details,
            processing=self.processing,
            theme=self.theme,
            language=self.language,
            epoch=self.epoch,
            notifications=self.notifications,
        )
