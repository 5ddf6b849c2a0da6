from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional
from uuid import uuid4

from codrush.features.judge0.service import Judge0Service, judge0_service
from .controller import EditorController
from .state import EditorState

logger = logging.getLogger(__name__)


@dataclass
class EditorSession:
    id: str
    state: EditorState
    controller: EditorController


class EditorSessionStore:
    """In-process registry of editor sessions, one per open page."""

    def __init__(self, service: Optional[Judge0Service] = None) -> None:
        self.service = service or judge0_service
        self._sessions: Dict[str, EditorSession] = {}

    def create(self) -> EditorSession:
        state = EditorState()
        session = EditorSession(id=str(uuid4()), state=state, controller=EditorController(state, self.service))
        self._sessions[session.id] = session
        logger.info("editor session %s opened", session.id)
        return session

    def get(self, session_id: str) -> Optional[EditorSession]:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.controller.close()
        logger.info("editor session %s closed", session_id)
        return True

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.remove(session_id)

    def __len__(self) -> int:
        return len(self._sessions)


session_store = EditorSessionStore()
