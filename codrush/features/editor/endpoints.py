from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from codrush.common.quota import QuotaError
from codrush.features.languages.registry import UnknownOptionError
from .renderer import render_editor
from .schemas import CodeUpdate, CompileStarted, KeyPress, LanguageSelect, SessionView, ThemeSelect
from .sessions import EditorSession, EditorSessionStore, session_store
from .state import Notification

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/editor", tags=["editor"])


def get_session_store() -> EditorSessionStore:
    return session_store


def _get_session(session_id: str, store: EditorSessionStore) -> EditorSession:
    session = store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Unknown editor session: {session_id}")
    return session


def _view(session: EditorSession) -> SessionView:
    return SessionView(session_id=session.id, editor=render_editor(session.state))


def _compile_response(session: EditorSession, epoch: Optional[int]) -> CompileStarted:
    return CompileStarted(started=epoch is not None, epoch=epoch, processing=session.state.processing)


@router.post("/sessions", response_model=SessionView, status_code=status.HTTP_201_CREATED)
async def create_session(store: EditorSessionStore = Depends(get_session_store)):
    return _view(store.create())


@router.get("/sessions/{session_id}", response_model=SessionView)
async def get_session(session_id: str, store: EditorSessionStore = Depends(get_session_store)):
    return _view(_get_session(session_id, store))


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str, store: EditorSessionStore = Depends(get_session_store)):
    if not store.remove(session_id):
        raise HTTPException(status_code=404, detail=f"Unknown editor session: {session_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/sessions/{session_id}/code", response_model=SessionView)
async def update_code(session_id: str, body: CodeUpdate, store: EditorSessionStore = Depends(get_session_store)):
    session = _get_session(session_id, store)
    session.state.set_code(body.code)
    return _view(session)


@router.put("/sessions/{session_id}/language", response_model=SessionView)
async def select_language(session_id: str, body: LanguageSelect, store: EditorSessionStore = Depends(get_session_store)):
    session = _get_session(session_id, store)
    try:
        session.state.select_language(id=body.id, value=body.value)
    except UnknownOptionError as exc:
        raise HTTPException(status_code=422, detail=str(exc.args[0])) from exc
    return _view(session)


@router.put("/sessions/{session_id}/theme", response_model=SessionView)
async def select_theme(session_id: str, body: ThemeSelect, store: EditorSessionStore = Depends(get_session_store)):
    session = _get_session(session_id, store)
    try:
        session.state.select_theme(body.value)
    except UnknownOptionError as exc:
        raise HTTPException(status_code=422, detail=str(exc.args[0])) from exc
    return _view(session)


@router.post("/sessions/{session_id}/compile", response_model=CompileStarted, status_code=status.HTTP_202_ACCEPTED)
async def compile_code(session_id: str, store: EditorSessionStore = Depends(get_session_store)):
    session = _get_session(session_id, store)
    try:
        epoch = session.controller.start_compile()
    except QuotaError as exc:
        raise HTTPException(status_code=413, detail=str(exc)) from exc
    return _compile_response(session, epoch)


@router.post("/sessions/{session_id}/keys", response_model=CompileStarted, summary="Keyboard shortcut (CTRL+ENTER)")
async def key_press(session_id: str, body: KeyPress, store: EditorSessionStore = Depends(get_session_store)):
    session = _get_session(session_id, store)
    try:
        epoch = session.controller.key_pressed(body.keys)
    except QuotaError as exc:
        raise HTTPException(status_code=413, detail=str(exc)) from exc
    return _compile_response(session, epoch)


@router.get("/sessions/{session_id}/notifications", response_model=List[Notification])
async def drain_notifications(session_id: str, store: EditorSessionStore = Depends(get_session_store)):
    return _get_session(session_id, store).state.drain_notifications()
