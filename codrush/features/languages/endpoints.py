from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException

from codrush.features.judge0.exceptions import CodeExecutionError
from codrush.features.judge0.schemas import Judge0Status, LanguageInfo
from codrush.features.judge0.service import judge0_service
from .registry import LanguageOption, ThemeOption, list_languages, list_themes

router = APIRouter(tags=["registry"])


@router.get("/languages", response_model=List[LanguageOption])
async def get_language_options():
    return list_languages()


@router.get("/themes", response_model=List[ThemeOption])
async def get_theme_options():
    return list_themes()


@router.get("/judge0/languages", response_model=List[LanguageInfo], summary="Languages reported by the backend")
async def get_backend_languages():
    try:
        return await judge0_service.get_languages()
    except CodeExecutionError as exc:
        raise HTTPException(status_code=502, detail=f"Failed to fetch languages: {exc}") from exc


@router.get("/judge0/statuses", response_model=List[Judge0Status], summary="Statuses reported by the backend")
async def get_backend_statuses():
    try:
        return await judge0_service.get_statuses()
    except CodeExecutionError as exc:
        raise HTTPException(status_code=502, detail=f"Failed to fetch statuses: {exc}") from exc
