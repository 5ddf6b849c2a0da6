from pydantic import BaseModel, Field, model_validator
from typing import List, Optional

from .renderer import EditorView


class CodeUpdate(BaseModel):
    code: str


class LanguageSelect(BaseModel):
    id: Optional[int] = None
    value: Optional[str] = None

    @model_validator(mode="after")
    def _require_key(self):
        if self.id is None and not self.value:
            raise ValueError("Provide a language id or value")
        return self


class ThemeSelect(BaseModel):
    value: str


class KeyPress(BaseModel):
    keys: List[str] = Field(default_factory=list)


class CompileStarted(BaseModel):
    started: bool
    epoch: Optional[int] = None
    processing: bool


class SessionView(BaseModel):
    session_id: str
    editor: EditorView
