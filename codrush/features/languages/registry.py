"""Static language and theme options offered by the editor.

Language ids are Judge0 CE ids. Two entries share the ``python`` value key
(2.7 and 3.8); both are kept and can be told apart by ``id``.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class UnknownOptionError(KeyError):
    pass


class LanguageOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    label: str
    value: str


class ThemeOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    label: str
    # built-in themes need no asset load on the page
    builtin: bool = False


def _lang(id: int, label: str, value: str) -> LanguageOption:
    return LanguageOption(id=id, name=label, label=label, value=value)


LANGUAGE_OPTIONS: Tuple[LanguageOption, ...] = (
    _lang(63, "JavaScript (Node.js 18.6.0)", "javascript"),
    _lang(50, "C (GCC 9.2.0)", "c"),
    _lang(54, "C++ (G++ 9.2.0)", "cpp"),
    _lang(51, "C# (Mono 6.6.0.161)", "csharp"),
    _lang(60, "Go (1.13.5)", "go"),
    _lang(62, "Java (OpenJDK 13.0.1)", "java"),
    _lang(78, "Kotlin (1.3.70)", "kotlin"),
    _lang(70, "Python (2.7.17)", "python"),
    _lang(71, "Python (3.8.1)", "python"),
    _lang(72, "Ruby (2.7.0)", "ruby"),
    _lang(81, "Scala (2.13.2)", "scala"),
    _lang(83, "Swift (5.2.3)", "swift"),
)

DEFAULT_LANGUAGE = LANGUAGE_OPTIONS[0]

_THEMES = {
    "light": "Light",
    "vs-dark": "VS Dark",
    "active4d": "Active4D",
    "all-hallows-eve": "All Hallows Eve",
    "amy": "Amy",
    "birds-of-paradise": "Birds of Paradise",
    "blackboard": "Blackboard",
    "brilliance-black": "Brilliance Black",
    "brilliance-dull": "Brilliance Dull",
    "chrome-devtools": "Chrome DevTools",
    "clouds-midnight": "Clouds Midnight",
    "clouds": "Clouds",
    "cobalt": "Cobalt",
    "dawn": "Dawn",
    "dreamweaver": "Dreamweaver",
    "eiffel": "Eiffel",
    "espresso-libre": "Espresso Libre",
    "github": "GitHub",
    "idle": "IDLE",
    "katzenmilch": "Katzenmilch",
    "kuroir-theme": "Kuroir Theme",
    "lazy": "LAZY",
    "magicwb--amiga-": "MagicWB (Amiga)",
    "merbivore-soft": "Merbivore Soft",
    "merbivore": "Merbivore",
    "monokai-bright": "Monokai Bright",
    "monokai": "Monokai",
    "night-owl": "Night Owl",
    "oceanic-next": "Oceanic Next",
    "pastels-on-dark": "Pastels on Dark",
    "slush-and-poppies": "Slush and Poppies",
    "solarized-dark": "Solarized-dark",
    "solarized-light": "Solarized-light",
    "spacecadet": "SpaceCadet",
    "sunburst": "Sunburst",
    "textmate--mac-classic-": "Textmate (Mac Classic)",
    "tomorrow-night-blue": "Tomorrow-Night-Blue",
    "tomorrow-night-bright": "Tomorrow-Night-Bright",
    "tomorrow-night-eighties": "Tomorrow-Night-Eighties",
    "tomorrow-night": "Tomorrow-Night",
    "tomorrow": "Tomorrow",
    "twilight": "Twilight",
    "upstream-sunburst": "Upstream Sunburst",
    "vibrant-ink": "Vibrant Ink",
    "xcode-default": "Xcode_default",
    "zenburnesque": "Zenburnesque",
    "iplastic": "iPlastic",
    "idlefingers": "idleFingers",
    "krtheme": "krTheme",
    "monoindustrial": "monoindustrial",
}

BUILTIN_THEMES = frozenset({"light", "vs-dark"})

THEME_OPTIONS: Tuple[ThemeOption, ...] = tuple(
    ThemeOption(value=value, label=label, builtin=value in BUILTIN_THEMES)
    for value, label in _THEMES.items()
)

DEFAULT_THEME_VALUE = "oceanic-next"


def list_languages() -> List[LanguageOption]:
    return list(LANGUAGE_OPTIONS)


def list_themes() -> List[ThemeOption]:
    return list(THEME_OPTIONS)


def languages_for_value(value: str) -> List[LanguageOption]:
    return [opt for opt in LANGUAGE_OPTIONS if opt.value == value]


def get_language(key: Union[int, str]) -> LanguageOption:
    """Look a language up by Judge0 id (int) or value key (str).

    A value key shared by several entries resolves to the first one.
    """
    if isinstance(key, int):
        for opt in LANGUAGE_OPTIONS:
            if opt.id == key:
                return opt
        raise UnknownOptionError(f"Unknown language id: {key}")
    matches = languages_for_value(key)
    if not matches:
        raise UnknownOptionError(f"Unknown language: {key}")
    if len(matches) > 1:
        logger.warning(
            "Language value %r is shared by ids %s; selecting %s",
            key, [m.id for m in matches], matches[0].id,
        )
    return matches[0]


def get_theme(value: str) -> ThemeOption:
    for opt in THEME_OPTIONS:
        if opt.value == value:
            return opt
    raise UnknownOptionError(f"Unknown theme: {value}")


def find_language(id: Optional[int] = None, value: Optional[str] = None) -> LanguageOption:
    if id is not None:
        return get_language(int(id))
    if value:
        return get_language(value)
    raise UnknownOptionError("Either a language id or value is required")
