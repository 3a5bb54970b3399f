"""Project configuration read from a whitespace separated key/value file."""

from __future__ import annotations

import re
from dataclasses import dataclass, fields
from pathlib import Path

DEFAULT_CONFIG_PATH = "assets/project.canis"

_SPACE = re.compile(r"\s*")
_WORD = re.compile(r"\S+")
_INT = re.compile(r"[+-]?\d+")
_FLOAT = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

_INT_MIN, _INT_MAX = -(2**31), 2**31 - 1
_UINT_RANGE = 2**32


@dataclass
class ProjectConfig:
    """Settings that control the window, frame limiting, seeding and logging."""

    fullscreen: bool = False
    width: int = 1280
    height: int = 800
    use_frame_limit: bool = False
    frame_limit: int = 60
    override_seed: bool = False
    seed: int = 0
    volume: float = 1.0
    mute: bool = False
    log: bool = False


class _EndOfInput(Exception):
    """Raised when the next value cannot be read; parsing stops there."""


class _Tokens:
    """Reads words and numbers from text the way a formatted stream does."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def _read(self, pattern: re.Pattern[str]) -> str:
        start = _SPACE.match(self._text, self._pos).end()
        match = pattern.match(self._text, start)
        if match is None:
            raise _EndOfInput
        self._pos = match.end()
        return match.group()

    def word(self) -> str:
        return self._read(_WORD)

    def flag(self) -> bool:
        return self.word() == "true"

    def int32(self) -> int:
        value = int(self._read(_INT))
        if not _INT_MIN <= value <= _INT_MAX:
            raise _EndOfInput
        return value

    def uint32(self) -> int:
        value = int(self._read(_INT))
        if abs(value) >= _UINT_RANGE:
            raise _EndOfInput
        return value % _UINT_RANGE

    def volume(self) -> float:
        return min(max(float(self._read(_FLOAT)), 0.0), 1.5)


_KEYS = {
    "fullscreen": ("fullscreen", _Tokens.flag),
    "width": ("width", _Tokens.int32),
    "heigth": ("height", _Tokens.int32),
    "volume": ("volume", _Tokens.volume),
    "use_frame_limit": ("use_frame_limit", _Tokens.flag),
    "frame_limit": ("frame_limit", _Tokens.int32),
    "override_seed": ("override_seed", _Tokens.flag),
    "seed": ("seed", _Tokens.uint32),
    "log": ("log", _Tokens.flag),
}


def parse_config(text: str) -> ProjectConfig:
    """Parse configuration text; reading stops at the first unreadable value."""
    config = ProjectConfig()
    tokens = _Tokens(text)
    try:
        while True:
            entry = _KEYS.get(tokens.word())
            if entry is not None:
                attribute, reader = entry
                setattr(config, attribute, reader(tokens))
    except _EndOfInput:
        pass
    return config


def load_config(path: str | Path) -> ProjectConfig:
    """Read and parse a configuration file."""
    return parse_config(Path(path).read_text())


_CONFIG = ProjectConfig()


def get_config() -> ProjectConfig:
    """Return the shared project configuration."""
    return _CONFIG


def init(path: str | Path = DEFAULT_CONFIG_PATH) -> ProjectConfig:
    """Load the configuration file into the shared configuration.

    A missing or unreadable file leaves the current settings untouched.
    """
    try:
        loaded = load_config(path)
    except OSError:
        return _CONFIG
    for item in fields(ProjectConfig):
        setattr(_CONFIG, item.name, getattr(loaded, item.name))
    return _CONFIG