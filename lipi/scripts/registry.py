"""
Static metadata for every script the pipeline can read or write.

Everything here is built once at import time and never mutated.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from lipi.core.errors import UnsupportedScript


class Script(str, Enum):
    DEVANAGARI = "devanagari"
    BENGALI = "bengali"
    GURMUKHI = "gurmukhi"
    GUJARATI = "gujarati"
    ODIA = "odia"
    TAMIL = "tamil"
    TELUGU = "telugu"
    KANNADA = "kannada"
    MALAYALAM = "malayalam"
    ROMANIZATION = "romanization"

    @classmethod
    def parse(cls, value: Union["Script", str]) -> "Script":
        if isinstance(value, Script):
            return value
        key = (value or "").strip().lower()
        try:
            return cls(SCRIPT_ALIASES.get(key, key))
        except ValueError:
            raise UnsupportedScript(value) from None

    @property
    def is_brahmic(self) -> bool:
        return self is not Script.ROMANIZATION


# Common alternative names accepted at the API boundary
SCRIPT_ALIASES: Dict[str, str] = {
    "hindi": "devanagari",
    "marathi": "devanagari",
    "nepali": "devanagari",
    "punjabi": "gurmukhi",
    "oriya": "odia",
    "latin": "romanization",
    "iso": "romanization",
    "iso15919": "romanization",
}


@dataclass(frozen=True)
class ScriptInfo:
    script: Script
    name: str
    ranges: Tuple[Tuple[int, int], ...]
    direction: str
    has_conjuncts: bool
    has_matras: bool
    inherent_vowel: str
    virama: str

    @property
    def unicode_range(self) -> Tuple[int, int]:
        return self.ranges[0]

    @property
    def block_start(self) -> int:
        return self.ranges[0][0]

    def contains(self, ch: str) -> bool:
        cp = ord(ch)
        return any(lo <= cp <= hi for lo, hi in self.ranges)


def _brahmic(script: Script, name: str, start: int, has_conjuncts: bool = True) -> ScriptInfo:
    return ScriptInfo(
        script=script,
        name=name,
        ranges=((start, start + 0x7F),),
        direction="ltr",
        has_conjuncts=has_conjuncts,
        has_matras=True,
        inherent_vowel="a",
        virama=chr(start + 0x4D),
    )


SCRIPTS: Dict[Script, ScriptInfo] = {
    Script.DEVANAGARI: _brahmic(Script.DEVANAGARI, "Devanagari", 0x0900),
    Script.BENGALI: _brahmic(Script.BENGALI, "Bengali", 0x0980),
    Script.GURMUKHI: _brahmic(Script.GURMUKHI, "Gurmukhi", 0x0A00),
    Script.GUJARATI: _brahmic(Script.GUJARATI, "Gujarati", 0x0A80),
    Script.ODIA: _brahmic(Script.ODIA, "Odia", 0x0B00),
    # Tamil writes clusters with an explicit pulli instead of ligatures
    Script.TAMIL: _brahmic(Script.TAMIL, "Tamil", 0x0B80, has_conjuncts=False),
    Script.TELUGU: _brahmic(Script.TELUGU, "Telugu", 0x0C00),
    Script.KANNADA: _brahmic(Script.KANNADA, "Kannada", 0x0C80),
    Script.MALAYALAM: _brahmic(Script.MALAYALAM, "Malayalam", 0x0D00),
    Script.ROMANIZATION: ScriptInfo(
        script=Script.ROMANIZATION,
        name="Romanization (ISO 15919)",
        # Basic Latin, Latin-1 letters, Latin Extended-A/B, combining marks,
        # Latin Extended Additional (ṃ, ṇ, ṭ ...)
        ranges=(
            (0x0000, 0x007F),
            (0x00C0, 0x024F),
            (0x0300, 0x036F),
            (0x1E00, 0x1EFF),
        ),
        direction="ltr",
        has_conjuncts=False,
        has_matras=False,
        inherent_vowel="",
        virama="",
    ),
}


def script_info(script: Union[Script, str, None]) -> Optional[ScriptInfo]:
    """Metadata for ``script``, or None when the id is not registered."""
    if script is None:
        return None
    try:
        return SCRIPTS[Script.parse(script)]
    except UnsupportedScript:
        return None


def require_script(script: Union[Script, str]) -> ScriptInfo:
    info = script_info(script)
    if info is None:
        raise UnsupportedScript(script)
    return info


def is_char_in_script(ch: str, script: Union[Script, str]) -> bool:
    info = script_info(script)
    if info is None or not ch:
        return False
    return info.contains(ch[0])


def supported_scripts() -> Tuple[Script, ...]:
    return tuple(SCRIPTS)
