import logging
from typing import Optional

try:
    from aksharamukha.transliterate import process
except ImportError:
    process = None

from lipi.scripts.registry import Script

# aksharamukha's names for our script ids
AKSHARAMUKHA_NAMES = {
    Script.DEVANAGARI: "Devanagari",
    Script.BENGALI: "Bengali",
    Script.GURMUKHI: "Gurmukhi",
    Script.GUJARATI: "Gujarati",
    Script.ODIA: "Oriya",
    Script.TAMIL: "Tamil",
    Script.TELUGU: "Telugu",
    Script.KANNADA: "Kannada",
    Script.MALAYALAM: "Malayalam",
    Script.ROMANIZATION: "ISO",
}


class AksharaAdapter:
    """Reference transliteration through aksharamukha, used to score our own output."""

    @property
    def available(self) -> bool:
        return process is not None

    def transliterate(self, text: str, source: Script, target: Script) -> Optional[str]:
        if process is None:
            logging.error("[AKSHARA] library missing")
            return None
        # aksharamukha is sync and cheap for short strings; called inline
        output = process(AKSHARAMUKHA_NAMES[source], AKSHARAMUKHA_NAMES[target], text)
        if not output:
            return None
        return output
