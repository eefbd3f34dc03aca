"""
Edge-case handling around the core conversion: proper nouns, numerals,
input clean-up and OCR confidence estimation.
"""
import re
import unicodedata
from typing import List, Optional

from lipi.phonemes.codec import ZERO_WIDTH
from lipi.phonemes.inventory import nfc
from lipi.phonemes.tables import CONSONANT, MATRA, TABLES, native_digits
from lipi.scripts.registry import Script

_CAPITALIZED = re.compile(r"^[A-Z][a-z]+[.,;:!?]*$")
_PUNCT = ".,;:!?।॥()\"'"
# honorific / toponym suffixes that mark a Hindi proper noun
_HINDI_NAME_SUFFIXES = ("जी", "पुर", "गढ़", "बाद", "नगर")
_HINDI_HONORIFICS = ("श्री", "श्रीमती", "डॉ.", "कुमारी")


def normalize_text(text: str) -> str:
    """NFC, minus zero-width joiners."""
    text = nfc(text or "")
    return "".join(ch for ch in text if ch not in ZERO_WIDTH)


def is_proper_noun(word: str, script: Script, previous: Optional[str] = None) -> bool:
    if not word:
        return False
    if script is Script.ROMANIZATION:
        return bool(_CAPITALIZED.match(word))
    if script is Script.DEVANAGARI:
        bare = word.strip(_PUNCT)
        if previous and previous.strip(_PUNCT) in _HINDI_HONORIFICS:
            return True
        return len(bare) > 2 and bare.endswith(_HINDI_NAME_SUFFIXES)
    return False


def proper_noun_flags(words: List[str], script: Script) -> List[bool]:
    flags = []
    previous = None
    for word in words:
        flags.append(is_proper_noun(word, script, previous))
        if word.strip():
            previous = word
    return flags


def to_ascii_digits(text: str) -> str:
    out = []
    for ch in text:
        d = unicodedata.decimal(ch, None)
        out.append(str(d) if d is not None and unicodedata.category(ch) == "Nd" else ch)
    return "".join(out)


def convert_numerals(text: str, target: Script) -> str:
    """
    Write every decimal digit with the target's digit glyphs.

    Romanization (and any script without a digit table) gets ASCII.
    """
    digits = native_digits(target)
    ascii_text = to_ascii_digits(text)
    if not digits:
        return ascii_text
    return "".join(digits[int(ch)] if "0" <= ch <= "9" else ch for ch in ascii_text)


def has_unusual_patterns(text: str, script: Script) -> bool:
    """Runs that rarely occur in real text: 4+ bare consonant letters, 3+ vowel signs, doubled virama."""
    table = TABLES.get(script)
    if table is None:
        return False
    consonants = signs = 0
    prev = ""
    for ch in text:
        entry = table.reverse.get(ch)
        kind = entry.kind if entry else None
        consonants = consonants + 1 if kind == CONSONANT else 0
        signs = signs + 1 if kind == MATRA else 0
        if consonants >= 4 or signs >= 3:
            return True
        if ch == table.virama and prev == table.virama:
            return True
        prev = ch
    return False


def estimate_ocr_confidence(text: str, script: Script, ocr_confidence: float, known: bool = False) -> float:
    confidence = max(0.0, min(1.0, ocr_confidence))
    if known:
        confidence = min(1.0, confidence + 0.2)
    if has_unusual_patterns(text, script):
        confidence = max(0.1, confidence - 0.3)
    return confidence
