"""
Round-trip validation: transliterate the output back and score it
against the input by normalized Levenshtein similarity.
"""
import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from lipi.core.errors import TransliterationError
from lipi.edge_cases import normalize_text, to_ascii_digits
from lipi.exceptions_dict import CorrectionCache, ExceptionDictionary
from lipi.phonemes.codec import Token, serialize, tokenize
from lipi.phonemes.inventory import ANUSVARA, homorganic_nasal, nfc
from lipi.phonemes.tables import CONSONANT, MODIFIER, TABLES
from lipi.scripts.registry import Script

# (text, source, target, mode)
ReverseFn = Callable[[str, Script, Script, Optional[str]], str]

_SPACES = re.compile(r"\s+")


@dataclass
class ValidationResult:
    is_valid: bool
    confidence: float
    suggestions: Optional[List[str]] = None
    similarity: Optional[float] = None
    reversed_text: Optional[str] = None
    skipped: bool = False


def levenshtein(a: Sequence, b: Sequence) -> int:
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        curr = [i]
        for j, cb in enumerate(b, 1):
            cost = 0 if ca == cb else 1
            curr.append(min(curr[j - 1] + 1, prev[j] + 1, prev[j - 1] + cost))
        prev = curr
    return prev[-1]


def similarity(a: Sequence, b: Sequence) -> float:
    if not a and not b:
        return 1.0
    dist = levenshtein(a, b)
    max_len = max(len(a), len(b)) or 1
    return max(0.0, min(1.0, 1 - dist / max_len))


def assimilate_nasals(text: str, script: Optional[Script] = None) -> str:
    """
    Spell an anusvara before a stop as the stop's homorganic nasal, so
    "संत" and "सन्त", or "saṃta" and "santa", compare equal.
    """
    if script is None:
        return text
    table = TABLES.get(script)
    if table is None:
        if ANUSVARA not in text:
            return text
        tokens = tokenize(text)
        out: List[Token] = []
        for i, tok in enumerate(tokens):
            nxt = tokens[i + 1] if i + 1 < len(tokens) else None
            if tok.kind == MODIFIER and tok.text == ANUSVARA and nxt is not None and nxt.kind == CONSONANT:
                nasal = homorganic_nasal(nxt.text)
                if nasal:
                    tok = Token(nfc(nasal), CONSONANT)
            out.append(tok)
        return serialize(out)

    marks = {g for g, entry in table.reverse.items() if entry.kind == MODIFIER and entry.phoneme == ANUSVARA}
    chars: List[str] = []
    for i, ch in enumerate(text):
        nxt = text[i + 1] if i + 1 < len(text) else ""
        if ch in marks and table.is_consonant(nxt):
            nasal = nfc(homorganic_nasal(table.reverse[nxt].phoneme) or "")
            if nasal in table.consonants:
                chars.append(table.consonants[nasal] + table.virama)
                continue
        chars.append(ch)
    return "".join(chars)


def comparable(text: str, script: Optional[Script] = None) -> str:
    text = to_ascii_digits(normalize_text(text)).casefold()
    return _SPACES.sub(" ", assimilate_nasals(text, script)).strip()


class ValidationEngine:
    def __init__(
        self,
        reverse: ReverseFn,
        exceptions: Optional[ExceptionDictionary] = None,
        corrections: Optional[CorrectionCache] = None,
        threshold: float = 0.8,
        max_length: int = 1000,
    ):
        self.reverse = reverse
        self.exceptions = exceptions if exceptions is not None else ExceptionDictionary()
        self.corrections = corrections if corrections is not None else CorrectionCache()
        self.threshold = threshold
        self.max_length = max_length

    def validate_round_trip(
        self,
        original: str,
        transliterated: str,
        source: Script,
        target: Script,
        mode: Optional[str] = None,
    ) -> ValidationResult:
        if len(original) >= self.max_length:
            logging.info("round_trip_skipped reason=too_long len=%d", len(original))
            return ValidationResult(is_valid=True, confidence=0.9, skipped=True)
        try:
            reversed_text = self.reverse(transliterated, target, source, mode)
        except TransliterationError as e:
            logging.error("round_trip_failed source=%s target=%s error=%s", source.value, target.value, e)
            return ValidationResult(
                is_valid=False, confidence=0.0, suggestions=["Manual verification required"]
            )

        score = round(similarity(comparable(original, source), comparable(reversed_text, source)), 4)
        result = ValidationResult(
            is_valid=score > self.threshold,
            confidence=score,
            similarity=score,
            reversed_text=reversed_text,
        )
        if not result.is_valid:
            result.suggestions = self.generate_suggestions(original, source, target)
            logging.info(
                "round_trip_low_confidence source=%s target=%s similarity=%.3f suggestions=%d",
                source.value,
                target.value,
                score,
                len(result.suggestions),
            )
        return result

    def generate_suggestions(self, original: str, source: Script, target: Script, limit: int = 3) -> List[str]:
        """Known renderings: a prior manual correction, an exact dictionary hit, then close dictionary entries."""
        suggestions: List[str] = []
        corrected = self.corrections.get(original)
        if corrected:
            suggestions.append(corrected)
        exact = self.exceptions.lookup(original, source, target)
        if exact and exact not in suggestions:
            suggestions.append(exact)

        key = comparable(original)
        scored = []
        for form, entry in self.exceptions.forms_for(source):
            if target not in entry.forms:
                continue
            score = similarity(key, comparable(form))
            if score >= 0.6:
                scored.append((score, entry.forms[target]))
        for _, candidate in sorted(scored, key=lambda x: x[0], reverse=True):
            if candidate not in suggestions:
                suggestions.append(candidate)
        return suggestions[:limit]
