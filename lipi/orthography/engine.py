"""
Script-specific orthography rules.

Phonemic-level passes (schwa, nasal assimilation, conjuncts) work on a
word's Token list; target-level passes (matra placement, diacritics,
script nuances) work on rendered text.
"""
import logging
import unicodedata
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

from lipi.orthography.rules import RARE, match_conjunct, schwa_rules_for
from lipi.phonemes.codec import ZERO_WIDTH, ZWNJ, Token, segment_aksharas
from lipi.phonemes.inventory import ANUSVARA, homorganic_nasal, nfc, unaspirated
from lipi.phonemes.tables import (
    CONSONANT,
    MODIFIER,
    PRE_BASE,
    TABLES,
    VOWEL,
    ScriptTable,
)
from lipi.scripts.registry import SCRIPTS, Script

logger = logging.getLogger(__name__)

STRICT = "strict"
READABLE = "readable"

# vowel signs that reach above the headline; candrabindu does not fit over them
_ABOVE_HEADLINE = set("िीेैोौॅॉॆॊ")
_TIPPI_CARRIERS = set("ਿੁੂਅਇਉਊ")
_MALAYALAM_CHILLUS = {"ണ": "ൺ", "ന": "ൻ", "ര": "ർ", "ല": "ൽ", "ള": "ൾ", "ക": "ൿ"}
_TRIM_FINAL_VIRAMA = (Script.DEVANAGARI, Script.GURMUKHI, Script.GUJARATI)


@dataclass
class OrthographyOptions:
    mode: str = READABLE
    schwa_handling: bool = True
    conjunct_resolution: bool = True
    # False keeps the anusvara wherever the target can write one
    nasal_assimilation: bool = True

    def __post_init__(self):
        if self.mode not in (STRICT, READABLE):
            raise ValueError(f"Unknown orthography mode: {self.mode!r}")


def split_words(tokens: List[Token]) -> List[Tuple[bool, List[Token]]]:
    """Group tokens into (is_word, tokens) chunks; words are runs of phonemes."""
    chunks: List[Tuple[bool, List[Token]]] = []
    for tok in tokens:
        is_word = tok.is_phoneme
        if chunks and chunks[-1][0] == is_word:
            chunks[-1][1].append(tok)
        else:
            chunks.append((is_word, [tok]))
    return chunks


def _map_words(tokens: List[Token], fn: Callable[[List[Token]], List[Token]]) -> List[Token]:
    out: List[Token] = []
    for is_word, chunk in split_words(tokens):
        out.extend(fn(chunk) if is_word else chunk)
    return out


def _is_word_final(text: str, i: int) -> bool:
    if i + 1 >= len(text):
        return True
    nxt = text[i + 1]
    return nxt not in ZERO_WIDTH and unicodedata.category(nxt)[0] not in ("L", "M")


class OrthographyEngine:
    def __init__(self, options: Optional[OrthographyOptions] = None):
        self.options = options or OrthographyOptions()

    # phonemic level

    def delete_schwa(self, tokens: List[Token], source: Script) -> List[Token]:
        """
        Drop inherent vowels the source language does not pronounce.

        Word-final schwa goes unless the word is a single syllable or the
        schwa closes a consonant cluster. Medial schwa goes in a
        V C _ C V context, scanning right to left. Running this twice
        gives the same result as running it once.
        """
        if self.options.mode != READABLE or not self.options.schwa_handling:
            return tokens
        rules = schwa_rules_for(source)
        deleting = {r.position for r in rules if r.action == "delete"}
        if not deleting:
            return tokens
        retain_cluster = any(r.position == "cluster" and r.action == "retain" for r in rules)

        def word_fn(word: List[Token]) -> List[Token]:
            if any(t.protected for t in word):
                return word
            w = list(word)
            vowels = sum(1 for t in w if t.kind == VOWEL)
            if "final" in deleting and len(w) >= 2 and w[-1].inherent and w[-2].kind == CONSONANT and vowels > 1:
                cluster = len(w) >= 3 and w[-3].kind == CONSONANT
                if not (cluster and retain_cluster):
                    del w[-1]
            if "medial" in deleting:
                i = len(w) - 3
                while i >= 2:
                    if (
                        w[i].inherent
                        and w[i - 2].kind == VOWEL
                        and w[i - 1].kind == CONSONANT
                        and w[i + 1].kind == CONSONANT
                        and w[i + 2].kind == VOWEL
                    ):
                        del w[i]
                    i -= 1
            return w

        return _map_words(tokens, word_fn)

    def resolve_nasals(self, tokens: List[Token], target: Script) -> List[Token]:
        """Anusvara before a stop becomes the stop's homorganic nasal."""
        table = TABLES.get(target)
        writes_anusvara = table is not None and ANUSVARA in table.modifiers
        if writes_anusvara and not self.options.nasal_assimilation:
            return tokens
        out: List[Token] = []
        for i, tok in enumerate(tokens):
            nxt = tokens[i + 1] if i + 1 < len(tokens) else None
            if tok.kind == MODIFIER and tok.text == ANUSVARA and nxt is not None and nxt.kind == CONSONANT:
                nasal = homorganic_nasal(nxt.text)
                if nasal:
                    out.append(Token(nfc(nasal), CONSONANT, protected=tok.protected))
                    continue
            out.append(tok)
        return out

    def resolve_conjuncts(self, tokens: List[Token], target: Script) -> Tuple[List[Token], List[str]]:
        """
        Mark consonant clusters that match a conjunct rule.

        Targets without conjunct support keep the decomposed spelling. In
        readable mode rare conjuncts get an explicit virama (ZWNJ) instead
        of a ligature.
        """
        info = SCRIPTS[target]
        if not self.options.conjunct_resolution or not info.has_conjuncts:
            return tokens, []
        found: List[str] = []
        out = [replace(t) for t in tokens]
        i = 0
        while i < len(out) - 1:
            if out[i].kind != CONSONANT or out[i + 1].kind != CONSONANT:
                i += 1
                continue
            j = i
            while j + 1 < len(out) and out[j + 1].kind == CONSONANT:
                j += 1
            rule = match_conjunct(tuple(t.text for t in out[i:j + 1]))
            if rule is None or any(t.protected for t in out[i:i + len(rule.phonemes)]):
                i += 1
                continue
            found.append(rule.name)
            span = len(rule.phonemes)
            if self.options.mode == READABLE and rule.frequency_class == RARE:
                for t in out[i:i + span - 1]:
                    t.joiner = ZWNJ
            elif target in rule.ligatures:
                out[i].ligature = rule.ligatures[target]
                out[i].span = span
            i += span
        if found:
            logger.debug("conjuncts_resolved target=%s rules=%s", target.value, ",".join(found))
        return out, found

    # target level

    def place_matras(self, text: str, script: Script) -> str:
        """
        Move pre-base vowel signs typed in visual order (sign before the
        consonant) to their logical position after the consonant cluster.
        Split two-part vowels recombine through NFC.
        """
        table = TABLES.get(script)
        if table is None:
            return text
        out: List[str] = []
        i = 0
        n = len(text)
        while i < n:
            ch = text[i]
            prev = text[i - 1] if i else ""
            if (
                table.matra_position(ch) == PRE_BASE
                and not table.is_consonant(prev)
                and not (table.nukta and prev == table.nukta)
                and i + 1 < n
                and table.is_consonant(text[i + 1])
            ):
                j = self._cluster_end(text, i + 1, table)
                out.append(text[i + 1:j] + ch)
                i = j
                continue
            out.append(ch)
            i += 1
        return nfc("".join(out))

    @staticmethod
    def _cluster_end(text: str, j: int, table: ScriptTable) -> int:
        n = len(text)
        j += 1
        while j < n:
            if table.nukta and text[j] == table.nukta:
                j += 1
            elif text[j] == table.virama and j + 1 < n and table.is_consonant(text[j + 1]):
                j += 2
            else:
                break
        return j

    def to_visual_order(self, text: str, script: Script) -> str:
        """Inverse of place_matras, for renderers that do no shaping."""
        table = TABLES.get(script)
        if table is None:
            return text
        out: List[str] = []
        for cluster in segment_aksharas(text, script):
            parts = list(unicodedata.normalize("NFD", cluster))
            pre = [c for c in parts if table.matra_position(c) == PRE_BASE]
            if pre and table.is_consonant(parts[0]):
                parts.remove(pre[0])
                parts.insert(0, pre[0])
            out.append("".join(parts))
        return "".join(out)

    def normalize_diacritics(self, text: str, script: Script) -> str:
        if script is Script.GURMUKHI:
            table = TABLES[script]
            chars = list(text)
            for i, ch in enumerate(chars):
                if ch != "ਂ" or i == 0:
                    continue
                prev = chars[i - 1]
                if table.is_consonant(prev) or prev in _TIPPI_CARRIERS or prev == table.nukta:
                    chars[i] = "ੰ"
            return "".join(chars)
        if script is Script.DEVANAGARI:
            chars = list(text)
            for i, ch in enumerate(chars):
                if ch == "ँ" and i and chars[i - 1] in _ABOVE_HEADLINE:
                    chars[i] = "ं"
            return "".join(chars)
        return text

    def apply_nuances(self, text: str, script: Script) -> str:
        table = TABLES.get(script)
        if table is None:
            return text
        virama = table.virama
        if script is Script.GURMUKHI:
            text = self._addak(text, table)
        out: List[str] = []
        i = 0
        while i < len(text):
            ch = text[i]
            nxt_is_virama = i + 1 < len(text) and text[i + 1] == virama
            if nxt_is_virama and _is_word_final(text, i + 1):
                if script is Script.MALAYALAM and ch in _MALAYALAM_CHILLUS:
                    out.append(_MALAYALAM_CHILLUS[ch])
                    i += 2
                    continue
                if script is Script.BENGALI and ch == "ত":
                    # khanda ta never closes a conjunct
                    if i == 0 or text[i - 1] != virama:
                        out.append("ৎ")
                        i += 2
                        continue
                    if self.options.mode == READABLE:
                        out.append(ch)
                        i += 2
                        continue
                if self.options.mode == READABLE and script in _TRIM_FINAL_VIRAMA and (table.is_consonant(ch) or ch == table.nukta):
                    out.append(ch)
                    i += 2
                    continue
            out.append(ch)
            i += 1
        return "".join(out)

    @staticmethod
    def _addak(text: str, table: ScriptTable) -> str:
        """Geminate C + virama + C is written with addak before the second consonant."""
        out: List[str] = []
        i = 0
        while i < len(text):
            if (
                i + 2 < len(text)
                and text[i + 1] == table.virama
                and table.is_consonant(text[i])
                and table.is_consonant(text[i + 2])
            ):
                first = table.reverse[text[i]].phoneme
                second = table.reverse[text[i + 2]].phoneme
                if first == second or unaspirated(second) == first:
                    out.append("ੱ")
                    i += 2
                    continue
            out.append(text[i])
            i += 1
        return "".join(out)

