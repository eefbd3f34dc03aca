"""
Grapheme <-> phoneme conversion.

Text is read akshara by akshara into a list of Tokens; phonemic strings
are the Tokens serialized back to ISO 15919 text. Rendering goes the
other way and is where mapping gaps are detected and recovered.
"""
import logging
import unicodedata
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple, Union

from lipi.core.errors import UnsupportedScript
from lipi.orthography.rules import (
    BEFORE_DENTAL,
    WORD_FINAL,
    WORD_INITIAL,
    WORD_MEDIAL,
    disambiguation_rule,
    ligature_readings,
)
from lipi.phonemes.inventory import (
    ALIASES,
    CONSONANTS_BY_BASE,
    FALLBACKS,
    INHERENT,
    MODIFIERS_BY_ID,
    OM,
    SEPARATOR,
    VOWELS_BY_ID,
    nfc,
    unaspirated,
)
from lipi.phonemes.tables import (
    ADDAK,
    BARE,
    CONSONANT,
    DIGIT,
    MATRA,
    MODIFIER,
    NUKTA,
    TABLES,
    VIRAMA,
    VOWEL,
    ScriptTable,
)
from lipi.scripts.registry import Script

logger = logging.getLogger(__name__)

OTHER = "other"
ZERO_WIDTH = "\u200c\u200d"
ZWNJ = "\u200c"


@dataclass
class Token:
    text: str
    kind: str
    inherent: bool = False
    protected: bool = False
    # conjunct glyph covering this consonant and the next ``span - 1``
    ligature: Optional[str] = None
    span: int = 1
    # written after the virama of a bare consonant (explicit half form)
    joiner: str = ""

    @property
    def is_phoneme(self) -> bool:
        return self.kind in (CONSONANT, VOWEL, MODIFIER)


@dataclass
class Rendered:
    text: str
    gaps: int
    phonemes: int


def _build_vocabulary() -> Dict[str, Tuple[str, str]]:
    vocab: Dict[str, Tuple[str, str]] = {}
    for base in CONSONANTS_BY_BASE:
        vocab[base] = (base, CONSONANT)
    for vowel in VOWELS_BY_ID:
        vocab[vowel] = (vowel, VOWEL)
    for modifier in MODIFIERS_BY_ID:
        vocab[modifier] = (modifier, MODIFIER)
    for alias, canonical in ALIASES.items():
        vocab.setdefault(alias, vocab[canonical])
    return vocab


VOCABULARY = _build_vocabulary()
# longest keys are tried first so "ā" never splits as "a" + residue, "kh" never as "k" + "h"
PHONEME_KEYS: List[str] = sorted(VOCABULARY, key=len, reverse=True)
_KEY_LENGTHS: List[int] = sorted({len(k) for k in PHONEME_KEYS}, reverse=True)


def _match(text: str, i: int) -> Optional[Tuple[str, str, str]]:
    for length in _KEY_LENGTHS:
        piece = text[i:i + length]
        if len(piece) == length and piece in VOCABULARY:
            canonical, kind = VOCABULARY[piece]
            return piece, canonical, kind
    return None


def tokenize(phonemic: str) -> List[Token]:
    """Longest-match split of a phonemic string into Tokens."""
    text = nfc(phonemic or "")
    tokens: List[Token] = []
    i = 0
    while i < len(text):
        if text[i] == SEPARATOR and tokens and tokens[-1].is_phoneme and _match(text, i + 1):
            i += 1
            continue
        found = _match(text, i)
        if found is None:
            tokens.append(Token(text[i], OTHER))
            i += 1
            continue
        piece, canonical, kind = found
        after_consonant = bool(tokens) and tokens[-1].kind == CONSONANT
        if canonical == OM and after_consonant:
            tokens.append(Token("o", VOWEL))
            tokens.append(Token("ṃ", MODIFIER))
        else:
            inherent = kind == VOWEL and canonical == INHERENT and after_consonant
            tokens.append(Token(canonical, kind, inherent=inherent))
        i += len(piece)
    return tokens


def _needs_separator(prev: Token, cur: Token) -> bool:
    if not (prev.is_phoneme and cur.is_phoneme):
        return False
    found = _match(prev.text + cur.text, 0)
    return found is None or len(found[0]) != len(prev.text)


def serialize(tokens: List[Token]) -> str:
    out: List[str] = []
    prev: Optional[Token] = None
    for tok in tokens:
        if prev is not None and _needs_separator(prev, tok):
            out.append(SEPARATOR)
        out.append(tok.text)
        prev = tok
    return "".join(out)


def _table(script: Union[Script, str]) -> Tuple[Script, Optional[ScriptTable]]:
    script = Script.parse(script)
    if script is Script.ROMANIZATION:
        return script, None
    table = TABLES.get(script)
    if table is None:
        raise UnsupportedScript(script)
    return script, table


def read(text: str, script: Union[Script, str]) -> List[Token]:
    """Read source text into Tokens, one akshara at a time."""
    script, table = _table(script)
    text = nfc(text or "")
    if table is None:
        return tokenize(text.lower())

    ligatures = ligature_readings(script)
    longest = max([table.max_grapheme_len] + [len(g) for g in ligatures])
    tokens: List[Token] = []
    pending: Optional[str] = None
    geminate = False

    def flush():
        nonlocal pending
        if pending is not None:
            tokens.append(Token(pending, CONSONANT))
            tokens.append(Token(INHERENT, VOWEL, inherent=True))
            pending = None

    i = 0
    while i < len(text):
        ch = text[i]
        if ch in ZERO_WIDTH:
            i += 1
            continue
        cluster = None
        entry = None
        size = 1
        for length in range(longest, 0, -1):
            piece = text[i:i + length]
            if len(piece) != length:
                continue
            if piece in ligatures:
                cluster, size = ligatures[piece], length
                break
            if piece in table.reverse:
                entry, size = table.reverse[piece], length
                break
        i += size

        if cluster is not None:
            flush()
            tokens.extend(Token(b, CONSONANT) for b in cluster[:-1])
            pending = cluster[-1]
            continue
        if entry is None:
            flush()
            tokens.append(Token(ch, OTHER))
            continue

        kind, phoneme = entry
        if kind == CONSONANT:
            flush()
            if geminate:
                tokens.append(Token(unaspirated(phoneme), CONSONANT))
                geminate = False
            pending = phoneme
        elif kind == MATRA:
            if pending is not None:
                tokens.append(Token(pending, CONSONANT))
                pending = None
            tokens.append(Token(phoneme, VOWEL))
        elif kind == VIRAMA:
            if pending is not None:
                tokens.append(Token(pending, CONSONANT))
                pending = None
        elif kind == NUKTA:
            # nukta on a letter the table has no nukta form for
            logger.debug("stray_nukta script=%s position=%d", script.value, i)
        elif kind == ADDAK:
            flush()
            geminate = True
        elif kind == BARE:
            flush()
            tokens.append(Token(phoneme, CONSONANT))
        elif kind == DIGIT:
            flush()
            tokens.append(Token(phoneme, OTHER))
        else:
            flush()
            tokens.append(Token(phoneme, kind))
    flush()
    return tokens


def to_phonemic(text: str, script: Union[Script, str]) -> str:
    return serialize(read(text, script))


def _substitute(tokens: List[Token], table: ScriptTable, script: Script) -> Tuple[List[Token], int]:
    """Replace phonemes the target cannot write, following the neutralization chain."""
    out: List[Token] = []
    gaps = 0
    for tok in tokens:
        if not tok.is_phoneme or table.supports(tok.text) or disambiguation_rule(script, tok.text):
            out.append(tok)
            continue
        gaps += 1
        current = [tok]
        for _ in range(6):
            unsupported = [t for t in current if t.is_phoneme and not table.supports(t.text)]
            if not unsupported:
                break
            nxt: List[Token] = []
            for t in current:
                if t.is_phoneme and not table.supports(t.text) and t.text in FALLBACKS:
                    nxt.extend(replace(r, protected=tok.protected) for r in tokenize(FALLBACKS[t.text]))
                else:
                    nxt.append(t)
            if nxt == current:
                break
            current = nxt
        for t in current:
            if t.is_phoneme and not table.supports(t.text):
                logger.info("mapping_gap script=%s phoneme=%s action=pass_through", script.value, t.text)
                t = Token(t.text, OTHER)
            out.append(t)
    return out, gaps


def _contexts(tokens: List[Token], i: int) -> set:
    contexts = set()
    before = tokens[i - 1] if i > 0 else None
    if before is None or not before.is_phoneme:
        contexts.add(WORD_INITIAL)
    later = []
    for t in tokens[i + 1:]:
        if not t.is_phoneme:
            break
        later.append(t)
    if not any(t.kind == CONSONANT for t in later):
        contexts.add(WORD_FINAL)
    if WORD_INITIAL not in contexts and WORD_FINAL not in contexts:
        contexts.add(WORD_MEDIAL)
    if later and later[0].kind == CONSONANT:
        nxt = CONSONANTS_BY_BASE.get(later[0].text)
        if nxt is not None and nxt.place == "dental" and nxt.manner == "stop":
            contexts.add(BEFORE_DENTAL)
    return contexts


def choose_grapheme(tokens: List[Token], i: int, table: ScriptTable, script: Script) -> str:
    """
    Pick the glyph for the consonant at ``tokens[i]``.

    Candidates that fit the position win; among those the signage
    form is preferred, then the most frequent one.
    """
    phoneme = tokens[i].text
    rule = disambiguation_rule(script, phoneme)
    if rule is None:
        return table.consonants[phoneme]
    contexts = _contexts(tokens, i)
    applicable = [c for c in rule.candidates if not c.contexts or c.contexts & contexts]
    if not applicable:
        applicable = list(rule.candidates)
    preferred = [c for c in applicable if c.signage_preference]
    if preferred:
        return preferred[0].grapheme
    return max(applicable, key=lambda c: c.frequency).grapheme


def render(tokens: List[Token], script: Union[Script, str]) -> Rendered:
    script, table = _table(script)
    phonemes = sum(1 for t in tokens if t.is_phoneme)
    if table is None:
        return Rendered(serialize(tokens), 0, phonemes)

    tokens, gaps = _substitute(tokens, table, script)
    out: List[str] = []
    i = 0
    while i < len(tokens):
        tok = tokens[i]
        if tok.kind == CONSONANT:
            if tok.ligature:
                glyph = tok.ligature
                last = i + tok.span - 1
            else:
                glyph = choose_grapheme(tokens, i, table, script)
                last = i
            nxt = tokens[last + 1] if last + 1 < len(tokens) else None
            if nxt is not None and nxt.kind == VOWEL:
                out.append(glyph + table.matras.get(nxt.text, ""))
                i = last + 2
            else:
                out.append(glyph + table.virama + tokens[last].joiner)
                i = last + 1
            continue
        if tok.kind == VOWEL:
            out.append(table.vowels[tok.text])
        elif tok.kind == MODIFIER:
            out.append(table.modifiers[tok.text])
        else:
            out.append(tok.text)
        i += 1
    return Rendered(nfc("".join(out)), gaps, phonemes)


def from_phonemic(phonemic: str, script: Union[Script, str]) -> str:
    """Render a phonemic string; ASCII digits come out in the script's own digits."""
    script, table = _table(script)
    text = render(tokenize((phonemic or "").lower()), script).text
    if table is None or not table.digits:
        return text
    return text.translate(str.maketrans("0123456789", table.digits))


def segment_aksharas(text: str, script: Union[Script, str]) -> List[str]:
    """Split text into orthographic syllables (grapheme clusters)."""
    script, table = _table(script)
    text = nfc(text or "")
    clusters: List[str] = []
    joined = False
    for ch in text:
        if table is None:
            if clusters and unicodedata.combining(ch):
                clusters[-1] += ch
            else:
                clusters.append(ch)
            continue
        entry = table.reverse.get(ch)
        kind = entry.kind if entry else None
        attaches = kind in (MATRA, VIRAMA, NUKTA, MODIFIER, ADDAK) or ch in ZERO_WIDTH
        if kind == MODIFIER and entry.phoneme == OM:
            attaches = False
        if clusters and (attaches or (kind == CONSONANT and joined)):
            clusters[-1] += ch
        else:
            clusters.append(ch)
        if kind == VIRAMA:
            joined = True
        elif ch not in ZERO_WIDTH:
            joined = False
    return clusters
