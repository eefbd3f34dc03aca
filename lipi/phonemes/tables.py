"""
Per-script grapheme tables, built once at import time.

The nine Brahmic blocks share the ISCII-derived layout, so every
grapheme is located by its offset from the start of its block. Which
phonemes a script actually writes is listed explicitly per script.
"""
import logging
import unicodedata
from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Tuple

from lipi.phonemes.inventory import (
    ANUSVARA,
    CANDRABINDU,
    CONSONANTS,
    OM,
    VISARGA,
    VOWELS,
    nfc,
)
from lipi.scripts.registry import SCRIPTS, Script

logger = logging.getLogger(__name__)

CONSONANT = "consonant"
VOWEL = "vowel"
MATRA = "matra"
MODIFIER = "modifier"
VIRAMA = "virama"
NUKTA = "nukta"
DIGIT = "digit"
BARE = "bare"  # chillu / khanda-ta: a consonant with no vowel and no virama
ADDAK = "addak"

PRE_BASE = "pre"
POST_BASE = "post"
ABOVE = "above"
BELOW = "below"
AROUND = "around"

CONSONANT_OFFSETS: Dict[str, int] = {
    "ka": 0x15, "kha": 0x16, "ga": 0x17, "gha": 0x18, "ṅa": 0x19,
    "ca": 0x1A, "cha": 0x1B, "ja": 0x1C, "jha": 0x1D, "ña": 0x1E,
    "ṭa": 0x1F, "ṭha": 0x20, "ḍa": 0x21, "ḍha": 0x22, "ṇa": 0x23,
    "ta": 0x24, "tha": 0x25, "da": 0x26, "dha": 0x27, "na": 0x28,
    "ṉa": 0x29,
    "pa": 0x2A, "pha": 0x2B, "ba": 0x2C, "bha": 0x2D, "ma": 0x2E,
    "ya": 0x2F, "ra": 0x30, "ṟa": 0x31, "la": 0x32, "ḷa": 0x33,
    "ḻa": 0x34, "va": 0x35, "śa": 0x36, "ṣa": 0x37, "sa": 0x38,
    "ha": 0x39,
    "qa": 0x58, "xa": 0x59, "ġa": 0x5A, "za": 0x5B,
    "ṛa": 0x5C, "ṛha": 0x5D, "fa": 0x5E, "ẏa": 0x5F,
}

# consonant a nukta letter is written on when the block has no precomposed form
NUKTA_BASES: Dict[str, str] = {
    "qa": "ka", "xa": "kha", "ġa": "ga", "za": "ja",
    "ṛa": "ḍa", "ṛha": "ḍha", "fa": "pha", "ẏa": "ya",
}

# vowel -> (independent offset, dependent sign offset)
VOWEL_OFFSETS: Dict[str, Tuple[int, Optional[int]]] = {
    "a": (0x05, None), "ā": (0x06, 0x3E),
    "i": (0x07, 0x3F), "ī": (0x08, 0x40),
    "u": (0x09, 0x41), "ū": (0x0A, 0x42),
    "r̥": (0x0B, 0x43), "r̥̄": (0x60, 0x44),
    "l̥": (0x0C, 0x62), "l̥̄": (0x61, 0x63),
    "ê": (0x0D, 0x45), "ĕ": (0x0E, 0x46),
    "e": (0x0F, 0x47), "ai": (0x10, 0x48),
    "ô": (0x11, 0x49), "ŏ": (0x12, 0x4A),
    "o": (0x13, 0x4B), "au": (0x14, 0x4C),
}

MODIFIER_OFFSETS: Dict[str, int] = {CANDRABINDU: 0x01, ANUSVARA: 0x02, VISARGA: 0x03, OM: 0x50}

_CORE = [
    "ka", "kha", "ga", "gha", "ṅa", "ca", "cha", "ja", "jha", "ña",
    "ṭa", "ṭha", "ḍa", "ḍha", "ṇa", "ta", "tha", "da", "dha", "na",
    "pa", "pha", "ba", "bha", "ma", "ya", "ra", "la", "va",
    "śa", "ṣa", "sa", "ha",
]
_NUKTA = list(NUKTA_BASES)
_TAMIL = [
    "ka", "ṅa", "ca", "ja", "ña", "ṭa", "ṇa", "ta", "na", "ṉa", "pa", "ma",
    "ya", "ra", "ṟa", "la", "ḷa", "ḻa", "va", "ṣa", "sa", "ha",
]

SCRIPT_CONSONANTS: Dict[Script, List[str]] = {
    Script.DEVANAGARI: _CORE + ["ḷa"] + _NUKTA,
    Script.BENGALI: _CORE + _NUKTA,
    Script.GURMUKHI: [c for c in _CORE if c != "ṣa"] + ["ḷa"] + _NUKTA,
    Script.GUJARATI: _CORE + ["ḷa"] + _NUKTA,
    Script.ODIA: _CORE + ["ḷa"] + _NUKTA,
    Script.TAMIL: _TAMIL,
    Script.TELUGU: _CORE + ["ṟa", "ḷa"],
    Script.KANNADA: _CORE + ["ṟa", "ḷa"],
    Script.MALAYALAM: _CORE + ["ṟa", "ḷa", "ḻa"],
}

_BASIC = ["a", "ā", "i", "ī", "u", "ū", "e", "ai", "o", "au"]
_VOCALIC = ["r̥", "r̥̄", "l̥", "l̥̄"]
_DRAVIDIAN = ["ĕ", "ŏ"]
_CANDRA = ["ê", "ô"]

SCRIPT_VOWELS: Dict[Script, List[str]] = {
    Script.DEVANAGARI: _BASIC + _VOCALIC + _CANDRA,
    Script.BENGALI: _BASIC + _VOCALIC,
    Script.GURMUKHI: _BASIC,
    Script.GUJARATI: _BASIC + _VOCALIC + _CANDRA,
    Script.ODIA: _BASIC + _VOCALIC,
    Script.TAMIL: _BASIC + _DRAVIDIAN,
    Script.TELUGU: _BASIC + _VOCALIC + _DRAVIDIAN,
    Script.KANNADA: _BASIC + _VOCALIC + _DRAVIDIAN,
    Script.MALAYALAM: _BASIC + _VOCALIC + _DRAVIDIAN,
}

SCRIPT_MODIFIERS: Dict[Script, List[str]] = {
    Script.DEVANAGARI: [ANUSVARA, CANDRABINDU, VISARGA, OM],
    Script.BENGALI: [ANUSVARA, CANDRABINDU, VISARGA],
    Script.GURMUKHI: [ANUSVARA, VISARGA],
    Script.GUJARATI: [ANUSVARA, CANDRABINDU, VISARGA, OM],
    Script.ODIA: [ANUSVARA, CANDRABINDU, VISARGA],
    # Tamil writes nasals out; ஃ (aytham) stands in for visarga
    Script.TAMIL: [VISARGA, OM],
    Script.TELUGU: [ANUSVARA, CANDRABINDU, VISARGA],
    Script.KANNADA: [ANUSVARA, VISARGA],
    Script.MALAYALAM: [ANUSVARA, VISARGA],
}

NUKTA_SCRIPTS = (Script.DEVANAGARI, Script.BENGALI, Script.GURMUKHI, Script.GUJARATI, Script.ODIA)

# Letters written with another consonant's glyph
OVERRIDES: Dict[Script, Dict[str, str]] = {
    Script.BENGALI: {"va": "ব"},
}

# Graphemes read on input but never produced by the tables
READ_ONLY: Dict[Script, Dict[str, Tuple[str, str]]] = {
    Script.GURMUKHI: {"ੰ": (MODIFIER, ANUSVARA), "ੱ": (ADDAK, "")},
    Script.BENGALI: {"ৎ": (BARE, "t")},
    # rare grantha letter; ś is written ஷ on output
    Script.TAMIL: {"ஶ": (CONSONANT, "ś")},
    Script.MALAYALAM: {
        "ൺ": (BARE, "ṇ"),
        "ൻ": (BARE, "n"),
        "ർ": (BARE, "r"),
        "ൽ": (BARE, "l"),
        "ൾ": (BARE, "ḷ"),
        "ൿ": (BARE, "k"),
    },
}

MATRA_POSITIONS: Dict[Script, Dict[str, str]] = {
    Script.DEVANAGARI: {PRE_BASE: "ि", ABOVE: "ॅॆेै", BELOW: "ुूृॄॢॣ", POST_BASE: "ाीॉॊोौ"},
    Script.BENGALI: {PRE_BASE: "িেৈ", AROUND: "োৌ", BELOW: "ুূৃৄৢৣ", POST_BASE: "াী"},
    Script.GURMUKHI: {PRE_BASE: "ਿ", ABOVE: "ੇੈੋੌ", BELOW: "ੁੂ", POST_BASE: "ਾੀ"},
    Script.GUJARATI: {PRE_BASE: "િ", ABOVE: "ૅેૈ", BELOW: "ુૂૃૄૢૣ", POST_BASE: "ાીૉોૌ"},
    Script.ODIA: {PRE_BASE: "େ", AROUND: "ୈୋୌ", ABOVE: "ି", BELOW: "ୁୂୃୄୢୣ", POST_BASE: "ାୀ"},
    Script.TAMIL: {PRE_BASE: "ெேை", AROUND: "ொோௌ", ABOVE: "ீ", POST_BASE: "ாிுூ"},
    Script.TELUGU: {ABOVE: "ాిీెేైొోౌ", BELOW: "ౢౣ", POST_BASE: "ుూృౄ"},
    Script.KANNADA: {ABOVE: "ಿೆ", BELOW: "ೢೣ", POST_BASE: "ಾೀುೂೃೄೇೈೊೋೌ"},
    Script.MALAYALAM: {PRE_BASE: "െേൈ", AROUND: "ൊോൌ", BELOW: "ൢൣ", POST_BASE: "ാിീുൂൃൄ"},
}


class Entry(NamedTuple):
    kind: str
    phoneme: str


@dataclass
class ScriptTable:
    script: Script
    consonants: Dict[str, str] = field(default_factory=dict)
    vowels: Dict[str, str] = field(default_factory=dict)
    matras: Dict[str, str] = field(default_factory=dict)
    modifiers: Dict[str, str] = field(default_factory=dict)
    virama: str = ""
    nukta: str = ""
    digits: str = ""
    reverse: Dict[str, Entry] = field(default_factory=dict)
    positions: Dict[str, str] = field(default_factory=dict)

    @property
    def max_grapheme_len(self) -> int:
        return max((len(g) for g in self.reverse), default=1)

    def supports(self, phoneme: str) -> bool:
        return phoneme in self.consonants or phoneme in self.vowels or phoneme in self.modifiers

    def matra_position(self, sign: str) -> Optional[str]:
        return self.positions.get(sign)

    def is_consonant(self, ch: str) -> bool:
        entry = self.reverse.get(ch)
        return entry is not None and entry.kind == CONSONANT

    def is_matra(self, ch: str) -> bool:
        entry = self.reverse.get(ch)
        return entry is not None and entry.kind == MATRA

    def _register(self, grapheme: str, kind: str, phoneme: str) -> None:
        # first registration wins, so shared glyphs read back as the primary phoneme
        self.reverse.setdefault(grapheme, Entry(kind, phoneme))


def _assigned(cp: int) -> bool:
    return unicodedata.name(chr(cp), None) is not None


def _build(script: Script) -> ScriptTable:
    start = SCRIPTS[script].block_start
    table = ScriptTable(script=script, virama=chr(start + 0x4D))
    if script in NUKTA_SCRIPTS:
        table.nukta = chr(start + 0x3C)
    table.digits = "".join(chr(start + 0x66 + d) for d in range(10))
    overrides = OVERRIDES.get(script, {})

    wanted = set(SCRIPT_CONSONANTS[script])
    for c in CONSONANTS:
        if c.id not in wanted:
            continue
        if c.id in overrides:
            glyph = overrides[c.id]
        elif c.id in NUKTA_BASES:
            cp = start + CONSONANT_OFFSETS[c.id]
            if _assigned(cp):
                glyph = nfc(chr(cp))
            else:
                glyph = nfc(table.consonants[nfc(NUKTA_BASES[c.id][:-1])] + table.nukta)
        else:
            glyph = nfc(chr(start + CONSONANT_OFFSETS[c.id]))
        base = nfc(c.base)
        table.consonants[base] = glyph
        table._register(glyph, CONSONANT, base)

    for vowel in SCRIPT_VOWELS[script]:
        independent, sign = VOWEL_OFFSETS[vowel]
        key = nfc(vowel)
        table.vowels[key] = nfc(chr(start + independent))
        table.matras[key] = nfc(chr(start + sign)) if sign is not None else ""
        table._register(table.vowels[key], VOWEL, key)
        if table.matras[key]:
            table._register(table.matras[key], MATRA, key)

    for modifier in SCRIPT_MODIFIERS[script]:
        key = nfc(modifier)
        table.modifiers[key] = chr(start + MODIFIER_OFFSETS[modifier])
        table._register(table.modifiers[key], MODIFIER, key)

    table._register(table.virama, VIRAMA, "")
    if table.nukta:
        table._register(table.nukta, NUKTA, "")
    for d, glyph in enumerate(table.digits):
        table._register(glyph, DIGIT, str(d))
    for glyph, (kind, phoneme) in READ_ONLY.get(script, {}).items():
        table._register(glyph, kind, nfc(phoneme))

    for position, signs in MATRA_POSITIONS.get(script, {}).items():
        for sign in signs:
            table.positions[sign] = position
    return table


TABLES: Dict[Script, ScriptTable] = {s: _build(s) for s in SCRIPTS if s.is_brahmic}

logger.debug("phoneme_tables_built scripts=%d", len(TABLES))


def table_for(script: Script) -> Optional[ScriptTable]:
    return TABLES.get(script)


def native_digits(script: Script) -> str:
    table = TABLES.get(script)
    return table.digits if table else ""
