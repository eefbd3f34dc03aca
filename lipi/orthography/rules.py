"""
Rule tables consumed by the orthography engine.
"""
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Tuple

from lipi.phonemes.inventory import nfc
from lipi.scripts.registry import Script

COMMON = "common"
RARE = "rare"


@dataclass(frozen=True)
class ConjunctRule:
    name: str
    phonemes: Tuple[str, ...]
    frequency_class: str
    frequency: float
    # only where the ligature differs from consonant + virama + consonant
    ligatures: Dict[Script, str] = field(default_factory=dict)


def _rule(name, phonemes, frequency_class, frequency, ligatures=None) -> ConjunctRule:
    return ConjunctRule(
        name=name,
        phonemes=tuple(nfc(p) for p in phonemes),
        frequency_class=frequency_class,
        frequency=frequency,
        ligatures=ligatures or {},
    )


CONJUNCT_RULES: List[ConjunctRule] = [
    _rule("ksha", ("k", "ṣ"), COMMON, 0.95),
    _rule("tra", ("t", "r"), COMMON, 0.90),
    _rule("jnya", ("j", "ñ"), COMMON, 0.85, {Script.GURMUKHI: "ਗ੍ਯ"}),
    _rule("shra", ("ś", "r"), COMMON, 0.80),
    _rule("kka", ("k", "k"), COMMON, 0.75),
    _rule("nka", ("ṅ", "k"), COMMON, 0.70),
    _rule("tta", ("ṭ", "ṭ"), COMMON, 0.65),
    _rule("shcha", ("ś", "c"), RARE, 0.30),
    _rule("dya", ("d", "y"), RARE, 0.25),
    _rule("hma", ("h", "m"), RARE, 0.20),
]


def match_conjunct(bases: Tuple[str, ...]) -> Optional[ConjunctRule]:
    """Longest rule whose phonemes prefix ``bases``."""
    best = None
    for rule in CONJUNCT_RULES:
        n = len(rule.phonemes)
        if bases[:n] == rule.phonemes and (best is None or n > len(best.phonemes)):
            best = rule
    return best


def ligature_readings(script: Script) -> Dict[str, Tuple[str, ...]]:
    """Script-specific ligatures, mapped back to the phonemes they spell."""
    return {
        rule.ligatures[script]: rule.phonemes
        for rule in CONJUNCT_RULES
        if script in rule.ligatures
    }


@dataclass(frozen=True)
class SchwaRule:
    name: str
    position: str  # "final" | "medial" | "cluster" | "all"
    action: str  # "delete" | "retain"
    confidence: float
    scripts: FrozenSet[Script]


_SCHWA_DELETING = frozenset({Script.DEVANAGARI, Script.GURMUKHI, Script.GUJARATI})

SCHWA_RULES: List[SchwaRule] = [
    SchwaRule("word_final_delete", "final", "delete", 0.9, _SCHWA_DELETING),
    SchwaRule("medial_delete", "medial", "delete", 0.7, _SCHWA_DELETING),
    SchwaRule("cluster_medial_retain", "cluster", "retain", 0.8, _SCHWA_DELETING),
    SchwaRule(
        "full_retention",
        "all",
        "retain",
        0.95,
        frozenset({
            Script.BENGALI,
            Script.ODIA,
            Script.TAMIL,
            Script.TELUGU,
            Script.KANNADA,
            Script.MALAYALAM,
            Script.ROMANIZATION,
        }),
    ),
]


def schwa_rules_for(script: Script) -> List[SchwaRule]:
    return [r for r in SCHWA_RULES if script in r.scripts]


WORD_INITIAL = "initial"
WORD_MEDIAL = "medial"
WORD_FINAL = "final"
BEFORE_DENTAL = "before_dental"


@dataclass(frozen=True)
class Candidate:
    grapheme: str
    frequency: float
    signage_preference: bool = False
    contexts: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class DisambiguationRule:
    script: Script
    phoneme: str
    candidates: Tuple[Candidate, ...]


DISAMBIGUATION_RULES: List[DisambiguationRule] = [
    DisambiguationRule(
        Script.TAMIL,
        "kh",
        (
            Candidate("க", 0.95, signage_preference=True),
            Candidate("க்ஹ", 0.05),
        ),
    ),
    DisambiguationRule(
        Script.TAMIL,
        "n",
        (
            Candidate("ந", 0.6, signage_preference=True, contexts=frozenset({WORD_INITIAL, BEFORE_DENTAL})),
            Candidate("ன", 0.4, contexts=frozenset({WORD_MEDIAL, WORD_FINAL})),
        ),
    ),
    DisambiguationRule(
        Script.TAMIL,
        "ś",
        (
            Candidate("ஷ", 0.8, signage_preference=True),
            Candidate("ஶ", 0.2),
        ),
    ),
]

DISAMBIGUATION_INDEX: Dict[Tuple[Script, str], DisambiguationRule] = {
    (r.script, nfc(r.phoneme)): r for r in DISAMBIGUATION_RULES
}


def disambiguation_rule(script: Script, phoneme: str) -> Optional[DisambiguationRule]:
    return DISAMBIGUATION_INDEX.get((script, phoneme))
