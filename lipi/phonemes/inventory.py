"""
The phoneme vocabulary shared by every script.

Phonemes are written in ISO 15919 style. Consonants are identified with
their inherent vowel (``ka``) and appear in phonemic strings as their
bare base (``k``) followed by a vowel token.
"""
import unicodedata
from dataclasses import dataclass
from typing import Dict, List, Optional


def nfc(text: str) -> str:
    return unicodedata.normalize("NFC", text)


@dataclass(frozen=True)
class Consonant:
    id: str
    place: str
    manner: str
    voiced: bool
    aspirated: bool = False

    @property
    def base(self) -> str:
        return self.id[:-1]


@dataclass(frozen=True)
class Vowel:
    id: str
    long: bool
    diphthong: bool = False


@dataclass(frozen=True)
class Modifier:
    id: str
    name: str


_C = Consonant
CONSONANTS: List[Consonant] = [
    _C("ka", "velar", "stop", False), _C("kha", "velar", "stop", False, True),
    _C("ga", "velar", "stop", True), _C("gha", "velar", "stop", True, True),
    _C("ṅa", "velar", "nasal", True),
    _C("ca", "palatal", "stop", False), _C("cha", "palatal", "stop", False, True),
    _C("ja", "palatal", "stop", True), _C("jha", "palatal", "stop", True, True),
    _C("ña", "palatal", "nasal", True),
    _C("ṭa", "retroflex", "stop", False), _C("ṭha", "retroflex", "stop", False, True),
    _C("ḍa", "retroflex", "stop", True), _C("ḍha", "retroflex", "stop", True, True),
    _C("ṇa", "retroflex", "nasal", True),
    _C("ta", "dental", "stop", False), _C("tha", "dental", "stop", False, True),
    _C("da", "dental", "stop", True), _C("dha", "dental", "stop", True, True),
    _C("na", "dental", "nasal", True),
    _C("ṉa", "alveolar", "nasal", True),
    _C("pa", "labial", "stop", False), _C("pha", "labial", "stop", False, True),
    _C("ba", "labial", "stop", True), _C("bha", "labial", "stop", True, True),
    _C("ma", "labial", "nasal", True),
    _C("ya", "palatal", "approximant", True),
    _C("ra", "alveolar", "flap", True),
    _C("ṟa", "alveolar", "trill", True),
    _C("la", "dental", "lateral", True),
    _C("ḷa", "retroflex", "lateral", True),
    _C("ḻa", "retroflex", "approximant", True),
    _C("va", "labial", "approximant", True),
    _C("śa", "palatal", "fricative", False),
    _C("ṣa", "retroflex", "fricative", False),
    _C("sa", "dental", "fricative", False),
    _C("ha", "glottal", "fricative", True),
    # nukta letters
    _C("qa", "velar", "stop", False),
    _C("xa", "velar", "fricative", False),
    _C("ġa", "velar", "fricative", True),
    _C("za", "dental", "fricative", True),
    _C("fa", "labial", "fricative", False),
    _C("ṛa", "retroflex", "flap", True),
    _C("ṛha", "retroflex", "flap", True, True),
    _C("ẏa", "palatal", "approximant", True),
]

VOWELS: List[Vowel] = [
    Vowel("a", False), Vowel("ā", True),
    Vowel("i", False), Vowel("ī", True),
    Vowel("u", False), Vowel("ū", True),
    Vowel("r̥", False), Vowel("r̥̄", True),
    Vowel("l̥", False), Vowel("l̥̄", True),
    Vowel("ê", True),
    Vowel("ĕ", False), Vowel("e", True), Vowel("ai", True, True),
    Vowel("ô", True),
    Vowel("ŏ", False), Vowel("o", True), Vowel("au", True, True),
]

MODIFIERS: List[Modifier] = [
    Modifier("ṃ", "anusvara"),
    Modifier("m̐", "candrabindu"),
    Modifier("ḥ", "visarga"),
    Modifier("oṁ", "om"),
]

ANUSVARA = "ṃ"
CANDRABINDU = "m̐"
VISARGA = "ḥ"
OM = "oṁ"
INHERENT = "a"
SEPARATOR = ":"

CONSONANTS_BY_ID: Dict[str, Consonant] = {c.id: c for c in CONSONANTS}
CONSONANTS_BY_BASE: Dict[str, Consonant] = {nfc(c.base): c for c in CONSONANTS}
VOWELS_BY_ID: Dict[str, Vowel] = {nfc(v.id): v for v in VOWELS}
MODIFIERS_BY_ID: Dict[str, Modifier] = {nfc(m.id): m for m in MODIFIERS}

HOMORGANIC_NASALS: Dict[str, str] = {
    "velar": "ṅ",
    "palatal": "ñ",
    "retroflex": "ṇ",
    "dental": "n",
    "alveolar": "n",
    "labial": "m",
}

# Accepted on input only, never produced
ALIASES: Dict[str, str] = {
    "aa": "ā",
    "ii": "ī",
    "ee": "ī",
    "uu": "ū",
    "oo": "ū",
    "ē": "e",
    "ō": "o",
    "ṝ": "r̥̄",
    "ḹ": "l̥̄",
    "ṁ": "ṃ",
    "sh": "ś",
    "w": "v",
}
ALIASES = {nfc(k): nfc(v) for k, v in ALIASES.items()}


def consonant_for_base(base: str) -> Optional[Consonant]:
    return CONSONANTS_BY_BASE.get(base)


def is_stop(base: str) -> bool:
    c = CONSONANTS_BY_BASE.get(base)
    return c is not None and c.manner == "stop"


def homorganic_nasal(base: str) -> Optional[str]:
    c = CONSONANTS_BY_BASE.get(base)
    if c is None or c.manner != "stop":
        return None
    return HOMORGANIC_NASALS.get(c.place)


def _neutralization_chain() -> Dict[str, str]:
    """
    Diacritic-loss fallbacks: aspirated -> unaspirated, voiced -> voiceless,
    plus the few letters that collapse onto a more common neighbour.
    """
    chain: Dict[str, str] = {}
    stops = [c for c in CONSONANTS if c.manner == "stop" and c.base != "q"]
    by_key = {(c.place, c.voiced, c.aspirated): c for c in stops}
    for c in stops:
        if c.aspirated:
            plain = by_key.get((c.place, c.voiced, False))
            if plain is not None:
                chain[c.base] = plain.base
        elif c.voiced:
            voiceless = by_key.get((c.place, False, False))
            if voiceless is not None:
                chain[c.base] = voiceless.base
    chain.update({
        "ṉ": "n",
        "ṟ": "r",
        "ḻ": "ḷ",
        "ḷ": "l",
        "ṣ": "ś",
        "ś": "s",
        "q": "k",
        "x": "kh",
        "ġ": "g",
        "z": "j",
        "f": "ph",
        "ṛ": "ḍ",
        "ṛh": "ḍh",
        "ẏ": "y",
        "v": "b",
        "r̥": "ri",
        "r̥̄": "rī",
        "l̥": "li",
        "l̥̄": "lī",
        "ĕ": "e",
        "ŏ": "o",
        "ê": "e",
        "ô": "o",
        "m̐": "ṃ",
        "ṃ": "m",
        "ḥ": "h",
        "oṁ": "o" + SEPARATOR + "ṃ",
    })
    return {nfc(k): nfc(v) for k, v in chain.items()}


FALLBACKS: Dict[str, str] = _neutralization_chain()


def unaspirated(base: str) -> str:
    c = CONSONANTS_BY_BASE.get(base)
    if c is not None and c.aspirated:
        return FALLBACKS.get(base, base)
    return base
