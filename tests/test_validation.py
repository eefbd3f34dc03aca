from lipi.core.errors import UnsupportedScript
from lipi.core.config import settings
from lipi.exceptions_dict import CorrectionCache, ExceptionDictionary
from lipi.scripts.registry import Script
from lipi.validation import ValidationEngine, assimilate_nasals, comparable, levenshtein, similarity


def test_levenshtein():
    assert levenshtein("kitten", "sitting") == 3
    assert levenshtein("", "abc") == 3
    assert levenshtein(["a", "b"], ["a", "c"]) == 1


def test_similarity_bounds():
    assert similarity("", "") == 1.0
    assert similarity("abc", "xyz") == 0.0
    assert similarity("abcd", "abce") == 0.75


def test_round_trip_valid():
    engine = ValidationEngine(lambda text, src, tgt, mode: "नमस्ते")
    result = engine.validate_round_trip("नमस्ते", "நமஸ்தே", Script.DEVANAGARI, Script.TAMIL)
    assert result.is_valid
    assert result.confidence == 1.0
    assert result.suggestions is None


def test_round_trip_low_confidence_offers_suggestions():
    exceptions = ExceptionDictionary.from_file(settings.EXCEPTIONS_PATH)
    corrections = CorrectionCache({"स्टेशन": "ஸ்டேசன்"})
    engine = ValidationEngine(lambda text, src, tgt, mode: "xyz", exceptions=exceptions, corrections=corrections)
    result = engine.validate_round_trip("स्टेशन", "???", Script.DEVANAGARI, Script.TAMIL)
    assert not result.is_valid
    assert result.confidence < 0.8
    assert result.suggestions[:2] == ["ஸ்டேசன்", "ஸ்டேஷன்"]


def test_reverse_failure_requires_manual_check():
    def reverse(text, src, tgt, mode):
        raise UnsupportedScript(tgt)

    result = ValidationEngine(reverse).validate_round_trip("abc", "abc", Script.ROMANIZATION, Script.TAMIL)
    assert not result.is_valid
    assert result.confidence == 0.0
    assert result.suggestions == ["Manual verification required"]


def test_long_inputs_skip_levenshtein():
    calls = []
    engine = ValidationEngine(lambda *args: calls.append(args) or "", max_length=5)
    result = engine.validate_round_trip("abcdef", "abcdef", Script.ROMANIZATION, Script.DEVANAGARI)
    assert result.skipped and result.is_valid
    assert result.confidence == 0.9
    assert calls == []


def test_reverse_receives_forward_mode():
    calls = []

    def reverse(text, src, tgt, mode):
        calls.append((text, src, tgt, mode))
        return "kamala"

    engine = ValidationEngine(reverse)
    engine.validate_round_trip("kamala", "कमल", Script.ROMANIZATION, Script.DEVANAGARI, mode="strict")
    assert calls == [("कमल", Script.DEVANAGARI, Script.ROMANIZATION, "strict")]


def test_anusvara_compares_as_homorganic_nasal():
    assert assimilate_nasals("संत", Script.DEVANAGARI) == "सन्त"
    assert assimilate_nasals("गंगा", Script.DEVANAGARI) == "गङ्गा"
    # fricatives and word-final anusvara stay as written
    assert assimilate_nasals("संसार", Script.DEVANAGARI) == "संसार"
    assert assimilate_nasals("अहं", Script.DEVANAGARI) == "अहं"
    assert assimilate_nasals("ਸੰਤ", Script.GURMUKHI) == "ਸਨ੍ਤ"
    assert assimilate_nasals("saṃta", Script.ROMANIZATION) == "santa"
    assert comparable("  SAṂTA ", Script.ROMANIZATION) == "santa"
    assert comparable("संत") == "संत"


def test_anusvara_round_trip_is_valid():
    engine = ValidationEngine(lambda text, src, tgt, mode: "सन्त")
    result = engine.validate_round_trip("संत", "sant", Script.DEVANAGARI, Script.ROMANIZATION)
    assert result.is_valid
    assert result.confidence == 1.0
