import pytest

from lipi.orthography.engine import READABLE, STRICT, OrthographyEngine, OrthographyOptions
from lipi.phonemes.codec import read, render, serialize
from lipi.scripts.registry import Script


def test_options_reject_unknown_mode():
    with pytest.raises(ValueError):
        OrthographyOptions(mode="loose")


def test_word_final_schwa_deleted_for_hindi():
    engine = OrthographyEngine()
    tokens = engine.delete_schwa(read("कमल", Script.DEVANAGARI), Script.DEVANAGARI)
    assert serialize(tokens) == "kamal"


def test_medial_schwa_deleted():
    engine = OrthographyEngine()
    tokens = engine.delete_schwa(read("रेलवे", Script.DEVANAGARI), Script.DEVANAGARI)
    assert serialize(tokens) == "relve"


def test_schwa_deletion_is_idempotent():
    engine = OrthographyEngine()
    for word in ("कमल", "रेलवे", "नमस्ते", "भारत"):
        once = engine.delete_schwa(read(word, Script.DEVANAGARI), Script.DEVANAGARI)
        twice = engine.delete_schwa(once, Script.DEVANAGARI)
        assert serialize(once) == serialize(twice)


def test_bengali_retains_schwa():
    engine = OrthographyEngine()
    tokens = engine.delete_schwa(read("কমল", Script.BENGALI), Script.BENGALI)
    assert serialize(tokens) == "kamala"


def test_strict_mode_keeps_schwa():
    engine = OrthographyEngine(OrthographyOptions(mode=STRICT))
    tokens = engine.delete_schwa(read("कमल", Script.DEVANAGARI), Script.DEVANAGARI)
    assert serialize(tokens) == "kamala"


def test_protected_words_keep_schwa():
    engine = OrthographyEngine()
    tokens = read("कमल", Script.DEVANAGARI)
    for t in tokens:
        t.protected = True
    assert serialize(engine.delete_schwa(tokens, Script.DEVANAGARI)) == "kamala"


def test_anusvara_before_stop_becomes_homorganic_nasal():
    engine = OrthographyEngine()
    tokens = read("संत", Script.DEVANAGARI)
    assert serialize(engine.resolve_nasals(tokens, Script.TAMIL)) == "santa"
    assert serialize(engine.resolve_nasals(tokens, Script.BENGALI)) == "santa"
    assert serialize(engine.resolve_nasals(read("गंगा", Script.DEVANAGARI), Script.ROMANIZATION)) == "gaṅgā"


def test_anusvara_kept_before_fricative_and_word_end():
    engine = OrthographyEngine()
    assert serialize(engine.resolve_nasals(read("संसार", Script.DEVANAGARI), Script.BENGALI)) == "saṃsāra"
    assert serialize(engine.resolve_nasals(read("अहं", Script.DEVANAGARI), Script.TELUGU)) == "ahaṃ"


def test_nasal_assimilation_can_be_limited_to_targets_without_anusvara():
    engine = OrthographyEngine(OrthographyOptions(nasal_assimilation=False))
    tokens = read("संत", Script.DEVANAGARI)
    assert serialize(engine.resolve_nasals(tokens, Script.BENGALI)) == "saṃta"
    assert serialize(engine.resolve_nasals(tokens, Script.TAMIL)) == "santa"
    assert serialize(engine.resolve_nasals(tokens, Script.ROMANIZATION)) == "santa"


def test_conjunct_resolution_devanagari_to_bengali():
    engine = OrthographyEngine()
    tokens, found = engine.resolve_conjuncts(read("क्ष", Script.DEVANAGARI), Script.BENGALI)
    assert found == ["ksha"]
    assert render(tokens, Script.BENGALI).text == "ক্ষ"


def test_conjuncts_left_decomposed_for_tamil():
    engine = OrthographyEngine()
    tokens, found = engine.resolve_conjuncts(read("क्ष", Script.DEVANAGARI), Script.TAMIL)
    assert found == []
    assert render(tokens, Script.TAMIL).text == "க்ஷ"


def test_rare_conjunct_gets_explicit_virama_in_readable_mode():
    engine = OrthographyEngine(OrthographyOptions(mode=READABLE))
    tokens, found = engine.resolve_conjuncts(read("द्य", Script.DEVANAGARI), Script.DEVANAGARI)
    assert found == ["dya"]
    assert render(tokens, Script.DEVANAGARI).text == "द्\u200cय"


def test_place_matras_moves_pre_base_sign():
    engine = OrthographyEngine()
    assert engine.place_matras("िकताब", Script.DEVANAGARI) == "किताब"
    assert engine.place_matras("\u09c7\u0995\u09be", Script.BENGALI) == "\u0995\u09cb"
    assert engine.place_matras("किताब", Script.DEVANAGARI) == "किताब"


def test_to_visual_order_inverts_place_matras():
    engine = OrthographyEngine()
    visual = engine.to_visual_order("किताब", Script.DEVANAGARI)
    assert visual == "िकताब"
    assert engine.place_matras(visual, Script.DEVANAGARI) == "किताब"


def test_normalize_diacritics():
    engine = OrthographyEngine()
    assert engine.normalize_diacritics("किँ", Script.DEVANAGARI) == "किं"
    assert engine.normalize_diacritics("ਕਂ", Script.GURMUKHI) == "ਕੰ"
    assert engine.normalize_diacritics("ਕਾਂ", Script.GURMUKHI) == "ਕਾਂ"


def test_script_nuances():
    engine = OrthographyEngine()
    assert engine.apply_nuances("അവന്", Script.MALAYALAM) == "അവൻ"
    assert engine.apply_nuances("ভাত্", Script.BENGALI) == "ভাৎ"
    assert engine.apply_nuances("সন্ত্", Script.BENGALI) == "সন্ত"
    assert engine.apply_nuances("कमल्", Script.DEVANAGARI) == "कमल"
    assert engine.apply_nuances("ਪਕ੍ਕਾ", Script.GURMUKHI) == "ਪੱਕਾ"


def test_strict_mode_keeps_final_virama():
    engine = OrthographyEngine(OrthographyOptions(mode=STRICT))
    assert engine.apply_nuances("कमल्", Script.DEVANAGARI) == "कमल्"
    assert engine.apply_nuances("সন্ত্", Script.BENGALI) == "সন্ত্"
