from lipi.scripts.detector import detect, segment_runs
from lipi.scripts.registry import Script


def test_detect_single_script():
    d = detect("नमस्ते दुनिया")
    assert d.script is Script.DEVANAGARI
    assert d.confidence == 1.0
    assert d.alternatives == []
    assert not d.ambiguous


def test_detect_falls_back_without_letters():
    d = detect("  123 !? ", fallback=Script.TAMIL)
    assert d.script is Script.TAMIL
    assert d.confidence == 0.0
    assert d.alternatives == []


def test_detect_mixed_is_ambiguous():
    d = detect("Hotel होटल")
    assert d.script is Script.ROMANIZATION
    assert d.ambiguous
    assert d.alternatives == [(Script.DEVANAGARI, 0.4444)]


def test_segment_runs_keeps_order():
    assert segment_runs("Hotel होटल") == [
        (Script.ROMANIZATION, "Hotel "),
        (Script.DEVANAGARI, "होटल"),
    ]


def test_segment_runs_neutral_only():
    assert segment_runs("12 34") == [(None, "12 34")]
    assert segment_runs("") == []


def test_segment_runs_leading_neutrals_join_first_run():
    assert segment_runs("(चेन्नई)") == [(Script.DEVANAGARI, "(चेन्नई)")]
