"""
Unicode-block script detection and mixed-script run segmentation.
"""
import logging
import unicodedata
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from lipi.scripts.registry import SCRIPTS, Script

logger = logging.getLogger(__name__)


@dataclass
class Detection:
    script: Script
    confidence: float
    alternatives: List[Tuple[Script, float]] = field(default_factory=list)
    ambiguous: bool = False


def is_letter_or_mark(ch: str) -> bool:
    return unicodedata.category(ch)[0] in ("L", "M")


def classify_char(ch: str) -> Optional[Script]:
    """Script owning ``ch``; None for whitespace, punctuation, digits and foreign text."""
    if not is_letter_or_mark(ch):
        return None
    # ranges are disjoint, first match wins
    for script, info in SCRIPTS.items():
        if info.contains(ch):
            return script
    return None


def detect(
    text: str,
    threshold: float = 0.8,
    fallback: Script = Script.DEVANAGARI,
) -> Detection:
    counts: Counter = Counter()
    for ch in text or "":
        script = classify_char(ch)
        if script is not None:
            counts[script] += 1

    total = sum(counts.values())
    if not total:
        logger.info("script_detection_fallback script=%s reason=no_classified_chars", fallback.value)
        return Detection(script=fallback, confidence=0.0, alternatives=[], ambiguous=True)

    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    best, best_count = ranked[0]
    confidence = best_count / total
    alternatives = [(s, round(c / total, 4)) for s, c in ranked[1:4]]
    ambiguous = confidence < threshold
    if ambiguous:
        logger.info(
            "script_detection_ambiguous script=%s confidence=%.2f alternatives=%s",
            best.value,
            confidence,
            ",".join(s.value for s, _ in alternatives),
        )
    return Detection(script=best, confidence=confidence, alternatives=alternatives, ambiguous=ambiguous)


def segment_runs(text: str) -> List[Tuple[Optional[Script], str]]:
    """
    Split text into maximal single-script runs.

    Neutral characters (spaces, punctuation, digits) stay with the run
    they follow; leading neutrals join the first run. Text with no
    classifiable character comes back as one run tagged None.
    """
    runs: List[List] = []
    leading = ""
    for ch in text or "":
        script = classify_char(ch)
        if script is None:
            if runs:
                runs[-1][1] += ch
            else:
                leading += ch
            continue
        if runs and runs[-1][0] == script:
            runs[-1][1] += ch
        else:
            runs.append([script, ch])

    if not runs:
        return [(None, leading)] if leading else []
    runs[0][1] = leading + runs[0][1]
    return [(script, chunk) for script, chunk in runs]
