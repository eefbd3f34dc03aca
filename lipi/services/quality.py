"""
Accuracy metrics for transliteration output against a ground truth, and
agreement with the aksharamukha reference transliterator.
"""
import logging
import time
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Tuple

from lipi.adapters.aksharamukha import AksharaAdapter
from lipi.phonemes.codec import segment_aksharas
from lipi.scripts.registry import Script
from lipi.services.transliteration import TransliterationPipeline
from lipi.validation import comparable, levenshtein, similarity


def _ratio(matches: int, total: int) -> float:
    return matches / total if total else 1.0


def character_accuracy(predicted: str, truth: str) -> float:
    max_len = max(len(predicted), len(truth))
    if not max_len:
        return 1.0
    return max(0.0, (max_len - levenshtein(predicted, truth)) / max_len)


def akshara_accuracy(predicted: str, truth: str, script: Script) -> float:
    """Position-by-position match of orthographic syllables."""
    p = segment_aksharas(predicted, script)
    t = segment_aksharas(truth, script)
    matches = sum(1 for a, b in zip(p, t) if a == b)
    return _ratio(matches, max(len(p), len(t)))


def word_accuracy(predicted: str, truth: str) -> float:
    p = predicted.split()
    t = truth.split()
    matches = sum(1 for a, b in zip(p, t) if a == b)
    return _ratio(matches, max(len(p), len(t)))


def cer(predicted: str, truth: str) -> float:
    return levenshtein(predicted, truth) / len(truth) if truth else 0.0


def wer(predicted: str, truth: str) -> float:
    t = truth.split()
    return levenshtein(predicted.split(), t) / len(t) if t else 0.0


class QualityEvaluator:
    def __init__(self, pipeline: TransliterationPipeline, reference: Optional[AksharaAdapter] = None):
        self.pipeline = pipeline
        self.reference = reference if reference is not None else AksharaAdapter()
        self.latencies: Dict[str, List[float]] = defaultdict(list)

    def measure(self, name: str, fn: Callable, *args, **kwargs):
        start = time.perf_counter()
        result = fn(*args, **kwargs)
        latency_ms = (time.perf_counter() - start) * 1000
        self.latencies[name].append(latency_ms)
        return result, latency_ms

    def evaluate(self, text: str, truth: str, source: Script, target: Script) -> Dict[str, float]:
        result, latency_ms = self.measure(
            "transliterate", self.pipeline.transliterate, text, source, target, validate_result=False
        )
        predicted = result.result
        metrics = {
            "character_accuracy": character_accuracy(predicted, truth),
            "akshara_accuracy": akshara_accuracy(predicted, truth, target),
            "word_accuracy": word_accuracy(predicted, truth),
            "cer": cer(predicted, truth),
            "wer": wer(predicted, truth),
            "latency_ms": latency_ms,
            "confidence": result.confidence,
        }
        logging.info(
            "[QUALITY] source=%s target=%s char_acc=%.3f word_acc=%.3f latency_ms=%.2f",
            source.value,
            target.value,
            metrics["character_accuracy"],
            metrics["word_accuracy"],
            latency_ms,
        )
        return metrics

    def round_trip_score(self, text: str, source: Script, target: Script) -> Tuple[float, str, str]:
        forward = self.pipeline.transliterate(text, source, target, validate_result=False).result
        backward = self.pipeline.transliterate(forward, target, source, validate_result=False).result
        score = character_accuracy(comparable(backward, source), comparable(text, source))
        return score, forward, backward

    def reference_agreement(self, text: str, source: Script, target: Script) -> Optional[float]:
        """Similarity to aksharamukha's output; None when the reference is unavailable."""
        expected = self.reference.transliterate(text, source, target)
        if expected is None:
            return None
        ours = self.pipeline.transliterate(text, source, target, validate_result=False).result
        return round(similarity(comparable(ours, target), comparable(expected, target)), 4)

    def report(
        self, text: str, source: Script, target: Script, truth: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        One conversion scored every way available: the round trip back to
        the source, agreement with the reference transliterator and, when
        a ground truth is given, the accuracy metrics against it.
        """
        result, latency_ms = self.measure(
            "transliterate", self.pipeline.transliterate, text, source, target, validate_result=False
        )
        round_trip, _, backward = self.round_trip_score(text, source, target)
        return {
            "result": result.result,
            "confidence": result.confidence,
            "round_trip": backward,
            "round_trip_accuracy": round(round_trip, 4),
            "reference_agreement": self.reference_agreement(text, source, target),
            "latency_ms": round(latency_ms, 3),
            "metrics": self.evaluate(text, truth, source, target) if truth is not None else None,
        }

    def performance_report(self, target_ms: float = 100.0) -> Dict[str, object]:
        operations = {
            name: {"count": len(values), "avg_latency_ms": sum(values) / len(values)}
            for name, values in self.latencies.items()
            if values
        }
        every = [v for values in self.latencies.values() for v in values]
        average = sum(every) / len(every) if every else 0.0
        return {
            "total_operations": len(every),
            "average_latency_ms": average,
            "target_met": average < target_ms,
            "operations": operations,
        }
