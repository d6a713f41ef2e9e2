"""Analysis quality summary over the detected pattern set."""

from btc_signals.analysis.models import AnalysisQuality, PatternRecord


def summarize_quality(
    patterns: list[PatternRecord],
    confidence_floor: float = 0.8,
    neutral_score: float = 0.5,
) -> AnalysisQuality:
    """Summarize a run's patterns into confidence and recognition scores.

    Formula:
        mathematical_confidence = max(accuracy rates, confidence_floor)
        pattern_recognition_score = mean(strengths), or neutral_score if empty

    Args:
        patterns: Records detected in one run (possibly empty).
        confidence_floor: Lower bound for the confidence.
        neutral_score: Recognition score when nothing was detected.

    Returns:
        AnalysisQuality for the run.
    """
    confidence = max([p.accuracy_rate for p in patterns] + [confidence_floor])

    if patterns:
        recognition = sum(p.strength for p in patterns) / len(patterns)
    else:
        recognition = neutral_score

    return AnalysisQuality(
        mathematical_confidence=confidence,
        pattern_recognition_score=recognition,
    )
