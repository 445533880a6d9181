"""
Marking Model - pure scoring rules for one subject.

Implements the marking formula:
1. wrong = attempted - correct, floored at zero
2. raw score = correct * points_correct, minus wrong * points_wrong
   when negative marking is on (may go below zero, never clamped)
3. max score = total * points_correct
4. every percentage is ratio_pct(numerator, denominator), which yields
   exactly 0.0 when the denominator is not positive
"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class MarkingConfig:
    """Points per correct answer, points per wrong answer, negative on/off."""
    points_correct: float
    points_wrong: float
    negative: bool


def wrong_count(attempted: int, correct: int) -> int:
    """Saturating attempted - correct: correct > attempted gives 0, not a negative."""
    return max(0, attempted - correct)


def subject_raw_score(correct: int, attempted: int, points_correct: float,
                      points_wrong: float, negative: bool) -> float:
    score = correct * float(points_correct)
    if negative:
        score -= wrong_count(attempted, correct) * float(points_wrong)
    return score


def subject_max_score(total: int, points_correct: float) -> float:
    return total * float(points_correct)


def ratio_pct(numerator: float, denominator: float) -> float:
    """Percentage numerator/denominator, or 0.0 when denominator <= 0."""
    if denominator > 0:
        return (numerator / denominator) * 100.0
    return 0.0


def _format_points(value: float) -> str:
    # 4.0 -> "4", 0.25 -> "0.25", 1e16 -> "10000000000000000"; never exponent form
    text = format(Decimal(repr(float(value))), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text


def marking_display(config: MarkingConfig) -> str:
    """Short label for a marking scheme: "+4/-1" or "Flat 4"."""
    if config.negative:
        return "+{}/-{}".format(_format_points(config.points_correct),
                                _format_points(config.points_wrong))
    return "Flat {}".format(_format_points(config.points_correct))
