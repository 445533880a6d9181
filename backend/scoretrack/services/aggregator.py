"""
Aggregator - folds per-subject raw counts into derived statistics.

Given a marking configuration and an ordered sequence of raw
(total, attempted, correct) triples, produces:
- per subject, in input order: attempts_pct, accuracy_pct, score_pct
- grand totals: total_score_pct = sum(raw scores) / sum(max scores),
  total_accuracy_pct = sum(correct) / sum(attempted)

Pure function of its inputs; the record store calls it on create, on
every mutation, and on every read.
"""

from dataclasses import dataclass, field
from typing import Iterable, List

from scoretrack.services.marking import (
    MarkingConfig, subject_raw_score, subject_max_score, ratio_pct
)


@dataclass(frozen=True)
class SubjectRaw:
    """Raw question counts for one subject."""
    total: int
    attempted: int
    correct: int


@dataclass(frozen=True)
class SubjectResult:
    attempts_pct: float
    accuracy_pct: float
    score_pct: float
    raw_score: float
    max_score: float


@dataclass
class AggregateResult:
    """Per-subject results (input order) plus the grand totals."""
    subjects: List[SubjectResult] = field(default_factory=list)
    grand_score: float = 0.0
    grand_max_score: float = 0.0
    grand_correct: int = 0
    grand_attempted: int = 0

    @property
    def total_score_pct(self) -> float:
        return ratio_pct(self.grand_score, self.grand_max_score)

    @property
    def total_accuracy_pct(self) -> float:
        return ratio_pct(self.grand_correct, self.grand_attempted)


def score_subject(config: MarkingConfig, raw: SubjectRaw) -> SubjectResult:
    """Derive one subject's percentages under the given marking scheme."""
    raw_score = subject_raw_score(raw.correct, raw.attempted, config.points_correct,
                                  config.points_wrong, config.negative)
    max_score = subject_max_score(raw.total, config.points_correct)
    return SubjectResult(
        attempts_pct=ratio_pct(raw.attempted, raw.total),
        accuracy_pct=ratio_pct(raw.correct, raw.attempted),
        score_pct=ratio_pct(raw_score, max_score),
        raw_score=raw_score,
        max_score=max_score,
    )


def aggregate(config: MarkingConfig, subjects: Iterable[SubjectRaw]) -> AggregateResult:
    """
    Fold subjects into per-subject and grand statistics.

    Zero subjects leaves every sum at zero, so both grand percentages
    resolve to 0.0.
    """
    result = AggregateResult()
    for raw in subjects:
        subject = score_subject(config, raw)
        result.subjects.append(subject)
        result.grand_score += subject.raw_score
        result.grand_max_score += subject.max_score
        result.grand_correct += raw.correct
        result.grand_attempted += raw.attempted
    return result
