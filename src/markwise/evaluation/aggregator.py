"""
Batch Aggregation

Derives batch statistics from a finished BatchEvaluation: average
percentage, best and worst students, grade distribution, and a leaderboard
whose entries point back into the unsorted batch.
"""

import statistics
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field, asdict

from .types import BatchEvaluation, EvaluationRecord, StudentEvaluation, StudentIdentity
from ..utils.logging import get_logger

logger = get_logger(__name__)

GOOD_THRESHOLD = 70.0
AVERAGE_THRESHOLD = 40.0


def percentage(score: float, total: float) -> float:
    """Score as a percentage of total; 0 when total is not positive."""
    if not total or total <= 0:
        return 0.0
    return (score / total) * 100


def grade_band(pct: float, good_threshold: float = GOOD_THRESHOLD,
               average_threshold: float = AVERAGE_THRESHOLD) -> str:
    """Classify a percentage as 'good', 'avg' or 'low'."""
    if pct >= good_threshold:
        return "good"
    if pct >= average_threshold:
        return "avg"
    return "low"


@dataclass(frozen=True)
class StudentScore:
    """One student's totals and percentage."""
    student: StudentIdentity
    score: float
    total: int
    pct: float


@dataclass(frozen=True)
class LeaderboardEntry:
    """Leaderboard row; ``original_index`` points into the unsorted batch."""
    rank: int
    original_index: int
    student: StudentIdentity
    score: float
    total: int
    pct: float


@dataclass
class GradeDistribution:
    """Count of students in each grade band."""
    good: int = 0
    avg: int = 0
    low: int = 0

    @property
    def total(self) -> int:
        return self.good + self.avg + self.low


@dataclass
class BatchStatistics:
    """Statistics derived from a BatchEvaluation."""
    total_students: int
    average: float
    best: Optional[StudentScore]
    worst: Optional[StudentScore]
    distribution: GradeDistribution
    leaderboard: List[LeaderboardEntry] = field(default_factory=list)
    median: float = 0.0
    std_dev: float = 0.0
    failed_students: int = 0
    partial_students: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class QuestionDetail:
    """Per-question row of a student report."""
    number: int
    question: str
    marks_obtained: float
    total_marks: int
    status: str
    explanation: str


@dataclass
class StudentReport:
    """Detail view of a single student's evaluation."""
    student: StudentIdentity
    obtained_marks: float
    total_marks: int
    percentage: float
    grade: str
    total_questions: int
    correct_answers: int
    questions: List[QuestionDetail] = field(default_factory=list)
    partial: bool = False


class BatchAggregator:
    """Computes statistics over a batch of student evaluations."""

    def __init__(self, good_threshold: float = GOOD_THRESHOLD,
                 average_threshold: float = AVERAGE_THRESHOLD):
        """
        Initialize the aggregator.

        Args:
            good_threshold: Minimum percentage counted as 'good'
            average_threshold: Minimum percentage counted as 'avg'
        """
        self.good_threshold = good_threshold
        self.average_threshold = average_threshold

    def aggregate(self, batch: BatchEvaluation) -> BatchStatistics:
        """
        Calculate statistics for a batch. The batch is not modified.

        Args:
            batch: Evaluated students in submission order

        Returns:
            BatchStatistics
        """
        scores = [self._student_score(s) for s in batch]
        percentages = [s.pct for s in scores]

        average = statistics.mean(percentages) if percentages else 0.0
        median = statistics.median(percentages) if percentages else 0.0
        std_dev = statistics.pstdev(percentages) if len(percentages) > 1 else 0.0

        # Strict comparisons: the first student seen keeps a tie
        best: Optional[StudentScore] = None
        worst: Optional[StudentScore] = None
        for score in scores:
            if best is None or score.pct > best.pct:
                best = score
            if worst is None or score.pct < worst.pct:
                worst = score

        distribution = GradeDistribution()
        for pct in percentages:
            band = grade_band(pct, self.good_threshold, self.average_threshold)
            setattr(distribution, band, getattr(distribution, band) + 1)

        stats = BatchStatistics(
            total_students=len(scores),
            average=average,
            best=best,
            worst=worst,
            distribution=distribution,
            leaderboard=self.leaderboard(batch),
            median=median,
            std_dev=std_dev,
            failed_students=sum(1 for s in batch if s.failed),
            partial_students=sum(1 for s in batch if s.partial),
        )
        logger.debug(f"Aggregated {stats.total_students} students, average {average:.1f}%")
        return stats

    def leaderboard(self, batch: BatchEvaluation) -> List[LeaderboardEntry]:
        """Students by percentage, descending; equal percentages keep submission order."""
        indexed = [(i, self._student_score(s)) for i, s in enumerate(batch)]
        ordered = sorted(indexed, key=lambda item: item[1].pct, reverse=True)

        return [
            LeaderboardEntry(
                rank=rank,
                original_index=original_index,
                student=score.student,
                score=score.score,
                total=score.total,
                pct=score.pct,
            )
            for rank, (original_index, score) in enumerate(ordered, start=1)
        ]

    @staticmethod
    def resolve(batch: BatchEvaluation, entry: LeaderboardEntry) -> StudentEvaluation:
        """Return the StudentEvaluation a leaderboard entry was built from."""
        return batch[entry.original_index]

    def student_report(self, evaluation: StudentEvaluation) -> StudentReport:
        """Build the detail view for one student."""
        pct = percentage(evaluation.total_score, evaluation.total_possible)
        questions = [
            self._question_detail(number, record)
            for number, record in enumerate(evaluation.records, start=1)
        ]
        return StudentReport(
            student=evaluation.student,
            obtained_marks=evaluation.total_score,
            total_marks=evaluation.total_possible,
            percentage=pct,
            grade=grade_band(pct, self.good_threshold, self.average_threshold),
            total_questions=len(evaluation.records),
            correct_answers=sum(1 for r in evaluation.records if r.is_correct),
            questions=questions,
            partial=evaluation.partial,
        )

    @staticmethod
    def _student_score(evaluation: StudentEvaluation) -> StudentScore:
        return StudentScore(
            student=evaluation.student,
            score=evaluation.total_score,
            total=evaluation.total_possible,
            pct=percentage(evaluation.total_score, evaluation.total_possible),
        )

    @staticmethod
    def _question_detail(number: int, record: EvaluationRecord) -> QuestionDetail:
        return QuestionDetail(
            number=number,
            question=record.question or f"Question {number}",
            marks_obtained=record.awarded_marks,
            total_marks=record.max_marks,
            status=record.status,
            explanation=record.explanation or "No explanation provided.",
        )
