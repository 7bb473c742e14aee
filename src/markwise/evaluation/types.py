"""
Evaluation Types

Immutable records passed between the matcher, scorer, evaluators,
and aggregator.
"""

from typing import Dict, List, Optional, Any, Tuple
from dataclasses import dataclass, field, asdict
from enum import Enum

from ..core.exceptions import EvaluationCancelledError


class ScoreProvenance(str, Enum):
    """Where an awarded mark came from."""
    EXACT_MATCH = "exact_match"      # Normalized texts identical, no remote call
    REMOTE_SCORED = "remote_scored"  # Semantic scorer marked the answer
    DEGRADED = "degraded"            # Scorer failed, defaulted to zero


@dataclass(frozen=True)
class ModelAnswerEntry:
    """One question of the model answer key."""
    question: str
    answer: str
    max_mark: int

    def __post_init__(self):
        if self.max_mark < 0:
            raise ValueError(f"max_mark must be >= 0, got {self.max_mark}")


@dataclass(frozen=True)
class StudentAnswerEntry:
    """One extracted question/answer pair from a student's script."""
    question_label: str
    answer_text: str


@dataclass(frozen=True)
class StudentIdentity:
    """Opaque identity attached to a submission."""
    name: str = "Student"
    roll: str = ""
    email: str = "N/A"

    @property
    def display_name(self) -> str:
        if self.roll:
            return f"{self.name} ({self.roll})"
        return self.name


@dataclass(frozen=True)
class StudentSubmission:
    """A student's identity plus their answers, in extraction order."""
    student: StudentIdentity
    answers: Tuple[StudentAnswerEntry, ...]
    raw_text: str = ""


@dataclass(frozen=True)
class ScoreResult:
    """Outcome of scoring one answer."""
    awarded_marks: float
    explanation: str
    provenance: ScoreProvenance


@dataclass(frozen=True)
class EvaluationRecord:
    """Marked answer for one matched question."""
    question: str
    student_question: str
    student_answer: str
    correct_answer: str
    awarded_marks: float
    max_marks: int
    explanation: str
    provenance: ScoreProvenance = ScoreProvenance.REMOTE_SCORED

    def __post_init__(self):
        if not 0 <= self.awarded_marks <= self.max_marks:
            raise ValueError(
                f"awarded_marks {self.awarded_marks} outside [0, {self.max_marks}]"
            )

    @property
    def is_correct(self) -> bool:
        return self.awarded_marks == self.max_marks

    @property
    def status(self) -> str:
        """Correct, Partial, or Incorrect."""
        if self.is_correct:
            return "Correct"
        if self.awarded_marks > 0:
            return "Partial"
        return "Incorrect"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['provenance'] = self.provenance.value
        data['is_correct'] = self.is_correct
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EvaluationRecord":
        return cls(
            question=data['question'],
            student_question=data.get('student_question', data['question']),
            student_answer=data.get('student_answer', ''),
            correct_answer=data.get('correct_answer', ''),
            awarded_marks=data['awarded_marks'],
            max_marks=data['max_marks'],
            explanation=data.get('explanation', ''),
            provenance=ScoreProvenance(data.get('provenance', ScoreProvenance.REMOTE_SCORED.value)),
        )


@dataclass(frozen=True)
class StudentEvaluation:
    """All records produced for one student. Totals are derived from the records."""
    student: StudentIdentity
    records: Tuple[EvaluationRecord, ...] = ()
    error: Optional[str] = None
    partial: bool = False

    @property
    def total_score(self) -> float:
        return sum(r.awarded_marks for r in self.records)

    @property
    def total_possible(self) -> int:
        return sum(r.max_marks for r in self.records)

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'student': asdict(self.student),
            'records': [r.to_dict() for r in self.records],
            'total_score': self.total_score,
            'total_possible': self.total_possible,
            'error': self.error,
            'partial': self.partial,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StudentEvaluation":
        return cls(
            student=StudentIdentity(**data.get('student', {})),
            records=tuple(EvaluationRecord.from_dict(r) for r in data.get('records', [])),
            error=data.get('error'),
            partial=bool(data.get('partial', False)),
        )


@dataclass(frozen=True)
class BatchEvaluation:
    """Student evaluations in submission order."""
    students: Tuple[StudentEvaluation, ...] = ()
    cancelled: bool = False
    session_id: Optional[str] = None

    def __len__(self) -> int:
        return len(self.students)

    def __iter__(self):
        return iter(self.students)

    def __getitem__(self, index: int) -> StudentEvaluation:
        return self.students[index]

    def raise_if_cancelled(self) -> "BatchEvaluation":
        """Return self, or raise EvaluationCancelledError when the batch was cut short."""
        if self.cancelled:
            raise EvaluationCancelledError(
                f"Evaluation cancelled after {len(self.students)} students",
                completed_students=len(self.students),
            )
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            'session_id': self.session_id,
            'cancelled': self.cancelled,
            'students': [s.to_dict() for s in self.students],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BatchEvaluation":
        return cls(
            students=tuple(StudentEvaluation.from_dict(s) for s in data.get('students', [])),
            cancelled=bool(data.get('cancelled', False)),
            session_id=data.get('session_id'),
        )


@dataclass
class BatchProgress:
    """Progress tracking for a running batch."""
    total_students: int
    completed_students: int = 0
    failed_students: int = 0
    current_student: Optional[str] = None
    skipped_questions: int = 0
    degraded_questions: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def completion_percentage(self) -> float:
        if self.total_students == 0:
            return 0.0
        return (self.completed_students / self.total_students) * 100.0
