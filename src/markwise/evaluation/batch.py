"""
Batch Evaluation

Runs the student evaluator over every submission, strictly one student at a
time so only one remote scoring call is ever outstanding.
"""

from typing import Callable, List, Optional, Sequence

from .evaluator import StudentEvaluator
from .index import QuestionIndex, build_index
from .matcher import QuestionMatcher
from .scorer import AnswerScorer
from .types import (
    BatchEvaluation,
    BatchProgress,
    ModelAnswerEntry,
    StudentEvaluation,
    StudentSubmission,
)
from ..core.config import EvaluationConfig
from ..core.exceptions import ValidationError
from ..scoring.base import ScorerClient
from ..utils.async_helpers import CancellationToken
from ..utils.logging import get_logger, PerformanceTimer

logger = get_logger(__name__)

ProgressCallback = Callable[[BatchProgress], None]


def validate_inputs(students: Sequence[StudentSubmission],
                    model_entries: Sequence[ModelAnswerEntry]) -> None:
    """Raise ValidationError when there is nothing to evaluate."""
    if not model_entries:
        raise ValidationError("Model answer key is missing or empty", field_name="model_entries")
    if not students:
        raise ValidationError("No student submissions to evaluate", field_name="students")


class BatchEvaluator:
    """Evaluates a batch of students sequentially."""

    def __init__(self, student_evaluator: StudentEvaluator,
                 isolate_failures: bool = True):
        """
        Initialize the batch evaluator.

        Args:
            student_evaluator: Evaluator used for each student
            isolate_failures: Keep going when one student's evaluation raises;
                when False the exception aborts the batch
        """
        self.student_evaluator = student_evaluator
        self.isolate_failures = isolate_failures
        self.progress: Optional[BatchProgress] = None

    @classmethod
    def from_client(cls, client: ScorerClient,
                    config: Optional[EvaluationConfig] = None) -> "BatchEvaluator":
        """Wire matcher, scorer and evaluators around one scorer client."""
        config = config or EvaluationConfig()
        matcher = QuestionMatcher(comparator=client if config.legacy_question_matching else None)
        scorer = AnswerScorer(client)
        return cls(StudentEvaluator(matcher, scorer),
                   isolate_failures=config.isolate_student_failures)

    async def evaluate_batch(self, students: Sequence[StudentSubmission],
                             index: Optional[QuestionIndex],
                             model_entries: Sequence[ModelAnswerEntry],
                             cancel_token: Optional[CancellationToken] = None,
                             on_progress: Optional[ProgressCallback] = None,
                             session_id: Optional[str] = None) -> BatchEvaluation:
        """
        Evaluate all students in submission order.

        Args:
            students: Submissions to evaluate
            index: Pre-built question index; None selects legacy matching
            model_entries: Model answer key
            cancel_token: Stops the batch before the next student or question
            on_progress: Called after each student with the current progress
            session_id: Model key identifier carried onto the result

        Returns:
            BatchEvaluation in submission order; ``cancelled`` is set when the
            token fired before every student was evaluated

        Raises:
            ValidationError: If the model key or the student list is empty
        """
        validate_inputs(students, model_entries)

        self.progress = BatchProgress(total_students=len(students))
        results: List[StudentEvaluation] = []
        cancelled = False

        logger.info(f"Starting batch evaluation of {len(students)} students "
                    f"against {len(model_entries)} model questions")

        with PerformanceTimer(f"batch evaluation of {len(students)} students", logger):
            for submission in students:
                if cancel_token is not None and cancel_token.is_cancelled:
                    cancelled = True
                    break

                self.progress.current_student = submission.student.display_name
                try:
                    evaluation = await self.student_evaluator.evaluate(
                        submission.answers, index, model_entries,
                        student=submission.student,
                        cancel_token=cancel_token,
                        progress=self.progress,
                        session_id=session_id,
                    )
                except Exception as e:
                    if not self.isolate_failures:
                        raise
                    logger.error(f"Evaluation failed for {submission.student.display_name}: {str(e)}",
                                 exc_info=True)
                    self.progress.failed_students += 1
                    self.progress.errors.append(f"{submission.student.display_name}: {str(e)}")
                    evaluation = StudentEvaluation(student=submission.student, error=str(e))

                results.append(evaluation)
                self.progress.completed_students += 1
                if on_progress is not None:
                    on_progress(self.progress)

            # A token fired during the last student's questions leaves that student partial
            if cancel_token is not None and cancel_token.is_cancelled:
                cancelled = True

        if cancelled:
            logger.warning(f"Batch cancelled after {len(results)}/{len(students)} students"
                           + (f": {cancel_token.reason}" if cancel_token.reason else ""))

        return BatchEvaluation(students=tuple(results), cancelled=cancelled, session_id=session_id)


async def evaluate_batch(students: Sequence[StudentSubmission],
                         model_entries: Sequence[ModelAnswerEntry],
                         client: ScorerClient,
                         config: Optional[EvaluationConfig] = None,
                         cancel_token: Optional[CancellationToken] = None,
                         on_progress: Optional[ProgressCallback] = None,
                         session_id: Optional[str] = None) -> BatchEvaluation:
    """
    Build the index and evaluate a batch in one call.

    Legacy matching (``config.legacy_question_matching``) runs without an index.
    """
    config = config or EvaluationConfig()
    validate_inputs(students, model_entries)

    index = None if config.legacy_question_matching else build_index(model_entries)
    evaluator = BatchEvaluator.from_client(client, config)
    return await evaluator.evaluate_batch(
        students, index, model_entries,
        cancel_token=cancel_token, on_progress=on_progress, session_id=session_id,
    )
