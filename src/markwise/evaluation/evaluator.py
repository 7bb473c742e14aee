"""
Student Evaluation

Evaluates one student's full answer set: match each question, score the
matched ones, and collect the records. A failure on one question skips only
that question.
"""

from typing import List, Optional, Sequence

from .index import QuestionIndex
from .matcher import QuestionMatcher
from .normalizer import normalize
from .scorer import AnswerScorer
from .types import (
    EvaluationRecord,
    ModelAnswerEntry,
    ScoreProvenance,
    StudentAnswerEntry,
    StudentEvaluation,
    StudentIdentity,
    BatchProgress,
)
from ..core.exceptions import QuestionProcessingError
from ..utils.async_helpers import CancellationToken
from ..utils.logging import get_evaluation_logger


class StudentEvaluator:
    """Evaluates a single student's answers against the model answer key."""

    def __init__(self, matcher: QuestionMatcher, scorer: AnswerScorer):
        """
        Initialize the evaluator.

        Args:
            matcher: Resolves question labels to model entries
            scorer: Marks matched answers
        """
        self.matcher = matcher
        self.scorer = scorer

    async def evaluate(self, student_entries: Sequence[StudentAnswerEntry],
                       index: Optional[QuestionIndex],
                       model_entries: Sequence[ModelAnswerEntry],
                       student: Optional[StudentIdentity] = None,
                       cancel_token: Optional[CancellationToken] = None,
                       progress: Optional[BatchProgress] = None,
                       session_id: Optional[str] = None) -> StudentEvaluation:
        """
        Evaluate every answer a student gave.

        Args:
            student_entries: Extracted question/answer pairs, in order
            index: Pre-built question index (None for legacy matching)
            model_entries: Model answer key
            student: Identity to attach to the result
            cancel_token: Stops evaluation before the next question when cancelled
            progress: Batch progress to update with skip/degrade counts
            session_id: Evaluation session identifier added to log context

        Returns:
            StudentEvaluation holding one record per matched question; ``partial``
            is set when cancellation stopped it before the last answer
        """
        student = student or StudentIdentity()
        log = get_evaluation_logger(student=student.display_name, session_id=session_id)
        records: List[EvaluationRecord] = []
        partial = False

        for entry in student_entries:
            if cancel_token is not None and cancel_token.is_cancelled:
                log.info(f"Cancelled after {len(records)} questions")
                partial = True
                break

            try:
                record = await self._evaluate_entry(entry, index, model_entries)
            except Exception as e:
                error = QuestionProcessingError(
                    f"Error processing question: {str(e)}",
                    question_label=entry.question_label,
                    student=student.display_name,
                )
                log.error(str(error), exc_info=True,
                          extra={'question_label': entry.question_label})
                if progress is not None:
                    progress.skipped_questions += 1
                    progress.errors.append(f"{student.display_name}: {entry.question_label}: {str(e)}")
                continue

            if record is None:
                log.debug(f"No model entry for '{entry.question_label}', skipped")
                if progress is not None:
                    progress.skipped_questions += 1
                continue

            if progress is not None and record.provenance == ScoreProvenance.DEGRADED:
                progress.degraded_questions += 1
            records.append(record)

        evaluation = StudentEvaluation(student=student, records=tuple(records), partial=partial)
        log.info(
            f"Evaluated {len(records)}/{len(student_entries)} questions, "
            f"score {evaluation.total_score}/{evaluation.total_possible}"
        )
        return evaluation

    async def _evaluate_entry(self, entry: StudentAnswerEntry,
                              index: Optional[QuestionIndex],
                              model_entries: Sequence[ModelAnswerEntry]) -> Optional[EvaluationRecord]:
        match = await self.matcher.match(entry.question_label, index, model_entries)
        if not match.found:
            return None

        model_entry = match.entry
        student_answer = normalize(entry.answer_text)
        model_answer = normalize(model_entry.answer)

        result = await self.scorer.score(student_answer, model_answer, model_entry.max_mark)

        return EvaluationRecord(
            question=model_entry.question,
            student_question=entry.question_label,
            student_answer=student_answer,
            correct_answer=model_answer,
            awarded_marks=result.awarded_marks,
            max_marks=model_entry.max_mark,
            explanation=result.explanation,
            provenance=result.provenance,
        )
