"""
Input Loading

Loading and validation of model answer keys and student submissions.
Model keys load through pandas so JSON, YAML and CSV sources share one
column-normalization path.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Union
import pandas as pd
import yaml

from markwise.core.exceptions import ValidationError
from markwise.evaluation.types import (
    ModelAnswerEntry,
    StudentAnswerEntry,
    StudentIdentity,
    StudentSubmission,
)
from markwise.utils.logging import get_logger

logger = get_logger(__name__)

REQUIRED_KEY_COLUMNS = ['question', 'answer', 'mark']

# Common alternative column names
COLUMN_MAPPING = {
    'question_text': 'question',
    'model_answer': 'answer',
    'correct_answer': 'answer',
    'marks': 'mark',
    'max_mark': 'mark',
    'max_marks': 'mark',
}


def _read_structured_file(path: Path) -> Any:
    """Read a JSON or YAML document."""
    suffix = path.suffix.lower()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            if suffix in ('.yaml', '.yml'):
                return yaml.safe_load(f)
            if suffix == '.json':
                return json.load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValidationError(f"Failed to parse {path}: {str(e)}", field_name="path",
                              invalid_value=str(path)) from e
    except OSError as e:
        raise ValidationError(f"Failed to read {path}: {str(e)}", field_name="path",
                              invalid_value=str(path)) from e

    raise ValidationError(f"Unsupported file type '{suffix}' for {path}",
                          field_name="path", invalid_value=str(path))


def _parse_mark(value: Any, row: int) -> int:
    """Coerce a mark to a non-negative integer."""
    if isinstance(value, bool) or value is None or (isinstance(value, float) and pd.isna(value)):
        raise ValidationError(f"Question {row}: mark is missing", field_name="mark",
                              invalid_value=value)
    try:
        number = float(str(value).strip())
    except ValueError as e:
        raise ValidationError(f"Question {row}: mark '{value}' is not a number",
                              field_name="mark", invalid_value=value) from e
    if not number.is_integer():
        raise ValidationError(f"Question {row}: mark '{value}' is not a whole number",
                              field_name="mark", invalid_value=value)
    if number < 0:
        raise ValidationError(f"Question {row}: mark must not be negative",
                              field_name="mark", invalid_value=value)
    return int(number)


def model_key_frame(raw: Any) -> pd.DataFrame:
    """Turn a raw model key document into a DataFrame with canonical column names."""
    if isinstance(raw, dict):
        if 'data' in raw:
            raw = raw['data']
        elif 'questions' in raw:
            raw = raw['questions']

    if isinstance(raw, pd.DataFrame):
        df = raw.copy()
    elif isinstance(raw, list):
        if not all(isinstance(item, dict) for item in raw):
            raise ValidationError("Model answer key entries must be objects",
                                  field_name="model_key")
        df = pd.DataFrame(raw)
    else:
        raise ValidationError("Model answer key must be a list of questions or a document "
                              "with a 'data' list", field_name="model_key",
                              invalid_value=type(raw).__name__)

    df.columns = [str(c).strip().lower() for c in df.columns]
    for old_col, new_col in COLUMN_MAPPING.items():
        if old_col in df.columns and new_col not in df.columns:
            df = df.rename(columns={old_col: new_col})

    return df


def parse_model_key(raw: Any) -> List[ModelAnswerEntry]:
    """
    Validate a model answer key.

    Args:
        raw: List of ``{question, answer, mark}`` objects, a ``{"data": [...]}``
            document, or a DataFrame with those columns

    Returns:
        ModelAnswerEntry list in key order

    Raises:
        ValidationError: If the key is empty or any entry is malformed
    """
    df = model_key_frame(raw)
    if df.empty:
        raise ValidationError("Model answer key is empty", field_name="model_key")

    missing_columns = [col for col in REQUIRED_KEY_COLUMNS if col not in df.columns]
    if missing_columns:
        raise ValidationError(
            f"Missing required columns: {missing_columns}. Available: {list(df.columns)}",
            field_name="model_key"
        )

    entries = []
    for row, record in enumerate(df[REQUIRED_KEY_COLUMNS].to_dict('records'), start=1):
        question = record['question']
        if question is None or (isinstance(question, float) and pd.isna(question)) \
                or not str(question).strip():
            raise ValidationError(f"Question {row}: question text is missing",
                                  field_name="question")

        answer = record['answer']
        if answer is None or (isinstance(answer, float) and pd.isna(answer)):
            answer = ""

        entries.append(ModelAnswerEntry(
            question=str(question),
            answer=str(answer),
            max_mark=_parse_mark(record['mark'], row),
        ))

    logger.info(f"Loaded model answer key with {len(entries)} questions")
    return entries


def load_model_key(path: Union[str, Path]) -> List[ModelAnswerEntry]:
    """Load a model answer key from a JSON, YAML or CSV file."""
    path = Path(path)
    if not path.exists():
        raise ValidationError(f"Model answer key not found: {path}", field_name="path",
                              invalid_value=str(path))

    if path.suffix.lower() == '.csv':
        try:
            raw = pd.read_csv(path, dtype=str, keep_default_na=False)
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise ValidationError(f"Failed to parse {path}: {str(e)}", field_name="path",
                                  invalid_value=str(path)) from e
    else:
        raw = _read_structured_file(path)

    return parse_model_key(raw)


def _parse_identity(raw: Any) -> StudentIdentity:
    if raw is None:
        return StudentIdentity()
    if not isinstance(raw, dict):
        raise ValidationError("Student identity must be an object", field_name="student",
                              invalid_value=raw)
    defaults = StudentIdentity()
    return StudentIdentity(
        name=str(raw.get('name') or defaults.name),
        roll=str(raw.get('roll') or raw.get('roll_number') or defaults.roll),
        email=str(raw.get('email') or defaults.email),
    )


def parse_submission(raw: Dict[str, Any], position: int = 0) -> StudentSubmission:
    """Validate one student's submission."""
    if not isinstance(raw, dict):
        raise ValidationError(f"Submission {position}: must be an object",
                              field_name="submission")

    qa_dict = raw.get('qa_dict', raw.get('answers', {}))
    if qa_dict is None:
        qa_dict = {}
    if not isinstance(qa_dict, dict):
        raise ValidationError(f"Submission {position}: qa_dict must map question labels to answers",
                              field_name="qa_dict", invalid_value=type(qa_dict).__name__)

    answers = tuple(
        StudentAnswerEntry(question_label=str(label),
                           answer_text="" if answer is None else str(answer))
        for label, answer in qa_dict.items()
    )
    return StudentSubmission(
        student=_parse_identity(raw.get('student')),
        answers=answers,
        raw_text=str(raw.get('raw_text') or ''),
    )


def parse_submissions(raw: Any) -> List[StudentSubmission]:
    """
    Validate a list of student submissions.

    Each submission is ``{"student": {name, roll, email}, "qa_dict": {label: answer}}``.

    Raises:
        ValidationError: If the list is empty or a submission is malformed
    """
    if isinstance(raw, dict) and 'students' in raw:
        raw = raw['students']
    if not isinstance(raw, list):
        raise ValidationError("Student submissions must be a list", field_name="students",
                              invalid_value=type(raw).__name__)
    if not raw:
        raise ValidationError("No student data found", field_name="students")

    submissions = [parse_submission(item, position) for position, item in enumerate(raw, start=1)]
    logger.info(f"Loaded {len(submissions)} student submissions")
    return submissions


def load_submissions(path: Union[str, Path]) -> List[StudentSubmission]:
    """Load student submissions from a JSON or YAML file."""
    path = Path(path)
    if not path.exists():
        raise ValidationError(f"Submissions file not found: {path}", field_name="path",
                              invalid_value=str(path))
    return parse_submissions(_read_structured_file(path))
