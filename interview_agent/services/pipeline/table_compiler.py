"""Deterministic merge of the three question sets into the final interview table."""
import logging
from typing import Iterable, Optional

from interview_agent.schemas.interview import InterviewTable, Question, QuestionSet, QuestionType

logger = logging.getLogger(__name__)


def _tag(question_set: Optional[QuestionSet], question_type: QuestionType) -> list[Question]:
    if question_set is None:
        return []
    return [q.model_copy(update={"type": question_type}) for q in question_set.questions]


def compile_interview_table(
    general: Optional[QuestionSet],
    role: Optional[QuestionSet],
    resume: Optional[QuestionSet],
    mismatch_note: Optional[str],
    role_title: str,
) -> InterviewTable:
    """
    Merge general, role and resume questions, in that order, into one table.

    Every question is tagged with the collection it came from. Nothing is
    deduplicated, re-scored or reordered. Absent sets contribute no questions
    and an absent note becomes the empty string.
    """
    sections: Iterable[tuple[Optional[QuestionSet], QuestionType]] = (
        (general, QuestionType.GENERAL),
        (role, QuestionType.ROLE),
        (resume, QuestionType.RESUME),
    )
    questions: list[Question] = []
    for question_set, question_type in sections:
        questions.extend(_tag(question_set, question_type))

    table = InterviewTable(role=role_title, note=mismatch_note or "", questions=questions)
    logger.info(f"Compiled interview table for '{role_title}' with {len(questions)} questions")
    return table
