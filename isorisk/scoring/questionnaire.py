"""
Supply-chain questionnaire scoring.

Each question carries a fixed point table; unanswered questions count as
"unknown". Answers for ids outside the question set are ignored.
"""

import logging
from typing import Dict, Mapping, Optional, Sequence, Union

from isorisk.exceptions import InvalidInputError
from shared.schemas.assessment import Answer, SupplyChainQuestion


logger = logging.getLogger(__name__)

AnswerValue = Union[Answer, str]


def parse_answer(value: AnswerValue) -> Answer:
    """Coerce an answer given as enum member or string."""
    if isinstance(value, Answer):
        return value
    try:
        return Answer(str(value).strip().lower())
    except ValueError:
        raise InvalidInputError(
            f"unrecognized answer {value!r}; expected yes, no or unknown"
        ) from None


def resolve_answers(
    answers: Optional[Mapping[str, AnswerValue]],
    questions: Sequence[SupplyChainQuestion],
) -> Dict[str, Answer]:
    """
    One answer per question id, defaulting to unknown.

    Raises:
        InvalidInputError: If a supplied answer is not yes/no/unknown
    """
    answers = answers or {}
    known = {q.question_id for q in questions}
    for question_id in answers:
        if question_id not in known:
            logger.debug(f"Ignoring answer for unknown question {question_id!r}")

    return {
        q.question_id: parse_answer(answers.get(q.question_id, Answer.UNKNOWN))
        for q in questions
    }


def supply_chain_score(
    answers: Optional[Mapping[str, AnswerValue]],
    questions: Sequence[SupplyChainQuestion],
) -> int:
    """Sum of each question's points for its (resolved) answer."""
    resolved = resolve_answers(answers, questions)
    return sum(q.points_for(resolved[q.question_id]) for q in questions)
