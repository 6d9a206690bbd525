"""
Grading of practice submissions.

`grade_answers` is the pure step: given the submitted answers and the
question documents they refer to, it produces the overall score, the
per-topic breakdown and a snapshot of every question as it was at grading
time. `GradingEngine` adds validation and the question lookup around it.
"""

import logging
import math
from typing import Dict, List, Mapping, Sequence

from ..models.test_result import (
    AnswerIn,
    GradingResult,
    PracticeSubmission,
    QuestionSnapshot,
    TopicResult,
)
from ..utils.errors import ValidationFailure

logger = logging.getLogger(__name__)

NOT_FOUND_TEXT = "[question not found]"
DEFAULT_TOPIC = "General"


def round_half_up(value: float) -> int:
    """Round .5 upwards (12.5 -> 13), unlike the builtin round()."""
    return int(math.floor(value + 0.5))


def percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return round_half_up(100 * part / whole)


def question_topics(question: dict) -> List[str]:
    topics = question.get("topics") or []
    if topics:
        return list(topics)
    return [question.get("category") or DEFAULT_TOPIC]


def grade_answers(answers: Sequence[AnswerIn], questions_by_id: Mapping[str, dict]) -> GradingResult:
    correct_count = 0
    correct_answers_map: Dict[str, int] = {}
    topic_agg: Dict[str, Dict[str, int]] = {}
    snapshot: List[QuestionSnapshot] = []

    for answer in answers:
        qid = str(answer.question_id)
        question = questions_by_id.get(qid)

        if question is None:
            # keeps one snapshot entry per submitted answer
            snapshot.append(QuestionSnapshot(id=qid, text=NOT_FOUND_TEXT))
            continue

        correct_index = question.get("correct_index")
        correct_answers_map[qid] = correct_index
        is_correct = (
            answer.selected_index is not None
            and correct_index is not None
            and answer.selected_index == correct_index
        )
        if is_correct:
            correct_count += 1

        for topic in question_topics(question):
            agg = topic_agg.setdefault(topic, {"correct": 0, "total": 0})
            agg["total"] += 1
            if is_correct:
                agg["correct"] += 1

        snapshot.append(QuestionSnapshot(
            id=str(question.get("_id", qid)),
            text=question.get("text"),
            options=question.get("options") or [],
            correct_index=correct_index,
            explanation=question.get("explanation") or "",
            topics=question.get("topics") or [],
        ))

    topic_results = [
        TopicResult(
            name=name,
            correct=agg["correct"],
            total=agg["total"],
            pct=percent(agg["correct"], agg["total"]),
        )
        for name, agg in topic_agg.items()
    ]
    # stable: equal percentages keep first-seen order
    topic_results.sort(key=lambda t: t.pct, reverse=True)

    total = len(answers)
    return GradingResult(
        total=total,
        correct_answers=correct_count,
        wrong_answers=total - correct_count,
        score=percent(correct_count, total),
        topic_results=topic_results,
        correct_answers_map=correct_answers_map,
        questions_snapshot=snapshot,
    )


def validate_submission(submission: PracticeSubmission):
    if not submission.category or not isinstance(submission.answers, list):
        raise ValidationFailure("Missing required fields (category and answers array)")


def parse_answers(raw_answers: list) -> List[AnswerIn]:
    """
    Read each submitted entry as an answer. Entries that are not objects
    carry no question id, so they grade as unresolved.
    """
    answers = []
    for entry in raw_answers:
        if isinstance(entry, AnswerIn):
            answers.append(entry)
        else:
            answers.append(AnswerIn.model_validate(entry if isinstance(entry, dict) else {}))
    return answers


class GradingEngine:
    def __init__(self, question_bank):
        self.question_bank = question_bank

    async def grade(self, submission: PracticeSubmission) -> GradingResult:
        validate_submission(submission)
        answers = parse_answers(submission.answers)
        questions = await self.question_bank.find_by_ids(
            str(answer.question_id) for answer in answers
        )
        result = grade_answers(answers, questions)
        logger.debug(
            f"graded {result.total} answers: {result.correct_answers} correct, "
            f"score {result.score}"
        )
        return result
