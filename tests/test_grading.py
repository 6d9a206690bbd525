"""
Tests for practice grading: score arithmetic, topic aggregation and
question snapshots.
"""

import pytest
from bson import ObjectId

from placement_prep.models.test_result import AnswerIn, PracticeSubmission
from placement_prep.services.grading import (
    NOT_FOUND_TEXT,
    GradingEngine,
    grade_answers,
    parse_answers,
    percent,
    question_topics,
    round_half_up,
)
from placement_prep.services.question_bank import QuestionBank
from placement_prep.utils.errors import ValidationFailure


def question(correct_index=0, options=("a", "b"), category="Aptitude", topics=None, **extra):
    doc = {
        "_id": ObjectId(),
        "text": "Question",
        "options": list(options),
        "correct_index": correct_index,
        "explanation": "because",
        "category": category,
        "difficulty": "Easy",
        "topics": list(topics) if topics else [],
    }
    doc.update(extra)
    return doc


def by_id(*questions):
    return {str(q["_id"]): q for q in questions}


def answer(q, selected):
    qid = q if isinstance(q, str) else str(q["_id"])
    return AnswerIn(question_id=qid, selected_index=selected)


class TestRounding:
    def test_half_rounds_up(self):
        assert round_half_up(12.5) == 13
        assert round_half_up(2.5) == 3
        assert round_half_up(62.4) == 62

    def test_percent_of_nothing_is_zero(self):
        assert percent(0, 0) == 0

    def test_percent_rounds_half_up(self):
        assert percent(1, 8) == 13
        assert percent(2, 3) == 67


class TestGradeAnswers:
    def test_ratio_scenario(self):
        """Two Ratios questions, one answered correctly."""
        q1 = question(correct_index=1, options=["a", "b", "c"], topics=["Ratios"])
        q2 = question(correct_index=0, options=["x", "y"], topics=["Ratios"])

        result = grade_answers([answer(q1, 1), answer(q2, 1)], by_id(q1, q2))

        assert result.total == 2
        assert result.correct_answers == 1
        assert result.wrong_answers == 1
        assert result.score == 50
        assert [t.model_dump() for t in result.topic_results] == [
            {"name": "Ratios", "correct": 1, "total": 2, "pct": 50}
        ]

    def test_null_selection_is_wrong_not_skipped(self):
        q1 = question(correct_index=0)
        q2 = question(correct_index=1)

        result = grade_answers([answer(q1, None), answer(q2, 1)], by_id(q1, q2))

        assert result.total == 2
        assert result.correct_answers == 1
        assert result.wrong_answers == 1
        assert result.score == 50
        assert result.topic_results[0].total == 2

    def test_all_unanswered_scores_zero(self):
        q1 = question(correct_index=0)
        result = grade_answers([answer(q1, None)], by_id(q1))
        assert result.correct_answers == 0
        assert result.wrong_answers == 1
        assert result.score == 0

    def test_float_selection_compares_numerically(self):
        q1 = question(correct_index=1)
        result = grade_answers([answer(q1, 1.0)], by_id(q1))
        assert result.correct_answers == 1

    def test_no_answers(self):
        result = grade_answers([], {})
        assert result.total == 0
        assert result.correct_answers == 0
        assert result.wrong_answers == 0
        assert result.score == 0
        assert result.topic_results == []
        assert result.questions_snapshot == []

    def test_unknown_question_gets_placeholder(self):
        q1 = question(correct_index=0, topics=["Ratios"])
        missing = str(ObjectId())

        result = grade_answers([answer(missing, 0), answer(q1, 0)], by_id(q1))

        # counted in the total but never correct
        assert result.total == 2
        assert result.correct_answers == 1
        assert result.wrong_answers == 1
        assert result.score == 50
        assert missing not in result.correct_answers_map
        assert result.topic_results[0].total == 1

        placeholder = result.questions_snapshot[0]
        assert placeholder.id == missing
        assert placeholder.text == NOT_FOUND_TEXT
        assert placeholder.options == []
        assert placeholder.correct_index is None
        assert placeholder.explanation == ""

    def test_snapshot_follows_submission_order(self):
        q1 = question(text="first", correct_index=0)
        q2 = question(text="second", correct_index=1, explanation="")

        result = grade_answers([answer(q2, 0), answer(q1, 0)], by_id(q1, q2))

        assert [s.text for s in result.questions_snapshot] == ["second", "first"]
        assert result.questions_snapshot[0].correct_index == 1
        assert result.questions_snapshot[1].explanation == "because"
        assert result.correct_answers_map == {str(q1["_id"]): 0, str(q2["_id"]): 1}

    def test_question_counts_towards_every_topic(self):
        q1 = question(correct_index=0, topics=["Graphs", "Data Structures"])
        q2 = question(correct_index=0, topics=["Data Structures"])

        result = grade_answers([answer(q1, 0), answer(q2, 1)], by_id(q1, q2))
        topics = {t.name: t for t in result.topic_results}

        assert topics["Graphs"].correct == 1
        assert topics["Graphs"].total == 1
        assert topics["Data Structures"].correct == 1
        assert topics["Data Structures"].total == 2
        assert topics["Data Structures"].pct == 50

    def test_topics_sorted_by_percentage_with_stable_ties(self):
        qa1 = question(correct_index=0, topics=["A"])
        qa2 = question(correct_index=0, topics=["A"])
        qb = question(correct_index=0, topics=["B"])
        qc1 = question(correct_index=0, topics=["C"])
        qc2 = question(correct_index=0, topics=["C"])

        result = grade_answers(
            [answer(qa1, 0), answer(qa2, 1), answer(qb, 0), answer(qc1, 1), answer(qc2, 0)],
            by_id(qa1, qa2, qb, qc1, qc2),
        )

        assert [t.name for t in result.topic_results] == ["B", "A", "C"]
        assert [t.pct for t in result.topic_results] == [100, 50, 50]

    def test_topic_falls_back_to_category(self):
        q1 = question(correct_index=0, category="Verbal")
        result = grade_answers([answer(q1, 0)], by_id(q1))
        assert result.topic_results[0].name == "Verbal"
        # stored topics are snapshotted as-is
        assert result.questions_snapshot[0].topics == []

    def test_topic_falls_back_to_general(self):
        assert question_topics({"topics": [], "category": None}) == ["General"]
        assert question_topics({}) == ["General"]

    def test_score_invariants_hold(self):
        questions = [question(correct_index=i % 2) for i in range(7)]
        answers = [answer(q, 0) for q in questions]

        result = grade_answers(answers, by_id(*questions))

        assert result.total == result.correct_answers + result.wrong_answers
        assert result.correct_answers == 4
        assert result.score == round_half_up(100 * 4 / 7)


class TestAnswerIn:
    def test_non_numeric_selection_is_unanswered(self):
        parsed = AnswerIn.model_validate({"questionId": "abc", "selectedIndex": "1"})
        assert parsed.selected_index is None

    def test_boolean_selection_is_unanswered(self):
        parsed = AnswerIn.model_validate({"questionId": "abc", "selectedIndex": True})
        assert parsed.selected_index is None

    def test_camel_case_fields(self):
        parsed = AnswerIn.model_validate({"questionId": "abc", "selectedIndex": 2})
        assert parsed.question_id == "abc"
        assert parsed.selected_index == 2

    def test_numeric_question_id_is_stringified(self):
        assert AnswerIn.model_validate({"questionId": 42}).question_id == "42"

    def test_missing_question_id_is_accepted(self):
        assert AnswerIn.model_validate({"selectedIndex": 0}).question_id is None


class TestParseAnswers:
    def test_entries_that_are_not_objects_carry_no_id(self):
        answers = parse_answers([{"questionId": "abc", "selectedIndex": 1}, "junk", 7, None])

        assert [a.question_id for a in answers] == ["abc", None, None, None]
        assert answers[0].selected_index == 1

    def test_missing_ids_grade_as_placeholders(self):
        answers = parse_answers([{"selectedIndex": 0}, {"questionId": None, "selectedIndex": 0}])

        result = grade_answers(answers, {})

        assert result.total == 2
        assert result.correct_answers == 0
        assert [s.text for s in result.questions_snapshot] == [NOT_FOUND_TEXT, NOT_FOUND_TEXT]


class ExplodingBank:
    async def find_by_ids(self, ids):
        raise AssertionError("question bank must not be queried")


class TestGradingEngine:
    async def test_missing_category_rejected_before_lookup(self):
        engine = GradingEngine(ExplodingBank())
        submission = PracticeSubmission(answers=[])
        with pytest.raises(ValidationFailure):
            await engine.grade(submission)

    async def test_missing_answers_rejected_before_lookup(self):
        engine = GradingEngine(ExplodingBank())
        submission = PracticeSubmission(category="Aptitude")
        with pytest.raises(ValidationFailure):
            await engine.grade(submission)

    async def test_non_list_answers_rejected_before_lookup(self):
        engine = GradingEngine(ExplodingBank())
        submission = PracticeSubmission(category="Aptitude", answers={"questionId": "abc"})
        with pytest.raises(ValidationFailure):
            await engine.grade(submission)

    async def test_grades_against_stored_questions(self, db, add_question):
        q1 = add_question(options=["a", "b", "c"], correct_index=1, topics=["Ratios"])
        q2 = add_question(options=["x", "y"], correct_index=0, topics=["Ratios"])
        engine = GradingEngine(QuestionBank(db))

        result = await engine.grade(PracticeSubmission(
            category="Aptitude",
            difficulty="Easy",
            answers=[
                AnswerIn(question_id=q1, selected_index=1),
                AnswerIn(question_id=q2, selected_index=1),
                AnswerIn(question_id="not-an-id", selected_index=0),
            ],
        ))

        assert result.total == 3
        assert result.correct_answers == 1
        assert result.score == 33
        assert result.correct_answers_map == {q1: 1, q2: 0}
        assert result.questions_snapshot[2].text == NOT_FOUND_TEXT
