import httpx
import pytest

from quizflare.schemas.quiz import UserAnswer
from quizflare.services.gateways import AnswerEvaluationGateway
from quizflare.services.scoring_service import (
    SCORE_MESSAGES,
    calculate_accuracy,
    complimentary_message,
    evaluate_submission,
    score_session,
)
from quizflare.services.session_service import QuizSession, SessionSubmission


class RecordingEvaluator:
    def __init__(self, verdict=True):
        self.verdict = verdict
        self.calls = []

    def evaluate(self, user_answer, correct_answer):
        self.calls.append((user_answer, correct_answer))
        return self.verdict


class BrokenEvaluator:
    def evaluate(self, user_answer, correct_answer):
        raise RuntimeError("evaluator down")


def _submission(build, questions, answers, name="Alex"):
    quiz = build.quiz(questions, subject="Geography")
    return SessionSubmission(
        quiz=quiz,
        participant_name=name,
        questions=list(questions),
        answers=[UserAnswer(question_id=question_id, answer=value) for question_id, value in answers],
    )


def test_mcq_correct_and_unanswered_short(build, data_service):
    mcq = build.mcq(correct_index=1, question_id="q_1")
    short = build.short(question_id="q_2")
    evaluator = RecordingEvaluator()

    result = score_session(_submission(build, [mcq, short], [("q_1", 1)]), evaluator, data_service)

    assert result.score == 1
    assert result.total_questions == 2
    assert result.accuracy == 50
    assert [r.is_correct for r in result.results] == [True, False]
    assert evaluator.calls == []


def test_mcq_exact_index_match(build):
    questions = [
        build.mcq(correct_index=2, question_id="q_1"),
        build.mcq(correct_index=2, question_id="q_2"),
        build.mcq(correct_index=2, question_id="q_3"),
        build.mcq(correct_index=2, question_id="q_4"),
    ]
    submission = _submission(build, questions, [("q_1", 2), ("q_2", 1), ("q_4", "2")])

    results = evaluate_submission(submission, RecordingEvaluator())
    assert [r.is_correct for r in results] == [True, False, False, False]


def test_short_answers_go_to_evaluator_in_order(build):
    questions = [
        build.short(answer="Dhaka", question_id="q_1"),
        build.short(answer="Paris", question_id="q_2"),
    ]
    evaluator = RecordingEvaluator(verdict=True)
    submission = _submission(build, questions, [("q_2", "paris"), ("q_1", "ঢাকা")])

    results = evaluate_submission(submission, evaluator)
    assert [r.is_correct for r in results] == [True, True]
    assert evaluator.calls == [("ঢাকা", "Dhaka"), ("paris", "Paris")]


def test_blank_short_answer_is_incorrect(build):
    evaluator = RecordingEvaluator(verdict=True)
    submission = _submission(build, [build.short(question_id="q_1")], [("q_1", "   ")])
    results = evaluate_submission(submission, evaluator)
    assert results[0].is_correct is False
    assert evaluator.calls == []


@pytest.mark.parametrize("answer,expected", [("dhaka ", True), ("Chittagong", False)])
def test_short_answer_falls_back_when_evaluator_raises(build, answer, expected):
    submission = _submission(build, [build.short(answer="Dhaka", question_id="q_1")], [("q_1", answer)])
    results = evaluate_submission(submission, BrokenEvaluator())
    assert results[0].is_correct is expected


def test_gateway_fallback_when_endpoint_fails(build):
    notices = []
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(503)))
    gateway = AnswerEvaluationGateway("http://testserver/api", client=client, notify=notices.append)
    submission = _submission(build, [build.short(answer="Dhaka", question_id="q_1")], [("q_1", "Dhaka ")])

    results = evaluate_submission(submission, gateway)
    assert results[0].is_correct is True
    assert len(notices) == 1


def test_exactly_one_leaderboard_entry(build, data_service):
    questions = [build.mcq(question_id="q_1"), build.mcq(question_id="q_2"), build.mcq(question_id="q_3")]
    submission = _submission(build, questions, [("q_1", 1), ("q_2", 1)])

    result = score_session(submission, RecordingEvaluator(), data_service)

    entries = data_service.get_leaderboard()
    assert len(entries) == 1
    entry = entries[0]
    assert entry == result.entry
    assert entry.id.startswith("le_")
    assert entry.participant_name == "Alex"
    assert entry.quiz_id == submission.quiz.id
    assert entry.quiz_title == "Geography"
    assert (entry.score, entry.total_questions, entry.accuracy) == (2, 3, 67)
    assert result.message == complimentary_message(67)


def test_session_hand_off_flows_into_scoring(build, data_service):
    quiz = build.quiz([build.mcq(correct_index=1) for _ in range(5)])
    results = []
    evaluator = RecordingEvaluator()
    session = QuizSession(
        quiz,
        tick_interval=None,
        on_submit=lambda submission: results.append(score_session(submission, evaluator, data_service)),
    )
    session.start("Alex")
    for _ in range(5):
        session.answer(1)

    assert results[0].score == 5
    assert results[0].accuracy == 100
    assert results[0].message == SCORE_MESSAGES[100]
    assert len(data_service.get_leaderboard()) == 1


@pytest.mark.parametrize(
    "score,total,expected",
    [(0, 0, 0), (0, 5, 0), (1, 2, 50), (1, 3, 33), (2, 3, 67), (1, 8, 13), (5, 5, 100)],
)
def test_calculate_accuracy(score, total, expected):
    assert calculate_accuracy(score, total) == expected


def test_complimentary_message_thresholds():
    assert complimentary_message(100) == SCORE_MESSAGES[100]
    assert complimentary_message(89) == SCORE_MESSAGES[75]
    assert complimentary_message(0) == SCORE_MESSAGES[0]
    assert complimentary_message(10, {50: "Halfway"}) == ""
