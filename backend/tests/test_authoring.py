import pytest

from quizflare.core.errors import QuizAccessError, QuizNotFoundError, QuizValidationError
from quizflare.schemas.quiz import QuestionType
from quizflare.services.authoring_service import (
    MAX_QUESTIONS,
    QuizDraft,
    delete_owned_quiz,
    load_draft,
)
from quizflare.services.data_service import CREATOR_ID_KEY


def _draft(build, count=5, subject="Geography"):
    return QuizDraft(subject=subject, questions=[build.mcq(text=f"Question {i}?") for i in range(count)])


def test_add_question_appends_blank_mcq():
    draft = QuizDraft()
    question = draft.add_question()

    assert question.type == QuestionType.MULTIPLE_CHOICE
    assert question.options == ["", "", "", ""]
    assert question.correct_answer_index == 0
    assert question.text == ""
    assert question.id.startswith("q_")
    assert draft.questions == [question]


def test_add_question_stops_at_max():
    draft = QuizDraft()
    for _ in range(MAX_QUESTIONS):
        assert draft.add_question() is not None
    assert draft.is_full
    assert draft.add_question() is None
    assert len(draft.questions) == MAX_QUESTIONS


def test_change_question_type_keeps_text_and_id():
    draft = QuizDraft()
    original = draft.add_question()
    draft.update_question(0, original.model_copy(update={"text": "Capital of France?"}))

    short = draft.change_question_type(0, QuestionType.SHORT_ANSWER)
    assert short.id == original.id
    assert short.text == "Capital of France?"
    assert short.correct_answer == ""
    assert short.options is None

    mcq = draft.change_question_type(0, QuestionType.MULTIPLE_CHOICE)
    assert mcq.options == ["", "", "", ""]
    assert mcq.correct_answer_index == 0
    assert mcq.correct_answer is None


def test_set_option(build):
    draft = QuizDraft()
    draft.add_question()
    updated = draft.set_option(0, 2, "Paris")
    assert updated.options == ["", "", "Paris", ""]
    assert draft.questions[0].options[2] == "Paris"

    draft.questions.append(build.short())
    with pytest.raises(QuizValidationError):
        draft.set_option(1, 0, "nope")


def test_remove_question(build):
    draft = _draft(build, count=2)
    removed = draft.remove_question(0)
    assert removed.text == "Question 0?"
    assert [question.text for question in draft.questions] == ["Question 1?"]


def test_append_generated_caps_at_max(build):
    draft = _draft(build, count=MAX_QUESTIONS - 2)
    added = draft.append_generated([build.short(), build.short(), build.short()])
    assert added == 2
    assert len(draft.questions) == MAX_QUESTIONS


@pytest.mark.parametrize(
    "subject,count,message",
    [
        ("  ", 5, "Subject is required."),
        ("Geography", 4, "A minimum of 5 questions is required."),
        ("Geography", 51, "A maximum of 50 questions is allowed."),
    ],
)
def test_validate_rejects(build, subject, count, message):
    draft = _draft(build, count=count, subject=subject)
    with pytest.raises(QuizValidationError) as excinfo:
        draft.validate()
    assert excinfo.value.message == message


def test_validate_rejects_blank_question_text(build):
    draft = _draft(build)
    draft.questions[3] = draft.questions[3].model_copy(update={"text": "   "})
    with pytest.raises(QuizValidationError) as excinfo:
        draft.validate()
    assert excinfo.value.message == "All questions must have text."
    assert excinfo.value.details == {"indexes": [3]}


def test_invalid_draft_is_not_saved(data_service, build):
    draft = _draft(build, count=4)
    with pytest.raises(QuizValidationError):
        draft.save(data_service)
    assert data_service.get_quizzes() == []


def test_save_new_quiz(data_service, build):
    draft = _draft(build)
    quiz = draft.save(data_service)

    assert quiz.id.startswith("quiz_")
    assert draft.quiz_id == quiz.id
    assert quiz.creator_id == data_service.get_creator_id()
    assert quiz.participation_count == 0
    assert quiz.created_at > 0
    assert data_service.get_quiz(quiz.id) == quiz


def test_save_edit_preserves_counters(data_service, build):
    quiz = _draft(build).save(data_service)
    data_service.increment_participation_count(quiz.id)
    data_service.increment_participation_count(quiz.id)

    draft = load_draft(data_service, quiz.id, data_service.get_creator_id())
    assert draft.is_editing
    draft.subject = "World Geography"
    saved = draft.save(data_service)

    assert saved.id == quiz.id
    assert saved.subject == "World Geography"
    assert saved.participation_count == 2
    assert saved.created_at == quiz.created_at
    assert len(data_service.get_quizzes()) == 1


def test_save_edit_of_foreign_quiz_is_rejected(data_service, store, build):
    quiz = _draft(build).save(data_service)
    store.set(CREATOR_ID_KEY, b"guest_1700000000000_other00")

    draft = QuizDraft(subject="Stolen", questions=quiz.questions, quiz_id=quiz.id)
    with pytest.raises(QuizAccessError):
        draft.save(data_service)
    assert data_service.get_quiz(quiz.id).subject == "Geography"


def test_load_draft_guards(data_service, build):
    quiz = _draft(build).save(data_service)

    with pytest.raises(QuizNotFoundError):
        load_draft(data_service, "quiz_missing", data_service.get_creator_id())
    with pytest.raises(QuizAccessError):
        load_draft(data_service, quiz.id, "guest_1700000000000_other00")
    with pytest.raises(QuizAccessError):
        load_draft(data_service, quiz.id, None)


def test_delete_owned_quiz(data_service, build):
    quiz = _draft(build).save(data_service)

    with pytest.raises(QuizAccessError):
        delete_owned_quiz(data_service, quiz.id, "guest_1700000000000_other00")
    delete_owned_quiz(data_service, quiz.id, data_service.get_creator_id())
    assert data_service.get_quiz(quiz.id) is None


def test_append_generated_reports_success(build):
    notices = []
    draft = QuizDraft(notify=notices.append)
    assert draft.append_generated([build.short(), build.mcq()]) == 2
    assert notices == ["2 questions generated successfully!"]

    full = QuizDraft(questions=[build.mcq() for _ in range(MAX_QUESTIONS)], notify=notices.append)
    assert full.append_generated([build.short()]) == 0
    assert notices == ["2 questions generated successfully!"]
