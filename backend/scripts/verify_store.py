import os
import sys
import tempfile
import uuid
from dataclasses import replace

BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from quizflare.core.config import load_settings
from quizflare.core.ids import now_ms
from quizflare.schemas.quiz import LeaderboardEntry, Question, QuestionType, Quiz
from quizflare.services.data_service import DataService
from quizflare.services.provider_factory import build_store


def main() -> None:
    # the leaderboard is append-only, so the check runs against a scratch store
    with tempfile.TemporaryDirectory() as scratch_dir:
        settings = replace(
            load_settings(),
            data_dir=scratch_dir,
            database_url=f"sqlite:///{os.path.join(scratch_dir, 'verify.db')}",
        )
        run_checks(DataService(build_store(settings)))


def run_checks(data_service: DataService) -> None:
    marker = uuid.uuid4().hex[:8]
    creator_id = data_service.get_or_create_creator_id()

    quiz = Quiz(
        id=f"quiz_verify_{marker}",
        creator_id=creator_id,
        subject="Store check",
        questions=[
            Question(
                id=f"q_verify_{marker}",
                type=QuestionType.MULTIPLE_CHOICE,
                text="Sample question?",
                options=["A", "B", "C", "D"],
                correct_answer_index=0,
            )
        ],
        created_at=now_ms(),
    )
    data_service.save_quiz(quiz)
    updated = data_service.increment_participation_count(quiz.id)
    data_service.save_leaderboard_entry(
        LeaderboardEntry(
            id=f"le_verify_{marker}",
            participant_name="verify",
            quiz_id=quiz.id,
            quiz_title=quiz.subject,
            score=1,
            total_questions=1,
            accuracy=100,
        )
    )

    loaded = data_service.get_quiz(quiz.id)
    entries = [entry for entry in data_service.get_leaderboard() if entry.quiz_id == quiz.id]
    data_service.delete_quiz(quiz.id)

    print(
        "quiz_id={quiz_id} participation={participation} leaderboard_entries={entries} creator_id={creator_id}".format(
            quiz_id=loaded.id if loaded else None,
            participation=updated.participation_count if updated else None,
            entries=len(entries),
            creator_id=creator_id,
        )
    )


if __name__ == "__main__":
    main()
