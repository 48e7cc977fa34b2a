from enum import Enum
from typing import List, Sequence, Union

from quizflare.schemas.quiz import QuestionType, Quiz

ALL_SUBJECTS = "All"


class QuizFilter(str, Enum):
    ALL = "All"
    MCQ = "MCQ"
    SHORT_ANSWER = "Short Questions"
    MIXED = "Mixed"


class QuizSort(str, Enum):
    NEWEST = "Newest First"
    OLDEST = "Oldest First"
    POPULAR = "Most Popular"


def list_subjects(quizzes: Sequence[Quiz]) -> List[str]:
    subjects = [ALL_SUBJECTS]
    for quiz in quizzes:
        if quiz.subject not in subjects:
            subjects.append(quiz.subject)
    return subjects


def quiz_kind(quiz: Quiz) -> QuizFilter:
    types = {question.type for question in quiz.questions}
    has_mcq = QuestionType.MULTIPLE_CHOICE in types
    has_short = QuestionType.SHORT_ANSWER in types
    if has_mcq and has_short:
        return QuizFilter.MIXED
    if has_mcq:
        return QuizFilter.MCQ
    return QuizFilter.SHORT_ANSWER


def browse_quizzes(
    quizzes: Sequence[Quiz],
    subject: str = ALL_SUBJECTS,
    filter_type: Union[QuizFilter, str] = QuizFilter.ALL,
    sort: Union[QuizSort, str] = QuizSort.NEWEST,
) -> List[Quiz]:
    filter_type = QuizFilter(filter_type)
    sort = QuizSort(sort)

    result = list(quizzes)
    if subject != ALL_SUBJECTS:
        result = [quiz for quiz in result if quiz.subject == subject]
    if filter_type != QuizFilter.ALL:
        result = [quiz for quiz in result if quiz.questions and quiz_kind(quiz) == filter_type]

    if sort == QuizSort.OLDEST:
        result.sort(key=lambda quiz: quiz.created_at)
    elif sort == QuizSort.POPULAR:
        result.sort(key=lambda quiz: quiz.participation_count, reverse=True)
    else:
        result.sort(key=lambda quiz: quiz.created_at, reverse=True)
    return result
