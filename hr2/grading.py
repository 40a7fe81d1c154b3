"""Multiple-choice grading and competency leveling.

Everything here is a pure function of its inputs: no database, no clock, no
logging. Persisting the outcome is the caller's job.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from hr2.models import (
    LEVEL_ADVANCED,
    LEVEL_BEGINNER,
    LEVEL_EXPERT,
    LEVEL_INTERMEDIATE,
    GradingView,
)

# Evaluated top-down; the first threshold the score reaches wins.
LEVEL_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (90, LEVEL_EXPERT),
    (75, LEVEL_ADVANCED),
    (50, LEVEL_INTERMEDIATE),
)


@dataclass(frozen=True)
class AnswerRow:
    question_id: str
    question: str
    selected_answer: str
    correct_answer: str
    is_correct: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "questionId": self.question_id,
            "question": self.question,
            "selectedAnswer": self.selected_answer,
            "correctAnswer": self.correct_answer,
            "isCorrect": self.is_correct,
        }


@dataclass(frozen=True)
class GradeResult:
    score: int
    total_questions: int
    correct_answers: int
    passed: bool
    level: str
    passing_score: int
    breakdown: tuple[AnswerRow, ...]

    def summary(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "totalQuestions": self.total_questions,
            "correctAnswers": self.correct_answers,
            "passed": self.passed,
            "level": self.level,
            "passingScore": self.passing_score,
        }


def percent_half_up(part: int, whole: int) -> int:
    """``round(100 * part / whole)`` with halves rounded up, in exact integer math.

    Returns 0 when ``whole`` is 0.
    """
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def classify_level(score: int) -> str:
    for threshold, level in LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return LEVEL_BEGINNER


def grade_submission(assessment: GradingView, answers: Mapping[str, str]) -> GradeResult:
    rows: list[AnswerRow] = []
    correct = 0
    for q in assessment.questions:
        selected = answers.get(q.id) or ""
        is_correct = selected == q.correct_answer
        if is_correct:
            correct += 1
        rows.append(
            AnswerRow(
                question_id=q.id,
                question=q.text,
                selected_answer=selected,
                correct_answer=q.correct_answer,
                is_correct=is_correct,
            )
        )

    total = len(assessment.questions)
    score = percent_half_up(correct, total)
    return GradeResult(
        score=score,
        total_questions=total,
        correct_answers=correct,
        passed=score >= assessment.passing_score,
        level=classify_level(score),
        passing_score=assessment.passing_score,
        breakdown=tuple(rows),
    )
