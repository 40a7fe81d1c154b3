"""Entity shapes for assessments and their two read projections.

An assessment document is read in two ways:

* ``PublicAssessment`` is what a test-taker sees before submitting. It has no
  field for the correct answer at all, so nothing can leak through it.
* ``GradingView`` carries the answer key and is only handed to the grader.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from hr2.utils.datetime import to_iso

CATEGORIES = ("Technical Skills", "Soft Skills", "Leadership", "Domain Knowledge")

LEVEL_BEGINNER = "Beginner"
LEVEL_INTERMEDIATE = "Intermediate"
LEVEL_ADVANCED = "Advanced"
LEVEL_EXPERT = "Expert"
LEVELS = (LEVEL_BEGINNER, LEVEL_INTERMEDIATE, LEVEL_ADVANCED, LEVEL_EXPERT)


@dataclass(frozen=True)
class Question:
    id: str
    text: str
    options: tuple[str, ...]
    correct_answer: str

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Question":
        return cls(
            id=str(doc.get("_id") or ""),
            text=str(doc.get("question") or ""),
            options=tuple(str(o) for o in (doc.get("options") or [])),
            correct_answer=str(doc.get("correctAnswer") or ""),
        )


@dataclass(frozen=True)
class PublicQuestion:
    id: str
    text: str
    options: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"_id": self.id, "question": self.text, "options": list(self.options)}


@dataclass(frozen=True)
class PublicAssessment:
    id: str
    skill_name: str
    category: str
    description: str
    passing_score: int
    duration: int
    is_active: bool
    questions: tuple[PublicQuestion, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "_id": self.id,
            "skillName": self.skill_name,
            "category": self.category,
            "description": self.description,
            "passingScore": self.passing_score,
            "duration": self.duration,
            "isActive": self.is_active,
            "totalQuestions": len(self.questions),
            "questions": [q.to_dict() for q in self.questions],
        }


@dataclass(frozen=True)
class GradingView:
    assessment_id: str
    skill_name: str
    category: str
    passing_score: int
    questions: tuple[Question, ...]


@dataclass(frozen=True)
class Assessment:
    id: str
    skill_name: str
    category: str
    description: str
    questions: tuple[Question, ...]
    passing_score: int
    duration: int
    is_active: bool
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Assessment":
        created_by = doc.get("createdBy")
        return cls(
            id=str(doc["_id"]),
            skill_name=str(doc.get("skillName") or ""),
            category=str(doc.get("category") or ""),
            description=str(doc.get("description") or ""),
            questions=tuple(Question.from_document(q) for q in (doc.get("questions") or [])),
            passing_score=int(doc.get("passingScore", 70)),
            duration=int(doc.get("duration", 30)),
            is_active=bool(doc.get("isActive", True)),
            created_by=str(created_by) if created_by else None,
            created_at=doc.get("createdAt"),
            updated_at=doc.get("updatedAt"),
        )

    def public_view(self) -> PublicAssessment:
        return PublicAssessment(
            id=self.id,
            skill_name=self.skill_name,
            category=self.category,
            description=self.description,
            passing_score=self.passing_score,
            duration=self.duration,
            is_active=self.is_active,
            questions=tuple(PublicQuestion(id=q.id, text=q.text, options=q.options) for q in self.questions),
        )

    def grading_view(self) -> GradingView:
        return GradingView(
            assessment_id=self.id,
            skill_name=self.skill_name,
            category=self.category,
            passing_score=self.passing_score,
            questions=self.questions,
        )

    def admin_dict(self) -> dict[str, Any]:
        """Full shape, answer key included, for administrators."""
        return {
            "_id": self.id,
            "skillName": self.skill_name,
            "category": self.category,
            "description": self.description,
            "passingScore": self.passing_score,
            "duration": self.duration,
            "isActive": self.is_active,
            "createdBy": self.created_by,
            "createdAt": to_iso(self.created_at),
            "updatedAt": to_iso(self.updated_at),
            "questions": [
                {"_id": q.id, "question": q.text, "options": list(q.options), "correctAnswer": q.correct_answer}
                for q in self.questions
            ],
        }


@dataclass(frozen=True)
class Competency:
    employee_id: str
    skill_name: str
    category: str
    score: int | None
    level: str | None
    assessed_at: datetime | None = None
    assessed_by: str | None = None
    notes: str = ""
    detailed_scores: dict[str, int] | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "Competency":
        score = doc.get("score")
        assessed_by = doc.get("assessedBy")
        return cls(
            employee_id=str(doc.get("employee") or ""),
            skill_name=str(doc.get("skillName") or ""),
            category=str(doc.get("category") or ""),
            score=int(score) if score is not None else None,
            level=doc.get("level"),
            assessed_at=doc.get("assessedAt"),
            assessed_by=str(assessed_by) if assessed_by else None,
            notes=str(doc.get("notes") or ""),
            detailed_scores=doc.get("detailedScores") or None,
            updated_at=doc.get("updatedAt"),
        )

    @property
    def assessed(self) -> bool:
        return self.score is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "employee": self.employee_id,
            "skillName": self.skill_name,
            "category": self.category,
            "score": self.score,
            "level": self.level,
            "assessed": self.assessed,
            "assessedAt": to_iso(self.assessed_at),
            "assessedBy": self.assessed_by,
            "notes": self.notes,
            "detailedScores": self.detailed_scores,
            "updatedAt": to_iso(self.updated_at),
        }
