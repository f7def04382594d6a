# resumelens/models.py
from __future__ import annotations
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Optional


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class _Record:
    """Camel-cased JSON view shared by every stored record."""

    _camel = {
        "resume_id": "resumeId",
        "analysis_id": "analysisId",
        "uploaded_at": "uploadedAt",
        "created_at": "createdAt",
        "overall_score": "overallScore",
        "template_id": "templateId",
        "job_description": "jobDescription",
        "target_role": "targetRole",
        "match_score": "matchScore",
        "recommended_changes": "recommendedChanges",
        "improved_resume_content": "improvedResumeContent",
    }

    def to_dict(self) -> dict:
        return {self._camel.get(f.name, f.name): _jsonable(getattr(self, f.name)) for f in fields(self)}


# ---------- records (frozen: the store hands out snapshots) ----------

@dataclass(frozen=True)
class Resume(_Record):
    id: str
    filename: str
    content: str
    uploaded_at: datetime


@dataclass(frozen=True)
class Analysis(_Record):
    id: str
    resume_id: str
    overall_score: str  # numeric value serialized as text
    scores: dict
    feedback: list
    skills: dict
    created_at: datetime


@dataclass(frozen=True)
class JobApplication(_Record):
    id: str
    resume_id: str
    job_description: str
    created_at: datetime
    analysis_id: Optional[str] = None
    target_role: Optional[str] = None
    match_score: Optional[str] = None
    recommended_changes: Optional[dict] = None
    improved_resume_content: Optional[str] = None


@dataclass(frozen=True)
class Portfolio(_Record):
    id: str
    resume_id: str
    template_id: str
    data: dict
    created_at: datetime


RECOMMENDATION_CATEGORIES = (
    "keywordOptimization",
    "experienceAlignment",
    "skillsHighlight",
    "formatSuggestions",
)
