# resumelens/schemas.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from .errors import ValidationError


class ExperienceItem(BaseModel):
    company: str
    role: str
    duration: str
    description: str


class EducationItem(BaseModel):
    institution: str
    degree: str
    year: str


class ProjectItem(BaseModel):
    name: str
    description: str
    link: Optional[str] = None


class PortfolioData(BaseModel):
    name: str
    title: str
    bio: str
    skills: List[str] = Field(default_factory=list)
    experience: List[ExperienceItem] = Field(default_factory=list)
    education: List[EducationItem] = Field(default_factory=list)
    projects: Optional[List[ProjectItem]] = None


class PortfolioCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    resume_id: str = Field(alias="resumeId", min_length=1)
    template_id: str = Field(alias="templateId", min_length=1)
    data: PortfolioData


def _describe(err: PydanticValidationError) -> str:
    parts = []
    for e in err.errors():
        loc = ".".join(str(p) for p in e.get("loc", ())) or "body"
        parts.append(f"{loc}: {e.get('msg')}")
    return "; ".join(parts)


def parse_portfolio_create(payload) -> PortfolioCreate:
    """Validate a create-portfolio body, raising our ValidationError with a readable message."""
    if not isinstance(payload, dict):
        raise ValidationError("Invalid portfolio: request body must be a JSON object")
    try:
        return PortfolioCreate.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid portfolio: {_describe(e)}") from e
