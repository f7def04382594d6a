# resumelens/services/pipeline.py
from __future__ import annotations

import logging, re
from typing import Optional

from ..errors import (
    AnalysisFailure, JobAnalysisMissing, JobMatchFailure, NoFileProvided,
    NotFound, ResumeLensError, RewriteFailure, UploadTooLarge, ValidationError,
)
from ..models import JobApplication, Portfolio
from ..schemas import parse_portfolio_create
from .documents import extract
from .normalize import normalize_analysis, normalize_job_match

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


def _call(stage: str, failure_cls, fn, *args):
    """Run one AI stage; anything that isn't already one of our errors becomes ``failure_cls``."""
    try:
        return fn(*args)
    except ResumeLensError:
        raise
    except Exception as e:
        logger.exception("%s stage failed", stage)
        raise failure_cls(str(e) or e.__class__.__name__) from e


def _warn_out_of_range(label: str, value) -> None:
    if not (0 <= value <= 100):
        logger.warning("%s out of range [0,100]: %r", label, value)


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")


class ResumePipeline:
    """
    Orchestrates a resume upload end to end:

        extract -> store resume -> analyze -> store analysis
                [-> match job description -> store job application] -> respond

    and, as a separate request, the rewrite of a stored resume against its job
    application. Stages run strictly in order; a failing stage ends the request
    and earlier writes are kept.

    ``store`` is any object with the MemoryStore interface and ``ai`` any
    object with ``analyze_resume``, ``match_job`` and ``rewrite_resume``.
    """

    def __init__(self, store, ai, max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES, portfolio_templates=None):
        self.store = store
        self.ai = ai
        self.max_upload_bytes = max_upload_bytes
        self.portfolio_templates = portfolio_templates

    # ---------- upload ----------
    def ingest(
        self,
        content: Optional[bytes],
        filename: Optional[str],
        job_description: Optional[str] = None,
        target_role: Optional[str] = None,
    ) -> dict:
        if content is None or not filename:
            raise NoFileProvided()
        if len(content) > self.max_upload_bytes:
            mb = self.max_upload_bytes / (1024 * 1024)
            raise UploadTooLarge(f"File too large. Maximum upload size is {mb:g} MB.")

        text = extract(content, filename)
        resume = self.store.create_resume(filename=filename, content=text)

        result = normalize_analysis(_call("analysis", AnalysisFailure, self.ai.analyze_resume, text))
        _warn_out_of_range("overallScore", result["overallScore"])
        analysis = self.store.create_analysis(
            resume_id=resume.id,
            overall_score=result["overallScore"],
            scores=result["scores"],
            feedback=result["feedback"],
            skills=result["skills"],
        )

        out = {
            "resumeId": resume.id,
            "analysisId": analysis.id,
            "analysis": {
                "overallScore": result["overallScore"],
                "scores": result["scores"],
                "feedback": result["feedback"],
                "skills": result["skills"],
            },
            "extractedData": result["extractedData"],
        }

        job_description = (job_description or "").strip()
        if not job_description:
            return out

        target_role = (target_role or "").strip() or None
        match = normalize_job_match(
            _call("job match", JobMatchFailure, self.ai.match_job, text, job_description, target_role)
        )
        _warn_out_of_range("matchScore", match["matchScore"])
        job = self.store.create_job_application(
            resume_id=resume.id,
            analysis_id=analysis.id,
            job_description=job_description,
            target_role=target_role,
            match_score=match["matchScore"],
            recommended_changes=match["recommendedChanges"],
        )
        out["jobApplicationId"] = job.id
        out["jobTargetedAnalysis"] = match
        return out

    # ---------- improvement ----------
    def generate_improved(self, resume_id: str) -> dict:
        resume = self.store.get_resume(resume_id)
        if resume is None:
            raise NotFound("Resume not found")
        job = self.store.get_job_application_by_resume_id(resume_id)
        if job is None or job.recommended_changes is None:
            raise JobAnalysisMissing()

        improved = _call(
            "rewrite", RewriteFailure, self.ai.rewrite_resume,
            resume.content, job.job_description, job.recommended_changes, job.target_role,
        )
        if not (improved or "").strip():
            logger.warning("Rewrite for resume %s came back empty; keeping the original text", resume_id)
            improved = resume.content

        updated = self.store.update_job_application(job.id, improved_resume_content=improved)
        if updated is None:
            raise NotFound("Job application not found")
        return {"jobApplicationId": updated.id, "improvedResumeContent": updated.improved_resume_content}

    def improved_resume_file(self, resume_id: str) -> tuple[str, str]:
        """(download filename, text) for the stored improved resume."""
        job = self.job_application(resume_id)
        if not job.improved_resume_content:
            raise NotFound("Improved resume not generated yet")
        slug = _slug(job.target_role)
        suffix = f"-{slug}" if slug else ""
        return f"improved-resume{suffix}.txt", job.improved_resume_content

    # ---------- portfolios ----------
    def create_portfolio(self, payload) -> Portfolio:
        body = parse_portfolio_create(payload)
        if self.portfolio_templates is not None and body.template_id not in self.portfolio_templates:
            known = ", ".join(sorted(self.portfolio_templates))
            raise ValidationError(f"Unknown templateId '{body.template_id}'. Choose one of: {known}")
        return self.store.create_portfolio(
            resume_id=body.resume_id,
            template_id=body.template_id,
            data=body.data.model_dump(exclude_none=True),
        )

    # ---------- lookups ----------
    def resume(self, resume_id: str):
        resume = self.store.get_resume(resume_id)
        if resume is None:
            raise NotFound("Resume not found")
        return resume

    def analysis(self, resume_id: str):
        analysis = self.store.get_analysis_by_resume_id(resume_id)
        if analysis is None:
            raise NotFound("Analysis not found")
        return analysis

    def portfolio(self, resume_id: str) -> Portfolio:
        portfolio = self.store.get_portfolio_by_resume_id(resume_id)
        if portfolio is None:
            raise NotFound("Portfolio not found")
        return portfolio

    def job_application(self, resume_id: str) -> JobApplication:
        job = self.store.get_job_application_by_resume_id(resume_id)
        if job is None:
            raise NotFound("Job application not found")
        return job
