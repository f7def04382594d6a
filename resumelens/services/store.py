# resumelens/services/store.py
from __future__ import annotations

import copy, logging, threading, uuid
from dataclasses import fields, replace
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, TypeVar

from ..errors import DuplicateRecord, NotFound
from ..models import Analysis, JobApplication, Portfolio, Resume

logger = logging.getLogger(__name__)

R = TypeVar("R")

# Fields that identify a record; an update may never touch them.
_FROZEN_ON_UPDATE = {"id", "resume_id", "created_at"}


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MemoryStore:
    """
    Process-wide, volatile record store for resumes, analyses, job applications
    and portfolios.

    Records are frozen dataclasses; nested JSON payloads are deep-copied on the
    way in and out so callers can never mutate a stored snapshot. One lock
    guards all four tables.

    Lookups return ``None`` when a record is absent. Creating a child record for
    an unknown resume raises ``NotFound``; a second analysis or job application
    for the same resume raises ``DuplicateRecord``.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._resumes: Dict[str, Resume] = {}
        self._analyses: Dict[str, Analysis] = {}
        self._job_applications: Dict[str, JobApplication] = {}
        self._portfolios: Dict[str, Portfolio] = {}

    # ---------- helpers ----------
    def _require_resume(self, resume_id: str) -> None:
        if resume_id not in self._resumes:
            raise NotFound(f"Resume {resume_id} not found")

    @staticmethod
    def _first(table: Dict[str, R], match: Callable[[R], bool]) -> Optional[R]:
        return next((r for r in table.values() if match(r)), None)

    @staticmethod
    def _snapshot(record: Optional[R]) -> Optional[R]:
        return copy.deepcopy(record) if record is not None else None

    # ---------- resumes ----------
    def create_resume(self, filename: str, content: str) -> Resume:
        resume = Resume(id=_new_id(), filename=filename, content=content, uploaded_at=_now())
        with self._lock:
            self._resumes[resume.id] = resume
        logger.info("Stored resume %s (%s)", resume.id, filename)
        return resume

    def get_resume(self, resume_id: str) -> Optional[Resume]:
        with self._lock:
            return self._resumes.get(resume_id)

    # ---------- analyses ----------
    def create_analysis(self, resume_id: str, overall_score, scores: dict, feedback: list, skills: dict) -> Analysis:
        analysis = Analysis(
            id=_new_id(),
            resume_id=resume_id,
            overall_score=str(overall_score),
            scores=copy.deepcopy(scores),
            feedback=copy.deepcopy(feedback),
            skills=copy.deepcopy(skills),
            created_at=_now(),
        )
        with self._lock:
            self._require_resume(resume_id)
            if self._first(self._analyses, lambda a: a.resume_id == resume_id):
                raise DuplicateRecord(f"Resume {resume_id} already has an analysis")
            self._analyses[analysis.id] = analysis
        logger.info("Stored analysis %s for resume %s", analysis.id, resume_id)
        return self._snapshot(analysis)

    def get_analysis(self, analysis_id: str) -> Optional[Analysis]:
        with self._lock:
            return self._snapshot(self._analyses.get(analysis_id))

    def get_analysis_by_resume_id(self, resume_id: str) -> Optional[Analysis]:
        with self._lock:
            return self._snapshot(self._first(self._analyses, lambda a: a.resume_id == resume_id))

    # ---------- job applications ----------
    def create_job_application(
        self,
        resume_id: str,
        job_description: str,
        analysis_id: Optional[str] = None,
        target_role: Optional[str] = None,
        match_score=None,
        recommended_changes: Optional[dict] = None,
    ) -> JobApplication:
        job = JobApplication(
            id=_new_id(),
            resume_id=resume_id,
            job_description=job_description,
            created_at=_now(),
            analysis_id=analysis_id,
            target_role=target_role,
            match_score=None if match_score is None else str(match_score),
            recommended_changes=copy.deepcopy(recommended_changes),
        )
        with self._lock:
            self._require_resume(resume_id)
            if analysis_id is not None and analysis_id not in self._analyses:
                raise NotFound(f"Analysis {analysis_id} not found")
            if self._first(self._job_applications, lambda j: j.resume_id == resume_id):
                raise DuplicateRecord(f"Resume {resume_id} already has a job application")
            self._job_applications[job.id] = job
        logger.info("Stored job application %s for resume %s", job.id, resume_id)
        return self._snapshot(job)

    def get_job_application(self, job_application_id: str) -> Optional[JobApplication]:
        with self._lock:
            return self._snapshot(self._job_applications.get(job_application_id))

    def get_job_application_by_resume_id(self, resume_id: str) -> Optional[JobApplication]:
        with self._lock:
            return self._snapshot(self._first(self._job_applications, lambda j: j.resume_id == resume_id))

    def update_job_application(self, job_application_id: str, **changes) -> Optional[JobApplication]:
        """
        Merge ``changes`` into a stored job application and return the updated
        record, or ``None`` if the id is unknown. Fields not mentioned keep
        their value; id, resume_id and created_at can't be changed.
        """
        allowed = {f.name for f in fields(JobApplication)} - _FROZEN_ON_UPDATE
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"Cannot update job application fields: {', '.join(sorted(unknown))}")

        with self._lock:
            current = self._job_applications.get(job_application_id)
            if current is None:
                return None
            updated = replace(current, **copy.deepcopy(changes))
            self._job_applications[job_application_id] = updated
        logger.info("Updated job application %s (%s)", job_application_id, ", ".join(sorted(changes)))
        return self._snapshot(updated)

    # ---------- portfolios ----------
    def create_portfolio(self, resume_id: str, template_id: str, data: dict) -> Portfolio:
        portfolio = Portfolio(
            id=_new_id(),
            resume_id=resume_id,
            template_id=template_id,
            data=copy.deepcopy(data),
            created_at=_now(),
        )
        with self._lock:
            self._require_resume(resume_id)
            self._portfolios[portfolio.id] = portfolio
        logger.info("Stored portfolio %s for resume %s", portfolio.id, resume_id)
        return self._snapshot(portfolio)

    def get_portfolio(self, portfolio_id: str) -> Optional[Portfolio]:
        with self._lock:
            return self._snapshot(self._portfolios.get(portfolio_id))

    def get_portfolio_by_resume_id(self, resume_id: str) -> Optional[Portfolio]:
        with self._lock:
            return self._snapshot(self._first(self._portfolios, lambda p: p.resume_id == resume_id))
