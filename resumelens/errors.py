# resumelens/errors.py
"""
Error taxonomy shared by the services and the HTTP layer.

Every error carries a human-readable message and the HTTP status it maps to;
routes render them as ``{"error": message}`` and never leak stack traces.
"""
from __future__ import annotations


class ResumeLensError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"error": self.message}


# ---------- request validation ----------

class ValidationError(ResumeLensError):
    status_code = 400


class NoFileProvided(ValidationError):
    def __init__(self, message: str = "No file uploaded"):
        super().__init__(message)


class UploadTooLarge(ValidationError):
    status_code = 413


# ---------- document extraction (terminal, non-retryable) ----------

class ExtractionError(ResumeLensError):
    status_code = 500


class UnsupportedFormat(ExtractionError):
    pass


class ParseFailure(ExtractionError):
    pass


# ---------- AI collaborators ----------

class EvaluatorFailure(ResumeLensError):
    status_code = 500
    prefix = "AI request failed"

    def __init__(self, message: str):
        super().__init__(f"{self.prefix}: {message}")
        self.reason = message


class AnalysisFailure(EvaluatorFailure):
    prefix = "Resume analysis failed"


class JobMatchFailure(EvaluatorFailure):
    prefix = "Job match analysis failed"


class RewriteFailure(EvaluatorFailure):
    prefix = "Resume rewrite failed"


# ---------- lookups / store ----------

class NotFound(ResumeLensError):
    status_code = 404


class JobAnalysisMissing(NotFound):
    status_code = 400

    def __init__(self, message: str = "Job analysis not found. Upload the resume with a job description first."):
        super().__init__(message)


class DuplicateRecord(ResumeLensError):
    status_code = 409
