# resumelens/services/ai.py
from __future__ import annotations

import json, logging, re
from typing import Optional

from ..errors import AnalysisFailure, JobMatchFailure, RewriteFailure
from .normalize import normalize_analysis, normalize_job_match

logger = logging.getLogger(__name__)

ANALYSIS_PROMPT = """
You are an expert resume analyzer and career coach. Analyze the given resume comprehensively and provide:
1. Overall score (0-100)
2. Detailed scores (0-100) for: content quality, skills relevance, impact/achievements, and formatting
3. Section-by-section feedback with specific points (mark each as "success" or "warning")
4. Actionable suggestions for improvement
5. Skills analysis (present skills and recommended missing skills for the modern job market)
6. Extracted structured data (name, title, contact, experience, education, projects)

Be honest, constructive, and specific.

Respond with a JSON object matching this structure:
{
  "overallScore": number,
  "scores": {"content": number, "skills": number, "impact": number, "formatting": number},
  "feedback": [
    {"section": string, "score": number,
     "points": [{"type": "success" | "warning", "text": string}],
     "suggestions": [string]}
  ],
  "skills": {"present": [string], "missing": [string]},
  "extractedData": {
    "name": string, "title": string, "email": string, "phone": string,
    "experience": [{"company": string, "role": string, "duration": string, "description": string}],
    "education": [{"institution": string, "degree": string, "year": string}],
    "projects": [{"name": string, "description": string, "link": string}]
  }
}
""".strip()

JOB_MATCH_PROMPT = """
You are an expert recruiter and ATS specialist. Compare the resume with the job description
and score how well the candidate matches (0-100). Recommend concrete changes to the resume,
grouped by category. Only recommend changes backed by the candidate's real experience.

Respond with a JSON object matching this structure:
{
  "matchScore": number,
  "recommendedChanges": {
    "keywordOptimization": [string],
    "experienceAlignment": [string],
    "skillsHighlight": [string],
    "formatSuggestions": [string]
  },
  "missingSkills": [string],
  "matchingSkills": [string]
}
""".strip()

REWRITE_PROMPT = """
You are an expert resume writer. Rewrite the resume in plain text so it targets the job below,
applying the recommended changes. Keep every fact truthful: do not invent employers, titles,
dates, degrees or metrics. Use strong action verbs and consistent bullets.
Return only the rewritten resume text.
""".strip()


def _message_content(resp) -> str:
    choice = resp.choices[0]
    logger.info("OpenAI response received (finish_reason=%s)", getattr(choice, "finish_reason", None))
    return (choice.message.content or "").strip()


def _parse_json(content: str) -> dict:
    content = re.sub(r"```(?:json)?", "", content).strip()
    s, e = content.find("{"), content.rfind("}")
    if s < 0 or e <= s:
        raise ValueError("AI response did not contain a JSON object")
    js = json.loads(content[s:e+1])
    if not isinstance(js, dict):
        raise ValueError("AI response JSON is not an object")
    return js


def _format_changes(changes: dict) -> str:
    lines = []
    for category, items in (changes or {}).items():
        if items:
            lines.append(f"{category}:")
            lines.extend(f"- {item}" for item in items)
    return "\n".join(lines) or "(none)"


class ResumeAI:
    """
    Adapter over an OpenAI client for the three AI collaborators: resume
    analysis, job matching and resume rewriting.

    Each call is one-shot and blocking. Any upstream failure (network, timeout,
    non-JSON payload) is wrapped into the collaborator's EvaluatorFailure
    subclass; results are normalized before they are returned.
    """

    def __init__(self, client, model: str = "gpt-4o", max_tokens: int = 4096):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    def _chat(self, system: str, user: str, *, json_mode: bool, temperature: float) -> str:
        if self.client is None:
            raise RuntimeError("OpenAI client is not configured")
        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        logger.info("Calling OpenAI model=%s (input %d chars)", self.model, len(user))
        resp = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            temperature=temperature,
            max_completion_tokens=self.max_tokens,
            **kwargs,
        )
        return _message_content(resp)

    def analyze_resume(self, resume_text: str) -> dict:
        if not (resume_text or "").strip():
            raise AnalysisFailure("resume text is empty")
        try:
            raw = _parse_json(self._chat(ANALYSIS_PROMPT, resume_text, json_mode=True, temperature=0.0))
        except Exception as e:
            logger.exception("Resume analysis call failed")
            raise AnalysisFailure(str(e) or e.__class__.__name__) from e
        return normalize_analysis(raw)

    def match_job(self, resume_text: str, job_description: str, target_role: Optional[str] = None) -> dict:
        if not (job_description or "").strip():
            raise JobMatchFailure("job description is empty")
        user = (
            (f"Target role: {target_role}\n\n" if target_role else "")
            + f"Job description:\n{job_description}\n\nResume:\n{resume_text}"
        )
        try:
            raw = _parse_json(self._chat(JOB_MATCH_PROMPT, user, json_mode=True, temperature=0.0))
        except Exception as e:
            logger.exception("Job match call failed")
            raise JobMatchFailure(str(e) or e.__class__.__name__) from e
        return normalize_job_match(raw)

    def rewrite_resume(
        self,
        resume_text: str,
        job_description: str,
        recommended_changes: dict,
        target_role: Optional[str] = None,
    ) -> str:
        """Return the rewritten resume text; may be empty if the model returned nothing."""
        user = (
            (f"Target role: {target_role}\n\n" if target_role else "")
            + f"Job description:\n{job_description}\n\n"
            + f"Recommended changes:\n{_format_changes(recommended_changes)}\n\n"
            + f"Original resume:\n\n{resume_text}"
        )
        try:
            out = self._chat(REWRITE_PROMPT, user, json_mode=False, temperature=0.3)
        except Exception as e:
            logger.exception("Resume rewrite call failed")
            raise RewriteFailure(str(e) or e.__class__.__name__) from e
        # drop fenced wrappers but keep their content
        return re.sub(r"```[a-zA-Z]*\n?", "", out).strip()
