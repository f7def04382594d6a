# resumelens/services/normalize.py
"""
Pure default-filling for the loosely structured JSON the AI collaborators return.

Every function accepts whatever came back (a dict, ``None``, the wrong type) and
returns a fully populated structure: missing numbers become 0, missing lists
become ``[]``, missing nested objects get their empty-field form. Nothing here
raises for bad input, and nothing downstream ever sees an absent field.
"""
from __future__ import annotations

import math
from typing import Any

from ..models import RECOMMENDATION_CATEGORIES

SCORE_KEYS = ("content", "skills", "impact", "formatting")
POINT_TYPES = ("success", "warning")


# ========= Low-level coercion =========
def _dict(val: Any) -> dict:
    return val if isinstance(val, dict) else {}

def _num(val: Any):
    if isinstance(val, bool) or val is None:
        return 0
    if isinstance(val, int):
        return val
    try:
        f = float(val) if isinstance(val, float) else float(str(val).strip().rstrip("%"))
    except (ValueError, OverflowError):
        return 0
    if not math.isfinite(f):  # NaN and infinities are not valid JSON
        return 0
    return int(f) if f.is_integer() else f

def _str(val: Any) -> str:
    if val is None or isinstance(val, (dict, list)):
        return ""
    return str(val).strip()

def _str_list(val: Any) -> list[str]:
    if isinstance(val, str):
        val = val.replace("\r", "").split("\n")
    if not isinstance(val, list):
        return []
    out = []
    for item in val:
        if isinstance(item, dict):
            # {"change": "...", "reason": "..."} style items collapse to their text
            item = item.get("change") or item.get("text") or item.get("name") or ""
        s = _str(item)
        if s:
            out.append(s)
    return out

def _records(val: Any, keys: tuple[str, ...]) -> list[dict]:
    if not isinstance(val, list):
        return []
    return [{k: _str(item.get(k)) for k in keys} for item in val if isinstance(item, dict)]


# ========= Resume analysis =========
def normalize_scores(raw: Any) -> dict:
    raw = _dict(raw)
    return {k: _num(raw.get(k)) for k in SCORE_KEYS}

def normalize_point(raw: Any) -> dict:
    if isinstance(raw, dict):
        kind = _str(raw.get("type")).lower()
        return {"type": kind if kind in POINT_TYPES else "warning", "text": _str(raw.get("text"))}
    return {"type": "warning", "text": _str(raw)}

def normalize_feedback(raw: Any) -> list[dict]:
    if not isinstance(raw, list):
        return []
    out = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        points = item.get("points") if isinstance(item.get("points"), list) else []
        out.append({
            "section": _str(item.get("section")),
            "score": _num(item.get("score")),
            "points": [p for p in (normalize_point(x) for x in points) if p["text"]],
            "suggestions": _str_list(item.get("suggestions")),
        })
    return out

def normalize_skills(raw: Any) -> dict:
    raw = _dict(raw)
    return {"present": _str_list(raw.get("present")), "missing": _str_list(raw.get("missing"))}

def normalize_extracted_data(raw: Any) -> dict:
    raw = _dict(raw)
    projects = []
    for p in _records(raw.get("projects"), ("name", "description", "link")):
        if not p["link"]:
            p.pop("link")
        projects.append(p)
    return {
        "name": _str(raw.get("name")),
        "title": _str(raw.get("title")),
        "email": _str(raw.get("email")),
        "phone": _str(raw.get("phone")),
        "experience": _records(raw.get("experience"), ("company", "role", "duration", "description")),
        "education": _records(raw.get("education"), ("institution", "degree", "year")),
        "projects": projects,
    }

def normalize_analysis(raw: Any) -> dict:
    raw = _dict(raw)
    return {
        "overallScore": _num(raw.get("overallScore")),
        "scores": normalize_scores(raw.get("scores")),
        "feedback": normalize_feedback(raw.get("feedback")),
        "skills": normalize_skills(raw.get("skills")),
        "extractedData": normalize_extracted_data(raw.get("extractedData")),
    }


# ========= Job match =========
def normalize_recommended_changes(raw: Any) -> dict:
    """Four category lists; a flat list of {category, change} items is regrouped."""
    if isinstance(raw, list):
        grouped = {k: [] for k in RECOMMENDATION_CATEGORIES}
        for item in raw:
            if isinstance(item, dict) and _str(item.get("category")) in grouped:
                grouped[_str(item.get("category"))].append(item)
        raw = grouped
    raw = _dict(raw)
    return {k: _str_list(raw.get(k)) for k in RECOMMENDATION_CATEGORIES}

def normalize_job_match(raw: Any) -> dict:
    raw = _dict(raw)
    return {
        "matchScore": _num(raw.get("matchScore")),
        "recommendedChanges": normalize_recommended_changes(raw.get("recommendedChanges")),
        "missingSkills": _str_list(raw.get("missingSkills")),
        "matchingSkills": _str_list(raw.get("matchingSkills")),
    }
