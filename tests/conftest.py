# tests/conftest.py
from io import BytesIO

import docx
import pytest

from resumelens import create_app
from resumelens.services.store import MemoryStore

RESUME_TEXT = "Jane Doe\nBackend Engineer\nPython Go Kubernetes\nLed migration to microservices"


def make_pdf(text: str) -> bytes:
    """Smallest single-page PDF PyPDF2 can read, one text line per input line."""
    lines = [l.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)") for l in text.splitlines()]
    ops = ["BT", "/F1 12 Tf", "72 720 Td"]
    for i, line in enumerate(lines):
        if i:
            ops.append("0 -16 Td")
        ops.append(f"({line}) Tj")
    ops.append("ET")
    stream = "\n".join(ops).encode("latin-1")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = BytesIO()
    out.write(b"%PDF-1.4\n")
    offsets = []
    for num, body in enumerate(objects, start=1):
        offsets.append(out.tell())
        out.write(b"%d 0 obj\n" % num + body + b"\nendobj\n")
    xref = out.tell()
    out.write(b"xref\n0 %d\n" % (len(objects) + 1))
    out.write(b"0000000000 65535 f \n")
    for off in offsets:
        out.write(b"%010d 00000 n \n" % off)
    out.write(b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref))
    return out.getvalue()


def make_docx(text: str) -> bytes:
    d = docx.Document()
    for line in text.splitlines():
        d.add_paragraph(line)
    buf = BytesIO()
    d.save(buf)
    return buf.getvalue()


class FakeAI:
    """Stands in for ResumeAI; records calls and returns canned payloads."""

    def __init__(self, analysis=None, match=None, rewrite="Improved resume text", fail=None):
        self.analysis = analysis if analysis is not None else {
            "overallScore": 78,
            "scores": {"content": 80, "skills": 75, "impact": 70, "formatting": 85},
            "feedback": [{
                "section": "Experience",
                "score": 72,
                "points": [{"type": "success", "text": "Clear role titles"}],
                "suggestions": ["Quantify outcomes"],
            }],
            "skills": {"present": ["Python", "Go"], "missing": ["Terraform"]},
            "extractedData": {"name": "Jane Doe", "title": "Backend Engineer"},
        }
        self.match = match if match is not None else {
            "matchScore": 66,
            "recommendedChanges": {
                "keywordOptimization": ["Mention Kubernetes operators"],
                "experienceAlignment": [],
                "skillsHighlight": ["Go"],
                "formatSuggestions": [],
            },
            "missingSkills": ["Helm"],
            "matchingSkills": ["Go", "Kubernetes"],
        }
        self.rewrite = rewrite
        self.fail = fail or {}
        self.calls = {"analyze_resume": 0, "match_job": 0, "rewrite_resume": 0}

    def _maybe_fail(self, name):
        self.calls[name] += 1
        if name in self.fail:
            raise self.fail[name]

    def analyze_resume(self, resume_text):
        self._maybe_fail("analyze_resume")
        return self.analysis

    def match_job(self, resume_text, job_description, target_role=None):
        self._maybe_fail("match_job")
        return self.match

    def rewrite_resume(self, resume_text, job_description, recommended_changes, target_role=None):
        self._maybe_fail("rewrite_resume")
        return self.rewrite


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def fake_ai():
    return FakeAI()


@pytest.fixture
def app(store, fake_ai):
    return create_app("test", store=store, ai=fake_ai)


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


@pytest.fixture
def pdf_bytes():
    return make_pdf(RESUME_TEXT)


@pytest.fixture
def docx_bytes():
    return make_docx(RESUME_TEXT)
