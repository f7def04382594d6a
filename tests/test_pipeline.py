import pytest

from resumelens.errors import (
    AnalysisFailure, DuplicateRecord, JobAnalysisMissing, JobMatchFailure, NoFileProvided,
    NotFound, ParseFailure, RewriteFailure, UnsupportedFormat, UploadTooLarge, ValidationError,
)
from resumelens.services.pipeline import ResumePipeline
from tests.conftest import RESUME_TEXT, FakeAI

JD = "Senior Backend Engineer, Go, Kubernetes"
TEMPLATES = {"minimal": (), "creative": (), "technical": ()}


@pytest.fixture
def pipeline(store, fake_ai):
    return ResumePipeline(store, fake_ai, portfolio_templates=TEMPLATES)


def test_ingest_without_job_description(pipeline, store, fake_ai, pdf_bytes):
    out = pipeline.ingest(pdf_bytes, "resume.pdf")

    assert set(out) == {"resumeId", "analysisId", "analysis", "extractedData"}
    assert 0 <= out["analysis"]["overallScore"] <= 100
    assert out["extractedData"]["name"] == "Jane Doe"
    assert out["extractedData"]["projects"] == []
    assert store.get_resume(out["resumeId"]).filename == "resume.pdf"
    assert "Kubernetes" in store.get_resume(out["resumeId"]).content
    assert store.get_analysis(out["analysisId"]).overall_score == "78"
    assert store.get_job_application_by_resume_id(out["resumeId"]) is None
    assert fake_ai.calls["match_job"] == 0


def test_blank_job_description_is_ignored(pipeline, store, fake_ai, docx_bytes):
    out = pipeline.ingest(docx_bytes, "resume.docx", job_description="   ", target_role="SRE")
    assert "jobApplicationId" not in out
    assert fake_ai.calls["match_job"] == 0


def test_ingest_with_job_description(pipeline, store, docx_bytes):
    out = pipeline.ingest(docx_bytes, "resume.docx", job_description=JD, target_role=" Senior Backend Engineer ")

    assert 0 <= out["jobTargetedAnalysis"]["matchScore"] <= 100
    job = store.get_job_application_by_resume_id(out["resumeId"])
    assert job.id == out["jobApplicationId"]
    assert job.analysis_id == out["analysisId"]
    assert job.job_description == JD
    assert job.target_role == "Senior Backend Engineer"
    assert job.match_score == "66"
    assert job.recommended_changes["keywordOptimization"] == ["Mention Kubernetes operators"]
    assert job.improved_resume_content is None


def test_partial_evaluator_output_is_filled(store, docx_bytes):
    pipeline = ResumePipeline(store, FakeAI(analysis={}, match={}))
    out = pipeline.ingest(docx_bytes, "resume.docx", job_description=JD)
    assert out["analysis"]["scores"] == {"content": 0, "skills": 0, "impact": 0, "formatting": 0}
    assert out["jobTargetedAnalysis"]["recommendedChanges"]["formatSuggestions"] == []


def test_no_file(pipeline):
    with pytest.raises(NoFileProvided):
        pipeline.ingest(None, "resume.pdf")
    with pytest.raises(NoFileProvided):
        pipeline.ingest(b"data", "")


def test_oversized_upload_skips_extraction(store, fake_ai, monkeypatch):
    called = []
    monkeypatch.setattr("resumelens.services.pipeline.extract", lambda *a: called.append(a))
    pipeline = ResumePipeline(store, fake_ai, max_upload_bytes=10)
    with pytest.raises(UploadTooLarge):
        pipeline.ingest(b"x" * 11, "resume.pdf")
    assert called == []


def test_extraction_failures_create_nothing(pipeline, store, fake_ai):
    with pytest.raises(UnsupportedFormat):
        pipeline.ingest(b"hello", "resume.txt")
    with pytest.raises(ParseFailure):
        pipeline.ingest(b"garbage", "resume.pdf")
    assert store._resumes == {}
    assert fake_ai.calls["analyze_resume"] == 0


def test_analysis_failure_keeps_resume(store, docx_bytes):
    ai = FakeAI(fail={"analyze_resume": ValueError("bad json")})
    pipeline = ResumePipeline(store, ai)
    with pytest.raises(AnalysisFailure) as err:
        pipeline.ingest(docx_bytes, "resume.docx")
    assert err.value.message == "Resume analysis failed: bad json"
    assert len(store._resumes) == 1
    assert store._analyses == {}


def test_job_match_failure_fails_request_but_keeps_analysis(store, docx_bytes):
    ai = FakeAI(fail={"match_job": ConnectionError("upstream down")})
    pipeline = ResumePipeline(store, ai)
    with pytest.raises(JobMatchFailure):
        pipeline.ingest(docx_bytes, "resume.docx", job_description=JD)
    assert len(store._analyses) == 1
    assert store._job_applications == {}


def test_generate_improved(pipeline, store, fake_ai, docx_bytes):
    out = pipeline.ingest(docx_bytes, "resume.docx", job_description=JD, target_role="SRE")
    before = store.get_job_application(out["jobApplicationId"])

    result = pipeline.generate_improved(out["resumeId"])

    assert result == {"jobApplicationId": out["jobApplicationId"], "improvedResumeContent": "Improved resume text"}
    after = store.get_job_application(out["jobApplicationId"])
    assert after.improved_resume_content == "Improved resume text"
    assert after.to_dict() | {"improvedResumeContent": None} == before.to_dict()


def test_generate_improved_empty_rewrite_falls_back(store, docx_bytes):
    pipeline = ResumePipeline(store, FakeAI(rewrite="  \n"))
    out = pipeline.ingest(docx_bytes, "resume.docx", job_description=JD)
    result = pipeline.generate_improved(out["resumeId"])
    original = store.get_resume(out["resumeId"]).content
    assert result["improvedResumeContent"] == original
    assert store.get_job_application(out["jobApplicationId"]).improved_resume_content == original


def test_generate_improved_preconditions(pipeline, fake_ai, docx_bytes):
    with pytest.raises(NotFound) as err:
        pipeline.generate_improved("missing")
    assert err.value.status_code == 404

    out = pipeline.ingest(docx_bytes, "resume.docx")
    with pytest.raises(JobAnalysisMissing) as err:
        pipeline.generate_improved(out["resumeId"])
    assert err.value.status_code == 400
    assert fake_ai.calls["rewrite_resume"] == 0


def test_generate_improved_requires_recommendations(store, fake_ai):
    resume = store.create_resume("cv.pdf", RESUME_TEXT)
    store.create_job_application(resume_id=resume.id, job_description=JD)
    with pytest.raises(JobAnalysisMissing):
        ResumePipeline(store, fake_ai).generate_improved(resume.id)
    assert fake_ai.calls["rewrite_resume"] == 0


def test_rewrite_failure(store, docx_bytes):
    pipeline = ResumePipeline(store, FakeAI(fail={"rewrite_resume": RuntimeError("timeout")}))
    out = pipeline.ingest(docx_bytes, "resume.docx", job_description=JD)
    with pytest.raises(RewriteFailure):
        pipeline.generate_improved(out["resumeId"])
    assert store.get_job_application(out["jobApplicationId"]).improved_resume_content is None


def test_improved_resume_file(pipeline, docx_bytes):
    out = pipeline.ingest(docx_bytes, "resume.docx", job_description=JD, target_role="Senior Backend  Engineer")
    with pytest.raises(NotFound):
        pipeline.improved_resume_file(out["resumeId"])
    pipeline.generate_improved(out["resumeId"])
    assert pipeline.improved_resume_file(out["resumeId"]) == (
        "improved-resume-senior-backend-engineer.txt", "Improved resume text",
    )


def test_second_analysis_for_same_resume_is_rejected(pipeline, store, docx_bytes):
    out = pipeline.ingest(docx_bytes, "resume.docx")
    with pytest.raises(DuplicateRecord):
        store.create_analysis(out["resumeId"], 1, {}, [], {})


PORTFOLIO_DATA = {
    "name": "Jane Doe",
    "title": "Backend Engineer",
    "bio": "Builds reliable services.",
    "skills": ["Go", "Kubernetes"],
    "experience": [{"company": "Acme", "role": "Engineer", "duration": "2019-2024", "description": "APIs"}],
    "education": [{"institution": "MIT", "degree": "BS CS", "year": "2018"}],
}


def test_create_portfolio(pipeline, store):
    resume = store.create_resume("cv.pdf", RESUME_TEXT)
    portfolio = pipeline.create_portfolio({"resumeId": resume.id, "templateId": "technical", "data": PORTFOLIO_DATA})
    assert portfolio.data == PORTFOLIO_DATA
    assert pipeline.portfolio(resume.id).id == portfolio.id


@pytest.mark.parametrize("payload", [
    None,
    {},
    {"resumeId": "x", "templateId": "minimal"},
    {"resumeId": "x", "templateId": "minimal", "data": {"name": "Jane"}},
    {"resumeId": "", "templateId": "minimal", "data": PORTFOLIO_DATA},
])
def test_create_portfolio_validation(pipeline, payload):
    with pytest.raises(ValidationError):
        pipeline.create_portfolio(payload)


def test_create_portfolio_unknown_template(pipeline, store):
    resume = store.create_resume("cv.pdf", RESUME_TEXT)
    with pytest.raises(ValidationError) as err:
        pipeline.create_portfolio({"resumeId": resume.id, "templateId": "neon", "data": PORTFOLIO_DATA})
    assert "creative, minimal, technical" in err.value.message


def test_create_portfolio_unknown_resume(pipeline):
    with pytest.raises(NotFound):
        pipeline.create_portfolio({"resumeId": "ghost", "templateId": "minimal", "data": PORTFOLIO_DATA})


def test_lookups_raise_not_found(pipeline):
    for lookup in (pipeline.resume, pipeline.analysis, pipeline.portfolio, pipeline.job_application):
        with pytest.raises(NotFound):
            lookup("missing")
