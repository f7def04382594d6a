# resumelens/routes/resumes.py
from __future__ import annotations

from io import BytesIO

from flask import Blueprint, request, jsonify, current_app, send_file

from . import get_pipeline
from ..errors import NoFileProvided, ResumeLensError

resumes_bp = Blueprint("resumes", __name__)


@resumes_bp.post("/resumes/upload")
def upload_resume():
    upload = request.files.get("file")
    if upload is None or not upload.filename:
        raise NoFileProvided()

    try:
        result = get_pipeline().ingest(
            upload.read(),
            upload.filename,
            job_description=request.form.get("jobDescription"),
            target_role=request.form.get("targetRole"),
        )
    except ResumeLensError as e:
        current_app.logger.warning("Resume upload failed (%s): %s", e.__class__.__name__, e.message)
        raise
    except Exception:
        current_app.logger.exception("Unhandled error in /resumes/upload")
        return jsonify(error="Failed to process resume"), 500
    return jsonify(result), 200


@resumes_bp.get("/resumes/<resume_id>")
def get_resume(resume_id):
    return jsonify(get_pipeline().resume(resume_id).to_dict())


@resumes_bp.get("/resumes/<resume_id>/analysis")
def get_analysis(resume_id):
    return jsonify(get_pipeline().analysis(resume_id).to_dict())


@resumes_bp.get("/resumes/<resume_id>/job-application")
def get_job_application(resume_id):
    return jsonify(get_pipeline().job_application(resume_id).to_dict())


@resumes_bp.post("/resumes/<resume_id>/generate-improved")
def generate_improved(resume_id):
    try:
        result = get_pipeline().generate_improved(resume_id)
    except ResumeLensError:
        raise
    except Exception:
        current_app.logger.exception("Unhandled error in /generate-improved")
        return jsonify(error="Failed to generate improved resume"), 500
    return jsonify(result), 200


@resumes_bp.get("/resumes/<resume_id>/improved-resume")
def download_improved(resume_id):
    filename, text = get_pipeline().improved_resume_file(resume_id)
    return send_file(
        BytesIO(text.encode("utf-8")),
        mimetype="text/plain",
        as_attachment=True,
        download_name=filename,
    )
