# resumelens/__init__.py
from __future__ import annotations
import logging
from datetime import datetime, timezone

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from .config import get_config
from .errors import ResumeLensError
from .extensions import init_openai, init_resume_ai, init_store
from .routes import register_routes

def create_app(env: str | None = None, store=None, ai=None) -> Flask:
    """
    Application factory. ``store`` and ``ai`` override the default in-memory
    store and OpenAI-backed collaborators (tests pass fakes here).
    """
    app = Flask(__name__)
    app.config.from_object(get_config(env))
    app.config["MAX_CONTENT_LENGTH"] = app.config["MAX_UPLOAD_BYTES"]

    # CORS & logging
    CORS(app, origins=app.config["CORS_ORIGINS"] or "*")
    logging.basicConfig(level=app.config["LOG_LEVEL"])

    # Extensions / clients
    if ai is None:
        ai = init_resume_ai(app.config, init_openai(app.config))
    app.config["RESUME_AI"] = ai
    app.config["RECORD_STORE"] = store if store is not None else init_store()

    # ---------- Errors ----------
    @app.errorhandler(ResumeLensError)
    def handle_domain_error(e: ResumeLensError):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(e):
        mb = app.config["MAX_UPLOAD_BYTES"] / (1024 * 1024)
        return jsonify(error=f"File too large. Maximum upload size is {mb:g} MB."), 413

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify(error=e.name), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        app.logger.exception("Unhandled error on %s", request.path)
        return jsonify(error="Internal server error"), 500

    # ---------- Blueprints ----------
    register_routes(app)

    # Optional: simple health endpoint
    @app.get("/healthz")
    def health():
        return {"ok": True, "ts": datetime.now(timezone.utc).isoformat()}

    return app
