from __future__ import annotations
from flask import Flask, current_app

from ..services.pipeline import ResumePipeline

def get_pipeline() -> ResumePipeline:
    """Pipeline bound to the app's store and AI collaborators."""
    cfg = current_app.config
    return ResumePipeline(
        store=cfg["RECORD_STORE"],
        ai=cfg["RESUME_AI"],
        max_upload_bytes=cfg["MAX_UPLOAD_BYTES"],
        portfolio_templates=cfg.get("PORTFOLIO_TEMPLATES"),
    )

def register_routes(app: Flask) -> None:
    from .resumes import resumes_bp
    from .portfolios import portfolios_bp

    # Core blueprints
    app.register_blueprint(resumes_bp)
    app.register_blueprint(portfolios_bp)

    # -------- /api aliases (same views, second mount point) --------
    app.register_blueprint(resumes_bp, url_prefix="/api", name="api_resumes")
    app.register_blueprint(portfolios_bp, url_prefix="/api", name="api_portfolios")
