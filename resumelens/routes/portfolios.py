# resumelens/routes/portfolios.py
from flask import Blueprint, request, jsonify, current_app

from . import get_pipeline
from ..errors import ResumeLensError

portfolios_bp = Blueprint("portfolios", __name__)


@portfolios_bp.post("/portfolios")
def create_portfolio():
    # every failure here is the caller's: bad body, unknown template or resume
    try:
        portfolio = get_pipeline().create_portfolio(request.get_json(silent=True))
    except ResumeLensError as e:
        current_app.logger.info("Create portfolio rejected: %s", e.message)
        return jsonify(error=e.message), 400
    except Exception:
        current_app.logger.exception("Create portfolio error")
        return jsonify(error="Failed to create portfolio"), 400
    return jsonify(portfolio.to_dict()), 200


@portfolios_bp.get("/resumes/<resume_id>/portfolio")
def get_portfolio(resume_id):
    return jsonify(get_pipeline().portfolio(resume_id).to_dict())


@portfolios_bp.get("/portfolio-templates")
def list_templates():
    templates = current_app.config.get("PORTFOLIO_TEMPLATES") or {}
    return jsonify([
        {"id": tid, "name": name, "description": desc, "tags": list(tags)}
        for tid, (name, desc, tags) in templates.items()
    ])
