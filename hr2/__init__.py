from __future__ import annotations

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS

from hr2.config import get_config
from hr2.db import init_mongo
from hr2.middlewares.error_handler import init_error_handlers
from hr2.middlewares.logging import init_request_logging
from hr2.middlewares.rate_limit import init_rate_limiting
from hr2.middlewares.request_context import init_request_context
from hr2.routes.admin import admin_bp
from hr2.routes.assessments import assessments_bp
from hr2.routes.auth import auth_bp
from hr2.routes.competencies import competencies_bp
from hr2.routes.core import core_bp
from hr2.routes.reports import reports_bp
from hr2.utils.logging import setup_logging


def create_app() -> Flask:
    load_dotenv()

    cfg = get_config()
    setup_logging(cfg.LOG_LEVEL)

    app = Flask(__name__)
    app.config["CFG"] = cfg
    app.config["TESTING"] = cfg.TESTING

    CORS(
        app,
        origins=cfg.CORS_ORIGINS,
        supports_credentials=cfg.CORS_ALLOW_CREDENTIALS,
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
        expose_headers=["X-Request-ID", "X-RateLimit-Remaining"],
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        max_age=3600,
    )

    init_request_context(app)
    init_rate_limiting(app)
    init_request_logging(app)
    init_error_handlers(app)

    init_mongo(app)

    app.register_blueprint(core_bp)
    app.register_blueprint(auth_bp, url_prefix="/api/v1/auth")
    app.register_blueprint(assessments_bp, url_prefix="/api/v1/assessments")
    app.register_blueprint(competencies_bp, url_prefix="/api/v1/competencies")
    app.register_blueprint(admin_bp, url_prefix="/api/v1/admin")
    app.register_blueprint(reports_bp, url_prefix="/api/v1/reports")

    return app
