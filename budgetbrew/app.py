# app.py
"""
Flask application factory.

- Loads env/config
- Initializes Firebase Admin (optional, for token verification)
- Enables CORS for /api/*
- Opens the JSON datastore (seeding it on first run)
- Registers blueprints: users, quiz, potions, teams, expenses, academy
- Serves the static frontend from STATIC_FOLDER when present
"""

from __future__ import annotations
import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

# ---- Load .env early ----
load_dotenv()

# ---- Config & blueprints ----
from budgetbrew import __version__
from budgetbrew.config import Config
from budgetbrew.errors import ApiError, DataStoreError
from budgetbrew.services.datastore import init_store
from budgetbrew.services.firebase import init_firebase_admin
from budgetbrew.routes.users import users_bp
from budgetbrew.routes.quiz import quiz_bp
from budgetbrew.routes.potions import potions_bp
from budgetbrew.routes.teams import teams_bp
from budgetbrew.routes.expenses import expenses_bp
from budgetbrew.routes.academy import academy_bp

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# App Factory
# ---------------------------------------------------------------------
def create_app(overrides: dict | None = None) -> Flask:
    settings = {k: getattr(Config, k) for k in dir(Config) if k.isupper()}
    settings.update(overrides or {})

    app = Flask(
        __name__,
        static_folder=str(Path(settings["STATIC_FOLDER"]).resolve()),
        static_url_path="",
    )
    app.config.from_mapping(settings)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    # CORS for the static frontend / local dev; lock down origins in production
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    if "FIREBASE_ENABLED" not in app.config:
        app.config["FIREBASE_ENABLED"] = init_firebase_admin(app.config.get("FIREBASE_AUTH", "auto"))

    init_store(app)

    # --- Register blueprints ---
    for bp in (users_bp, quiz_bp, potions_bp, teams_bp, expenses_bp, academy_bp):
        app.register_blueprint(bp, url_prefix="/api")

    # --- Health (public) ---
    @app.get("/api/health")
    def health():
        return jsonify({
            "status": "ok",
            "message": "Server is running",
            "timestamp": int(time.time() * 1000),
            "service": "budgetbrew",
            "version": __version__,
        })

    @app.get("/api/test/routes")
    def routes():
        rules = []
        for r in app.url_map.iter_rules():
            rules.append({
                "rule": r.rule,
                "methods": sorted(m for m in r.methods if m not in {"HEAD", "OPTIONS"})
            })
        return jsonify(sorted(rules, key=lambda x: x["rule"]))

    @app.get("/api/test/ping")
    def test_ping():
        """Simple ping test"""
        return jsonify({
            "ok": True,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "message": "Pong! Backend is responding."
        }), 200

    @app.get("/")
    def index():
        return app.send_static_file("index.html")

    # --- JSON error handlers ---
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        if isinstance(err, DataStoreError):
            logger.error("Datastore failure: %s", err)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(400)
    def handle_400(err):
        return jsonify({"error": err.description}), 400

    @app.errorhandler(404)
    def handle_404(err):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        if isinstance(err, HTTPException):
            return jsonify({"error": err.description}), err.code
        logger.exception("Unhandled error: %s", err)
        return jsonify({"error": "Server error"}), 500

    return app


# ---------------------------------------------------------------------
# Dev Server Launcher
# ---------------------------------------------------------------------
def main():
    app = create_app()
    port = int(os.getenv("PORT", str(app.config["PORT"])))
    logger.info("BudgetBrew server running on http://localhost:%s", port)
    logger.info("API endpoints available at http://localhost:%s/api", port)
    app.run(host="0.0.0.0", port=port, debug=os.getenv("FLASK_DEBUG") == "1")


if __name__ == "__main__":
    main()
