"""HTTP entrypoint exposing the worst-rated search (Cloud Run friendly)."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from flask import Flask, current_app, jsonify, request

from flopmap.core.config import get_settings
from flopmap.core.location import suggest_queries
from flopmap.core.models import SearchFailure
from flopmap.core.pipeline import SearchStack, build_search_service
from flopmap.etl.transform import to_failure_payload, to_search_payload

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

FAILURE_STATUS = {
    "InvalidInput": 400,
    "LocationNotResolved": 400,
    "ProviderQuotaExceeded": 429,
    "ProviderUnavailable": 503,
    "InternalError": 500,
}


def create_app(stack: Optional[SearchStack] = None) -> Flask:
    """Build the Flask app; the search stack is created on first use when not given."""
    app = Flask(__name__)
    app.config["SEARCH_STACK"] = stack
    _register_routes(app)
    return app


def _stack() -> SearchStack:
    stack = current_app.config.get("SEARCH_STACK")
    if stack is None:
        stack = build_search_service(get_settings())
        current_app.config["SEARCH_STACK"] = stack
    return stack


# ---------- Routes ----------


def _register_routes(app: Flask) -> None:
    @app.get("/")
    def root() -> Any:
        """Simple root to avoid 404 on GET /"""
        return "ok", 200

    @app.get("/healthz")
    def healthcheck() -> Any:
        """Lightweight health endpoint; does not call any provider."""
        settings = get_settings()
        return (
            jsonify(
                {
                    "status": "ok",
                    "api_key_configured": bool(settings.google_api_key),
                    "revision": os.getenv("K_REVISION", "unknown"),
                    "region": os.getenv("X_GOOGLE_RUNTIMEREGION", "unknown"),
                }
            ),
            200,
        )

    @app.get("/healthz/providers")
    def provider_health() -> Any:
        """Probe the geocoding and Places APIs with one cheap request each."""
        try:
            stack = _stack()
        except RuntimeError as exc:
            return jsonify({"status": "error", "error": str(exc)}), 500

        checks = {
            "geocoding": stack.geocoder.check_connection(),
            "places": stack.places.check_connection(),
        }
        healthy = all(check["ok"] for check in checks.values())
        return jsonify({"status": "ok" if healthy else "degraded", "checks": checks}), 200 if healthy else 503

    @app.post("/search")
    def search() -> Any:
        """
        Search the worst-rated places around a location.
        Required JSON field: query
        Optional: radius (int, meters), maxResults (int), placeTypes (list of str)
        """
        payload: Dict[str, Any] = request.get_json(silent=True) or {}
        if not isinstance(payload, dict):
            failure = SearchFailure(
                kind="InvalidInput",
                message="Paramètres invalides",
                details=["Le corps de la requête doit être un objet JSON"],
            )
            return jsonify(to_failure_payload(failure)), FAILURE_STATUS[failure.kind]

        try:
            stack = _stack()
        except RuntimeError as exc:
            logger.error("Search service misconfigured: %s", exc)
            return jsonify({"success": False, "kind": "InternalError", "error": "Configuration API manquante"}), 500

        outcome = stack.service.search(
            payload.get("query"),
            radius=payload.get("radius"),
            max_results=payload.get("maxResults"),
            categories=payload.get("placeTypes"),
        )
        if isinstance(outcome, SearchFailure):
            return jsonify(to_failure_payload(outcome)), FAILURE_STATUS.get(outcome.kind, 500)

        return jsonify(to_search_payload(outcome, photo_url=stack.places.photo_url)), 200

    @app.get("/search/suggestions")
    def suggestions() -> Any:
        query = request.args.get("query", "")
        return jsonify({"success": True, "suggestions": suggest_queries(query)}), 200


app = create_app()


def main() -> None:
    """
    Cloud Run injects PORT (usually 8080); fall back to settings for local runs.
    """
    port = get_settings().worker_port
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
