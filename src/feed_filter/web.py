"""Flask adapter exposing the feed filter over HTTP."""

from __future__ import annotations

from flask import Flask, Response, request

from .config import Settings, get_settings
from .pipeline import handle_request


def create_app(settings: Settings | None = None) -> Flask:
    app = Flask(__name__)
    app.config["SETTINGS"] = settings or get_settings()

    @app.get("/filter")
    def filter_feed():
        params = {
            "feedUrl": request.args.get("feedUrl"),
            "type": request.args.get("type"),
            "pattern": request.args.get("pattern"),
        }
        result = handle_request(params, settings=app.config["SETTINGS"])
        return Response(result.body, status=result.status_code, headers=result.headers)

    return app


__all__ = ["create_app"]
