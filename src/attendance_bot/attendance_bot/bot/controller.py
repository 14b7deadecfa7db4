from __future__ import annotations

import hmac
import logging
from datetime import datetime, timezone

from flask import Flask, abort, jsonify, request

from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    token = container.settings.bot_token

    def _check_token(path_token: str) -> None:
        if not hmac.compare_digest(path_token, token):
            abort(404)

    @app.route("/webhook/<path_token>", methods=["POST"], endpoint="webhook")
    def webhook(path_token: str):
        _check_token(path_token)
        update = request.get_json(silent=True) or {}
        logger.debug("Webhook update %s", update.get("update_id"))
        try:
            container.bot_service.handle_update(update)
        except Exception:
            # Telegram retries non-200 answers forever; the failure is logged instead.
            logger.exception("Unhandled error for update %s", update.get("update_id"))
        return jsonify({"ok": True})

    @app.route("/webhook/<path_token>", methods=["GET"], endpoint="webhook_status")
    def webhook_status(path_token: str):
        _check_token(path_token)
        return jsonify(
            {
                "status": "webhook endpoint active",
                "webhook_url": f"{container.settings.webhook_url}/webhook/<token>" if container.settings.webhook_url else "",
            }
        )

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok", "time": datetime.now(timezone.utc).isoformat()})
