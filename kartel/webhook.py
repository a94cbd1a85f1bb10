"""Webhook HTTP server for production mode.

Telegram posts updates to ``/webhook``; ``/ping`` answers health checks.
"""

from __future__ import annotations

import hmac
from typing import Any

from fastapi import Body, FastAPI, Header, HTTPException
from fastapi.responses import PlainTextResponse

from utils.logging_setup import get_logger

from .telegram import TelegramBot

logger = get_logger('webhook')

WEBHOOK_PATH = '/webhook'


def create_app(bot: TelegramBot, secret_token: str | None = None) -> FastAPI:
    app = FastAPI(title="kartel", docs_url=None, redoc_url=None, openapi_url=None)

    @app.get('/ping', response_class=PlainTextResponse)
    def ping() -> str:
        return 'pong'

    # sync endpoint: FastAPI runs it in its threadpool
    @app.post(WEBHOOK_PATH)
    def receive_update(
        update: dict[str, Any] = Body(...),
        x_telegram_bot_api_secret_token: str | None = Header(default=None),
    ) -> dict[str, bool]:
        if secret_token and not hmac.compare_digest(
            x_telegram_bot_api_secret_token or '', secret_token
        ):
            logger.warning("Rejected webhook call with a wrong secret token")
            raise HTTPException(status_code=403, detail="Invalid secret token")
        try:
            bot.handle_update(update)
        except Exception:
            # Telegram redelivers on non-2xx; a crashing update must not loop
            logger.exception(f"Webhook handler error for update {update.get('update_id')}")
        return {'ok': True}

    return app
