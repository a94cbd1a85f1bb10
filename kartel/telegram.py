"""Telegram Bot API transport: long polling, webhook registration, replies."""

from __future__ import annotations

import threading
import time
from typing import Any

import requests

from utils.http_client import HTTPClient
from utils.logging_setup import get_logger
from utils.telegram_commands import parse_bot_command

from .exceptions import TelegramError
from .handlers import COMMANDS, CommandHandler

logger = get_logger('telegram')

API_BASE = 'https://api.telegram.org'


class TelegramBot:
    """Receives updates from Telegram and answers commands through a CommandHandler."""

    def __init__(
        self,
        bot_token: str,
        http: HTTPClient,
        handler: CommandHandler,
        allowed_chat_ids: list[str] | None = None,
        bot_username: str | None = None,
    ):
        self.bot_token = bot_token
        self.http = http
        self.handler = handler
        self.allowed_chat_ids = {str(c) for c in allowed_chat_ids or []}
        self.bot_username = bot_username or None
        self.base_url = f"{API_BASE}/bot{bot_token}"
        self._polling = False
        self._thread: threading.Thread | None = None
        self._last_update_id: int | None = None
        # consecutive getUpdates failures, drives the polling backoff
        self._err_count = 0

    # ------------ Outbound ------------
    def _call(self, method: str, payload: dict[str, Any], timeout: float | None = None) -> Any:
        """Call a Bot API method and return its ``result``; raise on failure."""
        resp = self.http.post(f"{self.base_url}/{method}", json=payload, timeout=timeout)
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        if resp.status_code >= 400 or not body.get('ok', False):
            desc = body.get('description') or f"HTTP {resp.status_code}"
            raise TelegramError(f"telegram {method} failed: {desc}", response=body)
        return body.get('result')

    def send_message(
        self,
        chat_id: int | str,
        text: str,
        reply_to_message_id: int | None = None,
        parse_mode: str | None = 'HTML',
    ) -> bool:
        """Send a message to a chat, optionally as a reply; False on failure."""
        data: dict[str, Any] = {'chat_id': chat_id, 'text': text}
        if parse_mode:
            data['parse_mode'] = parse_mode
        if reply_to_message_id is not None:
            data['reply_parameters'] = {
                'message_id': reply_to_message_id,
                'allow_sending_without_reply': True,
            }
        try:
            self._call('sendMessage', data)
            return True
        except (requests.RequestException, TelegramError) as e:
            logger.error(f"Telegram sendMessage error for chat {chat_id}: {e}")
            return False

    def set_bot_commands(self, commands: dict[str, str] | None = None) -> bool:
        """Publish the command menu shown by Telegram clients."""
        commands = commands or COMMANDS
        payload = {'commands': [{'command': k, 'description': v} for k, v in commands.items()]}
        try:
            self._call('setMyCommands', payload)
            return True
        except (requests.RequestException, TelegramError) as e:
            logger.warning(f"Telegram setMyCommands error: {e}")
            return False

    def set_webhook(self, url: str, secret_token: str | None = None) -> bool:
        payload: dict[str, Any] = {'url': url, 'allowed_updates': ['message']}
        if secret_token:
            payload['secret_token'] = secret_token
        try:
            self._call('setWebhook', payload)
            logger.info(f"Webhook registered at {url}")
            return True
        except (requests.RequestException, TelegramError) as e:
            logger.error(f"Telegram setWebhook error: {e}")
            return False

    def delete_webhook(self) -> bool:
        try:
            self._call('deleteWebhook', {})
            return True
        except (requests.RequestException, TelegramError) as e:
            logger.warning(f"Telegram deleteWebhook error: {e}")
            return False

    # ------------ Inbound ------------
    def handle_update(self, update: dict[str, Any]) -> bool:
        """Answer one update. Returns True when a command was handled."""
        msg = update.get('message') or {}
        chat = msg.get('chat') or {}
        chat_id = chat.get('id')
        text = msg.get('text')
        if chat_id is None or not text:
            return False
        if self.allowed_chat_ids and str(chat_id) not in self.allowed_chat_ids:
            logger.debug(f"Ignoring message from chat {chat_id}")
            return False

        try:
            command, args = parse_bot_command(text, self.bot_username)
        except ValueError:
            return False
        if not self.handler.knows(command):
            return False

        replied = msg.get('reply_to_message')
        replied_text = None
        if isinstance(replied, dict):
            # empty string: a reply without text or caption
            replied_text = replied.get('text') or replied.get('caption') or ''
        reply_to = msg.get('message_id')
        # mock the replied-to message in place
        if command == 'spongebob' and replied_text:
            reply_to = replied.get('message_id', reply_to)

        logger.info(f"/{command} from chat {chat_id}")
        self.handler.handle(
            command,
            args,
            lambda out: self.send_message(chat_id, out, reply_to_message_id=reply_to),
            replied_text=replied_text,
        )
        return True

    def get_updates(self, timeout: int = 20) -> list[dict]:
        """Fetch new updates via long polling; offset tracking avoids duplicates."""
        params: dict[str, Any] = {'timeout': timeout, 'allowed_updates': '["message"]'}
        if self._last_update_id is not None:
            params['offset'] = self._last_update_id + 1
        try:
            resp = self.http.get(f"{self.base_url}/getUpdates", params=params, timeout=timeout + 5)
            resp.raise_for_status()
            data = resp.json()
            if not isinstance(data, dict):
                raise ValueError(f"unexpected getUpdates body: {type(data).__name__}")
            updates = data.get('result') or []
            if not isinstance(updates, list):
                raise ValueError(f"unexpected getUpdates result: {type(updates).__name__}")
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Telegram getUpdates error: {e}")
            self._err_count = min(8, self._err_count + 1)
            return []
        updates = [u for u in updates if isinstance(u, dict)]
        if updates:
            self._last_update_id = updates[-1].get('update_id', self._last_update_id)
        self._err_count = 0
        return updates

    def poll_once(self, timeout: int = 20) -> int:
        """Fetch and handle one batch of updates; returns how many were handled."""
        handled = 0
        for upd in self.get_updates(timeout=timeout):
            try:
                if self.handle_update(upd):
                    handled += 1
            except Exception:
                logger.exception(f"Telegram handler error for update {upd.get('update_id')}")
        return handled

    def backoff_delay(self) -> float:
        """Pause between polls; doubles with each consecutive error."""
        base = 0.5
        return min(10.0, base * (2 ** self._err_count)) if self._err_count else 0.0

    def start_polling(self, timeout: int = 25) -> threading.Thread:
        """Start a background thread polling Telegram until stop_polling()."""
        if self._thread is not None and self._thread.is_alive():
            return self._thread

        def _loop() -> None:
            logger.info("Polling for Telegram updates...")
            while self._polling:
                try:
                    self.poll_once(timeout=timeout)
                except Exception:
                    logger.exception("Telegram polling iteration failed")
                    self._err_count = min(8, self._err_count + 1)
                delay = self.backoff_delay()
                if delay:
                    time.sleep(delay)
            logger.info("Polling stopped")

        self._polling = True
        self._thread = threading.Thread(target=_loop, name='telegram-polling', daemon=True)
        self._thread.start()
        return self._thread

    def stop_polling(self) -> None:
        self._polling = False
