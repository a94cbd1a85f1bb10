"""Error taxonomy of the bot.

Every error carries a `user_message`, the text that is safe to send back
to the chat, next to the internal `message` used for logging.
"""

from __future__ import annotations

from typing import Any


class KartelError(Exception):
    """Base exception for bot errors."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.user_message = user_message or message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class InvalidArgumentsError(KartelError):
    """The command arguments typed by the user are malformed."""

    def __init__(self, message: str, **kwargs: Any):
        kwargs.setdefault('error_code', 'INVALID_ARGUMENTS')
        super().__init__(message, **kwargs)


class NetworkError(KartelError):
    """The call to the pricing API failed before a usable envelope came back."""

    def __init__(self, message: str, **kwargs: Any):
        kwargs.setdefault('error_code', 'NETWORK')
        kwargs.setdefault(
            'user_message', "Failed calling the forex service, please try again later."
        )
        super().__init__(message, **kwargs)


class ConfigurationError(KartelError):
    """Process configuration is missing or invalid."""

    def __init__(self, message: str, **kwargs: Any):
        kwargs.setdefault('error_code', 'CONFIG')
        super().__init__(message, **kwargs)


class TelegramError(KartelError):
    """The Telegram Bot API rejected or failed a request."""

    def __init__(self, message: str, response: Any = None, **kwargs: Any):
        kwargs.setdefault('error_code', 'TELEGRAM')
        super().__init__(message, **kwargs)
        self.response = response
