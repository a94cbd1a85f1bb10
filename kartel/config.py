"""Bot configuration.

- Non-destructive recursive merge of defaults into a JSON file's content
- KARTEL_* environment variables override both
- Dotted-key access: cfg.get('forex.default_base')

One BotConfig is built at start and handed to the components that need it.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .exceptions import ConfigurationError
from .queries import ForexDefaults

logger = logging.getLogger(__name__)

ENV_PREFIX = 'KARTEL_'

MODES = ('polling', 'webhook')

DEFAULTS: dict[str, Any] = {
    'bot': {
        'token': '',
        'username': '',
        # polling for development, webhook for production
        'mode': 'polling',
        'allowed_chat_ids': [],
        'poll_timeout_sec': 25,
    },
    'webhook': {
        'url': 'https://api.mfirhas.com/webhook',
        'host': '0.0.0.0',
        'port': 8080,
        'secret': '',
    },
    'forex': {
        'convert_endpoint': 'https://api.mfirhas.com/pfm/forex/convert',
        'convert_v2_endpoint': 'https://api.mfirhas.com/pfm/v2/forex/convert',
        'rates_endpoint': 'https://api.mfirhas.com/pfm/forex/rates',
        'default_base': 'USD',
        'default_batch': [
            ['USD 1', 'IDR'],
            ['BTC 1', 'USD'],
            ['XAU 1', 'USD'],
            ['XAU 1', 'IDR'],
            ['XAG 1', 'USD'],
            ['XAG 1', 'IDR'],
        ],
        'default_conversion': ['USD 1', 'IDR'],
    },
    'http': {
        'timeout_sec': 10.0,
        'pool_size': 32,
    },
    'logging': {
        'level': 'INFO',
        'file': None,
    },
}

# env var suffix -> (dotted key, converter)
ENV_OVERRIDES: dict[str, tuple[str, Any]] = {
    'BOT_TOKEN': ('bot.token', str),
    'BOT_USERNAME': ('bot.username', str),
    'MODE': ('bot.mode', str),
    'ALLOWED_CHAT_IDS': (
        'bot.allowed_chat_ids',
        lambda v: [s.strip() for s in v.split(',') if s.strip()],
    ),
    'WEBHOOK_URL': ('webhook.url', str),
    'WEBHOOK_HOST': ('webhook.host', str),
    'WEBHOOK_PORT': ('webhook.port', int),
    'WEBHOOK_SECRET': ('webhook.secret', str),
    'HTTP_TIMEOUT_SEC': ('http.timeout_sec', float),
    'LOG_LEVEL': ('logging.level', str),
    'LOG_FILE': ('logging.file', str),
}


class BotConfig:
    """Configuration values of the bot process."""

    def __init__(
        self,
        config_file: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.config_file = Path(config_file) if config_file else None
        self.config: dict[str, Any] = {}
        self.load_config(os.environ if environ is None else environ)

    def load_config(self, environ: Mapping[str, str]) -> None:
        """Load the file, merge defaults, then apply environment overrides."""
        if self.config_file is not None:
            if not self.config_file.exists():
                raise ConfigurationError(f"config file not found: {self.config_file}")
            try:
                with open(self.config_file, encoding='utf-8') as f:
                    loaded = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise ConfigurationError(f"cannot read config {self.config_file}: {e}") from e
            if not isinstance(loaded, dict):
                raise ConfigurationError(f"config {self.config_file} must hold a JSON object")
            self.config = loaded
            logger.debug(f"Configuration loaded from {self.config_file}")

        self._merge_defaults(self.config, copy.deepcopy(DEFAULTS))
        self._apply_env(environ)

    def _merge_defaults(self, cfg: dict[str, Any], defaults: dict[str, Any]) -> None:
        """Add missing keys recursively without overwriting existing values."""
        for key, def_val in defaults.items():
            if key not in cfg:
                cfg[key] = def_val
            elif isinstance(def_val, dict) and isinstance(cfg.get(key), dict):
                self._merge_defaults(cfg[key], def_val)

    def _apply_env(self, environ: Mapping[str, str]) -> None:
        for suffix, (key, convert) in ENV_OVERRIDES.items():
            raw = environ.get(ENV_PREFIX + suffix)
            if raw is None or raw == '':
                continue
            try:
                self.set(key, convert(raw))
            except ValueError as e:
                raise ConfigurationError(f"invalid {ENV_PREFIX}{suffix}={raw!r}: {e}") from e

    def get(self, key: str, default: Any = None) -> Any:
        value: Any = self.config
        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        if not key:
            raise ValueError("config key cannot be empty")
        keys = key.split('.')
        config = self.config
        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]
        config[keys[-1]] = value

    def validate_config(self, require_token: bool = True) -> None:
        """Raise ConfigurationError when the process cannot start with these values."""
        if require_token and not self.bot_token:
            raise ConfigurationError(
                "bot token is missing",
                user_message=f"Set {ENV_PREFIX}BOT_TOKEN or bot.token in the config file.",
            )
        if self.mode not in MODES:
            raise ConfigurationError(f"unknown mode {self.mode!r}, expected one of {MODES}")
        if self.mode == 'webhook' and not self.get('webhook.url'):
            raise ConfigurationError("webhook mode requires webhook.url")
        batch = self.get('forex.default_batch')
        if not isinstance(batch, list) or not all(
            isinstance(q, (list, tuple)) and len(q) == 2 for q in batch
        ):
            raise ConfigurationError("forex.default_batch must be a list of [from, to] pairs")
        conversion = self.get('forex.default_conversion')
        if not isinstance(conversion, (list, tuple)) or len(conversion) != 2:
            raise ConfigurationError("forex.default_conversion must be a [from, to] pair")

    # ---- typed accessors ----
    @property
    def bot_token(self) -> str:
        return str(self.get('bot.token') or '')

    @property
    def mode(self) -> str:
        return str(self.get('bot.mode') or 'polling').lower()

    @property
    def allowed_chat_ids(self) -> list[str]:
        return [str(c) for c in self.get('bot.allowed_chat_ids') or []]

    def forex_defaults(self) -> ForexDefaults:
        conversion = self.get('forex.default_conversion')
        return ForexDefaults(
            base=str(self.get('forex.default_base')),
            batch=tuple((str(f), str(t)) for f, t in self.get('forex.default_batch')),
            conversion=(str(conversion[0]), str(conversion[1])),
        )
