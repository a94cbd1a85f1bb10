"""kartel package initializer: expose public API and exceptions."""

from __future__ import annotations

from .api_client import ForexClient
from .config import BotConfig
from .exceptions import (
    ConfigurationError,
    InvalidArgumentsError,
    KartelError,
    NetworkError,
    TelegramError,
)
from .grammar import parse, parse_convert, parse_forex
from .handlers import CommandHandler
from .intents import BaseRates, CommandIntent, Convert, EmptyIntent, PairLookup
from .telegram import TelegramBot

__all__ = [
    'BotConfig',
    'CommandHandler',
    'ForexClient',
    'TelegramBot',
    'parse',
    'parse_forex',
    'parse_convert',
    'CommandIntent',
    'EmptyIntent',
    'PairLookup',
    'BaseRates',
    'Convert',
    'KartelError',
    'InvalidArgumentsError',
    'NetworkError',
    'ConfigurationError',
    'TelegramError',
]
