"""Typed command intents produced by the argument grammar."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Union


@dataclass(frozen=True)
class EmptyIntent:
    """No arguments were given; the command falls back to its defaults."""


@dataclass(frozen=True)
class PairLookup:
    left: str
    right: str
    date: datetime | None = None

    @property
    def pair(self) -> str:
        return f"{self.left}/{self.right}"


@dataclass(frozen=True)
class BaseRates:
    base: str
    date: datetime | None = None


@dataclass(frozen=True)
class Convert:
    from_currency: str
    # kept as typed by the user, e.g. "50,000" or "0.5"
    from_amount: str
    to_currency: str
    date: datetime | None = None


CommandIntent = Union[EmptyIntent, PairLookup, BaseRates, Convert]

__all__ = ['EmptyIntent', 'PairLookup', 'BaseRates', 'Convert', 'CommandIntent']
