"""Environment loading utilities (simple .env parser).

Usage:
    from utils.env import load_dotenv_safe
    load_dotenv_safe()

Won't overwrite existing environment variables. Unreadable files are skipped.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

DEFAULT_ENV_FILENAMES: Iterable[str] = ('.env', '.env.local')


def _parse_value(raw: str) -> str:
    raw = raw.strip()
    if raw.startswith(('"', "'")) and len(raw) > 1:
        q = raw[0]
        closing = raw.find(q, 1)
        if closing != -1:
            return raw[1:closing]
    if '#' in raw:
        raw = raw.split('#', 1)[0].rstrip()
    return raw


def load_dotenv_safe(
    filenames: Iterable[str] = DEFAULT_ENV_FILENAMES, base: Path | None = None
) -> list[Path]:
    """Load KEY=VALUE lines into os.environ, returning the files that were read."""
    base = base or Path(__file__).resolve().parent.parent
    loaded: list[Path] = []
    for name in filenames:
        path = base / name
        if not path.exists():
            continue
        try:
            text = path.read_text(encoding='utf-8')
        except OSError:
            continue
        for line in text.splitlines():
            line = line.strip()
            if not line or line.startswith('#') or '=' not in line:
                continue
            k, v = line.split('=', 1)
            k = k.strip()
            if k.startswith('export '):
                k = k[len('export '):].strip()
            if k and k not in os.environ:
                os.environ[k] = _parse_value(v)
        loaded.append(path)
    return loaded
