"""Stateless splitter for Telegram bot commands.

Supported forms:
- /command
- /command free text arguments
- /command@botname free text arguments

Returns a (command, args) tuple. The command is lowercased without the
leading slash or bot mention; args is the raw remainder with surrounding
whitespace removed, and may be empty.
"""

from __future__ import annotations


def parse_bot_command(text: str, bot_username: str | None = None) -> tuple[str, str]:
    """Split a message text into its command word and argument string.

    Raises ValueError when the text is not a command, or when the command is
    addressed to a different bot.
    """
    if not text or not isinstance(text, str):
        raise ValueError("empty command")

    raw = text.strip()
    if not raw.startswith('/'):
        raise ValueError("not a command")

    parts = raw.split(maxsplit=1)
    head = parts[0][1:]
    args = parts[1].strip() if len(parts) > 1 else ''

    command, _, mention = head.partition('@')
    if not command:
        raise ValueError("empty command")
    if mention and bot_username and mention.lower() != bot_username.lstrip('@').lower():
        raise ValueError(f"command addressed to another bot: @{mention}")

    return command.lower(), args
