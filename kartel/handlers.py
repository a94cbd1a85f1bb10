"""Command handlers: argument text in, reply text out.

CommandHandler owns the policy of each command (what an empty argument
means, which endpoint answers it) and converts every failure into a single
user-visible reply, so one bad command never reaches the transport loop.
"""

from __future__ import annotations

from collections.abc import Callable
from html import escape

from utils.logging_setup import get_logger

from . import grammar, queries, render
from .api_client import ForexClient
from .config import BotConfig
from .exceptions import InvalidArgumentsError, KartelError, NetworkError
from .intents import EmptyIntent
from .queries import ForexDefaults

logger = get_logger('handlers')

GENERIC_FAILURE = "Something went wrong while handling your command, please try again later."

BOT_DESCRIPTION = "This is Teknologi Umum Bot supporting these commands:"

COMMANDS: dict[str, str] = {
    'help': "Show this help message",
    'forex': "Fetch prices of some moneys. Optional date param: YYYY-MM-DD.",
    'convert': "Convert money: <CODE> <AMOUNT> ; <CODE> [; YYYY-MM-DD]",
    'spongebob': "sPoNgEbOb mocking text, or reply to a message with it",
}

Reply = Callable[[str], object]


def to_spongebob(text: str) -> str:
    """Alternate the case of ASCII letters, starting lowercase."""
    out = []
    upper = False
    for ch in text:
        if ch.isascii() and ch.isalpha():
            out.append(ch.upper() if upper else ch.lower())
            upper = not upper
        else:
            out.append(ch)
    return ''.join(out)


class CommandHandler:
    """Resolves a command's arguments, calls the pricing API and renders the reply."""

    def __init__(
        self,
        client: ForexClient,
        defaults: ForexDefaults | None = None,
        convert_endpoint: str | None = None,
    ):
        self.client = client
        self.defaults = defaults or ForexDefaults()
        # /convert talks to its own endpoint version
        self.convert_endpoint = convert_endpoint
        self._commands: dict[str, Callable[[str, str | None], str]] = {
            'help': lambda args, replied: self.help(),
            'start': lambda args, replied: self.help(),
            'forex': lambda args, replied: self.forex(args),
            'convert': lambda args, replied: self.convert(args),
            'spongebob': self.spongebob,
        }

    @classmethod
    def from_config(cls, config: BotConfig, client: ForexClient) -> CommandHandler:
        return cls(
            client,
            defaults=config.forex_defaults(),
            convert_endpoint=config.get('forex.convert_v2_endpoint'),
        )

    def knows(self, command: str) -> bool:
        return command in self._commands

    # ---- commands ----
    def help(self) -> str:
        lines = [BOT_DESCRIPTION]
        lines.extend(f"/{name} - {escape(desc)}" for name, desc in COMMANDS.items())
        return "\n".join(lines)

    def forex(self, args: str) -> str:
        intent = grammar.parse_forex(args)
        built = queries.build(intent, self.defaults)
        if isinstance(intent, EmptyIntent):
            return render.render_batch(self.client.fetch_batch(built))
        return render.render(intent, self.client.fetch(built[0]))

    def convert(self, args: str) -> str:
        intent = grammar.parse_convert(args)
        if isinstance(intent, EmptyIntent):
            query = queries.build_default_conversion(self.defaults)
        else:
            query = queries.build(intent, self.defaults)[0]
        env = self.client.fetch(query, self.convert_endpoint)
        return render.render_conversion(env)

    def spongebob(self, args: str, replied_text: str | None = None) -> str:
        """Mock the replied-to text, or the arguments when not replying.

        ``replied_text`` is None without a reply and empty for a reply that
        carries neither text nor caption.
        """
        if replied_text is not None:
            source = replied_text
        else:
            source = args
        if not source.strip():
            raise InvalidArgumentsError("Provide text or reply to a message")
        return escape(to_spongebob(source))

    # ---- dispatch ----
    def run(self, command: str, args: str, replied_text: str | None = None) -> str:
        """Run a command and return its reply text; never raises."""
        fn = self._commands.get(command)
        if fn is None:
            return escape(f"Unknown command /{command}. Send /help for the list of commands.")
        try:
            return fn(args, replied_text)
        except InvalidArgumentsError as e:
            logger.debug(f"/{command} rejected arguments {args!r}: {e.message}")
            return escape(e.user_message)
        except NetworkError as e:
            logger.warning(f"/{command} failed: {e}")
            return escape(e.user_message)
        except KartelError as e:
            logger.error(f"/{command} failed: {e}")
            return escape(e.user_message)
        except Exception:
            logger.exception(f"/{command} crashed on arguments {args!r}")
            return GENERIC_FAILURE

    def handle(
        self, command: str, args: str, reply: Reply, replied_text: str | None = None
    ) -> None:
        """Run a command and send exactly one reply through ``reply``."""
        reply(self.run(command, args, replied_text))
