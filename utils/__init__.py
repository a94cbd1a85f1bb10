from .env import load_dotenv_safe  # noqa: F401
from .http_client import HTTPClient  # noqa: F401
from .logging_setup import get_logger, setup_logging  # noqa: F401
from .telegram_commands import parse_bot_command  # noqa: F401

__all__ = ['load_dotenv_safe', 'setup_logging', 'get_logger', 'HTTPClient', 'parse_bot_command']
