#!/usr/bin/env python
"""Kartel Telegram bot launcher.

Reads configuration from an optional JSON file plus KARTEL_* environment
variables (a .env file beside this script is loaded first). Expected keys:
  KARTEL_BOT_TOKEN=...
  KARTEL_MODE=polling|webhook      (optional; default polling)
  KARTEL_WEBHOOK_URL=...           (webhook mode)
  KARTEL_WEBHOOK_SECRET=...        (optional)

Modes:
  polling   long-poll getUpdates; for development
  webhook   serve /webhook and /ping with uvicorn; for production

Examples:
  python run_bot.py
  python run_bot.py --mode webhook --port 8080
  python run_bot.py --config kartel.json --log-level DEBUG
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from kartel import BotConfig, CommandHandler, ConfigurationError, ForexClient, TelegramBot
from utils import HTTPClient, load_dotenv_safe, setup_logging

ROOT = Path(__file__).parent


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Kartel Telegram bot")
    p.add_argument('--config', help='JSON config file')
    p.add_argument('--mode', choices=['polling', 'webhook'], help='override bot.mode')
    p.add_argument('--port', type=int, help='override webhook.port')
    p.add_argument('--log-level', help='override logging.level')
    return p


def load_config(args: argparse.Namespace) -> BotConfig:
    load_dotenv_safe(base=ROOT)
    config = BotConfig(args.config)
    if args.mode:
        config.set('bot.mode', args.mode)
    if args.port:
        config.set('webhook.port', args.port)
    if args.log_level:
        config.set('logging.level', args.log_level)
    config.validate_config()
    return config


def build_bot(config: BotConfig, http: HTTPClient) -> TelegramBot:
    client = ForexClient(
        http,
        convert_endpoint=config.get('forex.convert_endpoint'),
        rates_endpoint=config.get('forex.rates_endpoint'),
    )
    handler = CommandHandler.from_config(config, client)
    return TelegramBot(
        config.bot_token,
        http,
        handler,
        allowed_chat_ids=config.allowed_chat_ids,
        bot_username=config.get('bot.username'),
    )


def run_polling(bot: TelegramBot, config: BotConfig) -> None:
    bot.delete_webhook()
    thread = bot.start_polling(timeout=int(config.get('bot.poll_timeout_sec', 25)))
    try:
        while thread.is_alive():
            thread.join(timeout=1.0)
    except KeyboardInterrupt:
        bot.stop_polling()


def run_webhook(bot: TelegramBot, config: BotConfig) -> None:
    import uvicorn

    from kartel.webhook import create_app

    secret = config.get('webhook.secret') or None
    if not bot.set_webhook(config.get('webhook.url'), secret):
        raise ConfigurationError("failed registering the Telegram webhook")
    app = create_app(bot, secret)
    uvicorn.run(app, host=config.get('webhook.host'), port=int(config.get('webhook.port')))


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args)
    except ConfigurationError as e:
        print(f"Configuration error: {e.user_message}", file=sys.stderr)
        return 2

    logger = setup_logging(
        level=str(config.get('logging.level') or 'INFO'), log_file=config.get('logging.file')
    )
    http = HTTPClient(
        timeout=float(config.get('http.timeout_sec')), pool_size=int(config.get('http.pool_size'))
    )
    bot = build_bot(config, http)
    bot.set_bot_commands()

    logger.info(f"kartel started in {config.mode} mode...")
    try:
        if config.mode == 'webhook':
            run_webhook(bot, config)
        else:
            run_polling(bot, config)
    except ConfigurationError as e:
        logger.error(str(e))
        return 2
    finally:
        http.close()
    return 0


if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())
