"""
Main entry point for the question of the day bot.

Usage:
    python bot_main.py          # Tick every minute, post once a day
    python bot_main.py --once   # Run a single cycle and exit
"""

import asyncio
import sys
from typing import List, Optional

from pydantic import ValidationError

from integrations.source import PastebinSource
from integrations.webhook import DiscordWebhookNotifier
from questions.errors import QotdError
from questions.store import create_store
from scheduler.bot_service import QuestionBot
from scheduler.models import SchedulerConfig
from utilities.config import BotConfig
from utilities.logger import get_logger, setup_logging

# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


def build_bot(config: BotConfig) -> QuestionBot:
    """
    Wire the bot's collaborators from configuration.

    Args:
        config: Validated bot configuration

    Returns:
        A ready-to-start QuestionBot.
    """
    scheduler_config = SchedulerConfig(
        post_at=config.post_at,
        timezone=config.timezone,
        tick_interval_seconds=config.tick_interval_seconds,
        continue_on_error=config.continue_on_error
    )

    source = PastebinSource(
        url=config.get_source_url(),
        timeout=config.request_timeout,
        retry_attempts=config.retry_attempts,
        retry_delay=config.retry_delay,
        headers={"User-Agent": config.get_user_agent()}
    )

    notifier = DiscordWebhookNotifier(
        webhook_url=config.get_webhook_url(),
        bot_name=config.bot_name,
        timeout=config.request_timeout
    )

    return QuestionBot(scheduler_config, create_store(config), source, notifier)


async def main(argv: Optional[List[str]] = None) -> int:
    """Main function to start the bot."""
    args = sys.argv[1:] if argv is None else argv

    run_once = False
    if args:
        if args[0] == '--once':
            run_once = True
        else:
            print(f"Unknown argument: {args[0]}")
            print("Usage: python bot_main.py [--once]")
            return EXIT_CONFIG_ERROR

    try:
        config = BotConfig()
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}")
        return EXIT_CONFIG_ERROR

    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.get_log_file_path(),
        debug=config.debug
    )
    logger = get_logger(__name__)

    missing = config.missing_settings()
    if missing:
        logger.error("Missing required settings", missing=missing)
        return EXIT_CONFIG_ERROR

    bot = build_bot(config)

    logger.info(
        "Starting question of the day bot",
        mode="once" if run_once else "daemon",
        source=config.get_source_url(),
        webhook_id=config.webhook_id,
        post_at=config.post_at.strftime("%H:%M"),
        timezone=config.timezone,
        store=config.store_backend
    )

    try:
        result = await bot.start(run_once=run_once)
    except QotdError as e:
        logger.error("Bot stopped", error=str(e), error_type=type(e).__name__)
        return EXIT_FAILURE

    if result is not None:
        logger.info("Cycle finished", **result.model_dump(mode="json"))
    else:
        logger.info("Bot stopped")
    return EXIT_SUCCESS


def run() -> None:
    """Console script entry point."""
    try:
        exit_code = asyncio.run(main())
    except KeyboardInterrupt:
        print("Received keyboard interrupt, shutting down...")
        exit_code = EXIT_SUCCESS
    sys.exit(exit_code)


if __name__ == "__main__":
    run()
