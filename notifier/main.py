import asyncio
import logging
import sys

from dotenv import load_dotenv

from notifier.core import ConfigurationError, load_env, resolve_settings, setup_logging
from notifier.core.bot import ChatBot, ChatConnectionError

LOGGER: logging.Logger = logging.getLogger("Bot")


def main() -> None:
    load_dotenv()

    try:
        env = load_env()
    except ConfigurationError as e:
        setup_logging()
        LOGGER.error(str(e))
        sys.exit(1)

    setup_logging(env.log_level)

    try:
        settings = resolve_settings(env)
    except ConfigurationError as e:
        LOGGER.error(str(e))
        sys.exit(1)

    bot = ChatBot(settings)

    try:
        exit_code = asyncio.run(bot.start())
    except ChatConnectionError as e:
        LOGGER.error(str(e))
        exit_code = 1
    except KeyboardInterrupt:
        LOGGER.warning("Shutting down due to KeyboardInterrupt...")
        exit_code = 0

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
