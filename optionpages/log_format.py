import logging
import os

from colorama import Back, Fore, Style, init

PACKAGE_LOGGER_NAME = "optionpages"


class ColorizedFormatter(logging.Formatter):
    level_colors = {
        logging.DEBUG: Fore.CYAN,
        logging.INFO: Fore.GREEN,
        logging.WARNING: Fore.YELLOW,
        logging.ERROR: Fore.RED,
        logging.CRITICAL: Fore.RED + Back.WHITE + Style.BRIGHT,
    }

    def format(self, record):
        level_color = self.level_colors.get(record.levelno, "")
        reset_color = Style.RESET_ALL
        message = super().format(record)
        return f"{level_color}{message}{reset_color}"


def configure_logging(level=None, stream=None):
    """Attach a colorized console handler to the package logger.

    Calling this more than once replaces the previously installed handler.
    """
    init(autoreset=True)

    if level is None:
        level = os.environ.get("OPTIONPAGES_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    logger.setLevel(level)

    for handler in logger.handlers[:]:
        if getattr(handler, "_optionpages_console", False):
            logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream)
    console_handler.setLevel(level)
    console_handler.setFormatter(ColorizedFormatter("%(asctime)s [%(levelname)s] (%(name)s) %(message)s"))
    console_handler._optionpages_console = True
    logger.addHandler(console_handler)
    return logger
