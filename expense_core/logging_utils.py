"""Logger factory shared by the core modules and the Streamlit app.

The root logger is configured once per process so that Streamlit reruns
do not stack duplicate handlers. The level defaults to the configured
``log_level`` setting.
"""
import logging
from typing import Optional, Union

from expense_core.config import get_settings

_LOGGER_INITIALISED = False


def configure_root_logger(level: Optional[Union[int, str]] = None) -> None:
    global _LOGGER_INITIALISED
    if _LOGGER_INITIALISED:
        return

    if level is None:
        level = get_settings().log_level

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    _LOGGER_INITIALISED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    configure_root_logger()
    return logging.getLogger(name)
