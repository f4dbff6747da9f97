"""
Sets up the logging for the ovex package. The logger is stored inside a ContextVar to support concurrent processing
in e.g. web services.
"""
import logging
from contextvars import ContextVar
from typing import Callable

logger: ContextVar[logging.Logger] = ContextVar("logger", default=logging.getLogger("ovex-unbound"))


def initialize_logger(context_specific_logger: logging.Logger) -> Callable[[], None]:
    """
    Initialize the logger context variable. You should use the returned teardown function to reset the context
    variable when your (web) request is done.
    """
    token = logger.set(context_specific_logger)

    def clear_logger():
        """
        Reset the logger context variable to the value it had before `initialize_logger` was called.
        """
        logger.reset(token)

    return clear_logger
