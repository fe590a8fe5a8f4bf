from __future__ import annotations
import logging

# libraries that are too chatty at DEBUG for day-to-day use
QUIET_LOGGERS = ("sqlalchemy.engine", "multipart", "httpx")


def setup_console_logging(level: int = logging.INFO) -> None:
    """
    Configure the root logger once for the delivery service and the CLI.

    Repeated calls only adjust the level, so importing the app from tests or
    from ``main.py`` never stacks handlers.
    """
    root = logging.getLogger()
    root.setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    if root.handlers:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root.addHandler(handler)
