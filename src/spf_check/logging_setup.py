"""Root logger configuration and the startup banner."""

import logging

from rich.logging import RichHandler

from . import __version__

LOGO = (
    r"  ______________________________       _________ .__                   __",
    r" /   _____/\______   \_   _____/       \_   ___ \|  |__   ____   ____ |  | __",
    r" \_____  \  |     ___/|    __)  ______ /    \  \/|  |  \_/ __ \_/ ___\|  |/ /",
    r" /        \ |    |    |     \  /_____/ \     \___|   Y  \  ___/\  \___|    <",
    "/_______  / |____|    \\___  /           \\______  /___|  /\\___  >\\___  >__|_ \\",
    r"        \/                \/                   \/     \/     \/     \/     \/",
)

logger = logging.getLogger("spf_check")


def configure_logging(level: str = "INFO") -> None:
    """Send all log records through a single rich handler on the root logger."""
    root_logger = logging.getLogger()
    # Calling twice (tests, uvicorn reload) must not duplicate output.
    if not any(isinstance(h, RichHandler) for h in root_logger.handlers):
        handler = RichHandler(
            show_path=False,
            rich_tracebacks=True,
            markup=False,
            log_time_format="[%Y-%m-%dT%H:%M:%S]",
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(handler)
    root_logger.setLevel(level)


def print_banner() -> None:
    for line in LOGO:
        logger.info(line)
    logger.info("> spf-check v%s", __version__)
