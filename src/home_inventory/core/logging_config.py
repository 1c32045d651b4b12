import logging
import sys
from typing import Optional

from .config import LOG_LEVEL, LOG_NAMESPACES


class NamespaceFilter(logging.Filter):
    def __init__(self, allowed_namespaces=None):
        super().__init__()
        self.allowed_namespaces = allowed_namespaces if allowed_namespaces is not None else []

    def filter(self, record):
        if not self.allowed_namespaces:
            return True # If no namespaces are specified, allow all records
        # Allow record if its name starts with any of the allowed namespaces
        return any(record.name.startswith(ns) for ns in self.allowed_namespaces)


log_formatter = logging.Formatter(
    fmt="%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

app_logger = logging.getLogger("home_inventory")


def configure_logging(level: str = LOG_LEVEL, namespaces: Optional[list[str]] = None) -> logging.Logger:
    """
    Attaches a stdout handler to the application logger.

    Modules log through ``logging.getLogger(__name__)`` so every logger under
    ``home_inventory.*`` inherits this handler and level. Calling this more
    than once does not stack handlers.
    """
    app_logger.setLevel(level)

    for handler in list(app_logger.handlers):
        if getattr(handler, "_home_inventory_console", False):
            app_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)
    console_handler._home_inventory_console = True

    # Only records from these prefixes reach the console, e.g.
    # LOG_NAMESPACES="home_inventory.features.reports,home_inventory.main"
    allowed = LOG_NAMESPACES if namespaces is None else namespaces
    if allowed:
        console_handler.addFilter(NamespaceFilter(allowed))

    app_logger.addHandler(console_handler)
    return app_logger


# Namespace-specific level examples:
# logging.getLogger("home_inventory.features.reports").setLevel(logging.DEBUG)
#
# SQL statements are logged by SQLAlchemy itself:
# logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
