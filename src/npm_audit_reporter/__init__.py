__version__ = "1.0.4"

from .app.main import generate_report, list_attributions

__all__ = [
    "generate_report",
    "list_attributions",
]

# stdlib logging defaults: attach NullHandler to prevent 'No handler' warnings
import logging
_logger = logging.getLogger(__name__)
_logger.addHandler(logging.NullHandler())
