"""
openplot: custom time-series functions and the snippet library behind them.

The public API lives in openplot.processing.custom_functions.
"""

import logging

__version__ = "0.1.0"


# Set up basic logging configuration if none exists
def _ensure_basic_logging():
    """Ensure basic logging is configured if no configuration exists."""
    root_logger = logging.getLogger()

    if not root_logger.handlers and root_logger.level > logging.INFO:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )


_ensure_basic_logging()
