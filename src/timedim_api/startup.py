"""Early-boot side effects: dotenv and logging.

This module is imported before any other timedim_api modules so that
``TIMEDIM_*`` variables from a ``.env`` file are visible when settings are
first read.
"""

import logging

# -- Load .env (must happen before settings are read) -------------------------
from dotenv import load_dotenv

load_dotenv()

from timedim_api.config import get_settings  # noqa: E402

# -- Silence noisy third-party loggers early ----------------------------------
logging.getLogger("pygeoapi").setLevel(logging.WARNING)
logging.getLogger("pyogrio").setLevel(logging.WARNING)

# -- timedim_api logging setup -------------------------------------------------
timedim_logger = logging.getLogger("timedim_api")
timedim_logger.setLevel(get_settings().log_level)
if not timedim_logger.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s"))
    timedim_logger.addHandler(handler)
timedim_logger.propagate = False
