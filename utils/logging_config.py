# tailor/utils/logging_config.py

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def setup_logging() -> None:
    """
    Configure root logging once per process.

    Level comes from LOG_LEVEL (default INFO). Output goes to stdout so it
    shows up next to the Streamlit server log. Calling it again on a Streamlit
    rerun is a no-op because basicConfig leaves configured roots alone.
    """
    level_name = (os.getenv("LOG_LEVEL") or "INFO").upper()

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # supabase-py logs every request through httpx
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
