from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

# Environment variable with optional path to a JSON file with currency definitions.
# When not set, the bundled `suite_money/data/currency_iso.json` is used.
CURRENCY_TABLE_ENV_VAR: str = "SUITE_MONEY_CURRENCY_TABLE"


def currency_table_path() -> Path | None:
    """Return path to the configured currency definitions file.

    Values from a `.env` file (searched upwards from the current working directory)
    are loaded first; variables already present in the environment win over it.

    Returns:
        Path to the JSON file set in `SUITE_MONEY_CURRENCY_TABLE`, or None if the
        bundled definitions should be used.

    Raises:
        ValueError: If the configured path does not point to an existing file.
    """
    load_dotenv(find_dotenv(usecwd=True))
    raw_path = os.environ.get(CURRENCY_TABLE_ENV_VAR, "").strip()
    if not raw_path:
        return None

    path = Path(raw_path).expanduser()

    # Raise: configured path must point to an existing file
    if not path.is_file():
        raise ValueError(f"Cannot call `currency_table_path` because ${CURRENCY_TABLE_ENV_VAR} ('{raw_path}') is not an existing file")

    logger.debug(f"Using currency definitions from ${CURRENCY_TABLE_ENV_VAR}: {path}")
    return path
