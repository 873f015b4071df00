"""Portfolio persistence helpers."""

import datetime as dt
import logging
from pathlib import Path
from typing import List, Sequence

from . import codec
from .holdings import Clock, Portfolio

logger = logging.getLogger(__name__)


def load_portfolios(path, clock: Clock = dt.datetime.now) -> List[Portfolio]:
    """Load portfolios from the record file, or return [] if it is missing/unreadable."""
    path = Path(path)
    if not path.exists():
        logger.info("Portfolio file not found, starting fresh: %s", path)
        return []
    logger.info("Loading portfolios: %s", path)
    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Could not read portfolio file %s: %s", path, exc)
        return []
    return codec.decode(text, clock=clock)


def save_portfolios(path, portfolios: Sequence[Portfolio]) -> None:
    """Rewrite the whole record file, creating the folder if needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Saving %d portfolio(s): %s", len(portfolios), path)
    with path.open("w", encoding="utf-8", newline="\n") as f:
        f.write(codec.encode(portfolios))
