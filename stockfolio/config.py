"""Configuration helpers for stockfolio (env/.env + defaults)."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

try:
    # Optional dependency: only used to load values from .env
    from dotenv import load_dotenv
except Exception:  # pragma: no cover
    load_dotenv = None


PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_PORTFOLIO_FILE = PROJECT_ROOT / "data" / "portfolios.csv"

DEFAULT_API_KEY = "demo"
DEFAULT_BASE_URL = "https://www.alphavantage.co/query"
DEFAULT_REQUEST_TIMEOUT = 10.0


@dataclass
class Config:
    """Runtime settings used across the app."""

    portfolio_file: str = str(DEFAULT_PORTFOLIO_FILE)
    api_key: str = DEFAULT_API_KEY
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    use_fallback: bool = True

    @classmethod
    def from_env(cls) -> "Config":
        """Load config from .env/environment and fall back to defaults."""
        if load_dotenv:
            load_dotenv()

        # USE_FALLBACK_QUOTES=false disables the built-in quote table.
        fallback_raw = os.getenv("USE_FALLBACK_QUOTES", "true").lower().strip()
        use_fallback = fallback_raw in {"1", "true", "yes", "y"}

        return cls(
            portfolio_file=os.getenv("PORTFOLIO_FILE", str(DEFAULT_PORTFOLIO_FILE)),
            api_key=os.getenv("ALPHA_VANTAGE_API_KEY") or DEFAULT_API_KEY,
            base_url=os.getenv("ALPHA_VANTAGE_URL", DEFAULT_BASE_URL),
            request_timeout=float(
                os.getenv("REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT))
            ),
            use_fallback=use_fallback,
        )


def setup_logging() -> None:
    """Configure standard console logging for the app."""
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
