import logging
import os


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    DATABASE_URL = os.environ.get("DATABASE_URL") or "sqlite:///checkers.db"
    SQL_ECHO = _env_flag("SQL_ECHO")
    # Turn budget (seconds) before the side to move gets skipped
    TURN_DURATION_SEC = float(os.environ.get("TURN_DURATION_SEC", "60"))
    # How often viewers recompute the countdown (seconds)
    CLOCK_TICK_SEC = float(os.environ.get("CLOCK_TICK_SEC", "1"))
    # Keep the turn while the jumping piece can capture again. Off: every jump ends the turn.
    CHAIN_JUMPS = _env_flag("CHAIN_JUMPS")
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


def configure_logging(level: str = Config.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
