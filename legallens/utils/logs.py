from __future__ import annotations
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the package logger (idempotent across Streamlit reruns)."""
    pkg_logger = logging.getLogger("legallens")
    pkg_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if any(getattr(h, "_legallens", False) for h in pkg_logger.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._legallens = True  # type: ignore[attr-defined]
    pkg_logger.addHandler(handler)
