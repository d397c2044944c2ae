import logging

# Project logger; every helper below writes through it.
logger = logging.getLogger("spopify")


def log_section(title: str) -> None:
    logger.info("=== %s ===", title)


def log_info(message: str) -> None:
    logger.info("%s", message)


def log_step(message: str) -> None:
    logger.info("→ %s", message)


def log_success(message: str) -> None:
    logger.info("✅ %s", message)


def log_warning(message: str) -> None:
    """Non-fatal problem: degraded data, skipped item, retry."""
    logger.warning("⚠️ %s", message)


def log_error(message: str) -> None:
    logger.error("❌ %s", message)


def log_debug(message: str) -> None:
    logger.debug("%s", message)


def log_progress(current: int, total: int, prefix: str = "") -> None:
    """`prefix 2/8 (25.0%)`, one line per call."""
    percent = max(0.0, min(1.0, current / max(total, 1))) * 100
    label = f"{prefix} " if prefix else ""
    logger.info("%s%d/%d (%.1f%%)", label, current, total, percent)
