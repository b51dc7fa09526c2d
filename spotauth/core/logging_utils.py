import logging

# Project logger (handlers are installed by logging_config)
LOGGER_NAME = "spotauth"
logger = logging.getLogger(LOGGER_NAME)


def log_section(title: str) -> None:
    """
    Log a top-level section header.
    """
    logger.info("")
    logger.info("=== %s ===", title)


def log_info(message: str) -> None:
    logger.info("%s", message)


def log_step(message: str) -> None:
    """
    Action step / ongoing work.
    """
    logger.info("→ %s", message)


def log_success(message: str) -> None:
    logger.info("✅ %s", message)


def log_warning(message: str) -> None:
    """
    Non-fatal problem: the flow carries on.
    """
    logger.warning("⚠️ %s", message)


def log_error(message: str) -> None:
    logger.error("❌ %s", message)
