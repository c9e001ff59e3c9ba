"""
Logging setup for services embedding the engine.

The package only emits records through loguru's global logger; it never
adds sinks on import. Call setup_logging once at service startup.
"""

from loguru import logger

from compensation.settings import CompensationSettings, get_settings


def setup_logging(settings: CompensationSettings | None = None) -> int | None:
    """
    Configure logger with file rotation.

    Returns:
        Id of the added file sink, or None when no log file is configured
    """
    settings = settings or get_settings()

    handler_id = None
    if settings.log_file:
        handler_id = logger.add(
            settings.log_file,
            rotation="1 day",
            retention="7 days",
            level=settings.log_level,
            encoding="utf-8",
        )

    logger.info(
        "Compensation logging configured",
        extra={"level": settings.log_level, "log_file": settings.log_file},
    )
    return handler_id
