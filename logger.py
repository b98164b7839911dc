"""
MODULE: logger
RESPONSIBILITY: Centralized Loguru configuration and logger instance provision.
ALLOWED: Configuring loguru, exporting `logger` object.
FORBIDDEN: Business logic, re-configuring logger in other modules.
ERRORS: OSError (if log directory creation fails).

Централизованная настройка логирования через Loguru.
ЗАПРЕЩЕНО настраивать logger в других модулях!
Модули импортируют `from loguru import logger`, а точка входа один раз
вызывает setup_logging().
"""
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from config.settings import AppConfig, config

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message} | {extra}"


def setup_logging(app_config: Optional[AppConfig] = None, to_files: bool = True) -> None:
    """
    Настройка sink'ов loguru

    Args:
        app_config: Конфигурация приложения (по умолчанию глобальная)
        to_files: Писать ли логи в файлы app.log / errors.log
    """
    app_config = app_config or config.app

    # Удаляем стандартный handler
    logger.remove()

    # Консольный вывод
    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=app_config.log_level,
        colorize=True,
    )

    if not to_files:
        return

    log_dir = Path(app_config.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    # Файл приложения (DEBUG и выше)
    logger.add(
        log_dir / "app.log",
        format=FILE_FORMAT,
        level="DEBUG",
        rotation=app_config.log_rotation,
        retention=app_config.log_retention,
        compression="zip",
    )

    # Файл ошибок (ERROR и выше)
    logger.add(
        log_dir / "errors.log",
        format=FILE_FORMAT,
        level="ERROR",
        rotation=app_config.log_rotation,
        retention="90 days",
        compression="zip",
    )


__all__ = ["logger", "setup_logging"]
