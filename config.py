"""
Настройки приложения и логирование.
Настройки хранятся в ~/.notes_app/config.json.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

APP_DIR = Path.home() / ".notes_app"
CONFIG_PATH = APP_DIR / "config.json"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_default_settings() -> Dict[str, Any]:
    """Настройки по умолчанию."""
    return {
        'storage_path': str(APP_DIR / "defaults.json"),
        'log_file': str(APP_DIR / "notes_app.log"),
        'log_level': 'INFO',
    }


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Загрузить все настройки из config.json.

    Args:
        config_path: Путь к файлу настроек (по умолчанию ~/.notes_app/config.json)

    Returns:
        Словарь с настройками (отсутствующие ключи берутся из значений по умолчанию)
    """
    config_path = Path(config_path) if config_path else CONFIG_PATH
    default_settings = get_default_settings()
    try:
        if config_path.exists():
            with open(config_path, 'r', encoding='utf-8') as f:
                config = json.load(f)
            if not isinstance(config, dict):
                logger.warning("Файл настроек имеет неверный формат: %s", config_path)
                return default_settings
            logger.info("Настройки загружены из конфига")
            return {**default_settings, **config}
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Не удалось загрузить настройки из конфига: %s", e)
    return default_settings


def save_config(settings: Dict[str, Any], config_path: Optional[Path] = None) -> None:
    """
    Сохранить настройки в config.json.

    Args:
        settings: Словарь с настройками
        config_path: Путь к файлу настроек (по умолчанию ~/.notes_app/config.json)
    """
    config_path = Path(config_path) if config_path else CONFIG_PATH
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=2, ensure_ascii=False)
        logger.info("Настройки сохранены в конфиг: %s", config_path)
    except OSError as e:
        logger.error("Не удалось сохранить настройки в конфиг: %s", e)


def setup_logging(level: str = 'INFO', log_file: Optional[str] = None) -> None:
    """
    Настройка логирования в консоль и (опционально) в файл.

    Args:
        level: Уровень логирования ("DEBUG", "INFO", ...)
        log_file: Путь к файлу лога (None или пустая строка - без файла)
    """
    handlers = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding='utf-8'))

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True
    )
