"""
Модуль постоянного хранилища "ключ-значение".
Хранит списки строк в JSON файле (аналог системных настроек приложения).
"""

import json
import shutil
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class StorageError(IOError):
    """Ошибка чтения или записи файла хранилища."""


class KeyValueStore:
    """
    Файловое хранилище "ключ-значение" со значениями-списками строк.

    Значения других типов, найденные в файле, недоступны через get(),
    но записываются обратно без изменений.

    Атрибуты:
        path (Path): Путь к JSON файлу хранилища
    """

    def __init__(self, path):
        """
        Инициализация хранилища.

        Args:
            path: Путь к JSON файлу (директория создаётся при необходимости)

        Raises:
            StorageError: Если не удалось создать директорию или прочитать файл
        """
        self.path = Path(path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Не удалось создать директорию хранилища: %s", e)
            raise StorageError(f"Не удалось создать директорию хранилища: {e}") from e

        self._data: Dict[str, List[str]] = {}
        self._other: Dict[str, Any] = {}
        self._read()

    def get(self, key: str) -> Optional[List[str]]:
        """
        Получение списка строк по ключу.

        Args:
            key: Ключ

        Returns:
            Optional[List[str]]: Копия сохранённого списка или None если ключа нет
        """
        value = self._data.get(key)
        if value is None:
            return None
        return list(value)

    def set(self, key: str, values: List[str]) -> None:
        """
        Запись списка строк по ключу (предыдущее значение перезаписывается).

        Args:
            key: Ключ
            values: Список строк

        Raises:
            StorageError: Если не удалось записать файл
        """
        values = list(values)
        if not all(isinstance(value, str) for value in values):
            raise TypeError("Значение должно быть списком строк")

        data_backup = dict(self._data)
        other_backup = dict(self._other)
        self._data[key] = values
        self._other.pop(key, None)
        try:
            self._write()
        except StorageError:
            # Память не должна расходиться с файлом
            self._data = data_backup
            self._other = other_backup
            raise

    def remove(self, key: str) -> None:
        """
        Удаление ключа из хранилища.

        Raises:
            StorageError: Если не удалось записать файл
        """
        if key not in self._data and key not in self._other:
            return

        data_backup = dict(self._data)
        other_backup = dict(self._other)
        self._data.pop(key, None)
        self._other.pop(key, None)
        try:
            self._write()
        except StorageError:
            self._data = data_backup
            self._other = other_backup
            raise

    def _read(self) -> None:
        """Загрузка данных из файла с обработкой повреждений."""
        self._data = {}
        self._other = {}

        if not self.path.exists():
            logger.info("Файл хранилища не найден, будет создан при записи: %s", self.path)
            return

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.error("Ошибка при разборе JSON хранилища: %s", e)
            backup_path = self.path.with_suffix('.backup')
            try:
                shutil.copy2(self.path, backup_path)
                logger.warning("Резервная копия сохранена: %s", backup_path)
            except OSError as backup_error:
                logger.error("Не удалось создать резервную копию: %s", backup_error)
            return
        except OSError as e:
            logger.error("Ошибка при чтении файла хранилища: %s", e)
            raise StorageError(f"Не удалось прочитать хранилище: {e}") from e

        if not isinstance(data, dict):
            logger.warning("Неожиданный формат хранилища, при записи файл будет перезаписан")
            return

        for key, value in data.items():
            if isinstance(value, list) and all(isinstance(item, str) for item in value):
                self._data[key] = value
            else:
                logger.warning("Значение ключа '%s' не является списком строк, оставлено без изменений", key)
                self._other[key] = value

        logger.info("Хранилище загружено: %s (ключей: %d)", self.path, len(self._data))

    def _write(self) -> None:
        """
        Атомарная запись всех данных в файл.

        Raises:
            StorageError: Если не удалось сохранить файл
        """
        temp_path = self.path.with_suffix('.tmp')
        try:
            with open(temp_path, 'w', encoding='utf-8') as f:
                json.dump({**self._other, **self._data}, f, ensure_ascii=False, indent=2)

            # Замена файла только после успешной записи
            temp_path.replace(self.path)
        except OSError as e:
            logger.error("Ошибка при записи хранилища: %s", e)
            try:
                temp_path.unlink(missing_ok=True)
            except OSError as cleanup_error:
                logger.warning("Не удалось удалить временный файл: %s", cleanup_error)
            raise StorageError(f"Не удалось сохранить хранилище: {e}") from e

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        """Строковое представление хранилища."""
        return f"KeyValueStore(path={self.path}, keys={len(self._data)})"
