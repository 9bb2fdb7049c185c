"""
Модуль для работы с заметками.
Содержит классы Note и NoteStore для управления упорядоченным списком заметок.
"""

import uuid
import logging
from typing import Iterable, Iterator, List, Optional, Tuple

from storage import KeyValueStore, StorageError

logger = logging.getLogger(__name__)

# Ключ, под которым тексты заметок лежат в хранилище
NOTES_KEY = "notes"

DEFAULT_NOTE_TEXT = (
    "Здравствуйте! Это приложение Заметки для ЦФТ. "
    "Хорошего Вам дня и надеюсь поучаствовать в данной стажировке! 😊"
)


class NotesError(Exception):
    """Базовая ошибка операций с заметками."""


class NoteIndexError(NotesError, IndexError):
    """Позиция заметки вне диапазона [0, количество заметок)."""

    def __init__(self, position: int, length: int):
        super().__init__(f"Позиция {position} вне диапазона [0, {length})")
        self.position = position
        self.length = length


class NoteNotFoundError(NotesError, KeyError):
    """Заметка с указанным ID не найдена."""


class Note:
    """
    Класс для представления заметки.

    Атрибуты:
        id (str): Уникальный в пределах сессии идентификатор (не сохраняется)
        text (str): Текст заметки
    """

    __slots__ = ("_id", "text")

    def __init__(self, text: str = ""):
        self._id = uuid.uuid4().hex
        self.text = text

    @property
    def id(self) -> str:
        return self._id

    def __repr__(self) -> str:
        """Строковое представление заметки."""
        preview = self.text if len(self.text) <= 20 else self.text[:17] + "..."
        return f"Note(id={self.id[:8]}..., text='{preview}')"


class NoteStore:
    """
    Класс для управления коллекцией заметок и их хранением.

    Каждая операция изменения сразу же сохраняет тексты заметок
    в хранилище под ключом "notes".

    Атрибуты:
        storage (KeyValueStore): Хранилище "ключ-значение"
        last_error (Optional[StorageError]): Последняя ошибка сохранения
    """

    def __init__(self, storage: KeyValueStore):
        """
        Инициализация хранилища заметок.

        Args:
            storage: Хранилище, в котором лежит список текстов заметок
        """
        self.storage = storage
        self.last_error: Optional[StorageError] = None
        self._notes: List[Note] = []
        self.load()

    @property
    def notes(self) -> Tuple[Note, ...]:
        """Текущие заметки в порядке отображения (только для чтения)."""
        return tuple(self._notes)

    def load(self) -> None:
        """
        Загрузка заметок из хранилища.

        Если сохранённого списка нет или он пуст, коллекция состоит
        из одной приветственной заметки. Запись при этом не выполняется.
        """
        texts = self.storage.get(NOTES_KEY)
        if texts:
            self._notes = [Note(text) for text in texts]
            logger.info("Загружено заметок: %d", len(self._notes))
        else:
            self._notes = [Note(DEFAULT_NOTE_TEXT)]
            logger.info("Сохранённых заметок нет, создана приветственная заметка")

    def save(self) -> bool:
        """
        Сохранение текстов всех заметок в хранилище.

        Ошибка записи не прерывает работу: состояние в памяти сохраняется,
        ошибка логируется и запоминается в last_error.

        Returns:
            bool: True если запись прошла успешно, False иначе
        """
        try:
            self.storage.set(NOTES_KEY, [note.text for note in self._notes])
        except StorageError as e:
            logger.error("Не удалось сохранить заметки: %s", e)
            self.last_error = e
            return False

        self.last_error = None
        logger.info("Заметки успешно сохранены: %d записей", len(self._notes))
        return True

    def append(self, text: str) -> Note:
        """
        Добавление новой заметки в конец списка.

        Args:
            text: Текст заметки (пустая строка допустима)

        Returns:
            Note: Созданная заметка
        """
        if not isinstance(text, str):
            raise TypeError("Текст заметки должен быть строкой")

        note = Note(text)
        self._notes.append(note)
        logger.info("Добавлена заметка: %s", note.id[:8])
        self.save()
        return note

    def edit_text(self, position: int, text: str) -> Note:
        """
        Замена текста заметки в указанной позиции.

        Args:
            position: Позиция заметки в списке
            text: Новый текст

        Returns:
            Note: Изменённая заметка (ID не меняется)

        Raises:
            NoteIndexError: Если позиция вне диапазона
        """
        if not isinstance(text, str):
            raise TypeError("Текст заметки должен быть строкой")
        self._check_position(position)

        note = self._notes[position]
        note.text = text
        logger.info("Заметка изменена: %s (позиция %d)", note.id[:8], position)
        self.save()
        return note

    def delete(self, position: int) -> Note:
        """
        Удаление заметки в указанной позиции.

        Args:
            position: Позиция заметки в списке

        Returns:
            Note: Удалённая заметка

        Raises:
            NoteIndexError: Если позиция вне диапазона
        """
        self._check_position(position)

        note = self._notes.pop(position)
        logger.info("Заметка удалена: %s (позиция %d)", note.id[:8], position)
        self.save()
        return note

    def delete_many(self, positions: Iterable[int]) -> List[Note]:
        """
        Удаление нескольких заметок за одно действие.

        Все позиции относятся к списку до удаления. Если хотя бы одна
        позиция некорректна, ничего не удаляется.

        Args:
            positions: Позиции удаляемых заметок

        Returns:
            List[Note]: Удалённые заметки в исходном порядке

        Raises:
            NoteIndexError: Если хотя бы одна позиция вне диапазона
        """
        unique_positions = sorted(set(positions))
        for position in unique_positions:
            self._check_position(position)

        if not unique_positions:
            return []

        removed = []
        for position in reversed(unique_positions):
            removed.append(self._notes.pop(position))
        removed.reverse()

        logger.info("Удалено заметок: %d", len(removed))
        self.save()
        return removed

    def get_note(self, note_id: str) -> Optional[Note]:
        """
        Получение заметки по ID.

        Returns:
            Optional[Note]: Объект заметки или None если не найдена
        """
        return next((note for note in self._notes if note.id == note_id), None)

    def index_of(self, note_id: str) -> int:
        """
        Текущая позиция заметки по её ID.

        Raises:
            NoteNotFoundError: Если заметки с таким ID нет
        """
        for position, note in enumerate(self._notes):
            if note.id == note_id:
                return position
        raise NoteNotFoundError(note_id)

    def edit_text_by_id(self, note_id: str, text: str) -> Note:
        """Замена текста заметки по её ID."""
        return self.edit_text(self.index_of(note_id), text)

    def delete_by_id(self, note_id: str) -> Note:
        """Удаление заметки по её ID."""
        return self.delete(self.index_of(note_id))

    def _check_position(self, position: int) -> None:
        # Отрицательные индексы Python здесь не допускаются
        if isinstance(position, bool) or not isinstance(position, int):
            raise TypeError("Позиция должна быть целым числом")
        if not 0 <= position < len(self._notes):
            logger.warning("Попытка обратиться к позиции %s (заметок: %d)", position, len(self._notes))
            raise NoteIndexError(position, len(self._notes))

    def __len__(self) -> int:
        """Количество заметок."""
        return len(self._notes)

    def __iter__(self) -> Iterator[Note]:
        return iter(tuple(self._notes))

    def __getitem__(self, position: int) -> Note:
        self._check_position(position)
        return self._notes[position]

    def __repr__(self) -> str:
        """Строковое представление хранилища."""
        return f"NoteStore(storage={self.storage.path}, notes={len(self._notes)})"
