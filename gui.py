"""
Графический интерфейс для приложения заметок.
Использует PySide6 (Qt) для создания desktop GUI.
"""

import sys
import logging
from typing import List, Optional

from PySide6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QListWidget, QListWidgetItem, QLineEdit, QTextEdit, QPushButton,
    QMessageBox, QLabel, QDialog, QAbstractItemView
)
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QFont, QShortcut, QKeySequence

from config import load_config, setup_logging
from notes import NoteStore, NotesError
from storage import KeyValueStore, StorageError

logger = logging.getLogger(__name__)

EMPTY_NOTE_TITLE = "(Пустая заметка)"


def note_title(text: str, limit: int = 50) -> str:
    """Заголовок заметки для списка: первая строка, обрезанная до limit символов."""
    lines = text.strip().splitlines()
    title = lines[0] if lines else ""
    if not title:
        return EMPTY_NOTE_TITLE
    if len(title) > limit:
        title = title[:limit - 3] + "..."
    return title


class EditNoteDialog(QDialog):
    """
    Экран редактирования заметки.
    """

    def __init__(self, store: NoteStore, note_id: str, parent=None):
        super().__init__(parent)
        self.store = store
        self.note_id = note_id

        self.setWindowTitle("Редактирование заметки")
        self.resize(600, 400)

        layout = QVBoxLayout(self)

        self.text_edit = QTextEdit()
        self.text_edit.setFont(QFont("Arial", 11))
        self.text_edit.setLineWrapMode(QTextEdit.WidgetWidth)
        layout.addWidget(self.text_edit)

        self.btn_save = QPushButton("Сохранить изменения")
        self.btn_save.clicked.connect(self.save_changes)
        layout.addWidget(self.btn_save)

        QShortcut(QKeySequence.Save, self).activated.connect(self.save_changes)

        # Текст берётся из хранилища при открытии экрана
        note = self.store.get_note(note_id)
        self.text_edit.setPlainText(note.text if note else "")

    def save_changes(self):
        """Сохранение текста заметки в хранилище."""
        try:
            self.store.edit_text_by_id(self.note_id, self.text_edit.toPlainText())
        except NotesError as e:
            logger.error("Ошибка при сохранении заметки: %s", e)
            QMessageBox.critical(
                self,
                "Ошибка сохранения",
                f"Не удалось сохранить заметку:\n{e}"
            )
            return

        logger.info("Заметка сохранена: %s", self.note_id[:8])
        self.accept()


class NotesWindow(QMainWindow):
    """
    Главное окно приложения: список заметок.
    """

    def __init__(self, store: Optional[NoteStore] = None, settings: Optional[dict] = None):
        super().__init__()

        # Инициализация хранилища заметок
        if store is None:
            if settings is None:
                settings = load_config()
            try:
                store = NoteStore(KeyValueStore(settings['storage_path']))
            except StorageError as e:
                logger.error("Ошибка при инициализации хранилища: %s", e)
                QMessageBox.critical(
                    self,
                    "Ошибка",
                    f"Не удалось инициализировать хранилище заметок:\n{e}"
                )
                sys.exit(1)
        self.store = store

        self.setWindowTitle("Список заметок")
        self.setGeometry(100, 100, 500, 600)
        self.setMinimumSize(360, 400)

        self.init_ui()
        self.setup_shortcuts()
        self.load_notes_list()

    def init_ui(self):
        """Инициализация пользовательского интерфейса."""
        central_widget = QWidget()
        self.setCentralWidget(central_widget)

        main_layout = QVBoxLayout(central_widget)

        # Заголовок
        title_label = QLabel("Список заметок")
        title_font = QFont()
        title_font.setPointSize(12)
        title_font.setBold(True)
        title_label.setFont(title_font)
        main_layout.addWidget(title_label)

        # Список заметок (можно выделить несколько для удаления)
        self.notes_list = QListWidget()
        self.notes_list.setSelectionMode(QAbstractItemView.ExtendedSelection)
        self.notes_list.setSpacing(4)
        self.notes_list.itemActivated.connect(self.on_note_activated)
        self.notes_list.itemSelectionChanged.connect(self.on_selection_changed)
        main_layout.addWidget(self.notes_list)

        # Черновик новой заметки
        self.draft_edit = QLineEdit()
        self.draft_edit.setPlaceholderText("Текст новой заметки...")
        self.draft_edit.returnPressed.connect(self.add_note)
        main_layout.addWidget(self.draft_edit)

        buttons_layout = QHBoxLayout()

        self.btn_add = QPushButton("➕ Добавить заметку")
        self.btn_add.clicked.connect(self.add_note)
        buttons_layout.addWidget(self.btn_add)

        self.btn_edit = QPushButton("✏️ Изменить")
        self.btn_edit.clicked.connect(self.edit_selected_note)
        self.btn_edit.setEnabled(False)
        buttons_layout.addWidget(self.btn_edit)

        self.btn_delete = QPushButton("🗑️ Удалить")
        self.btn_delete.clicked.connect(self.delete_selected_notes)
        self.btn_delete.setEnabled(False)
        buttons_layout.addWidget(self.btn_delete)

        main_layout.addLayout(buttons_layout)

        # Статусная метка внизу
        self.status_label = QLabel("")
        self.status_label.setStyleSheet("color: #666666; font-size: 11px; padding: 5px;")
        self.status_label.setWordWrap(True)
        main_layout.addWidget(self.status_label)

        # Таймер очистки статуса
        self.status_timer = QTimer(self)
        self.status_timer.setSingleShot(True)
        self.status_timer.timeout.connect(self.status_label.clear)
        self.status_delay = 5000  # 5 секунд в миллисекундах

    def setup_shortcuts(self):
        """Настройка горячих клавиш."""
        # Ctrl+N - Добавить заметку из черновика
        QShortcut(QKeySequence.New, self).activated.connect(self.add_note)

        # Delete - Удалить выделенные заметки
        QShortcut(QKeySequence.Delete, self.notes_list).activated.connect(self.delete_selected_notes)
        logger.info("Горячие клавиши настроены")

    def load_notes_list(self):
        """Загрузка списка заметок в QListWidget."""
        self.notes_list.clear()

        for note in self.store.notes:
            item = QListWidgetItem(note_title(note.text))
            item.setData(Qt.UserRole, note.id)
            item.setToolTip(note.text or EMPTY_NOTE_TITLE)
            self.notes_list.addItem(item)

        self.on_selection_changed()

    def selected_positions(self) -> List[int]:
        """Позиции выделенных заметок в текущем списке."""
        return sorted(self.notes_list.row(item) for item in self.notes_list.selectedItems())

    def on_selection_changed(self):
        """Обработчик изменения выделения в списке."""
        count = len(self.notes_list.selectedItems())
        self.btn_edit.setEnabled(count == 1)
        self.btn_delete.setEnabled(count > 0)

    def on_note_activated(self, item):
        """Обработчик двойного щелчка или Enter на заметке."""
        if not item:
            return
        self.open_editor(item.data(Qt.UserRole))

    def edit_selected_note(self):
        """Открытие выделенной заметки в редакторе."""
        items = self.notes_list.selectedItems()
        if len(items) != 1:
            return
        self.open_editor(items[0].data(Qt.UserRole))

    def open_editor(self, note_id: str):
        """Открытие экрана редактирования заметки."""
        dialog = EditNoteDialog(self.store, note_id, self)
        if dialog.exec():
            self.load_notes_list()
            self.report_result("Заметка сохранена")

    def add_note(self):
        """Добавление заметки с текстом черновика (пустой текст допустим)."""
        try:
            note = self.store.append(self.draft_edit.text())
        except (NotesError, TypeError) as e:
            logger.error("Ошибка при создании заметки: %s", e)
            QMessageBox.critical(
                self,
                "Ошибка",
                f"Не удалось создать заметку:\n{e}"
            )
            return

        self.draft_edit.clear()
        self.load_notes_list()
        self.notes_list.setCurrentRow(len(self.store) - 1)
        logger.info("Создана новая заметка: %s", note.id[:8])
        self.report_result("Создана новая заметка")

    def delete_selected_notes(self):
        """Удаление всех выделенных заметок одним действием."""
        positions = self.selected_positions()
        if not positions:
            logger.warning("Попытка удалить, но заметки не выбраны")
            return

        reply = QMessageBox.question(
            self,
            "Подтверждение удаления",
            f"Удалить выбранные заметки ({len(positions)})?",
            QMessageBox.Yes | QMessageBox.No
        )
        if reply != QMessageBox.Yes:
            return

        try:
            removed = self.store.delete_many(positions)
        except NotesError as e:
            logger.error("Ошибка при удалении заметок: %s", e)
            QMessageBox.critical(
                self,
                "Ошибка удаления",
                f"Не удалось удалить заметки:\n{e}"
            )
            self.load_notes_list()
            return

        self.load_notes_list()
        self.report_result(f"Удалено заметок: {len(removed)}")

    def report_result(self, message: str):
        """Статус после изменения с предупреждением об ошибке сохранения."""
        if self.store.last_error is not None:
            self.update_status(f"⚠️ Изменения не сохранены на диск: {self.store.last_error}")
        else:
            self.update_status(message)

    def update_status(self, message):
        """Обновление статусного сообщения."""
        self.status_label.setText(message)

        # Автоматически очищаем статус через 5 секунд
        self.status_timer.start(self.status_delay)


def main():
    """Точка входа для запуска GUI приложения."""
    settings = load_config()
    setup_logging(settings['log_level'], settings['log_file'])
    logger.info("Запуск приложения")

    app = QApplication(sys.argv)

    # Установка стиля приложения
    app.setStyle("Fusion")

    window = NotesWindow(settings=settings)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
