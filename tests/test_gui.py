"""
Тесты главного окна и экрана редактирования заметки.
"""

import sys
from pathlib import Path

import pytest
from PySide6.QtCore import Qt
from PySide6.QtWidgets import QDialog, QMessageBox

# Импортируем модули приложения
sys.path.insert(0, str(Path(__file__).parent.parent))
import gui
from gui import EMPTY_NOTE_TITLE, EditNoteDialog, NotesWindow, note_title
from notes import DEFAULT_NOTE_TEXT, NOTES_KEY, NoteStore
from storage import KeyValueStore, StorageError


@pytest.fixture
def storage(tmp_path):
    return KeyValueStore(tmp_path / "defaults.json")


@pytest.fixture
def window(qtbot, storage):
    app = NotesWindow(NoteStore(storage))
    qtbot.addWidget(app)
    app.show()
    qtbot.waitExposed(app)
    return app


def list_texts(window):
    return [window.notes_list.item(i).text() for i in range(window.notes_list.count())]


def test_note_title():
    assert note_title("Купить молоко\nи хлеб") == "Купить молоко"
    assert note_title("") == EMPTY_NOTE_TITLE
    assert note_title("   \n  ") == EMPTY_NOTE_TITLE
    assert note_title("x" * 60) == "x" * 47 + "..."


def test_first_run_shows_welcome_note(window):
    assert window.notes_list.count() == 1
    assert window.notes_list.item(0).toolTip() == DEFAULT_NOTE_TEXT
    assert window.notes_list.item(0).data(Qt.UserRole) == window.store.notes[0].id
    assert not window.btn_delete.isEnabled()
    assert not window.btn_edit.isEnabled()


def test_add_note_uses_draft_text(qtbot, window, storage):
    window.draft_edit.setText("Купить молоко")
    qtbot.mouseClick(window.btn_add, Qt.LeftButton)

    assert list_texts(window)[-1] == "Купить молоко"
    assert window.draft_edit.text() == ""
    assert storage.get(NOTES_KEY) == [DEFAULT_NOTE_TEXT, "Купить молоко"]
    assert window.notes_list.currentRow() == 1
    assert window.status_label.text() == "Создана новая заметка"


def test_add_note_with_empty_draft(qtbot, window):
    qtbot.mouseClick(window.btn_add, Qt.LeftButton)

    assert window.store.notes[-1].text == ""
    assert list_texts(window)[-1] == EMPTY_NOTE_TITLE


def test_delete_selected_notes_at_once(qtbot, window, storage, monkeypatch):
    for text in ("A", "B", "C"):
        window.store.append(text)
    window.load_notes_list()

    # Выделяем приветственную заметку и "B"
    window.notes_list.item(0).setSelected(True)
    window.notes_list.item(2).setSelected(True)
    assert window.btn_delete.isEnabled()
    assert not window.btn_edit.isEnabled()

    monkeypatch.setattr(QMessageBox, "question", lambda *args, **kwargs: QMessageBox.Yes)
    qtbot.mouseClick(window.btn_delete, Qt.LeftButton)

    assert list_texts(window) == ["A", "C"]
    assert storage.get(NOTES_KEY) == ["A", "C"]
    assert window.status_label.text() == "Удалено заметок: 2"


def test_delete_can_be_cancelled(qtbot, window, storage, monkeypatch):
    window.notes_list.item(0).setSelected(True)

    monkeypatch.setattr(QMessageBox, "question", lambda *args, **kwargs: QMessageBox.No)
    qtbot.mouseClick(window.btn_delete, Qt.LeftButton)

    assert window.notes_list.count() == 1
    assert storage.get(NOTES_KEY) is None


def test_edit_dialog_saves_text(qtbot, window, storage):
    window.store.append("Черновик")
    note = window.store.notes[1]

    dialog = EditNoteDialog(window.store, note.id)
    qtbot.addWidget(dialog)
    assert dialog.text_edit.toPlainText() == "Черновик"

    dialog.text_edit.setPlainText("Готовый текст")
    dialog.btn_save.click()

    assert dialog.result()
    assert window.store.notes[1].id == note.id
    assert window.store.notes[1].text == "Готовый текст"
    assert storage.get(NOTES_KEY) == [DEFAULT_NOTE_TEXT, "Готовый текст"]


def test_edit_dialog_for_removed_note_shows_error(qtbot, window, monkeypatch):
    note = window.store.append("Удалится")
    dialog = EditNoteDialog(window.store, note.id)
    qtbot.addWidget(dialog)
    window.store.delete_by_id(note.id)

    errors = []
    monkeypatch.setattr(QMessageBox, "critical", lambda *args, **kwargs: errors.append(args))
    dialog.btn_save.click()

    assert len(errors) == 1
    assert not dialog.result()
    assert [n.text for n in window.store.notes] == [DEFAULT_NOTE_TEXT]


def test_open_editor_refreshes_list(qtbot, window, monkeypatch):
    note_id = window.store.notes[0].id

    def fake_exec(dialog):
        dialog.text_edit.setPlainText("Новый текст")
        dialog.save_changes()
        return QDialog.Accepted

    monkeypatch.setattr(EditNoteDialog, "exec", fake_exec)
    window.notes_list.item(0).setSelected(True)
    qtbot.mouseClick(window.btn_edit, Qt.LeftButton)

    assert list_texts(window) == ["Новый текст"]
    assert window.store.notes[0].id == note_id
    assert window.status_label.text() == "Заметка сохранена"


def test_save_failure_is_reported(qtbot, window, storage, monkeypatch):
    def failing_set(key, values):
        raise StorageError("диск переполнен")

    monkeypatch.setattr(storage, "set", failing_set)
    window.draft_edit.setText("Не сохранится")
    qtbot.mouseClick(window.btn_add, Qt.LeftButton)

    # Заметка остаётся в памяти, пользователь видит предупреждение
    assert list_texts(window)[-1] == "Не сохранится"
    assert window.status_label.text().startswith("⚠️")


def test_window_uses_given_settings(qtbot, tmp_path, monkeypatch):
    path = tmp_path / "defaults.json"
    KeyValueStore(path).set(NOTES_KEY, ["Из настроек"])

    def unexpected_load_config(*args, **kwargs):
        raise AssertionError("настройки уже загружены")

    monkeypatch.setattr(gui, "load_config", unexpected_load_config)
    window = NotesWindow(settings={'storage_path': str(path)})
    qtbot.addWidget(window)

    assert list_texts(window) == ["Из настроек"]


def test_unusable_storage_path_shows_error(qtbot, tmp_path, monkeypatch):
    blocker = tmp_path / "blocker"
    blocker.write_text("не директория", encoding="utf-8")

    errors = []
    monkeypatch.setattr(QMessageBox, "critical", lambda *args, **kwargs: errors.append(args))

    with pytest.raises(SystemExit):
        NotesWindow(settings={'storage_path': str(blocker / "defaults.json")})
    assert len(errors) == 1
