"""
Главный файл приложения "Заметки".
Точка входа для запуска приложения.
"""

from gui import main

if __name__ == "__main__":
    main()
