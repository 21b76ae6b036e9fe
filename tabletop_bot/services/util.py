"""
Утилиты для работы с файлами и парсинга env.
"""

import os
from pathlib import Path


def atomic_write_bytes(file_path: str, data: bytes) -> None:
    """
    Атомарная запись в файл через временный файл.

    Args:
        file_path: Путь к целевому файлу
        data: Данные для записи
    """
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)
    tmp_path = file_path + '.tmp'
    try:
        with open(tmp_path, 'wb') as f:
            f.write(data)
        os.replace(tmp_path, file_path)
    except Exception as e:
        # Удаляем временный файл в случае ошибки
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise e


def chat_dir_name(chat_id: int) -> str:
    """
    Имя каталога чата в хранилище.

    Групповые чаты в Telegram имеют отрицательные id, а '-' в начале ключа
    неудобен для хранилищ, поэтому минус заменяется на '_'.
    """
    if chat_id < 0:
        return f"_{-chat_id}"
    return str(chat_id)


def parse_env_bool(value: str) -> bool:
    """Парсит булево значение из переменной окружения."""
    return value.strip().lower() in ('1', 'true', 'yes', 'on')
