"""
Ошибки трекера.

Ошибки модели (EntityError) и разбора callback превращаются в понятный
пользователю ответ. StoreError и TransportError прерывают обработку события
и попадают в ErrorHandlerMiddleware.
"""


class TrackerError(Exception):
    """Базовая ошибка бота-трекера."""


class EntityError(TrackerError):
    """Ошибка операции над таймером или игроком."""


class DuplicateNameError(EntityError):
    """Сущность с таким именем уже существует."""

    def __init__(self, kind: str, name: str):
        super().__init__(f"{kind} '{name}' already exists")
        self.kind = kind
        self.name = name


class NotFoundError(EntityError):
    """Сущность с таким id не найдена."""

    def __init__(self, kind: str, item_id: int):
        super().__init__(f"{kind} #{item_id} not found")
        self.kind = kind
        self.item_id = item_id


class CounterOverflowError(EntityError):
    """Значение счетчика вышло за пределы 32-битного целого."""

    def __init__(self, name: str, field: str):
        super().__init__(f"{field} of '{name}' is out of range")
        self.name = name
        self.field = field


class InvalidCallbackError(TrackerError):
    """Неверные или неизвестные данные кнопки."""


class StoreError(TrackerError):
    """Ошибка хранилища (кроме отсутствия ключа)."""


class TransportError(TrackerError):
    """Не удалось отправить, изменить или удалить сообщение."""
