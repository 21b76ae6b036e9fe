"""
Централизованная система логирования для бота.
"""

import logging
import logging.handlers
import json
import sys
import traceback
import threading
import time
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from pathlib import Path

ROOT_LOGGER = 'tabletop_bot'


class JsonFormatter(logging.Formatter):
    """Форматтер для JSON логов."""

    EXTRA_FIELDS = ('user_id', 'chat_id', 'handler_name', 'duration_ms', 'error_type', 'event_type')

    def format(self, record: logging.LogRecord) -> str:
        """Форматирует запись лога в JSON."""
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        for field in self.EXTRA_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }

        return json.dumps(log_data, ensure_ascii=False)


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter,
                      backup_count: int = 7) -> logging.Handler:
    handler = logging.handlers.TimedRotatingFileHandler(
        path,
        when='midnight',
        interval=1,
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(logs_dir: str = 'logs', level: str = 'INFO') -> logging.Logger:
    """Настраивает логгер бота: консоль, текстовый файл, JSON и файл ошибок."""
    logs_path = Path(logs_dir)
    logs_path.mkdir(parents=True, exist_ok=True)

    main_logger = logging.getLogger(ROOT_LOGGER)
    main_logger.setLevel(logging.DEBUG)
    main_logger.handlers.clear()

    console_formatter = logging.Formatter(
        '%(asctime)s | %(levelname)-8s | %(name)-28s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    console_handler.setFormatter(console_formatter)
    main_logger.addHandler(console_handler)

    main_logger.addHandler(_rotating_handler(logs_path / "bot_all.log", logging.DEBUG, console_formatter))
    main_logger.addHandler(_rotating_handler(logs_path / "bot_structured.jsonl", logging.INFO, JsonFormatter()))
    main_logger.addHandler(_rotating_handler(logs_path / "bot_errors.log", logging.ERROR, JsonFormatter(), 30))

    logging.getLogger('aiogram').setLevel(logging.WARNING)
    logging.getLogger('aiohttp').setLevel(logging.WARNING)

    main_logger.info("🔧 Система логирования инициализирована")
    return main_logger


def get_logger(name: str) -> logging.Logger:
    """Возвращает логгер для указанного модуля."""
    return logging.getLogger(f'{ROOT_LOGGER}.{name}')


# Счетчики для сводки в логах
_metrics: Dict[str, Any] = {
    'messages_processed': 0,
    'callbacks_processed': 0,
    'errors_count': 0,
    'last_activity': time.time()
}
_metrics_lock = threading.Lock()


def log_message(user_id: int, chat_id: int, message_text: str, handler_name: Optional[str] = None):
    """Логирует обработку сообщения."""
    with _metrics_lock:
        _metrics['messages_processed'] += 1
        _metrics['last_activity'] = time.time()

    get_logger('messages').info(
        f"📩 Сообщение: {message_text[:50]}{'...' if len(message_text) > 50 else ''}",
        extra={'user_id': user_id, 'chat_id': chat_id, 'handler_name': handler_name, 'event_type': 'message'}
    )


def log_callback(user_id: int, chat_id: int, callback_data: str, handler_name: Optional[str] = None):
    """Логирует обработку callback."""
    with _metrics_lock:
        _metrics['callbacks_processed'] += 1
        _metrics['last_activity'] = time.time()

    get_logger('callbacks').info(
        f"🔘 Callback: {callback_data}",
        extra={'user_id': user_id, 'chat_id': chat_id, 'handler_name': handler_name, 'event_type': 'callback'}
    )


def log_error(error: BaseException, context: Optional[Dict[str, Any]] = None, user_id: Optional[int] = None):
    """Логирует ошибку с контекстом."""
    with _metrics_lock:
        _metrics['errors_count'] += 1

    extra_data: Dict[str, Any] = {'error_type': type(error).__name__}
    if user_id:
        extra_data['user_id'] = user_id
    if context:
        extra_data.update(context)

    get_logger('errors').error(
        f"❌ Ошибка: {error}",
        extra=extra_data,
        exc_info=(type(error), error, error.__traceback__)
    )


def log_timing(handler_name: str, duration_ms: float, user_id: Optional[int] = None, slow_ms: float = 1000):
    """Логирует медленные обработчики."""
    if duration_ms > slow_ms:
        get_logger('performance').warning(
            f"⏱️ Медленный обработчик: {handler_name} ({duration_ms:.2f}ms)",
            extra={'handler_name': handler_name, 'duration_ms': duration_ms, 'user_id': user_id}
        )


def get_metrics() -> Dict[str, Any]:
    """Возвращает текущие счетчики."""
    with _metrics_lock:
        return dict(_metrics)
