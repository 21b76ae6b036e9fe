"""
Настройки бота из переменных окружения.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .services.blob_store import BlobStore, FileBlobStore, GCSBlobStore
from .services.util import parse_env_bool


@dataclass(frozen=True)
class Settings:
    bot_token: str
    storage_backend: str = 'file'
    data_dir: str = 'data'
    gcs_bucket: str = ''
    use_webhook: bool = False
    webhook_url: str = ''
    webhook_path: str = '/webhook'
    webhook_secret: Optional[str] = None
    port: int = 3000
    ops_chat_id: Optional[int] = None
    logs_dir: str = 'logs'
    log_level: str = 'INFO'


def load_settings() -> Settings:
    """Загружает .env и собирает настройки."""
    load_dotenv()

    bot_token = os.getenv('BOT_TOKEN')
    if not bot_token:
        raise ValueError("BOT_TOKEN не найден в переменных окружения")

    storage_backend = os.getenv('STORAGE_BACKEND', 'file').strip().lower()
    if storage_backend not in ('file', 'gcs'):
        raise ValueError(f"Неизвестный STORAGE_BACKEND: {storage_backend}")

    use_webhook = parse_env_bool(os.getenv('USE_WEBHOOK', 'false'))
    webhook_url = os.getenv('WEBHOOK_URL', '')
    if use_webhook and not webhook_url:
        raise ValueError("WEBHOOK_URL не найден в переменных окружения при USE_WEBHOOK=true")

    ops_chat_id = os.getenv('OPS_CHAT_ID', '').strip()

    return Settings(
        bot_token=bot_token,
        storage_backend=storage_backend,
        data_dir=os.getenv('DATA_DIR', 'data'),
        gcs_bucket=os.getenv('GCS_BUCKET_NAME', ''),
        use_webhook=use_webhook,
        webhook_url=webhook_url,
        webhook_path=os.getenv('WEBHOOK_PATH', '/webhook'),
        webhook_secret=os.getenv('WEBHOOK_SECRET') or None,
        port=int(os.getenv('PORT', 3000)),
        ops_chat_id=int(ops_chat_id) if ops_chat_id else None,
        logs_dir=os.getenv('LOGS_DIR', 'logs'),
        log_level=os.getenv('LOG_LEVEL', 'INFO'),
    )


def create_blob_store(settings: Settings) -> BlobStore:
    """Создает хранилище документов по настройкам."""
    if settings.storage_backend == 'gcs':
        return GCSBlobStore(settings.gcs_bucket)
    return FileBlobStore(settings.data_dir)
