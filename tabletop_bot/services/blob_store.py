"""
Хранилища "ключ - байты" для документов чатов.

FileBlobStore хранит объекты в локальном каталоге, GCSBlobStore - в бакете
Google Cloud Storage. Отсутствие ключа сообщается через BlobNotFound,
остальные ошибки бэкенда - через StoreError.
"""

import os
from pathlib import Path

from .errors import StoreError
from .logger import get_logger
from .util import atomic_write_bytes

logger = get_logger('blob_store')


class BlobNotFound(Exception):
    """Объект с таким ключом не существует."""

    def __init__(self, key: str):
        super().__init__(f"Key not found: {key}")
        self.key = key


class BlobStore:
    """Интерфейс хранилища объектов."""

    def get(self, key: str) -> bytes:
        raise NotImplementedError

    def put(self, key: str, data: bytes) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class FileBlobStore(BlobStore):
    """Объекты хранятся файлами в каталоге root."""

    def __init__(self, root: str = 'data'):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise StoreError(f"Invalid key: {key}")
        return path

    def get(self, key: str) -> bytes:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            raise BlobNotFound(key)
        except OSError as e:
            raise StoreError(f"Error reading {key}: {e}") from e

    def put(self, key: str, data: bytes) -> None:
        path = self._path(key)
        try:
            atomic_write_bytes(str(path), data)
        except OSError as e:
            raise StoreError(f"Error writing {key}: {e}") from e
        logger.debug(f"Записан объект {key} ({len(data)} байт)")

    def delete(self, key: str) -> None:
        path = self._path(key)
        try:
            os.unlink(path)
        except FileNotFoundError:
            raise BlobNotFound(key)
        except OSError as e:
            raise StoreError(f"Error deleting {key}: {e}") from e


class GCSBlobStore(BlobStore):
    """Объекты хранятся в бакете Google Cloud Storage."""

    def __init__(self, bucket_name: str, client=None):
        from google.cloud import storage

        if not bucket_name:
            raise ValueError("GCS_BUCKET_NAME не задан")
        self.client = client or storage.Client()
        self.bucket = self.client.bucket(bucket_name)

    def get(self, key: str) -> bytes:
        from google.api_core.exceptions import NotFound, GoogleAPIError

        try:
            return self.bucket.blob(key).download_as_bytes()
        except NotFound:
            raise BlobNotFound(key)
        except GoogleAPIError as e:
            raise StoreError(f"Error fetching {key} from GCS: {e}") from e

    def put(self, key: str, data: bytes) -> None:
        from google.api_core.exceptions import GoogleAPIError

        try:
            self.bucket.blob(key).upload_from_string(data, content_type='application/json')
        except GoogleAPIError as e:
            raise StoreError(f"Error putting {key} to GCS: {e}") from e
        logger.debug(f"Записан объект gs://{self.bucket.name}/{key}")

    def delete(self, key: str) -> None:
        from google.api_core.exceptions import NotFound, GoogleAPIError

        try:
            self.bucket.blob(key).delete()
        except NotFound:
            raise BlobNotFound(key)
        except GoogleAPIError as e:
            raise StoreError(f"Error deleting {key} from GCS: {e}") from e
