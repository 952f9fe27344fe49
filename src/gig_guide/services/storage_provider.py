"""
Storage provider for uploaded media
Images are written under UPLOADS_ROOT and served from /uploads by the API
"""
import hashlib
import logging
import os
import re
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator, List, Optional

from fastapi import UploadFile

from ..config import config
from ..exceptions import InvalidInputError
from .media_paths import storage_key_from_path

logger = logging.getLogger(__name__)

_SLUG_STRIP = re.compile(r"[^a-z0-9_\-]")


def slugify(name: str) -> str:
    """Lowercase folder-safe form of a display name: "The Blue Notes" -> "the_blue_notes" """
    slug = re.sub(r"\s+", "_", (name or "").strip().lower())
    return _SLUG_STRIP.sub("", slug) or "untitled"


def folder_name_for(resource_id: int, name: str) -> str:
    return f"{resource_id}_{slugify(name)}"


class StorageProvider(ABC):
    """Abstract base class for storage providers"""

    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        """
        Store data and return the key it was stored under

        Args:
            key: Storage key, e.g. "artists/3_nova/gallery/20240101_ab12cd34.jpg"
            data: Data bytes to store
            content_type: MIME type
        """

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Retrieve data by key, or None if not found"""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete data by key; False if it did not exist"""

    @abstractmethod
    def get_url(self, key: str) -> str:
        """Path under which the stored object is publicly served"""

    def generate_key(self, prefix: str, extension: str = "") -> str:
        """
        Generate a unique storage key

        Args:
            prefix: Folder prefix (e.g., 'venues/4/gallery')
            extension: File extension including the dot (e.g., '.jpg')
        """
        timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
        random_suffix = hashlib.md5(os.urandom(16)).hexdigest()[:8]
        return f"{prefix.strip('/')}/{timestamp}_{random_suffix}{extension}"


class LocalDiskStorageProvider(StorageProvider):
    """Local filesystem storage rooted at UPLOADS_ROOT"""

    def __init__(self, base_path: Optional[str] = None, url_prefix: Optional[str] = None):
        self.base_path = Path(base_path or config.UPLOADS_ROOT).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.url_prefix = (url_prefix or config.UPLOADS_URL_PREFIX).rstrip("/")
        logger.info(f"LocalDiskStorageProvider initialized at {self.base_path}")

    def _path_for(self, key: str) -> Path:
        file_path = (self.base_path / key.lstrip("/")).resolve()
        if self.base_path not in file_path.parents:
            raise InvalidInputError(f"Invalid storage key: {key}")
        return file_path

    def put(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        file_path = self._path_for(key)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "wb") as f:
            f.write(data)

        logger.debug(f"Stored {len(data)} bytes to {file_path}")
        return file_path.relative_to(self.base_path).as_posix()

    def get(self, key: str) -> Optional[bytes]:
        file_path = self._path_for(key)
        if not file_path.exists():
            return None
        with open(file_path, "rb") as f:
            return f.read()

    def delete(self, key: str) -> bool:
        file_path = self._path_for(key)
        if not file_path.exists():
            return False
        file_path.unlink()
        logger.debug(f"Deleted {file_path}")
        return True

    def get_url(self, key: str) -> str:
        return f"{self.url_prefix}/{key.lstrip('/')}"


class MediaStorage:
    """Validates uploaded images and stores them through a StorageProvider"""

    def __init__(self, provider: StorageProvider, max_bytes: Optional[int] = None,
                 allowed_extensions: Optional[List[str]] = None):
        self.provider = provider
        self.max_bytes = max_bytes or config.max_upload_bytes
        self.allowed_extensions = allowed_extensions or config.ALLOWED_IMAGE_EXTENSIONS

    def save_image(self, upload: UploadFile, folder: str) -> str:
        """Store one uploaded image under folder and return its public path"""
        extension = Path(upload.filename or "").suffix.lower()
        if extension not in self.allowed_extensions:
            raise InvalidInputError(
                f"Unsupported file type '{extension or upload.filename}'. "
                f"Allowed: {', '.join(self.allowed_extensions)}"
            )

        data = upload.file.read()
        if not data:
            raise InvalidInputError(f"Uploaded file '{upload.filename}' is empty")
        if len(data) > self.max_bytes:
            raise InvalidInputError(
                f"Uploaded file '{upload.filename}' exceeds the {self.max_bytes // (1024 * 1024)}MB limit"
            )

        key = self.provider.generate_key(folder, extension)
        stored_key = self.provider.put(key, data, upload.content_type or "application/octet-stream")
        return self.provider.get_url(stored_key)

    def save_images(self, uploads: List[UploadFile], folder: str) -> List[str]:
        with self.staged() as batch:
            return batch.save_images(uploads, folder)

    def delete_path(self, key: Optional[str]) -> bool:
        """Delete a stored object by storage key; a missing key is a no-op"""
        if not key:
            return False
        return self.provider.delete(key)

    @contextmanager
    def staged(self) -> Iterator["StagedUploads"]:
        """
        Group the uploads of one request.

        Every file saved through the yielded batch is deleted again if the
        block raises, so a failed validation or commit leaves nothing behind.
        """
        batch = StagedUploads(self)
        try:
            yield batch
        except Exception:
            batch.discard()
            raise


class StagedUploads:
    """Paths saved within a MediaStorage.staged() block"""

    def __init__(self, storage: MediaStorage):
        self.storage = storage
        self.paths: List[str] = []

    def save_image(self, upload: UploadFile, folder: str) -> str:
        path = self.storage.save_image(upload, folder)
        self.paths.append(path)
        return path

    def save_images(self, uploads: List[UploadFile], folder: str) -> List[str]:
        return [self.save_image(upload, folder) for upload in uploads if upload is not None]

    def discard(self) -> None:
        for path in self.paths:
            try:
                self.storage.delete_path(storage_key_from_path(path))
            except OSError as e:
                logger.warning(f"Could not remove staged upload {path}: {e}")
        if self.paths:
            logger.info(f"Discarded {len(self.paths)} staged upload(s)")
        self.paths = []


_media_storage: Optional[MediaStorage] = None


def get_media_storage() -> MediaStorage:
    """FastAPI dependency returning the process-wide media storage"""
    global _media_storage
    if _media_storage is None:
        _media_storage = MediaStorage(LocalDiskStorageProvider())
    return _media_storage
