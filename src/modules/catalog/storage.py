"""Product cover images on Django's storage API.

New files are named ``<PRODUCT_IMAGE_DIR>/<uuid4><ext>``.  A stored name
is only ever deleted when it resolves inside ``PRODUCT_IMAGE_DIR``.
"""

from __future__ import annotations

import posixpath
import uuid
from pathlib import PurePosixPath
from typing import Optional

import structlog
from django.conf import settings
from django.core.files.base import File
from django.core.files.storage import Storage, default_storage

from modules.catalog.exceptions import InvalidImagePath

logger = structlog.get_logger(__name__)


class ProductImageStore:
    def __init__(
        self, storage: Optional[Storage] = None, directory: Optional[str] = None
    ) -> None:
        self._storage = storage or default_storage
        self._directory = (directory or settings.PRODUCT_IMAGE_DIR).strip("/")

    def ensure_managed(self, name: str) -> str:
        """Normalise *name* and check it lies inside the image directory.

        Raises:
            InvalidImagePath: the path escapes the image directory.
        """
        normalized = posixpath.normpath(name.replace("\\", "/").lstrip("/"))
        if not normalized.startswith(f"{self._directory}/"):
            raise InvalidImagePath(f"The image path '{name}' is invalid.")
        return normalized

    def save(self, upload: File) -> str:
        extension = PurePosixPath(upload.name or "").suffix.lower()
        name = f"{self._directory}/{uuid.uuid4()}{extension}"
        stored_name = self._storage.save(name, upload)
        logger.info("product_image.saved", image=stored_name)
        return stored_name

    def delete(self, name: str) -> None:
        if not name:
            return
        normalized = self.ensure_managed(name)
        if self._storage.exists(normalized):
            self._storage.delete(normalized)
            logger.info("product_image.deleted", image=normalized)
