"""Ownership of uploaded product images.

Uploaded files land in a single managed directory under a generated
``<uuid><ext>`` name and are referenced from product records as
``/uploads/<name>``. Only those paths are ever deleted; anything else (the
bundled seed assets for instance) is an external reference.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from uuid import uuid4

from werkzeug.datastructures import FileStorage
from werkzeug.utils import safe_join

from commonlib.config import DEFAULT_MAX_UPLOAD_BYTES

from .errors import UploadRejected, UploadTooLarge

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = frozenset({"jpeg", "jpg", "png", "gif", "webp"})
ALLOWED_MIMETYPES = frozenset(
    {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
)


class ImageManager:
    def __init__(
        self,
        upload_dir: Path | str,
        url_prefix: str = "/uploads",
        max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
    ) -> None:
        self.upload_dir = Path(upload_dir)
        self.url_prefix = "/" + url_prefix.strip("/")
        self.max_bytes = max_bytes
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Upload acceptance
    # ------------------------------------------------------------------
    @staticmethod
    def _extension(filename: str) -> str:
        return os.path.splitext(filename or "")[1].lower()

    @staticmethod
    def _size(upload: FileStorage) -> int:
        stream = upload.stream
        position = stream.tell()
        stream.seek(0, os.SEEK_END)
        size = stream.tell()
        stream.seek(position)
        return size

    def validate(self, upload: FileStorage) -> str:
        """Return the normalised extension of an acceptable image upload."""

        ext = self._extension(upload.filename or "")
        mimetype = (upload.mimetype or "").lower()
        if ext.lstrip(".") not in ALLOWED_EXTENSIONS or mimetype not in ALLOWED_MIMETYPES:
            raise UploadRejected("Only image files are allowed!")
        if self._size(upload) > self.max_bytes:
            raise UploadTooLarge(
                "Image exceeds the upload limit",
                cause=f"maximum size is {self.max_bytes} bytes",
            )
        return ext

    def save(self, upload: FileStorage) -> str:
        """Store an accepted upload and return the path recorded on the product."""

        ext = self.validate(upload)
        filename = f"{uuid4()}{ext}"
        upload.save(self.upload_dir / filename)
        logger.info("Stored upload %s as %s", upload.filename, filename)
        return f"{self.url_prefix}/{filename}"

    # ------------------------------------------------------------------
    # Ownership
    # ------------------------------------------------------------------
    def resolve(self, image_path: str | None) -> Path | None:
        """Map a managed image path to its file, or ``None`` for anything else."""

        if not image_path or not image_path.startswith(self.url_prefix + "/"):
            return None
        name = image_path[len(self.url_prefix) + 1:]
        if not name:
            return None
        joined = safe_join(str(self.upload_dir), name)
        return Path(joined) if joined else None

    def owns(self, image_path: str | None) -> bool:
        return self.resolve(image_path) is not None

    def release(self, image_path: str | None) -> bool:
        """Delete a managed image file. Returns ``True`` when a file was removed."""

        target = self.resolve(image_path)
        if target is None or not target.is_file():
            return False
        target.unlink(missing_ok=True)
        logger.info("Removed image %s", image_path)
        return True
