"""Image storage for posts.

Older rows keep image bytes inline in ``posts.imgdata``; current uploads keep
that column empty and store the bytes as ``{post_id}.{ext}`` under the image
directory. Reads go through :class:`ImageStore`, which prefers the file,
falls back to the inline bytes and copies them to a file on first read, so
callers never branch on the storage generation.
"""
from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from sqlalchemy.orm import Session

from picfeed.core.errors import NotFoundError, StorageFault, ValidationFault
from picfeed.core.settings import settings
from picfeed.repositories.post_repo import PostRepository

logger = logging.getLogger(__name__)

__all__ = [
    "ImageStore",
    "LocalFileStorage",
    "StoredImage",
    "SUPPORTED_MIME_TYPES",
    "canonical_extension",
    "get_file_storage",
    "image_url",
    "mime_from_content_type",
]

SUPPORTED_MIME_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
}


def canonical_extension(mime: str) -> str | None:
    """Return the file extension used for ``mime``, or None if unsupported."""
    return SUPPORTED_MIME_TYPES.get(mime)


def image_url(post_id: int, mime: str) -> str:
    """Return the public path serving a post's image."""
    ext = canonical_extension(mime)
    suffix = f".{ext}" if ext else ""
    return f"/image/{post_id}{suffix}"


def mime_from_content_type(content_type: str | None) -> str:
    """Map an upload's declared content type onto a supported MIME type.

    Raises:
        ValidationFault: The content type is not JPEG, PNG or GIF.
    """
    declared = (content_type or "").lower()
    if "jpeg" in declared:
        return "image/jpeg"
    if "png" in declared:
        return "image/png"
    if "gif" in declared:
        return "image/gif"
    raise ValidationFault("Only jpg, png and gif images can be posted")


@dataclass(frozen=True)
class StoredImage:
    """Image bytes together with the MIME type they should be served as."""

    data: bytes
    mime: str


class LocalFileStorage:
    """Byte storage rooted at a directory on the local filesystem."""

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self.root = Path(root)

    def _path(self, name: str) -> Path:
        if not name or "/" in name or "\\" in name or name in {".", ".."}:
            raise ValueError(f"Invalid storage name: {name!r}")
        return self.root / name

    def exists(self, name: str) -> bool:
        return self._path(name).is_file()

    def read(self, name: str) -> bytes | None:
        """Return the stored bytes, or None when the file does not exist."""
        try:
            return self._path(name).read_bytes()
        except FileNotFoundError:
            return None

    def write(self, name: str, data: bytes) -> None:
        """Atomically replace ``name`` with ``data``.

        Bytes go to a temporary file in the same directory which is then
        renamed over the target, so readers never observe a partial image.
        """
        target = self._path(name)
        self.root.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.root, prefix=f".{name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class ImageStore:
    """Resolve and persist post images across inline and file storage."""

    def __init__(
        self,
        session: Session,
        storage: LocalFileStorage,
        *,
        upload_limit: int = 10 * 1024 * 1024,
    ) -> None:
        self.session = session
        self.posts = PostRepository(session)
        self.storage = storage
        self.upload_limit = upload_limit

    def image_bytes(self, post_id: int, requested_extension: str) -> StoredImage:
        """Return the image of ``post_id`` if ``requested_extension`` matches it.

        Raises:
            NotFoundError: The post does not exist, the extension does not
                match the stored MIME type, or no bytes exist in either store.
            StorageFault: The file store failed while reading. A failed
                migration write is logged and the inline bytes are still served.
        """
        post = self.posts.get_by_id(post_id)
        if post is None:
            raise NotFoundError(f"Post {post_id} not found")

        ext = canonical_extension(post.mime)
        if ext is None or requested_extension != ext:
            raise NotFoundError(f"No {requested_extension!r} image for post {post_id}")

        name = f"{post_id}.{ext}"
        try:
            data = self.storage.read(name)
        except OSError as exc:
            raise StorageFault(f"Failed to read image {name}") from exc
        if data is not None:
            return StoredImage(data=data, mime=post.mime)

        # Deferred column; only loaded when the file store has nothing.
        inline = post.imgdata
        if not inline:
            logger.warning("Image file %s is missing and post %d has no inline data", name, post_id)
            raise NotFoundError(f"Image for post {post_id} not found")

        data = bytes(inline)
        try:
            self._materialize(name, data)
        except StorageFault:
            logger.warning(
                "Serving post %d from inline data; %s could not be written",
                post_id,
                name,
                exc_info=True,
            )
        return StoredImage(data=data, mime=post.mime)

    def store_upload(self, user_id: int, data: bytes, mime: str, body: str = "") -> int:
        """Persist a new post and its image, returning the post id.

        The row is committed before the file is written. If the write fails,
        the row remains and its image reads as not found.

        Raises:
            ValidationFault: Unsupported MIME type or oversized upload.
            StorageFault: The file could not be written.
        """
        ext = canonical_extension(mime)
        if ext is None:
            raise ValidationFault("Only jpg, png and gif images can be posted")
        if len(data) > self.upload_limit:
            raise ValidationFault("File is too large")

        post = self.posts.create(user_id=user_id, mime=mime, body=body)
        self.session.commit()
        post_id = post.id

        name = f"{post_id}.{ext}"
        try:
            self.storage.write(name, data)
        except OSError as exc:
            raise StorageFault(f"Failed to write image {name} for post {post_id}") from exc
        logger.info("Stored %d byte %s image for post %d", len(data), mime, post_id)
        return post_id

    def materialize_legacy(self, batch_size: int = 100) -> int:
        """Copy every remaining inline image to file storage.

        Returns:
            The number of files written.
        """
        written = 0
        last_id = 0
        while True:
            ids = self.posts.list_legacy_ids(last_id, batch_size)
            if not ids:
                break
            for post_id in ids:
                post = self.posts.get_with_image(post_id)
                ext = canonical_extension(post.mime) if post else None
                if post is None or ext is None:
                    continue
                name = f"{post_id}.{ext}"
                if self.storage.exists(name):
                    continue
                self._materialize(name, bytes(post.imgdata))
                written += 1
            last_id = ids[-1]
            self.session.expunge_all()
        return written

    def _materialize(self, name: str, data: bytes) -> None:
        try:
            self.storage.write(name, data)
        except OSError as exc:
            raise StorageFault(f"Failed to migrate inline image to {name}") from exc
        logger.info("Migrated inline image to %s", name)


_storage: LocalFileStorage | None = None


def get_file_storage() -> LocalFileStorage:
    """Return the process-wide file storage rooted at the configured image dir."""
    global _storage
    if _storage is None:
        _storage = LocalFileStorage(settings.image_dir)
    return _storage
