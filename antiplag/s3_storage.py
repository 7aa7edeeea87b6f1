"""
Simple S3-like object storage on the local filesystem.
One instance serves one bucket; keys map to paths below the bucket directory.
"""

import contextlib
import hashlib
import logging
import os
import tempfile
from pathlib import Path, PurePosixPath
from typing import List

from antiplag.exceptions import InvalidArgumentError, NotFoundError, UnavailableError

logger = logging.getLogger(__name__)

PARTIAL_SUFFIX = ".part"


class S3Storage:
    """Bucket of objects stored as files under ``base_path/bucket_name``."""

    def __init__(self, base_path: str, bucket_name: str):
        self.base_path = Path(base_path)
        self.bucket_name = bucket_name
        self.bucket_path = self.base_path / bucket_name
        try:
            self.bucket_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise UnavailableError(f"cannot create bucket {bucket_name}: {e}")

    def _object_path(self, key: str) -> Path:
        """Resolve a key to its path, rejecting keys that escape the bucket."""
        parts = PurePosixPath(key).parts
        if not key or key.startswith("/") or "\\" in key or ".." in parts:
            raise InvalidArgumentError(f"invalid object key: {key!r}")
        if key.endswith(PARTIAL_SUFFIX):
            raise InvalidArgumentError(f"object key may not end with {PARTIAL_SUFFIX}: {key!r}")
        return self.bucket_path.joinpath(*parts)

    def put_object(self, key: str, data: bytes) -> dict:
        """
        Store an object.

        Every write goes to its own ``.part`` file next to the object and is
        renamed into place, so readers never observe a half-written object and
        concurrent writers to one key never share a file. The last rename wins.

        Returns:
            dict with 'key', 'bucket', 'hash' and 'size' of the stored object
        """
        file_path = self._object_path(key)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, partial_name = tempfile.mkstemp(
                dir=file_path.parent,
                prefix=f".{file_path.name}.",
                suffix=PARTIAL_SUFFIX,
            )
        except OSError as e:
            raise UnavailableError(f"failed to store object {key}: {e}")

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(partial_name, file_path)
        except OSError as e:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(partial_name)
            raise UnavailableError(f"failed to store object {key}: {e}")

        logger.debug(f"Stored object {key} ({len(data)} bytes) in bucket {self.bucket_name}")
        return {
            "key": key,
            "bucket": self.bucket_name,
            "hash": hashlib.sha256(data).hexdigest(),
            "size": len(data),
        }

    def get_object(self, key: str) -> bytes:
        file_path = self._object_path(key)
        try:
            with open(file_path, "rb") as f:
                return f.read()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            raise NotFoundError(f"object {key} not found in bucket {self.bucket_name}")
        except OSError as e:
            raise UnavailableError(f"failed to read object {key}: {e}")

    def stat_object(self, key: str) -> bool:
        """Check if an object exists. Errors other than absence propagate."""
        file_path = self._object_path(key)
        try:
            return file_path.is_file()
        except OSError as e:
            raise UnavailableError(f"failed to stat object {key}: {e}")

    def list_keys(self) -> List[str]:
        """List all object keys in the bucket."""
        try:
            return [
                file_path.relative_to(self.bucket_path).as_posix()
                for file_path in self.bucket_path.rglob("*")
                if file_path.is_file() and not file_path.name.endswith(PARTIAL_SUFFIX)
            ]
        except OSError as e:
            raise UnavailableError(f"failed to list bucket {self.bucket_name}: {e}")
