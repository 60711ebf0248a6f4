# Copyright 2026 Dell Inc. or its subsidiaries. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Local staging of incoming uploads before they are hashed and archived."""

import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

from core.archive.exceptions import ArchiveStorageError

logger = logging.getLogger(__name__)


class UploadStaging:
    """Spools upload streams into the temp-upload directory.

    Every upload is fully received on local disk first, so hashing and
    storing read the same seekable file instead of the request body.
    """

    DEFAULT_BUFFER_SIZE: int = 256 * 1024

    def __init__(self, upload_dir: Path, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        """Initialize upload staging.

        Args:
            upload_dir: Directory that receives staged files.
            buffer_size: Copy buffer size in bytes.

        Raises:
            ValueError: If upload_dir exists but is not a directory.
        """
        self._upload_dir = Path(upload_dir)
        self._buffer_size = buffer_size
        self._upload_dir.mkdir(parents=True, exist_ok=True)
        if not self._upload_dir.is_dir():
            raise ValueError(f"upload_dir is not a directory: {upload_dir}")

    @property
    def upload_dir(self) -> Path:
        return self._upload_dir

    @contextmanager
    def stage(self, source: BinaryIO) -> Iterator[BinaryIO]:
        """Copy ``source`` to a staged file and yield it rewound to 0.

        The staged file is removed when the context exits.

        Raises:
            ArchiveStorageError: If the staged file cannot be written.
        """
        try:
            staged = tempfile.NamedTemporaryFile(
                mode="w+b", dir=self._upload_dir, prefix="upload-", delete=False
            )
        except OSError as e:
            raise ArchiveStorageError(f"Failed to create staged upload file: {e}") from e

        staged_path = Path(staged.name)
        try:
            try:
                shutil.copyfileobj(source, staged, self._buffer_size)
                staged.flush()
                staged.seek(0)
            except OSError as e:
                raise ArchiveStorageError(
                    f"Failed to stage upload to {staged_path}: {e}"
                ) from e
            yield staged
        finally:
            staged.close()
            try:
                staged_path.unlink()
            except FileNotFoundError:
                pass
            except OSError:
                logger.warning("Failed to remove staged upload %s", staged_path)
