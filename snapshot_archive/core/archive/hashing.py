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

"""Content hashing for staged uploads."""

import hashlib
from typing import BinaryIO, Tuple

from core.archive.exceptions import ArchiveStorageError, ArchiveValidationError
from core.archive.value_objects import ContentHash

DEFAULT_BUFFER_SIZE = 256 * 1024


class HashingUploadPipeline:
    """Computes the SHA-256 of a staged upload and rewinds it for storage.

    The stream must be seekable: uploads are staged on local disk before
    processing, so the same bytes that were hashed are the ones written
    to the chunk store.
    """

    def __init__(self, buffer_size: int = DEFAULT_BUFFER_SIZE) -> None:
        if buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {buffer_size}")
        self._buffer_size = buffer_size

    def hash(self, stream: BinaryIO) -> Tuple[ContentHash, BinaryIO]:
        """Hash the full content of ``stream``, then rewind it.

        Args:
            stream: Seekable binary stream over the staged upload.

        Returns:
            The content hash and the same stream positioned at its start.

        Raises:
            ArchiveValidationError: If the stream cannot be rewound.
            ArchiveStorageError: If reading the stream fails.
        """
        if not _is_seekable(stream):
            raise ArchiveValidationError(
                "Upload stream must be seekable so it can be stored after hashing"
            )

        digest = hashlib.sha256()
        try:
            stream.seek(0)
            for block in iter(lambda: stream.read(self._buffer_size), b""):
                digest.update(block)
            stream.seek(0)
        except OSError as e:
            raise ArchiveStorageError(f"Error generating hash for file: {e}") from e

        return ContentHash(digest.hexdigest()), stream


def _is_seekable(stream: BinaryIO) -> bool:
    seekable = getattr(stream, "seekable", None)
    if seekable is None:
        return False
    try:
        return bool(seekable())
    except (OSError, ValueError):
        return False
