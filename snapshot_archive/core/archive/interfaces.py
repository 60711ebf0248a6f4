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

"""Storage interfaces (Protocols) for the archive domain.

These define the contracts that infrastructure implementations must satisfy.
"""

from typing import Any, BinaryIO, Dict, Iterator, Optional, Protocol, Sequence

from .entities import FileInfo
from .value_objects import FilterTerm, QuerySpec


class ChunkStore(Protocol):
    """Port for a chunked blob store with GridFS semantics.

    Blobs are written once, split into fixed-size chunks, and described by
    a files document (filename, length, uploadDate, metadata). Blob ids are
    assigned by the store at commit time.
    """

    def upload_from_stream(
        self,
        filename: str,
        source: BinaryIO,
        metadata: Dict[str, Any],
        chunk_size_bytes: Optional[int] = None,
    ) -> str:
        """Write the remaining bytes of ``source`` as a new blob.

        Args:
            filename: Name recorded on the files document.
            source: Readable binary stream, consumed to EOF.
            metadata: Metadata document stored with the blob.
            chunk_size_bytes: Chunk size override; store default when None.

        Returns:
            The store-assigned blob id.

        Raises:
            DuplicateContentError: If the store's hash uniqueness constraint fires.
            ArchiveStorageError: If the write fails. No partial blob is left behind.
        """
        ...

    def open_download_stream(self, blob_id: str) -> BinaryIO:
        """Open a readable stream over a blob's content.

        Raises:
            BlobNotFoundError: If the blob does not exist.
            ArchiveStorageError: If the store cannot be read.
        """
        ...

    def download_to_stream(self, blob_id: str, destination: BinaryIO) -> None:
        """Write a blob's full content into ``destination``.

        Raises:
            BlobNotFoundError: If the blob does not exist.
            ArchiveStorageError: If the store cannot be read.
        """
        ...

    def find(self, query: QuerySpec) -> Iterator[FileInfo]:
        """Iterate files matching the query's filter, sort, skip and limit."""
        ...

    def find_by_id(self, blob_id: str) -> Optional[FileInfo]:
        """Return a single file's info, or None if absent."""
        ...

    def delete(self, blob_id: str) -> bool:
        """Delete a blob and its chunks.

        Returns:
            True if a blob was deleted, False if it was not found.
        """
        ...

    def count(self, terms: Sequence[FilterTerm] = ()) -> int:
        """Count files matching all ``terms``; every file when empty."""
        ...
