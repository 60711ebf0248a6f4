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

"""Domain exceptions for the snapshot archive."""

from typing import Optional


class ArchiveDomainError(Exception):
    """Base exception for all archive domain errors."""

    def __init__(self, message: str, correlation_id: Optional[str] = None) -> None:
        """Initialize archive domain error.

        Args:
            message: Human-readable error description.
            correlation_id: Optional correlation ID for tracing.
        """
        super().__init__(message)
        self.message = message
        self.correlation_id = correlation_id


class ArchiveValidationError(ArchiveDomainError):
    """Request parameters or upload input failed validation."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize archive validation error.

        Args:
            message: Human-readable validation error description.
            field: Name of the offending parameter, when there is one.
            correlation_id: Optional correlation ID for tracing.
        """
        super().__init__(message, correlation_id=correlation_id)
        self.field = field


class DuplicateContentError(ArchiveDomainError):
    """A blob with the same content hash is already archived."""

    def __init__(
        self,
        content_hash: str,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize duplicate content error.

        Args:
            content_hash: SHA-256 hex digest that already exists.
            correlation_id: Optional correlation ID for tracing.
        """
        super().__init__(
            f"A document already exists with hash: {content_hash}",
            correlation_id=correlation_id,
        )
        self.content_hash = content_hash


class BlobNotFoundError(ArchiveDomainError):
    """Blob does not exist in the archive."""

    def __init__(
        self,
        blob_id: str,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize blob not found error.

        Args:
            blob_id: The identifier that was not found.
            correlation_id: Optional correlation ID for tracing.
        """
        super().__init__(
            f"ID {blob_id} not found",
            correlation_id=correlation_id,
        )
        self.blob_id = blob_id


class ArchiveStorageError(ArchiveDomainError):
    """Infrastructure-level failure of the chunk store or upload staging."""
