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

"""Value objects for the snapshot archive domain.

All value objects are immutable and defined by their values, not identity.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, List, Optional, Tuple

# Field names of the chunk store's files documents (GridFS layout).
ID_FIELD = "_id"
FILENAME_FIELD = "filename"
LENGTH_FIELD = "length"
UPLOAD_DATE_FIELD = "uploadDate"
HASH_FIELD = "metadata.sha256"
TICKET_NUMBER_FIELD = "metadata.ticketNumber"

HASH_METADATA_KEY = "sha256"
TICKET_NUMBER_METADATA_KEY = "ticketNumber"


class SortDirection(str, Enum):
    """Shared direction applied to every requested sort field."""

    ASC = "ASC"
    DESC = "DESC"


class FilterOperator(str, Enum):
    """Comparison operators a chunk store must understand."""

    EQ = "EQ"
    GTE = "GTE"
    LTE = "LTE"


@dataclass(frozen=True)
class ContentHash:
    """SHA-256 hex digest of blob content.

    Attributes:
        value: 64-character lowercase hex string.

    Raises:
        ValueError: If value does not match SHA-256 pattern.
    """

    value: str

    SHA256_PATTERN: ClassVar[str] = r"^[0-9a-f]{64}$"

    def __post_init__(self) -> None:
        """Validate SHA-256 format."""
        if not isinstance(self.value, str) or not re.match(self.SHA256_PATTERN, self.value):
            raise ValueError(
                f"Invalid SHA-256 hex digest: {self.value}. "
                f"Expected 64 lowercase hexadecimal characters."
            )

    @classmethod
    def parse(cls, raw: str) -> "ContentHash":
        """Build a ContentHash from user input, ignoring case and whitespace."""
        return cls(value=(raw or "").strip().lower())

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


@dataclass(frozen=True)
class BlobId:
    """Identifier assigned to a blob by the chunk store (ObjectId hex).

    Attributes:
        value: 24-character lowercase hex string.

    Raises:
        ValueError: If value is not a valid ObjectId string.
    """

    value: str

    OBJECT_ID_PATTERN: ClassVar[str] = r"^[0-9a-f]{24}$"

    def __post_init__(self) -> None:
        """Validate ObjectId format."""
        if not isinstance(self.value, str) or not re.match(self.OBJECT_ID_PATTERN, self.value):
            raise ValueError(f"Invalid blob id format: {self.value}")

    @classmethod
    def parse(cls, raw: str) -> "BlobId":
        """Build a BlobId from user input, ignoring case and whitespace."""
        return cls(value=(raw or "").strip().lower())

    def __str__(self) -> str:
        """Return string representation."""
        return self.value


@dataclass(frozen=True)
class FilterTerm:
    """Single comparison on a files-document field.

    Attributes:
        field: Dotted path of the field, e.g. ``metadata.ticketNumber``.
        operator: Comparison to apply.
        value: Right-hand operand.
    """

    field: str
    operator: FilterOperator
    value: Any


@dataclass(frozen=True)
class QuerySpec:
    """Typed listing query built from loosely-typed request parameters.

    A limit of 0 means unbounded; a skip of 0 means start at the first
    record. Sorting only applies when both ``sort_fields`` and
    ``sort_direction`` are set.
    """

    ticket_number: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    filename: Optional[str] = None
    limit: int = 0
    skip: int = 0
    sort_fields: Tuple[str, ...] = field(default_factory=tuple)
    sort_direction: Optional[SortDirection] = None

    def __post_init__(self) -> None:
        """Validate pagination values."""
        if self.limit < 0:
            raise ValueError(f"limit must be non-negative, got {self.limit}")
        if self.skip < 0:
            raise ValueError(f"skip must be non-negative, got {self.skip}")

    @property
    def is_sorted(self) -> bool:
        """Whether the query requests an ordering."""
        return bool(self.sort_fields) and self.sort_direction is not None

    def filter_terms(self) -> List[FilterTerm]:
        """Return the AND-ed filter terms; empty means unrestricted."""
        terms: List[FilterTerm] = []
        if self.ticket_number:
            terms.append(FilterTerm(TICKET_NUMBER_FIELD, FilterOperator.EQ, self.ticket_number))
        if self.start_date is not None:
            terms.append(FilterTerm(UPLOAD_DATE_FIELD, FilterOperator.GTE, self.start_date))
        if self.end_date is not None:
            terms.append(FilterTerm(UPLOAD_DATE_FIELD, FilterOperator.LTE, self.end_date))
        if self.filename:
            terms.append(FilterTerm(FILENAME_FIELD, FilterOperator.EQ, self.filename))
        return terms
