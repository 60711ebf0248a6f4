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

"""Archive domain entities."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from .value_objects import HASH_METADATA_KEY, TICKET_NUMBER_METADATA_KEY


@dataclass(frozen=True)
class FileInfo:
    """Read-only projection of a stored blob.

    Attributes:
        id: Store-assigned identifier.
        filename: Name supplied at upload time (not unique).
        length: Content size in bytes.
        upload_date: Commit timestamp (UTC).
        metadata: Metadata document, holds ``sha256`` and optional ``ticketNumber``.
    """

    id: str
    filename: str
    length: int
    upload_date: datetime
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate projection fields."""
        if self.length < 0:
            raise ValueError(f"length must be non-negative, got {self.length}")

    @property
    def sha256(self) -> Optional[str]:
        """Content hash recorded at upload time."""
        return self.metadata.get(HASH_METADATA_KEY)

    @property
    def ticket_number(self) -> Optional[str]:
        """Help desk ticket the snapshot was filed under."""
        return self.metadata.get(TICKET_NUMBER_METADATA_KEY)
