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

"""Unit tests for archive value objects and entities."""

from dataclasses import FrozenInstanceError
from datetime import datetime, timezone

import pytest

from core.archive.entities import FileInfo
from core.archive.value_objects import (
    BlobId,
    ContentHash,
    FilterOperator,
    FilterTerm,
    QuerySpec,
    SortDirection,
)

VALID_HASH = "a" * 64


class TestContentHash:
    """Tests for ContentHash value object."""

    def test_valid_hash(self) -> None:
        assert ContentHash(VALID_HASH).value == VALID_HASH

    def test_uppercase_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid SHA-256"):
            ContentHash("A" * 64)

    def test_parse_normalizes_case_and_whitespace(self) -> None:
        assert ContentHash.parse(f"  {'AB' * 32} ").value == "ab" * 32

    def test_wrong_length_rejected(self) -> None:
        with pytest.raises(ValueError):
            ContentHash("a" * 63)

    def test_immutable(self) -> None:
        digest = ContentHash(VALID_HASH)
        with pytest.raises(FrozenInstanceError):
            digest.value = "b" * 64  # type: ignore[misc]


class TestBlobId:
    """Tests for BlobId value object."""

    def test_valid_object_id(self) -> None:
        assert str(BlobId("65a1f0c2e4b0a1b2c3d4e5f6")) == "65a1f0c2e4b0a1b2c3d4e5f6"

    @pytest.mark.parametrize("raw", ["", "xyz", "65a1f0c2e4b0a1b2c3d4e5f", "65a1f0c2e4b0a1b2c3d4e5fg"])
    def test_invalid_rejected(self, raw: str) -> None:
        with pytest.raises(ValueError, match="Invalid blob id"):
            BlobId(raw)


class TestQuerySpec:
    """Tests for QuerySpec value object."""

    def test_default_is_unrestricted(self) -> None:
        spec = QuerySpec()
        assert spec.filter_terms() == []
        assert spec.limit == 0
        assert spec.skip == 0
        assert not spec.is_sorted

    def test_negative_limit_rejected(self) -> None:
        with pytest.raises(ValueError, match="limit"):
            QuerySpec(limit=-1)

    def test_negative_skip_rejected(self) -> None:
        with pytest.raises(ValueError, match="skip"):
            QuerySpec(skip=-1)

    def test_filter_terms_combined(self) -> None:
        start = datetime(2023, 1, 1, tzinfo=timezone.utc)
        end = datetime(2023, 12, 31, tzinfo=timezone.utc)
        spec = QuerySpec(ticket_number="INC-1", start_date=start, end_date=end, filename="a.bin")

        assert spec.filter_terms() == [
            FilterTerm("metadata.ticketNumber", FilterOperator.EQ, "INC-1"),
            FilterTerm("uploadDate", FilterOperator.GTE, start),
            FilterTerm("uploadDate", FilterOperator.LTE, end),
            FilterTerm("filename", FilterOperator.EQ, "a.bin"),
        ]

    def test_sorted_requires_fields_and_direction(self) -> None:
        assert not QuerySpec(sort_fields=("filename",)).is_sorted
        assert not QuerySpec(sort_direction=SortDirection.ASC).is_sorted
        assert QuerySpec(sort_fields=("filename",), sort_direction=SortDirection.ASC).is_sorted


class TestFileInfo:
    """Tests for FileInfo entity."""

    def test_metadata_accessors(self) -> None:
        info = FileInfo(
            id="65a1f0c2e4b0a1b2c3d4e5f6",
            filename="a.bin",
            length=3,
            upload_date=datetime(2023, 1, 1, tzinfo=timezone.utc),
            metadata={"sha256": VALID_HASH, "ticketNumber": "INC-7"},
        )
        assert info.sha256 == VALID_HASH
        assert info.ticket_number == "INC-7"

    def test_negative_length_rejected(self) -> None:
        with pytest.raises(ValueError, match="length"):
            FileInfo(
                id="65a1f0c2e4b0a1b2c3d4e5f6",
                filename="a.bin",
                length=-1,
                upload_date=datetime(2023, 1, 1, tzinfo=timezone.utc),
            )
