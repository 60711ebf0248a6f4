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

"""Unit tests for UploadStaging."""

import io
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from core.archive.exceptions import ArchiveStorageError
from infra.upload_staging import UploadStaging


class TestUploadStaging:
    """Tests for staging uploads on local disk."""

    def test_creates_upload_dir(self, tmp_path: Path) -> None:
        upload_dir = tmp_path / "nested" / "uploads"

        staging = UploadStaging(upload_dir)

        assert staging.upload_dir == upload_dir
        assert upload_dir.is_dir()

    def test_rejects_file_as_upload_dir(self, tmp_path: Path) -> None:
        not_a_dir = tmp_path / "file.txt"
        not_a_dir.write_text("x")

        with pytest.raises((ValueError, FileExistsError)):
            UploadStaging(not_a_dir)

    def test_stage_yields_rewound_copy(self, tmp_path: Path) -> None:
        staging = UploadStaging(tmp_path, buffer_size=3)

        with staging.stage(io.BytesIO(b"staged content")) as staged:
            assert staged.tell() == 0
            assert staged.seekable()
            assert staged.read() == b"staged content"
            staged_path = Path(staged.name)
            assert staged_path.parent == tmp_path
            assert staged_path.name.startswith("upload-")

        assert not staged_path.exists()

    def test_staged_file_removed_on_error(self, tmp_path: Path) -> None:
        staging = UploadStaging(tmp_path)

        with pytest.raises(RuntimeError):
            with staging.stage(io.BytesIO(b"x")):
                raise RuntimeError("downstream failure")

        assert list(tmp_path.iterdir()) == []

    def test_copy_failure_becomes_storage_error(self, tmp_path: Path) -> None:
        source = MagicMock()
        source.read.side_effect = OSError("connection reset")
        staging = UploadStaging(tmp_path)

        with pytest.raises(ArchiveStorageError, match="Failed to stage upload"):
            with staging.stage(source):
                pass

        assert list(tmp_path.iterdir()) == []
