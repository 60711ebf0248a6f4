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

"""Unit tests for the INI configuration loader."""

import textwrap
from pathlib import Path

import pytest

from common.config import SnapshotArchiveConfig, load_config


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "snapshot_archive.ini"
    path.write_text(textwrap.dedent(content))
    return path


class TestLoadConfig:
    """Tests for load_config."""

    def test_full_file(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            """
            [archive]
            backend = MEMORY
            upload_dir = /var/tmp/uploads
            transfer_buffer_bytes = 65536

            [mongodb]
            uri = mongodb://archive:secret@db:27017
            database = archive

            [gridfs]
            bucket_name = snapshots
            chunk_size_bytes = 1048576
            """,
        )

        config = load_config(str(path))

        assert config.archive.backend == "memory"
        assert config.archive.upload_dir == "/var/tmp/uploads"
        assert config.archive.transfer_buffer_bytes == 65536
        assert config.mongodb.uri == "mongodb://archive:secret@db:27017"
        assert config.mongodb.database == "archive"
        assert config.gridfs.bucket_name == "snapshots"
        assert config.gridfs.chunk_size_bytes == 1048576

    def test_missing_options_use_defaults(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            """
            [mongodb]
            database = other
            """,
        )

        config = load_config(str(path))
        defaults = SnapshotArchiveConfig()

        assert config.archive == defaults.archive
        assert config.gridfs == defaults.gridfs
        assert config.mongodb.uri == defaults.mongodb.uri
        assert config.mongodb.database == "other"

    def test_path_from_environment(self, tmp_path: Path, monkeypatch) -> None:
        path = _write(tmp_path, "[gridfs]\nbucket_name = env\n")
        monkeypatch.setenv("SNAPSHOT_ARCHIVE_CONFIG_PATH", str(path))

        assert load_config().gridfs.bucket_name == "env"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "absent.ini"))

    def test_empty_file(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Empty"):
            load_config(str(_write(tmp_path, "")))

    def test_unsupported_backend(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="Unsupported archive backend"):
            load_config(str(_write(tmp_path, "[archive]\nbackend = s3\n")))

    @pytest.mark.parametrize(
        "content",
        [
            "[gridfs]\nchunk_size_bytes = 0\n",
            "[archive]\ntransfer_buffer_bytes = -5\n",
            "[gridfs]\nchunk_size_bytes = big\n",
        ],
    )
    def test_invalid_sizes(self, tmp_path: Path, content: str) -> None:
        with pytest.raises(ValueError):
            load_config(str(_write(tmp_path, content)))

    def test_gridfs_requires_database(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="database"):
            load_config(str(_write(tmp_path, "[mongodb]\ndatabase =\n")))

    def test_memory_backend_without_database(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "[archive]\nbackend = memory\n[mongodb]\ndatabase =\n")
        assert load_config(str(path)).archive.backend == "memory"
