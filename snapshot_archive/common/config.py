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

"""Configuration loader for the Snapshot Archive."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import configparser

DEFAULT_CONFIG_PATH = "/etc/snapshot_archive/snapshot_archive.ini"
SUPPORTED_BACKENDS = ("gridfs", "memory")


@dataclass
class ArchiveConfig:
    """Archive service configuration."""
    backend: str = "gridfs"
    upload_dir: str = "/tmp/snapshot_archive/uploads"
    transfer_buffer_bytes: int = 262144


@dataclass
class MongoConfig:
    """MongoDB connection configuration."""
    uri: str = "mongodb://localhost:27017"
    database: str = "snapshots"


@dataclass
class GridFSConfig:
    """GridFS bucket configuration."""
    bucket_name: str = "fs"
    chunk_size_bytes: int = 261120


@dataclass
class SnapshotArchiveConfig:
    """Snapshot Archive configuration."""
    archive: ArchiveConfig = field(default_factory=ArchiveConfig)
    mongodb: MongoConfig = field(default_factory=MongoConfig)
    gridfs: GridFSConfig = field(default_factory=GridFSConfig)


def _positive_int(parser: configparser.ConfigParser, section: str, option: str, default: int) -> int:
    if not parser.has_option(section, option):
        return default
    value = parser.getint(section, option)
    if value <= 0:
        raise ValueError(f"[{section}] {option} must be positive, got {value}")
    return value


def load_config(config_path: Optional[str] = None) -> SnapshotArchiveConfig:
    """Load Snapshot Archive configuration from INI file.

    Args:
        config_path: Path to configuration file. If None, uses
                    SNAPSHOT_ARCHIVE_CONFIG_PATH environment variable or default path.

    Returns:
        SnapshotArchiveConfig instance.

    Raises:
        FileNotFoundError: If config file not found.
        ValueError: If config is invalid.
    """
    if config_path is None:
        config_path = os.getenv("SNAPSHOT_ARCHIVE_CONFIG_PATH", DEFAULT_CONFIG_PATH)

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    parser = configparser.ConfigParser()
    parser.read(config_file)

    if not parser.sections():
        raise ValueError(f"Empty configuration file: {config_file}")

    defaults = SnapshotArchiveConfig()

    backend = parser.get("archive", "backend", fallback=defaults.archive.backend).strip().lower()
    if backend not in SUPPORTED_BACKENDS:
        raise ValueError(
            f"Unsupported archive backend: {backend}. Expected one of {SUPPORTED_BACKENDS}"
        )

    archive = ArchiveConfig(
        backend=backend,
        upload_dir=parser.get("archive", "upload_dir", fallback=defaults.archive.upload_dir),
        transfer_buffer_bytes=_positive_int(
            parser, "archive", "transfer_buffer_bytes", defaults.archive.transfer_buffer_bytes
        ),
    )

    mongodb = MongoConfig(
        uri=parser.get("mongodb", "uri", fallback=defaults.mongodb.uri),
        database=parser.get("mongodb", "database", fallback=defaults.mongodb.database),
    )
    if backend == "gridfs" and not mongodb.database.strip():
        raise ValueError("[mongodb] database is required when backend=gridfs")

    gridfs = GridFSConfig(
        bucket_name=parser.get("gridfs", "bucket_name", fallback=defaults.gridfs.bucket_name),
        chunk_size_bytes=_positive_int(
            parser, "gridfs", "chunk_size_bytes", defaults.gridfs.chunk_size_bytes
        ),
    )

    return SnapshotArchiveConfig(
        archive=archive,
        mongodb=mongodb,
        gridfs=gridfs,
    )
