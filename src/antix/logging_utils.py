# ------------------------------------------------------------------------------
#  Antix
#  Copyright (c) 2025 Fabio Oddi
#
#  This file is part of Antix, released under the BSD 3-Clause License.
#  You may use, modify, and redistribute this file according to the terms of the
#  license. Attribution is required if this code is used in other works.
# ------------------------------------------------------------------------------

"""
Logging setup for runs of the simulator.

Records always go to the console unless ``to_console`` is switched off.
With ``enabled`` set in the `logging` block of the JSON config, they are
also written into ``logs/antix_<stamp>[_<digest>].zip``. The archive is
opened on the first record; at that point the config that drove the run
is copied to ``logs/configs/`` and a row is appended to ``logs/index.csv``
so that every archive can be traced back to its parameters.
"""
from __future__ import annotations

import csv
import hashlib
import logging
import shutil
import zipfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Optional

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
LOG_NAMESPACE = "antix"
ARCHIVE_DIR = "logs"
CONFIG_COPIES = "configs"
INDEX_FILE = "index.csv"
DIGEST_CHARS = 12


def level_from(value: Any, fallback: int = logging.INFO) -> int:
    """Turn ``"debug"``, ``"INFO "`` or ``10`` into a logging level; anything else gives ``fallback``."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        resolved = logging.getLevelName(value.strip().upper())
        if isinstance(resolved, int):
            return resolved
    return fallback


@dataclass(frozen=True)
class LogSettings:
    """Parsed `logging` block."""
    enabled: bool = False
    level: int = logging.INFO
    file_level: int = logging.INFO
    to_console: bool = True

    @classmethod
    def from_block(cls, block: Optional[Mapping[str, Any]]) -> "LogSettings":
        block = block or {}
        level = level_from(block.get("level"))
        return cls(
            enabled=bool(block.get("enabled", False)),
            level=level,
            file_level=level_from(block.get("file_level"), level),
            to_console=bool(block.get("to_console", True)),
        )


@dataclass
class LogArtifacts:
    """Paths of one run's archive plus the config it was produced with."""
    directory: Path
    archive: Path
    member: str
    stamp: str
    root: Path
    config: Optional[Path] = None
    digest: Optional[str] = None
    published: bool = False

    @classmethod
    def prepare(cls, config_path: Optional[str | Path], project_root: Optional[str | Path]) -> "LogArtifacts":
        root = Path(project_root).resolve() if project_root else Path.cwd()
        directory = root / ARCHIVE_DIR
        directory.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        config = None
        digest = None
        if config_path:
            candidate = Path(config_path).expanduser()
            if candidate.is_file():
                config = candidate.resolve()
                digest = hashlib.sha256(config.read_bytes()).hexdigest()[:DIGEST_CHARS]
        name = f"antix_{stamp}_{digest}" if digest else f"antix_{stamp}"
        return cls(
            directory=directory,
            archive=directory / f"{name}.zip",
            member=f"{name}.log",
            stamp=stamp,
            root=root,
            config=config,
            digest=digest,
        )

    def publish(self) -> None:
        """Copy the config next to the archives and index it; runs once."""
        if self.published:
            return
        self.published = True
        if self.config is None:
            return
        copies = self.directory / CONFIG_COPIES
        copies.mkdir(exist_ok=True)
        shutil.copy2(self.config, copies / f"{self.stamp}_{self.digest}_{self.config.name}")
        index = self.directory / INDEX_FILE
        fresh = not index.exists()
        try:
            archive = self.archive.relative_to(self.root).as_posix()
        except ValueError:
            archive = self.archive.as_posix()
        with index.open("a", newline="", encoding="utf-8") as fh:
            rows = csv.writer(fh)
            if fresh:
                rows.writerow(["config_digest", "archive", "config"])
            rows.writerow([self.digest, archive, self.config.name])


class CompressedLogHandler(logging.Handler):
    """Write formatted records into a single member of a deflated zip archive."""

    def __init__(self, artifacts: LogArtifacts, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.artifacts = artifacts
        self._archive: Optional[zipfile.ZipFile] = None
        self._member = None

    def _open(self):
        self._archive = zipfile.ZipFile(self.artifacts.archive, "w", zipfile.ZIP_DEFLATED, compresslevel=9)
        self._member = self._archive.open(self.artifacts.member, "w")
        self.artifacts.publish()
        return self._member

    def emit(self, record: logging.LogRecord) -> None:
        try:
            member = self._member or self._open()
            member.write((self.format(record) + "\n").encode("utf-8"))
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        self.acquire()
        try:
            if self._member is not None:
                self._member.close()
            if self._archive is not None:
                self._archive.close()
            self._member = None
            self._archive = None
        finally:
            self.release()
        super().close()


def configure_logging(
    settings: Optional[Mapping[str, Any]] = None,
    config_path: Optional[str | Path] = None,
    project_root: Optional[str | Path] = None,
) -> Optional[LogArtifacts]:
    """
    Install the root handlers described by a `logging` config block.

    Keys: ``enabled`` (zip archive on/off, default off), ``level``
    (console level, default INFO), ``file_level`` (archive level,
    defaults to ``level``) and ``to_console`` (default on). The archive
    lives under ``<project_root>/logs``; ``project_root`` defaults to the
    working directory.

    Returns the archive paths when file logging is enabled, else None.
    """
    parsed = LogSettings.from_block(settings)
    handlers: list[logging.Handler] = []
    if parsed.to_console:
        console = logging.StreamHandler()
        console.setLevel(parsed.level)
        handlers.append(console)
    artifacts = None
    if parsed.enabled:
        artifacts = LogArtifacts.prepare(config_path, project_root)
        handlers.append(CompressedLogHandler(artifacts, parsed.file_level))
    if not handlers:
        handlers.append(logging.NullHandler(parsed.level))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
    lowest = min(handler.level for handler in handlers)
    logging.basicConfig(level=lowest, handlers=handlers, force=True)
    logging.getLogger(LOG_NAMESPACE).setLevel(lowest)
    return artifacts


def get_logger(component: str) -> logging.Logger:
    """``get_logger("arena")`` is the ``antix.arena`` logger."""
    component = component.strip(".")
    return logging.getLogger(f"{LOG_NAMESPACE}.{component}" if component else LOG_NAMESPACE)
