from __future__ import annotations

import fnmatch
import hashlib
import os
import stat as stat_module
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Optional

from .enums import FileKnown, FileType
from .logging import get_logger

LOGGER = get_logger("core.evidence_fs")


@dataclass
class EvidenceFileStat:
    """
    File metadata from evidence filesystem.

    All timestamps are Unix epochs (float) for precision.

    Timestamp semantics:
        - mtime: Modification time (content changed)
        - atime: Access time (file read)
        - ctime: Metadata change time (Unix: inode change, Windows: often same as crtime)
        - crtime: Creation time (NTFS $SI Create, ext4 crtime if available)
    """
    size_bytes: int
    mtime_epoch: Optional[float]
    atime_epoch: Optional[float]
    ctime_epoch: Optional[float]
    crtime_epoch: Optional[float]
    inode: Optional[int]
    is_file: bool
    is_dir: bool = False


class EvidenceFS(ABC):
    """Abstract read-only view over an evidence filesystem (the data source)."""

    name: str = ""

    @abstractmethod
    def iter_paths(self, glob_pattern: str) -> Iterator[str]:
        """Yield normalized paths that match the provided glob pattern."""

    @abstractmethod
    def open_for_read(self, path: str) -> BinaryIO:
        """Return a binary file-like object for the specified path."""

    @abstractmethod
    def stat(self, path: str) -> EvidenceFileStat:
        """
        Get file metadata without reading content.

        Raises:
            FileNotFoundError: If path does not exist
        """

    @abstractmethod
    def iter_all_files(self) -> Iterator[str]:
        """Yield all file paths in the filesystem (directories excluded)."""

    def open_for_stream(self, path: str, chunk_size: int = 65536) -> Iterator[bytes]:
        """
        Yield file content in chunks without full buffering.

        Args:
            path: File path in evidence
            chunk_size: Bytes per chunk (default 64KB)
        """
        with self.open_for_read(path) as handle:
            while chunk := handle.read(chunk_size):
                yield chunk

    def read_file(self, path: str) -> bytes:
        """Read entire file content as bytes."""
        with self.open_for_read(path) as f:
            return f.read()

    def read_header(self, path: str, size: int = 32) -> bytes:
        """Read the first ``size`` bytes of a file (signature checks)."""
        with self.open_for_read(path) as f:
            return f.read(size)

    def iter_paths_any(self, patterns: Iterable[str]) -> Iterator[str]:
        """Yield unique paths matching any of the glob patterns, first match order."""
        seen = set()
        for pattern in patterns:
            for path in self.iter_paths(pattern):
                if path not in seen:
                    seen.add(path)
                    yield path


class MountedFS(EvidenceFS):
    """Evidence filesystem wrapper for a locally mounted read-only path."""

    def __init__(self, mount_point: Path, name: Optional[str] = None) -> None:
        mount_point = Path(mount_point)
        if not mount_point.exists():
            raise FileNotFoundError(f"Mount point {mount_point} does not exist.")
        self.mount_point = mount_point
        self.name = name or mount_point.name
        LOGGER.info("MountedFS bound to %s", mount_point)

    def iter_paths(self, glob_pattern: str) -> Iterator[str]:
        LOGGER.debug("MountedFS iterating for pattern %s", glob_pattern)
        pattern = glob_pattern.lower()
        for rel in self.iter_all_files():
            # Windows evidence is case-insensitive
            if fnmatch.fnmatchcase(rel.lower(), pattern):
                yield rel

    def open_for_read(self, path: str) -> BinaryIO:
        resolved = self._resolve_under_mount(path)
        if not resolved.is_file():
            raise FileNotFoundError(f"Path {path} not found under mount {self.mount_point}.")
        LOGGER.debug("Opening %s for read (MountedFS)", resolved)
        return resolved.open("rb")

    def stat(self, path: str) -> EvidenceFileStat:
        """
        Get file metadata from mounted filesystem.

        crtime (birth time) is only available on some platforms (macOS, Windows).
        """
        resolved = self._resolve_under_mount(path)
        if not resolved.exists():
            raise FileNotFoundError(f"Path {path} not found under mount {self.mount_point}.")
        st = os.stat(resolved)

        crtime: Optional[float] = None
        if hasattr(st, "st_birthtime"):
            crtime = st.st_birthtime

        return EvidenceFileStat(
            size_bytes=st.st_size,
            mtime_epoch=st.st_mtime,
            atime_epoch=st.st_atime,
            ctime_epoch=st.st_ctime,
            crtime_epoch=crtime,
            inode=st.st_ino,
            is_file=stat_module.S_ISREG(st.st_mode),
            is_dir=stat_module.S_ISDIR(st.st_mode),
        )

    def _resolve_under_mount(self, path: str) -> Path:
        """
        Resolve a user-provided path and enforce mount root confinement.

        This prevents path traversal such as '../..' from escaping the mounted
        evidence root.
        """
        base = self.mount_point.resolve()
        resolved = (self.mount_point / path).resolve()
        try:
            resolved.relative_to(base)
        except ValueError as exc:
            raise ValueError(
                f"Path traversal attempt: {path!r} resolves outside mount {self.mount_point}"
            ) from exc
        return resolved

    def iter_all_files(self) -> Iterator[str]:
        """Walk the mount and yield all file paths with forward slashes, sorted per directory."""
        for root, dirs, files in os.walk(self.mount_point):
            dirs.sort()
            for name in sorted(files):
                full_path = os.path.join(root, name)
                rel_path = os.path.relpath(full_path, self.mount_point)
                yield rel_path.replace(os.sep, "/")


@dataclass
class EvidenceFile:
    """
    A file-level content object handed to file-scoped extractors.

    ``path`` is relative to the data source root with forward slashes.
    """
    fs: EvidenceFS = field(repr=False)
    path: str
    file_type: FileType = FileType.FS
    known: FileKnown = FileKnown.UNKNOWN
    size_bytes: int = 0

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def parent_path(self) -> str:
        if "/" not in self.path:
            return "/"
        return "/" + self.path.rsplit("/", 1)[0] + "/"

    def open(self) -> BinaryIO:
        return self.fs.open_for_read(self.path)

    def read_header(self, size: int = 32) -> bytes:
        return self.fs.read_header(self.path, size)


def md5_of(fs: EvidenceFS, path: str) -> str:
    """Compute the MD5 of an evidence file by streaming it."""
    hasher = hashlib.md5()
    for chunk in fs.open_for_stream(path):
        hasher.update(chunk)
    return hasher.hexdigest()


def make_evidence_file(
    fs: EvidenceFS,
    path: str,
    known_hashes: Optional[set[str]] = None,
) -> EvidenceFile:
    """
    Build an EvidenceFile for a path, marking it KNOWN when its MD5 is listed.

    Hashing only happens when a known-hash set is supplied.
    """
    try:
        size = fs.stat(path).size_bytes
    except (FileNotFoundError, OSError):
        size = 0
    known = FileKnown.UNKNOWN
    if known_hashes:
        try:
            if md5_of(fs, path) in known_hashes:
                known = FileKnown.KNOWN
        except OSError as exc:
            LOGGER.warning("Could not hash %s for known-file lookup: %s", path, exc)
    return EvidenceFile(fs=fs, path=path, known=known, size_bytes=size)
