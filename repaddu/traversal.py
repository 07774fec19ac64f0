"""Walking a repository tree and collecting the files worth reporting."""

from __future__ import annotations

import os
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import FrozenSet, List, Set

from .binary import looks_binary
from .core import (
    ExitCode,
    FileEntry,
    Options,
    RepadduError,
    classify_extension,
    resolve_build_file_names,
)


@dataclass
class TraversalResult:
    """Everything found under the input path, each list sorted by path."""

    files: List[FileEntry] = field(default_factory=list)
    directories: List[PurePath] = field(default_factory=list)
    cmake_lists: List[PurePath] = field(default_factory=list)
    build_files: List[PurePath] = field(default_factory=list)

    def merge(self, other: "TraversalResult") -> None:
        self.files.extend(other.files)
        self.directories.extend(other.directories)
        self.cmake_lists.extend(other.cmake_lists)
        self.build_files.extend(other.build_files)

    def sort(self) -> None:
        self.files.sort(key=lambda entry: str(entry.relative_path))
        self.directories.sort(key=str)
        self.cmake_lists.sort(key=str)
        self.build_files.sort(key=str)


@dataclass
class _DirectoryScan:
    found: TraversalResult = field(default_factory=TraversalResult)
    subdirectories: List[Path] = field(default_factory=list)


def _traversal_failure() -> RepadduError:
    return RepadduError("Filesystem traversal failed.", ExitCode.traversal_failure)


def _is_excluded(relative: PurePath, include_hidden: bool) -> bool:
    parts = relative.parts
    if ".git" in parts:
        return True
    return not include_hidden and any(part.startswith(".") for part in parts)


class _Scanner:
    def __init__(self, options: Options, build_names_lower: FrozenSet[str]) -> None:
        self.options = options
        self.root = Path(options.input_path)
        self.build_names_lower = build_names_lower

    def scan(self, directory: Path) -> _DirectoryScan:
        """List one directory; subdirectories to descend into are returned, not visited."""
        result = _DirectoryScan()
        try:
            with os.scandir(directory) as entries:
                listing = list(entries)
        except PermissionError:
            return result
        except OSError as exc:
            raise _traversal_failure() from exc

        for entry in listing:
            current = Path(entry.path)
            try:
                relative = current.relative_to(self.root)
            except ValueError as exc:
                raise RepadduError(
                    "Failed to compute relative path.", ExitCode.traversal_failure
                ) from exc

            if _is_excluded(relative, self.options.include_hidden):
                continue

            try:
                is_directory = entry.is_dir()
                is_symlink = entry.is_symlink()
                is_regular = not is_directory and entry.is_file()
            except OSError as exc:
                raise _traversal_failure() from exc

            if is_directory:
                result.found.directories.append(relative)
                if self.options.follow_symlinks or not is_symlink:
                    result.subdirectories.append(current)
                continue

            if not is_regular:
                continue
            if is_symlink and not self.options.follow_symlinks:
                continue

            result.found.files.append(self._file_entry(entry, current, relative))
            name_lower = entry.name.lower()
            if name_lower == "cmakelists.txt":
                result.found.cmake_lists.append(relative)
            if name_lower in self.build_names_lower:
                result.found.build_files.append(relative)
        return result

    @staticmethod
    def _file_entry(entry: os.DirEntry, current: Path, relative: PurePath) -> FileEntry:
        try:
            size = entry.stat().st_size
        except OSError as exc:
            raise RepadduError("Failed to read file size.", ExitCode.io_failure) from exc
        extension = current.suffix.lower()
        return FileEntry(
            absolute_path=current,
            relative_path=relative,
            size_bytes=size,
            extension_lower=extension,
            file_class=classify_extension(extension),
            is_binary=looks_binary(current),
        )


def _traverse_sequential(scanner: _Scanner) -> TraversalResult:
    result = TraversalResult()
    stack = [scanner.root]
    while stack:
        scan = scanner.scan(stack.pop())
        result.merge(scan.found)
        stack.extend(reversed(scan.subdirectories))
    return result


def _traverse_parallel(scanner: _Scanner) -> TraversalResult:
    result = TraversalResult()
    workers = max(1, os.cpu_count() or 1)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        pending: Set[Future] = {pool.submit(scanner.scan, scanner.root)}
        try:
            while pending:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    scan = future.result()
                    result.merge(scan.found)
                    pending.update(pool.submit(scanner.scan, sub) for sub in scan.subdirectories)
        except BaseException:
            for future in pending:
                future.cancel()
            raise
    return result


def traverse_repository(options: Options) -> TraversalResult:
    """Collect files, directories and build files under ``options.input_path``.

    ``.git`` is always skipped, hidden entries unless ``include_hidden`` is set,
    and symbolic links unless ``follow_symlinks`` is set. Raises RepadduError
    with io_failure if the input path does not exist, and with
    traversal_failure if it cannot be walked.
    """
    root = Path(options.input_path)
    if not root.exists():
        raise RepadduError("Input path does not exist.", ExitCode.io_failure)

    build_names_lower = frozenset(name.lower() for name in resolve_build_file_names(options))
    scanner = _Scanner(options, build_names_lower)

    if options.parallel_traversal:
        result = _traverse_parallel(scanner)
    else:
        result = _traverse_sequential(scanner)
    result.sort()
    return result