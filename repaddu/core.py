"""Shared types, options and language/build-system profiles."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from pathlib import Path, PurePath
from typing import Iterable, List, Optional, Tuple


class ExitCode(IntEnum):
    success = 0
    invalid_usage = 1
    io_failure = 2
    traversal_failure = 3


class RepadduError(Exception):
    """An error carrying the exit code the program reports for it."""

    def __init__(self, message: str, code: ExitCode = ExitCode.io_failure) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class FileClass(IntEnum):
    """Kind of file; the order puts headers before sources before the rest."""

    header = 0
    source = 1
    other = 2


class GroupingMode(Enum):
    directory = "directory"
    component = "component"
    type = "type"
    size = "size"


class OutputFormat(Enum):
    markdown = "markdown"
    jsonl = "jsonl"
    html = "html"


@dataclass
class FileEntry:
    absolute_path: Path = field(default_factory=Path)
    relative_path: PurePath = field(default_factory=PurePath)
    size_bytes: int = 0
    extension_lower: str = ""
    file_class: FileClass = FileClass.other
    is_binary: bool = False
    token_count: int = 0


@dataclass
class Group:
    name: str = ""
    file_indices: List[int] = field(default_factory=list)


@dataclass
class OutputChunk:
    category: str = ""
    title: str = ""
    file_indices: List[int] = field(default_factory=list)


@dataclass
class Options:
    input_path: Path = field(default_factory=lambda: Path("."))
    output_path: Path = field(default_factory=lambda: Path("."))
    max_files: int = 0
    max_bytes: int = 0
    include_headers: bool = False
    include_sources: bool = False
    include_hidden: bool = False
    include_binaries: bool = False
    follow_symlinks: bool = False
    headers_first: bool = False
    max_file_size: int = 1024 * 1024
    force_large_files: bool = False
    redact_pii: bool = False
    isolate_docs: bool = False
    dry_run: bool = False
    parallel_traversal: bool = False
    format: OutputFormat = OutputFormat.markdown
    group_by: GroupingMode = GroupingMode.directory
    group_depth: int = 1
    extensions: List[str] = field(default_factory=list)
    exclude_extensions: List[str] = field(default_factory=list)
    language: str = ""
    build_system: str = ""


@dataclass(frozen=True)
class LanguageProfile:
    id: str
    display_name: str
    source_extensions: Tuple[str, ...]
    header_extensions: Tuple[str, ...]
    build_files: Tuple[str, ...]
    supports_headers: bool


@dataclass(frozen=True)
class BuildSystemProfile:
    id: str
    build_files: Tuple[str, ...]


@dataclass
class DetectionResult:
    language_id: str = ""
    build_system_id: str = ""


_C_BUILD_FILES = ("CMakeLists.txt", "Makefile", "meson.build", "BUILD", "BUILD.bazel")
_CARGO_FILES = ("Cargo.toml", "Cargo.lock", "rust-toolchain", "rust-toolchain.toml")
_PYTHON_FILES = ("pyproject.toml", "setup.py", "setup.cfg", "requirements.txt")
_NPM_FILES = ("package.json", "package-lock.json", "yarn.lock", "pnpm-lock.yaml")

LANGUAGE_PROFILES: Tuple[LanguageProfile, ...] = (
    LanguageProfile("c", "C", (".c",), (".h",), _C_BUILD_FILES, True),
    LanguageProfile(
        "cpp", "C++", (".cc", ".cpp", ".cxx"), (".h", ".hpp", ".hh", ".hxx"), _C_BUILD_FILES, True
    ),
    LanguageProfile("rust", "Rust", (".rs",), (), _CARGO_FILES, False),
    LanguageProfile("python", "Python", (".py", ".pyi"), (), _PYTHON_FILES, False),
)

BUILD_SYSTEM_PROFILES: Tuple[BuildSystemProfile, ...] = (
    BuildSystemProfile("cmake", ("CMakeLists.txt",)),
    BuildSystemProfile("make", ("Makefile",)),
    BuildSystemProfile("meson", ("meson.build",)),
    BuildSystemProfile("bazel", ("BUILD", "BUILD.bazel")),
    BuildSystemProfile("cargo", _CARGO_FILES),
    BuildSystemProfile("npm", _NPM_FILES),
    BuildSystemProfile("python", _PYTHON_FILES),
)

_HEADER_EXTENSIONS = frozenset(e for p in LANGUAGE_PROFILES for e in p.header_extensions)
_SOURCE_EXTENSIONS = frozenset(e for p in LANGUAGE_PROFILES for e in p.source_extensions)

_LANGUAGE_PRIORITY = ("cpp", "c", "rust", "python")

_BUILD_SYSTEM_BY_FILENAME = {
    "cmakelists.txt": "cmake",
    "meson.build": "meson",
    "build": "bazel",
    "build.bazel": "bazel",
    **{name.lower(): "cargo" for name in _CARGO_FILES},
    **{name.lower(): "npm" for name in _NPM_FILES},
    **{name.lower(): "python" for name in _PYTHON_FILES},
    "makefile": "make",
}

_BUILD_SYSTEM_PRIORITY = ("cargo", "npm", "cmake", "meson", "bazel", "python", "make")


def classify_extension(extension: str) -> FileClass:
    """Classify a file extension (with leading dot) as header, source or other."""
    ext = extension.lower()
    if ext in _HEADER_EXTENSIONS:
        return FileClass.header
    if ext in _SOURCE_EXTENSIONS:
        return FileClass.source
    return FileClass.other


def file_class_label(file_class: FileClass) -> str:
    return FileClass(file_class).name


def sanitize_name(name: str) -> str:
    """Turn a group name into a token safe for use in file names."""
    cleaned = "".join(ch if ch.isascii() and (ch.isalnum() or ch in "-_") else "_" for ch in name)
    return cleaned or "group"


def find_language_profile(language_id: str) -> Optional[LanguageProfile]:
    wanted = language_id.lower()
    return next((p for p in LANGUAGE_PROFILES if p.id == wanted), None)


def find_build_system_profile(build_id: str) -> Optional[BuildSystemProfile]:
    wanted = build_id.lower()
    return next((p for p in BUILD_SYSTEM_PROFILES if p.id == wanted), None)


def _profile_matches(profile: LanguageProfile, extension: str) -> bool:
    if extension in profile.source_extensions:
        return True
    return profile.supports_headers and extension in profile.header_extensions


def detect_language_and_build_system(files: Iterable[FileEntry]) -> DetectionResult:
    """Guess the dominant language and build system of a set of files."""
    result = DetectionResult()
    scores = {profile.id: 0 for profile in LANGUAGE_PROFILES}
    seen_build_systems = set()

    for entry in files:
        filename = PurePath(entry.relative_path).name.lower()
        build_system = _BUILD_SYSTEM_BY_FILENAME.get(filename)
        if build_system is not None:
            seen_build_systems.add(build_system)

        if entry.is_binary:
            continue
        for profile in LANGUAGE_PROFILES:
            if _profile_matches(profile, entry.extension_lower):
                scores[profile.id] += 1

    best_score = 0
    for language_id in _LANGUAGE_PRIORITY:
        if scores[language_id] > best_score:
            best_score = scores[language_id]
            result.language_id = language_id

    result.build_system_id = next(
        (b for b in _BUILD_SYSTEM_PRIORITY if b in seen_build_systems), ""
    )
    return result


def _append_unique(values: Iterable[str], out: List[str]) -> None:
    for value in values:
        if value not in out:
            out.append(value)


def resolve_build_file_names(options: Options) -> List[str]:
    """Build-file names to report, chosen by build system and language options."""
    result: List[str] = []
    if options.build_system:
        build_profile = find_build_system_profile(options.build_system)
        if build_profile is not None:
            _append_unique(build_profile.build_files, result)
    if options.language:
        language_profile = find_language_profile(options.language)
        if language_profile is not None:
            _append_unique(language_profile.build_files, result)
    if not result:
        for profile in BUILD_SYSTEM_PROFILES:
            _append_unique(profile.build_files, result)
    return result