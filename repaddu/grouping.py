"""Filtering of traversed files and their arrangement into groups and chunks."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Callable, Iterable, List, Optional, Sequence

from .component_map import ComponentMap, resolve_component
from .core import (
    FileClass,
    FileEntry,
    Group,
    GroupingMode,
    LanguageProfile,
    Options,
    OutputChunk,
    file_class_label,
    find_language_profile,
    sanitize_name,
)
from .logger import log_warn

_DOCUMENTATION = "documentation"
_SIZE = "size"
_SIZE_CHUNK_TITLE = "Size-balanced chunk"
_DOC_EXTENSIONS = frozenset({".md", ".txt", ".rst", ".adoc"})
_NOT_DOCUMENTATION = frozenset({"cmakelists.txt", "requirements.txt"})


@dataclass
class GroupingResult:
    """Indices of the files that passed the filters, and the groups they form."""

    included_indices: List[int] = field(default_factory=list)
    groups: List[Group] = field(default_factory=list)


def _normalize_extensions(values: Iterable[str]) -> List[str]:
    result = []
    for value in values:
        normalized = value.lower()
        if normalized and not normalized.startswith("."):
            normalized = "." + normalized
        result.append(normalized)
    return result


def _extensions_for_language(options: Options, profile: LanguageProfile) -> List[str]:
    if not profile.supports_headers:
        return _normalize_extensions(profile.source_extensions)
    if options.include_headers and not options.include_sources:
        return _normalize_extensions(profile.header_extensions)
    if options.include_sources and not options.include_headers:
        return _normalize_extensions(profile.source_extensions)
    return _normalize_extensions(profile.source_extensions) + _normalize_extensions(
        profile.header_extensions
    )


def _extension_allowed(extension: str, include: Sequence[str], exclude: Sequence[str]) -> bool:
    if extension in exclude:
        return False
    if include:
        return extension in include
    return True


def _path_key(files: Sequence[FileEntry]) -> Callable[[int], str]:
    return lambda index: str(files[index].relative_path)


def _order_indices(
    files: Sequence[FileEntry], indices: Iterable[int], headers_first: bool
) -> List[int]:
    if headers_first:
        return sorted(
            indices,
            key=lambda i: (int(files[i].file_class), str(files[i].relative_path)),
        )
    return sorted(indices, key=_path_key(files))


def _is_documentation(entry: FileEntry) -> bool:
    if PurePath(entry.relative_path).name.lower() in _NOT_DOCUMENTATION:
        return False
    return entry.extension_lower in _DOC_EXTENSIONS


def _group_key(
    options: Options, entry: FileEntry, component_map: Optional[ComponentMap]
) -> str:
    if options.isolate_docs and _is_documentation(entry):
        return _DOCUMENTATION

    mode = options.group_by
    if mode is GroupingMode.directory:
        depth = options.group_depth if options.group_depth > 0 else 1
        key = "/".join(PurePath(entry.relative_path).parts[:depth])
        return key or "root"
    if mode is GroupingMode.component:
        if component_map is not None:
            return resolve_component(component_map, entry.relative_path)
        return "unmapped"
    if mode is GroupingMode.type:
        return file_class_label(entry.file_class)
    if mode is GroupingMode.size:
        return _SIZE
    return "group"


def _passes_class_filter(options: Options, entry: FileEntry) -> bool:
    if options.include_headers and not options.include_sources:
        return entry.file_class == FileClass.header
    if options.include_sources and not options.include_headers:
        return entry.file_class == FileClass.source
    return entry.file_class != FileClass.other


def _size_chunk(indices: Optional[List[int]] = None) -> OutputChunk:
    return OutputChunk(category=_SIZE, title=_SIZE_CHUNK_TITLE, file_indices=indices or [])


def _chunk_size(files: Sequence[FileEntry], chunk: OutputChunk) -> int:
    return sum(files[i].size_bytes for i in chunk.file_indices)


def _size_balanced_chunks(
    options: Options, files: Sequence[FileEntry], indices: Sequence[int]
) -> List[OutputChunk]:
    ordered = sorted(indices, key=lambda i: (-files[i].size_bytes, str(files[i].relative_path)))

    if options.max_bytes > 0:
        capacity = options.max_bytes
        chunks: List[OutputChunk] = []
        for index in ordered:
            size = files[index].size_bytes
            target = next(
                (c for c in chunks if _chunk_size(files, c) + size <= capacity), None
            )
            if target is None:
                chunks.append(_size_chunk([index]))
            else:
                target.file_indices.append(index)
    elif options.max_files > 0:
        chunks = [_size_chunk() for _ in range(options.max_files)]
        for index in ordered:
            lightest = min(chunks, key=lambda c: _chunk_size(files, c))
            lightest.file_indices.append(index)
        chunks = [c for c in chunks if c.file_indices]
    else:
        chunks = [_size_chunk(list(ordered))]

    key = _path_key(files)
    for chunk in chunks:
        chunk.file_indices.sort(key=key)
    return chunks


def _type_rank(name: str) -> int:
    return {"header": 0, "source": 1}.get(name, 2)


def filter_and_group_files(
    options: Options,
    files: Sequence[FileEntry],
    component_map: Optional[ComponentMap] = None,
) -> GroupingResult:
    """Drop files the options exclude and group the rest by ``options.group_by``.

    Documentation groups come first; in type mode headers and sources lead.
    """
    result = GroupingResult()

    include_ext = _normalize_extensions(options.extensions)
    exclude_ext = _normalize_extensions(options.exclude_extensions)
    if not include_ext and options.language:
        profile = find_language_profile(options.language)
        if profile is not None:
            include_ext = _extensions_for_language(options, profile)

    for index, entry in enumerate(files):
        documentation = options.isolate_docs and _is_documentation(entry)
        if not options.include_binaries and entry.is_binary:
            continue
        if entry.size_bytes > options.max_file_size and not options.force_large_files:
            log_warn(
                f"Skipping large file: {entry.relative_path} "
                f"({entry.size_bytes} bytes > {options.max_file_size} bytes)"
            )
            continue
        if not _extension_allowed(entry.extension_lower, include_ext, exclude_ext):
            continue
        if not include_ext and not documentation and not _passes_class_filter(options, entry):
            continue
        result.included_indices.append(index)

    if options.group_by is GroupingMode.size:
        if options.isolate_docs:
            docs = [i for i in result.included_indices if _is_documentation(files[i])]
            rest = [i for i in result.included_indices if not _is_documentation(files[i])]
            for name, members in ((_DOCUMENTATION, docs), (_SIZE, rest)):
                if members:
                    result.groups.append(
                        Group(name, _order_indices(files, members, options.headers_first))
                    )
        else:
            result.groups.append(Group(_SIZE, list(result.included_indices)))
        return result

    buckets: dict = {}
    for index in result.included_indices:
        buckets.setdefault(_group_key(options, files[index], component_map), []).append(index)

    result.groups = [
        Group(name, _order_indices(files, members, options.headers_first))
        for name, members in buckets.items()
    ]
    result.groups.sort(key=lambda g: (g.name != _DOCUMENTATION, g.name))

    if options.group_by is GroupingMode.type:
        result.groups.sort(key=lambda g: (_type_rank(g.name), g.name))

    return result


def chunk_groups(
    options: Options, files: Sequence[FileEntry], groups: Sequence[Group]
) -> List[OutputChunk]:
    """Turn groups into output chunks; size mode balances files by byte size."""
    if options.group_by is GroupingMode.size:
        result: List[OutputChunk] = []
        for group in groups:
            if not group.file_indices:
                continue
            if options.isolate_docs and group.name == _DOCUMENTATION:
                result.append(
                    OutputChunk(
                        category=_DOCUMENTATION,
                        title=_DOCUMENTATION,
                        file_indices=sorted(group.file_indices, key=_path_key(files)),
                    )
                )
                continue
            result.extend(_size_balanced_chunks(options, files, group.file_indices))
        return result

    return [
        OutputChunk(
            category=sanitize_name(group.name),
            title=group.name,
            file_indices=list(group.file_indices),
        )
        for group in groups
    ]