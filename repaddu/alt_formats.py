"""JSON Lines and single-page HTML output writers."""

from __future__ import annotations

from pathlib import Path, PurePath
from typing import Iterable, List, Optional, Sequence, Union

from .core import ExitCode, FileEntry, Options, OutputChunk, RepadduError, file_class_label
from .logger import log_info
from .pii import PiiRedactor

JSONL_FILENAME = "dataset.jsonl"
HTML_FILENAME = "index.html"

_SIMPLE_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

_HTML_HEAD = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Repaddu Code Report</title>
    <style>
        body { font-family: sans-serif; margin: 0; display: flex; height: 100vh; overflow: hidden; }
        #sidebar { width: 300px; border-right: 1px solid #ccc; overflow-y: auto; background: #f5f5f5; padding: 10px; }
        #content { flex: 1; padding: 20px; overflow-y: auto; background: #fff; }
        .file-item { cursor: pointer; padding: 2px 5px; white-space: nowrap; overflow: hidden; text-overflow: ellipsis; }
        .file-item:hover { background: #e0e0e0; }
        .file-item.active { background: #d0d0ff; font-weight: bold; }
        pre { background: #f8f8f8; padding: 10px; border: 1px solid #ddd; overflow-x: auto; }
    </style>
</head>
<body>
    <div id="sidebar"><h3>Files</h3><div id="file-list"></div></div>
    <div id="content"><h2>Select a file to view content</h2><pre id="code-view"></pre></div>
    <script>
        const files = [
"""

_HTML_TAIL = """
        ];

        const listEl = document.getElementById('file-list');
        const codeEl = document.getElementById('code-view');
        const titleEl = document.querySelector('#content h2');

        files.forEach((file, index) => {
            const div = document.createElement('div');
            div.className = 'file-item';
            div.textContent = file.path;
            div.onclick = () => {
                document.querySelectorAll('.file-item').forEach(el => el.classList.remove('active'));
                div.classList.add('active');
                titleEl.textContent = file.path;
                codeEl.textContent = file.content;
            };
            listEl.appendChild(div);
        });
    </script>
</body>
</html>"""


def estimate_tokens(text: str) -> int:
    """Rough token count: one token per four characters, rounded up."""
    return (len(text) + 3) // 4


def _escape_char(ch: str) -> str:
    escaped = _SIMPLE_ESCAPES.get(ch)
    if escaped is not None:
        return escaped
    if ord(ch) <= 0x1F:
        return f"\\u{ord(ch):04x}"
    return ch


def escape_json_string(value: str) -> str:
    """Quote ``value`` as a JSON string literal, escaping control characters."""
    return '"' + "".join(_escape_char(ch) for ch in value) + '"'


def read_file_content(
    path: Union[str, Path],
    redactor: Optional[PiiRedactor] = None,
    relative_path: str = "",
) -> str:
    """Read a file as text, redacting it when a redactor is given.

    Raises RepadduError with io_failure if the file cannot be read.
    """
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise RepadduError(f"Failed to read file: {path}", ExitCode.io_failure) from exc
    content = raw.decode("utf-8", errors="replace")
    if redactor is not None:
        content = redactor.redact(content, relative_path)
    return content


def _unique_indices(chunks: Iterable[OutputChunk]) -> List[int]:
    seen = set()
    ordered = []
    for chunk in chunks:
        for index in chunk.file_indices:
            if index not in seen:
                seen.add(index)
                ordered.append(index)
    return ordered


def _jsonl_record(entry: FileEntry, content: str, tokens: int) -> str:
    path = PurePath(entry.relative_path).as_posix()
    return (
        "{"
        f'"path": {escape_json_string(path)}, '
        f'"class": {escape_json_string(file_class_label(entry.file_class))}, '
        f'"bytes": {entry.size_bytes}, '
        f'"tokens": {tokens}, '
        f'"content": {escape_json_string(content)}'
        "}\n"
    )


def write_jsonl_output(
    options: Options,
    files: Sequence[FileEntry],
    chunks: Sequence[OutputChunk],
    redactor: Optional[PiiRedactor] = None,
) -> Optional[Path]:
    """Write one JSON record per file, in chunk order, each file once.

    Returns the written path, or None on a dry run. Raises RepadduError with
    io_failure if the output file cannot be created or an input cannot be read.
    """
    out_path = Path(options.output_path) / JSONL_FILENAME
    if options.dry_run:
        log_info(f"[Dry Run] Would write JSONL: {JSONL_FILENAME}")
        return None

    try:
        stream = open(out_path, "w", encoding="utf-8", newline="")
    except OSError as exc:
        raise RepadduError("Failed to create JSONL output file.", ExitCode.io_failure) from exc

    with stream:
        for index in _unique_indices(chunks):
            entry = files[index]
            content = read_file_content(
                entry.absolute_path, redactor, str(entry.relative_path)
            )
            stream.write(_jsonl_record(entry, content, estimate_tokens(content)))
    return out_path


def write_html_output(
    options: Options,
    files: Sequence[FileEntry],
    redactor: Optional[PiiRedactor] = None,
) -> Optional[Path]:
    """Write a self-contained HTML page listing every file and its content.

    Unreadable files appear with empty content. Returns the written path, or
    None on a dry run. Raises RepadduError with io_failure if the page cannot
    be created.
    """
    out_path = Path(options.output_path) / HTML_FILENAME
    if options.dry_run:
        log_info(f"[Dry Run] Would write HTML: {HTML_FILENAME}")
        return None

    try:
        stream = open(out_path, "w", encoding="utf-8")
    except OSError as exc:
        raise RepadduError("Failed to create HTML output file.", ExitCode.io_failure) from exc

    records = []
    for entry in files:
        try:
            content = read_file_content(
                entry.absolute_path, redactor, str(entry.relative_path)
            )
        except RepadduError:
            content = ""
        path = PurePath(entry.relative_path).as_posix()
        records.append(
            f'{{ "path": {escape_json_string(path)}, "content": {escape_json_string(content)} }}'
        )

    with stream:
        stream.write(_HTML_HEAD)
        stream.write(",\n".join(records))
        stream.write(_HTML_TAIL)
    return out_path