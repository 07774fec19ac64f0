# repaddu

repaddu is a library that walks a source repository, works out which files
matter, groups them, and writes them out as a JSON Lines dataset or as a
self-contained HTML page that can be read in a browser.

It can:

- traverse a repository (`repaddu.traversal.traverse_repository`), always
  skipping `.git`, skipping hidden entries unless `include_hidden` is set and
  symbolic links unless `follow_symlinks` is set, and noting `CMakeLists.txt`
  and other build files along the way; with `parallel_traversal` the
  directories are scanned on a thread pool;
- detect binary files (`repaddu.binary.looks_binary`) by magic bytes (ELF, PE,
  Mach-O, Java class, PNG, JPEG, GIF, ZIP, GZIP, BMP, ICO) or by a NUL byte in
  the first 4 KiB;
- guess the main language (C, C++, Rust, Python) and the build system
  (Cargo, npm, CMake, Meson, Bazel, Python packaging, Make) with
  `repaddu.core.detect_language_and_build_system`;
- filter files by extension, by language, by header/source class and by
  size, and group them by directory, by component, by file type or into
  size-balanced chunks, optionally keeping documentation in its own group
  (`repaddu.grouping`);
- redact e-mail addresses, IPv4 addresses, GitHub tokens, AWS access keys and
  obvious secret assignments (`repaddu.pii.PiiRedactor`);
- write a `dataset.jsonl` file with one record per file, or an `index.html`
  viewer (`repaddu.alt_formats`).

There are no runtime dependencies beyond the standard library.

## Example

```python
from pathlib import Path

from repaddu.core import GroupingMode, Options
from repaddu.traversal import traverse_repository
from repaddu.grouping import filter_and_group_files, chunk_groups
from repaddu.pii import PiiRedactor
from repaddu.alt_formats import write_jsonl_output

options = Options(
    input_path=Path("path/to/repo"),
    output_path=Path("out"),
    group_by=GroupingMode.directory,
    isolate_docs=True,
)

traversal = traverse_repository(options)
grouped = filter_and_group_files(options, traversal.files, None)
chunks = chunk_groups(options, traversal.files, grouped.groups)

write_jsonl_output(options, traversal.files, chunks, PiiRedactor())
```

`write_jsonl_output` and `write_html_output` return the path they wrote, or
`None` when `options.dry_run` is set (they then only log what they would
write). Each JSONL record holds `path`, `class`, `bytes`, `tokens` and
`content`.

Failures are raised as `repaddu.core.RepadduError`, which carries an
`ExitCode` (`invalid_usage`, `io_failure`, `traversal_failure`).

## Filtering and grouping

`filter_and_group_files` drops binaries (unless `include_binaries`), files
larger than `max_file_size` bytes (unless `force_large_files`), and files
whose extension is not allowed by `extensions`, `exclude_extensions` or
`language`. Without an extension list, only headers and sources are kept;
`include_headers` or `include_sources` on its own narrows this to one class.

`group_by` chooses the grouping:

- `GroupingMode.directory`: by the first `group_depth` path components;
- `GroupingMode.component`: by a component map (see below);
- `GroupingMode.type`: `header`, `source`, `other`;
- `GroupingMode.size`: `chunk_groups` then packs files into chunks of at
  most `max_bytes`, or spreads them over `max_files` chunks.

With `isolate_docs`, `.md`, `.txt`, `.rst` and `.adoc` files (but not
`CMakeLists.txt` or `requirements.txt`) go into a `documentation` group.

## Component maps

Grouping by component uses a small JSON object that maps component names to
lists of path prefixes:

```json
{
  "engine": ["src/engine", "include/engine"],
  "tools": ["tools/"]
}
```

```python
from repaddu.component_map import load_component_map, resolve_component

component_map = load_component_map("components.json")
resolve_component(component_map, "src/engine/render.cpp")  # "engine"
```

The longest matching prefix wins; files that match nothing land in
`"unmapped"`.

## Redaction

```python
from repaddu.pii import PiiRedactor

redactor = PiiRedactor()
redactor.redact("contact: someone@example.com", "notes.txt")
# 'contact: <REDACTED:EMAIL>'
```

Each hit is reported as a warning through `repaddu.logger`.

## Other pieces

- `repaddu.alt_formats.estimate_tokens` counts four characters per token,
  rounded up, so a 400-character string is 100 tokens.
- `repaddu.jsonlite.parse` is a small lenient JSON reader; numbers come back
  as floats and malformed input raises `JsonParseError`.
- `repaddu.logger` writes timestamped lines to standard error and, after
  `Logger.instance().set_log_file(...)`, to a log file too; messages below
  the level set with `set_level` are dropped.
- `repaddu.console.ConsoleUI` prints log lines and draws a single-line
  progress bar on the terminal.

## What it does not do

repaddu is a library only: it installs no command-line program and reads no
configuration file. It writes JSON Lines and HTML only; there is no Markdown
writer, directory-tree or build-file report, and no code analysis beyond the
language and build-system guess.