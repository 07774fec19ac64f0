import json
from pathlib import Path, PurePath

import pytest

from repaddu.alt_formats import (
    escape_json_string,
    estimate_tokens,
    read_file_content,
    write_html_output,
    write_jsonl_output,
)
from repaddu.core import ExitCode, FileClass, FileEntry, Options, OutputChunk, RepadduError
from repaddu.pii import PiiRedactor


def _entry(root: Path, relative: str, content: str, file_class=FileClass.source) -> FileEntry:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return FileEntry(
        absolute_path=path,
        relative_path=PurePath(relative),
        size_bytes=len(content.encode("utf-8")),
        extension_lower=path.suffix.lower(),
        file_class=file_class,
    )


@pytest.fixture
def repo(tmp_path):
    src = tmp_path / "src"
    out = tmp_path / "out"
    out.mkdir()
    files = [
        _entry(src, "a.h", "int a();\n", FileClass.header),
        _entry(src, "b.cpp", 'int b() { return "x\\ty"[0]; }\n'),
    ]
    return Options(input_path=src, output_path=out), files


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", 0),
        ("a", 1),
        ("abc", 1),
        ("abcd", 1),
        ("abcdefgh", 2),
        ("abcde", 2),
        ("x" * 400, 100),
    ],
)
def test_estimate_tokens(text, expected):
    assert estimate_tokens(text) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("plain", '"plain"'),
        ('say "hi"', '"say \\"hi\\""'),
        ("a\\b", '"a\\\\b"'),
        ("line\nnext\r\t", '"line\\nnext\\r\\t"'),
        ("\b\f", '"\\b\\f"'),
        ("\x01\x1f", '"\\u0001\\u001f"'),
        ("\x7f", '"\x7f"'),
        ("é", '"é"'),
    ],
)
def test_escape_json_string(value, expected):
    assert escape_json_string(value) == expected


def test_escape_round_trips_through_json():
    value = 'mixed "quotes" \\ and \x02 control\n'
    assert json.loads(escape_json_string(value)) == value


def test_read_file_content_plain(tmp_path):
    path = tmp_path / "f.txt"
    path.write_text("hello", encoding="utf-8")
    assert read_file_content(path) == "hello"


def test_read_file_content_redacts(tmp_path):
    path = tmp_path / "f.txt"
    path.write_text("mail user@example.com now", encoding="utf-8")
    assert read_file_content(path, PiiRedactor(), "f.txt") == "mail <REDACTED:EMAIL> now"


def test_read_file_content_missing_raises(tmp_path):
    with pytest.raises(RepadduError) as info:
        read_file_content(tmp_path / "missing.txt")
    assert info.value.code == ExitCode.io_failure


def test_write_jsonl_records(repo):
    options, files = repo
    chunks = [OutputChunk("src", "src", [1, 0])]
    path = write_jsonl_output(options, files, chunks, None)
    assert path == Path(options.output_path) / "dataset.jsonl"
    lines = path.read_text(encoding="utf-8").splitlines()
    records = [json.loads(line) for line in lines]
    assert [r["path"] for r in records] == ["b.cpp", "a.h"]
    assert records[1] == {
        "path": "a.h",
        "class": "header",
        "bytes": 9,
        "tokens": 3,
        "content": "int a();\n",
    }
    assert records[0]["class"] == "source"
    assert records[0]["content"] == 'int b() { return "x\\ty"[0]; }\n'


def test_write_jsonl_writes_each_file_once(repo):
    options, files = repo
    chunks = [OutputChunk("one", "one", [0, 1]), OutputChunk("two", "two", [1, 0])]
    path = write_jsonl_output(options, files, chunks, None)
    records = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert [r["path"] for r in records] == ["a.h", "b.cpp"]


def test_write_jsonl_nested_path_uses_forward_slashes(tmp_path):
    out = tmp_path / "out"
    out.mkdir()
    entry = _entry(tmp_path / "src", "dir/sub/x.c", "x")
    options = Options(output_path=out)
    path = write_jsonl_output(options, [entry], [OutputChunk("c", "c", [0])], None)
    record = json.loads(path.read_text(encoding="utf-8").splitlines()[0])
    assert record["path"] == "dir/sub/x.c"
    assert record["tokens"] == 1


def test_write_jsonl_redacts(tmp_path):
    out = tmp_path / "out"
    out.mkdir()
    entry = _entry(tmp_path / "src", "conf.py", "host = '10.0.0.1'\n")
    options = Options(output_path=out)
    path = write_jsonl_output(options, [entry], [OutputChunk("c", "c", [0])], PiiRedactor())
    record = json.loads(path.read_text(encoding="utf-8"))
    assert record["content"] == "host = '<REDACTED:IPV4>'\n"


def test_write_jsonl_dry_run_writes_nothing(repo):
    options, files = repo
    options.dry_run = True
    assert write_jsonl_output(options, files, [OutputChunk("c", "c", [0])], None) is None
    assert not (Path(options.output_path) / "dataset.jsonl").exists()


def test_write_jsonl_missing_output_dir_raises(repo, tmp_path):
    options, files = repo
    options.output_path = tmp_path / "does" / "not" / "exist"
    with pytest.raises(RepadduError) as info:
        write_jsonl_output(options, files, [OutputChunk("c", "c", [0])], None)
    assert info.value.code == ExitCode.io_failure
    assert info.value.message == "Failed to create JSONL output file."


def test_write_jsonl_unreadable_input_raises(repo):
    options, files = repo
    Path(files[0].absolute_path).unlink()
    with pytest.raises(RepadduError) as info:
        write_jsonl_output(options, files, [OutputChunk("c", "c", [0])], None)
    assert info.value.code == ExitCode.io_failure


def test_write_html_contains_files(repo):
    options, files = repo
    path = write_html_output(options, files, None)
    assert path == Path(options.output_path) / "index.html"
    html = path.read_text(encoding="utf-8")
    assert html.startswith("<!DOCTYPE html>")
    assert html.endswith("</html>")
    assert '{ "path": "a.h", "content": "int a();\\n" }' in html
    assert '"path": "b.cpp"' in html
    assert html.index('"path": "a.h"') < html.index('"path": "b.cpp"')


def test_write_html_unreadable_file_has_empty_content(repo):
    options, files = repo
    Path(files[1].absolute_path).unlink()
    html = write_html_output(options, files, None).read_text(encoding="utf-8")
    assert '{ "path": "b.cpp", "content": "" }' in html


def test_write_html_redacts(tmp_path):
    out = tmp_path / "out"
    out.mkdir()
    entry = _entry(tmp_path / "src", "notes.md", "contact user@example.com")
    html = write_html_output(Options(output_path=out), [entry], PiiRedactor()).read_text(
        encoding="utf-8"
    )
    assert "<REDACTED:EMAIL>" in html
    assert "user@example.com" not in html


def test_write_html_dry_run_writes_nothing(repo):
    options, files = repo
    options.dry_run = True
    assert write_html_output(options, files, None) is None
    assert not (Path(options.output_path) / "index.html").exists()


def test_write_html_missing_output_dir_raises(repo, tmp_path):
    options, files = repo
    options.output_path = tmp_path / "missing"
    with pytest.raises(RepadduError) as info:
        write_html_output(options, files, None)
    assert info.value.message == "Failed to create HTML output file."