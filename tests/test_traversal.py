import os
from pathlib import Path

import pytest

from repaddu.core import ExitCode, FileClass, Options, RepadduError
from repaddu.traversal import traverse_repository


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    root = tmp_path / "repo"
    (root / "src").mkdir(parents=True)
    (root / "include").mkdir()
    (root / "docs").mkdir()
    (root / "sub").mkdir()
    (root / ".hidden").mkdir()
    (root / ".git").mkdir()

    (root / "CMakeLists.txt").write_text("project(x)\n")
    (root / "sub" / "CMakeLists.txt").write_text("add_library(y)\n")
    (root / "Cargo.toml").write_text("[package]\n")
    (root / "src" / "main.cpp").write_text("int main() { return 0; }\n")
    (root / "include" / "api.hpp").write_text("#pragma once\n")
    (root / "docs" / "readme.txt").write_text("hello docs\n")
    (root / "image.png").write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 8)
    (root / ".hidden" / "secret.cpp").write_text("int hidden;\n")
    (root / ".env").write_text("A=1\n")
    (root / ".git" / "config").write_text("[core]\n")
    return root


def _paths(entries):
    return [Path(p).as_posix() for p in entries]


def _file_paths(result):
    return [Path(f.relative_path).as_posix() for f in result.files]


def test_missing_input_raises_io_failure(tmp_path: Path):
    options = Options(input_path=tmp_path / "does-not-exist")
    with pytest.raises(RepadduError) as info:
        traverse_repository(options)
    assert info.value.code == ExitCode.io_failure
    assert info.value.message == "Input path does not exist."


@pytest.mark.parametrize("parallel", [False, True])
def test_file_as_input_is_traversal_failure(tmp_path: Path, parallel: bool):
    target = tmp_path / "README.md"
    target.write_text("# readme\n")
    options = Options(input_path=target, parallel_traversal=parallel)
    with pytest.raises(RepadduError) as info:
        traverse_repository(options)
    assert info.value.code == ExitCode.traversal_failure


@pytest.mark.parametrize("parallel", [False, True])
def test_hidden_and_git_are_skipped_by_default(repo: Path, parallel: bool):
    result = traverse_repository(Options(input_path=repo, parallel_traversal=parallel))
    paths = _file_paths(result)
    assert "src/main.cpp" in paths
    assert all(not part.startswith(".") for p in paths for part in p.split("/"))
    assert ".hidden" not in _paths(result.directories)
    assert ".git" not in _paths(result.directories)


@pytest.mark.parametrize("parallel", [False, True])
def test_include_hidden_still_skips_git(repo: Path, parallel: bool):
    options = Options(input_path=repo, include_hidden=True, parallel_traversal=parallel)
    result = traverse_repository(options)
    paths = _file_paths(result)
    assert ".hidden/secret.cpp" in paths
    assert ".env" in paths
    assert ".git/config" not in paths
    assert ".git" not in _paths(result.directories)


def test_lists_are_sorted(repo: Path):
    result = traverse_repository(Options(input_path=repo))
    files = [str(f.relative_path) for f in result.files]
    assert files == sorted(files)
    dirs = [str(d) for d in result.directories]
    assert dirs == sorted(dirs)
    assert _paths(result.directories) == ["docs", "include", "src", "sub"]


def test_cmake_lists_and_build_files(repo: Path):
    result = traverse_repository(Options(input_path=repo))
    assert _paths(result.cmake_lists) == ["CMakeLists.txt", "sub/CMakeLists.txt"]
    build = _paths(result.build_files)
    assert "Cargo.toml" in build
    assert "CMakeLists.txt" in build
    assert "sub/CMakeLists.txt" in build


def test_build_files_limited_by_build_system(repo: Path):
    result = traverse_repository(Options(input_path=repo, build_system="cargo"))
    assert _paths(result.build_files) == ["Cargo.toml"]
    assert _paths(result.cmake_lists) == ["CMakeLists.txt", "sub/CMakeLists.txt"]


def test_file_entry_fields(repo: Path):
    result = traverse_repository(Options(input_path=repo))
    by_path = {Path(f.relative_path).as_posix(): f for f in result.files}

    main = by_path["src/main.cpp"]
    assert main.size_bytes == len("int main() { return 0; }\n")
    assert main.extension_lower == ".cpp"
    assert main.file_class == FileClass.source
    assert not main.is_binary
    assert Path(main.absolute_path).resolve() == (repo / "src" / "main.cpp").resolve()

    header = by_path["include/api.hpp"]
    assert header.file_class == FileClass.header

    docs = by_path["docs/readme.txt"]
    assert docs.file_class == FileClass.other

    image = by_path["image.png"]
    assert image.is_binary
    assert image.extension_lower == ".png"


def test_parallel_matches_sequential(repo: Path):
    sequential = traverse_repository(Options(input_path=repo, include_hidden=True))
    parallel = traverse_repository(
        Options(input_path=repo, include_hidden=True, parallel_traversal=True)
    )
    assert sequential.files == parallel.files
    assert _paths(sequential.directories) == _paths(parallel.directories)
    assert _paths(sequential.cmake_lists) == _paths(parallel.cmake_lists)
    assert _paths(sequential.build_files) == _paths(parallel.build_files)


def test_uppercase_extension_is_lowered(tmp_path: Path):
    (tmp_path / "MAIN.CPP").write_text("x\n")
    result = traverse_repository(Options(input_path=tmp_path))
    assert [f.extension_lower for f in result.files] == [".cpp"]
    assert result.files[0].file_class == FileClass.source


def test_empty_directory_yields_nothing(tmp_path: Path):
    result = traverse_repository(Options(input_path=tmp_path))
    assert result.files == []
    assert result.directories == []
    assert result.build_files == []


@pytest.mark.parametrize("parallel", [False, True])
def test_symlinked_file_requires_follow(tmp_path: Path, parallel: bool):
    (tmp_path / "real.cpp").write_text("int a;\n")
    os.symlink(tmp_path / "real.cpp", tmp_path / "link.cpp")

    plain = traverse_repository(Options(input_path=tmp_path, parallel_traversal=parallel))
    assert _file_paths(plain) == ["real.cpp"]

    followed = traverse_repository(
        Options(input_path=tmp_path, follow_symlinks=True, parallel_traversal=parallel)
    )
    assert _file_paths(followed) == ["link.cpp", "real.cpp"]


@pytest.mark.parametrize("parallel", [False, True])
def test_symlinked_directory_listed_but_not_entered(tmp_path: Path, parallel: bool):
    real = tmp_path / "real"
    real.mkdir()
    (real / "inner.py").write_text("x = 1\n")
    os.symlink(real, tmp_path / "alias", target_is_directory=True)

    plain = traverse_repository(Options(input_path=tmp_path, parallel_traversal=parallel))
    assert _paths(plain.directories) == ["alias", "real"]
    assert _file_paths(plain) == ["real/inner.py"]

    followed = traverse_repository(
        Options(input_path=tmp_path, follow_symlinks=True, parallel_traversal=parallel)
    )
    assert _file_paths(followed) == ["alias/inner.py", "real/inner.py"]