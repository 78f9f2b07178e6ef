"""Tests for codecounter.scanner."""

from __future__ import annotations

import re
from pathlib import Path

import pytest

from codecounter.config import CounterConfig
from codecounter.scanner import CodeScanner, is_ignored_dir
from tests._fixtures.repo_builder import RepoBuilder


def test_scan_yields_directories_with_projects(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "notes.txt": "not counted\n",
            "App/App.csproj": "<Project />\n",
            "App/Program.cs": "class Program { }\n",
            "App/Models/User.cs": "class User { }\n",
            "Docs/readme.md": "# docs\n",
            "Lib/Lib.vcxproj": "<Project />\n",
            "Lib/Lib.cpp": "int x;\n",
        }
    )

    entries = repo_builder.scan()

    assert [entry.relative for entry in entries] == ["App", "App/Models", "Lib"]
    app, models, lib = entries

    assert app.project_file is not None and app.project_file.name == "App.csproj"
    assert app.owns_project is True
    assert [path.name for path in app.source_files] == ["Program.cs"]
    assert app.file_count == 2

    assert models.project_file == app.project_file
    assert models.owns_project is False

    assert lib.project_file is not None and lib.project_file.name == "Lib.vcxproj"
    assert [path.name for path in lib.source_files] == ["Lib.cpp"]


def test_scan_skips_excluded_and_hidden_entries(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "src/Main.cs": "class Main { }\n",
            "src/.Hidden.cs": "class Hidden { }\n",
            "bin/Debug/Out.cs": "class Out { }\n",
            "obj/Temp.cs": "class Temp { }\n",
            "packages/Pkg/Lib.cs": "class Lib { }\n",
            ".git/hooks/Hook.cs": "class Hook { }\n",
        }
    )

    entries = repo_builder.scan()

    assert [entry.relative for entry in entries] == ["src"]
    assert [path.name for path in entries[0].source_files] == ["Main.cs"]
    assert entries[0].project_file is None


def test_scan_applies_ignore_patterns(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "Core/Core.cs": "class Core { }\n",
            "LegacyTools/Old.cs": "class Old { }\n",
        }
    )
    config = CounterConfig(root=repo_builder.path(), ignore=["^Legacy"])

    entries = list(CodeScanner(config).scan(repo_builder.path()))

    assert [entry.relative for entry in entries] == ["Core"]


def test_last_project_file_by_name_wins(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            "Both/A.csproj": "<Project />\n",
            "Both/B.csproj": "<Project />\n",
            "Both/Code.cs": "class Code { }\n",
        }
    )

    (entry,) = repo_builder.scan()

    assert entry.project_file is not None
    assert entry.project_file.name == "B.csproj"


def test_root_files_have_empty_relative_path(repo_builder: RepoBuilder) -> None:
    repo_builder.write({"Root.cs": "class Root { }\n"})

    (entry,) = repo_builder.scan()

    assert entry.relative == ""


def test_scan_missing_root_raises(tmp_path: Path) -> None:
    scanner = CodeScanner(CounterConfig(root=tmp_path))

    with pytest.raises(FileNotFoundError):
        list(scanner.scan(tmp_path / "missing"))


def test_scan_file_root_raises(tmp_path: Path) -> None:
    target = tmp_path / "Program.cs"
    target.write_text("class Program { }\n", encoding="utf-8")
    scanner = CodeScanner(CounterConfig(root=tmp_path))

    with pytest.raises(NotADirectoryError):
        list(scanner.scan(target))


@pytest.mark.parametrize(
    ("name", "ignored"),
    [
        ("", True),
        ("   ", True),
        (".vs", True),
        ("bin", True),
        ("obj", True),
        ("packages", True),
        ("Bin", False),
        ("src", False),
        ("TestData", True),
    ],
)
def test_is_ignored_dir(name: str, ignored: bool) -> None:
    assert is_ignored_dir(name, [re.compile("^Test")]) is ignored
