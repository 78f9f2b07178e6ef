"""Tests for codecounter.projects."""

from __future__ import annotations

from pathlib import Path

from codecounter.namespaces import NameSpaces
from codecounter.projects import (
    COLOR_EXE,
    COLOR_FAIL,
    COLOR_PACKAGE,
    COLOR_PROJECT,
    COLOR_SYSTEM,
    COLOR_TEST,
    READ_OK,
)


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content.strip() + "\n", encoding="utf-8")
    return path


def test_csproj_references(tmp_path: Path) -> None:
    _write(tmp_path / "Core" / "Core.csproj", '<Project Sdk="Microsoft.NET.Sdk" />')
    app_file = _write(
        tmp_path / "App" / "App.csproj",
        r"""
<Project Sdk="Microsoft.NET.Sdk">
  <PropertyGroup>
    <OutputType>Exe</OutputType>
  </PropertyGroup>
  <ItemGroup>
    <ProjectReference Include="..\Core\Core.csproj" />
    <PackageReference Include="Newtonsoft.Json" Version="13.0.1" />
    <PackageReference Include="System.Text.Json" Version="8.0.0" />
  </ItemGroup>
</Project>
""",
    )
    namespaces = NameSpaces()

    app = namespaces.add_project_ref(app_file)

    assert app is not None
    assert app.read_result == READ_OK
    assert app.is_exe is True
    assert app.color == COLOR_EXE
    assert list(app.project_refs) == ["core"]
    core = app.project_refs["core"]
    assert core.read_result == READ_OK
    assert core.color == COLOR_PROJECT
    assert set(app.package_refs) == {"newtonsoft.json", "system.text.json"}
    assert app.package_refs["system.text.json"].color == COLOR_SYSTEM
    assert app.package_refs["newtonsoft.json"].color == COLOR_PACKAGE
    assert [project.name for project in namespaces.projects] == ["App", "Core"]


def test_vcxproj_dependencies(tmp_path: Path) -> None:
    tool_file = _write(
        tmp_path / "Tool" / "Tool.vcxproj",
        r"""
<?xml version="1.0" encoding="utf-8"?>
<Project DefaultTargets="Build" xmlns="http://schemas.microsoft.com/developer/msbuild/2003">
  <ItemDefinitionGroup>
    <Link>
      <AdditionalDependencies>Engine.lib;kernel32.lib;%(AdditionalDependencies)</AdditionalDependencies>
    </Link>
  </ItemDefinitionGroup>
  <ImportGroup Label="ExtensionTargets">
    <Import Project="..\packages\zlib.1.2\build\native\zlib.targets" />
  </ImportGroup>
  <ImportGroup Label="PropertySheets">
    <Import Project="$(UserRootDir)\Microsoft.Cpp.user.props" />
  </ImportGroup>
  <ItemGroup>
    <Reference Include="Vendor.Sdk">
      <HintPath>..\lib\Vendor.Sdk.dll</HintPath>
    </Reference>
  </ItemGroup>
</Project>
""",
    )
    namespaces = NameSpaces(ignored_packages=["kernel32"])

    tool = namespaces.add_project_ref(tool_file)

    assert tool is not None
    assert tool.errors == []
    assert tool.is_exe is False
    assert tool.project_refs == {}
    assert set(tool.package_refs) == {"engine", "zlib", "vendor.sdk"}
    assert [project.name for project in namespaces.projects] == ["Tool"]


def test_unreadable_project_reports_error(tmp_path: Path) -> None:
    bad_file = _write(tmp_path / "Bad" / "Bad.csproj", "<Project><ItemGroup>")
    namespaces = NameSpaces()

    bad = namespaces.add_project_ref(bad_file)

    assert bad is not None
    assert bad.read_result < 0
    assert bad.color == COLOR_FAIL
    assert bad.errors == ["Project File Exception: Bad.csproj"]


def test_test_projects_are_coloured_as_tests(tmp_path: Path) -> None:
    project_file = _write(
        tmp_path / "Core.Tests" / "Core.Tests.csproj",
        "<Project><PropertyGroup><OutputType>Exe</OutputType></PropertyGroup></Project>",
    )

    project = NameSpaces().add_project_ref(project_file)

    assert project is not None
    assert project.is_test is True
    assert project.color == COLOR_TEST


def test_reference_cycles_terminate(tmp_path: Path) -> None:
    first_file = _write(
        tmp_path / "A" / "A.csproj",
        r'<Project><ItemGroup><ProjectReference Include="..\B\B.csproj" /></ItemGroup></Project>',
    )
    _write(
        tmp_path / "B" / "B.csproj",
        r'<Project><ItemGroup><ProjectReference Include="..\A\A.csproj" /></ItemGroup></Project>',
    )
    namespaces = NameSpaces()

    first = namespaces.add_project_ref(first_file)

    assert first is not None
    second = first.project_refs["b"]
    assert second.project_refs["a"] is first
