"""Tests for codecounter.graph."""

from __future__ import annotations

from pathlib import Path

from codecounter.graph import GRAPH_HEADER, render_graph
from codecounter.projects import READ_OK, PackageReference, ProjectReference


def _projects() -> list[ProjectReference]:
    app = ProjectReference(Path("App.csproj"), "App", "App")
    app.read_result = READ_OK
    app.is_exe = True
    core = ProjectReference(Path("Core.csproj"), "Core", "Core")
    core.read_result = READ_OK
    app.project_refs["core"] = core
    app.package_refs["newtonsoft.json"] = PackageReference("Newtonsoft.Json", "Newtonsoft_Json")
    return [app, core]


def test_level_one_draws_projects_only() -> None:
    graph = render_graph(_projects(), 1)

    assert graph.splitlines() == [
        GRAPH_HEADER,
        'App [color="darkorchid"]',
        'Core [color="green2"]',
        'App -> Core [color="darkorchid"];',
        "}",
    ]


def test_level_two_adds_packages() -> None:
    graph = render_graph(_projects(), 2)

    assert graph.splitlines() == [
        GRAPH_HEADER,
        'App [color="darkorchid"]',
        'Core [color="green2"]',
        'App -> Core [color="darkorchid"];',
        'Newtonsoft_Json [color="tan1"]',
        'App -> Newtonsoft_Json [color="darkorchid"];',
        "}",
    ]


def test_shared_dependency_is_drawn_once() -> None:
    shared = ProjectReference(Path("Shared.csproj"), "Shared", "Shared")
    left = ProjectReference(Path("Left.csproj"), "Left", "Left")
    right = ProjectReference(Path("Right.csproj"), "Right", "Right")
    left.project_refs["shared"] = shared
    right.project_refs["shared"] = shared

    lines = render_graph([left, right, shared], 1).splitlines()

    assert sum(1 for line in lines if line.startswith("Shared ")) == 1
    assert "Right -> Shared [color=\"royalblue\"];" in lines
