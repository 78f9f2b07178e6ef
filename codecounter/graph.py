"""GraphViz rendering of the project dependency graph."""

from __future__ import annotations

from typing import Iterable, List, Set

from .projects import ModuleBase, PackageReference, ProjectReference

GRAPH_BANNER = "Modules: paste below into http://www.webgraphviz.com/ or use http://www.graphviz.org/"
GRAPH_HEADER = "digraph prof { ratio = fill; node[style = filled]; "


class _GraphWriter:
    def __init__(self, level: int) -> None:
        self.level = level
        self.lines: List[str] = [GRAPH_HEADER]
        self._displayed: Set[int] = set()

    def _first_visit(self, module: ModuleBase) -> bool:
        if id(module) in self._displayed:
            return False
        self._displayed.add(id(module))
        return True

    def project(self, project: ProjectReference) -> None:
        # dependencies are emitted before the edges that point at them
        if not self._first_visit(project):
            return
        color = project.color
        self.lines.append(f"{project.display_name} {color}")
        for reference in project.project_refs.values():
            self.project(reference)
            self.lines.append(f"{project.display_name} -> {reference.display_name} {color};")
        if self.level > 1:
            for package in project.package_refs.values():
                self.package(package)
                self.lines.append(f"{project.display_name} -> {package.display_name} {color};")

    def package(self, package: PackageReference) -> None:
        if self._first_visit(package):
            self.lines.append(f"{package.display_name} {package.color}")


def render_graph(projects: Iterable[ProjectReference], level: int) -> str:
    """Return the ``digraph`` text for ``projects``.

    Level 1 draws projects only; level 2 and above also draws packages.
    """
    writer = _GraphWriter(level)
    for project in projects:
        writer.project(project)
    writer.lines.append("}")
    return "\n".join(writer.lines)


__all__ = ["GRAPH_BANNER", "GRAPH_HEADER", "render_graph"]
