"""Run the scanner, readers and aggregators over one or more source trees."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .config import CounterConfig
from .graph import GRAPH_BANNER, render_graph
from .lexers import ALL_SUFFIXES
from .logging import get_logger
from .models import CodeClass
from .namespaces import NameSpaces
from .projects import ProjectReference
from .readers import FileReport, read_source
from .scanner import CodeScanner, DirectoryEntry
from .stats import CodeStats


class TreePrefixer:
    """Builds the ``│``/``├``/``└`` prefixes of the tree listing.

    Level 0 (directories) has no prefix; files, classes and methods are
    levels 1 to 3. A bit per level remembers whether the last entry printed
    at that level closed its branch.
    """

    def __init__(self, enabled: bool) -> None:
        self.enabled = enabled
        self._last_mask = 0

    def prefix(self, level: int, is_last: bool) -> str:
        if not self.enabled or level == 0:
            return ""
        level -= 1
        if is_last:
            self._last_mask |= 1 << level
        else:
            self._last_mask &= ~(1 << level)

        parts = [" " if self._last_mask & (1 << depth) else "│" for depth in range(level)]
        parts.append("└ " if self._last_mask & (1 << level) else "├ ")
        return "".join(parts)


@dataclass
class CounterResult:
    """Everything a counter run produced."""

    stats: CodeStats
    namespaces: NameSpaces
    files: List[FileReport] = field(default_factory=list)
    output: List[str] = field(default_factory=list)
    graph: Optional[str] = None

    @property
    def errors(self) -> List[str]:
        return [line[len("Error: "):] for line in self.output if line.startswith("Error: ")]

    def render(self) -> str:
        lines = list(self.output)
        lines.append(self.stats.render())
        if self.graph is not None:
            lines.append(GRAPH_BANNER)
            lines.append(self.graph)
        return "\n".join(lines) + "\n"


class CodeCounter:
    """Counts lines, types and methods below a set of root directories."""

    def __init__(self, config: CounterConfig, scanner: CodeScanner | None = None) -> None:
        self.config = config
        self.scanner = scanner or CodeScanner(config)
        self.logger = get_logger("counter")

    def run(self, roots: Sequence[str | Path] | None = None) -> CounterResult:
        """Count every root in order and return the combined result."""
        output = self.config.output
        roots = list(roots) if roots else [self.config.root]
        result = CounterResult(
            stats=CodeStats(),
            namespaces=NameSpaces(
                unprefix=self.config.unprefix,
                ignored_packages=self.config.ignored_packages,
            ),
        )
        tree = TreePrefixer(output.tree)

        for root in roots:
            root_path = Path(root).expanduser().resolve()
            self.logger.info("Counting %s", root_path)
            result.output.append(f"Read Dir '{root}' for files of type {','.join(ALL_SUFFIXES)}")
            for entry in self.scanner.scan(root_path):
                self._count_directory(entry, root_path, result, tree)

        for project in result.namespaces.projects:
            project.trim_namespaces_used()
            for error in project.errors:
                self._report_error(result, f"{error} in {project.name}")

        result.namespaces.fixup_packages()
        if output.graph_level > 0:
            result.graph = render_graph(result.namespaces.projects, output.graph_level)

        self.logger.debug(
            "Counted %d files in %d directories",
            result.stats.files,
            result.stats.directories,
        )
        return result

    def _count_directory(
        self,
        entry: DirectoryEntry,
        root: Path,
        result: CounterResult,
        tree: TreePrefixer,
    ) -> None:
        output = self.config.output
        if output.verbose or output.tree:
            result.output.append(f"{tree.prefix(0, False)}Dir: /{entry.relative}")

        project: Optional[ProjectReference] = None
        if entry.project_file is not None:
            project = result.namespaces.add_project_ref(entry.project_file)
            if entry.owns_project:
                result.stats.projects += 1

        for index, path in enumerate(entry.source_files):
            is_last = index == len(entry.source_files) - 1
            report = read_source(path, display_name=path.relative_to(root).as_posix())
            if report is None:
                continue
            self._record(report, project, is_last, result, tree)

        result.stats.directories += 1

    def _record(
        self,
        report: FileReport,
        project: Optional[ProjectReference],
        is_last: bool,
        result: CounterResult,
        tree: TreePrefixer,
    ) -> None:
        output = self.config.output
        result.files.append(report)
        result.stats.record_file(report)

        namespaces = result.namespaces
        for text in report.namespace_decls:
            namespaces.add_namespace_decl(project, text)
        for text in report.using_decls:
            namespaces.add_using_decl(project, text)
        if output.is_reading_classes and project is not None:
            project.classes.extend(report.classes)

        if output.verbose or output.tree:
            name = f"{report.path} (Auto Generated)" if report.generated else report.path
            result.output.append(f"{tree.prefix(1, is_last)}File: {name}")
        for error in report.errors:
            result.output.append(f"Error: {error}")
        if output.verbose:
            self._dump_classes(report.classes, result, tree)

    def _dump_classes(self, classes: Iterable[CodeClass], result: CounterResult, tree: TreePrefixer) -> None:
        classes = list(classes)
        for index, record in enumerate(classes, start=1):
            result.output.append(f"{tree.prefix(2, index == len(classes))}Class: {record.name}")
            for number, method in enumerate(record.methods, start=1):
                result.output.append(f"{tree.prefix(3, number == len(record.methods))}Method: {method}")

    def _report_error(self, result: CounterResult, message: str) -> None:
        result.output.append(f"Error: {message}")
        result.stats.errors += 1


__all__ = ["CodeCounter", "CounterResult", "TreePrefixer"]
