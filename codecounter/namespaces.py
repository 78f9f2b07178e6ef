"""Registry of namespaces, projects and packages seen during a run.

Namespaces form a trie keyed by dotted segment. Each level remembers the
first project that declared it, so a ``using`` in another project can be
turned into a project-to-project dependency.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from .logging import get_logger
from .projects import PackageReference, ProjectReference

_LOGGER = get_logger("namespaces")

IGNORED_ROOT_NAMESPACE = "System"


class NameSpaceLevel:
    """One dotted segment of a namespace."""

    def __init__(self, name: str, parent: Optional["NameSpaceLevel"] = None) -> None:
        self.name = name
        self.parent = parent
        self.children: Dict[str, NameSpaceLevel] = {}
        self.project: Optional[ProjectReference] = None

    @property
    def full_name(self) -> str:
        if self.parent is None:
            return self.name
        return f"{self.parent.full_name}.{self.name}"

    @property
    def level_count(self) -> int:
        """Number of ancestors above this level."""
        count = 0
        parent = self.parent
        while parent is not None:
            count += 1
            parent = parent.parent
        return count

    def find_partial_match(self, names: Sequence[str], index: int = 1) -> "NameSpaceLevel":
        """Return the deepest existing level matching ``names[index:]``."""
        level = self
        while index < len(names):
            child = level.children.get(names[index])
            if child is None:
                break
            level = child
            index += 1
        return level

    def add_children(self, names: Sequence[str], level_count: int) -> "NameSpaceLevel":
        """Create the missing levels ``names[level_count:]`` below this one."""
        level = self
        for name in names[level_count:]:
            child = level.children.get(name)
            if child is None:
                child = NameSpaceLevel(name, level)
                level.children[name] = child
            level = child
        return level

    def __repr__(self) -> str:
        return f"NameSpaceLevel({self.full_name!r})"


class NameSpaces:
    """Tracks every namespace, project and package referenced by a run."""

    def __init__(
        self,
        unprefix: Optional[str] = None,
        ignored_packages: Iterable[str] = (),
    ) -> None:
        self.unprefix = unprefix
        self.ignored_packages = {name.lower() for name in ignored_packages}
        self._roots: Dict[str, NameSpaceLevel] = {}
        self._projects: Dict[str, ProjectReference] = {}
        self._packages: Dict[str, PackageReference] = {}

    @property
    def projects(self) -> List[ProjectReference]:
        return [self._projects[key] for key in sorted(self._projects)]

    @property
    def packages(self) -> List[PackageReference]:
        return [self._packages[key] for key in sorted(self._packages)]

    def _find_or_make(self, text: Optional[str]) -> Optional[NameSpaceLevel]:
        if text is None:
            return None
        text = text.strip().rstrip(";{").strip()
        if not text:
            return None
        names = [name.strip() for name in text.split(".")]
        if not all(names):
            return None
        if names[0] == IGNORED_ROOT_NAMESPACE:
            return None

        root = self._roots.get(names[0])
        if root is None:
            root = NameSpaceLevel(names[0])
            self._roots[root.name] = root
            level, level_count = root, 1
        else:
            level = root.find_partial_match(names)
            level_count = level.level_count + 1
        return level.add_children(names, level_count)

    def add_using_decl(self, project: Optional[ProjectReference], text: str) -> Optional[NameSpaceLevel]:
        """Record ``using <text>`` seen in a source of ``project``."""
        if project is None:
            return None
        target = _using_target(text)
        if target is None:
            return None
        level = self._find_or_make(target)
        project.add_namespace_used(level)
        return level

    def add_namespace_decl(self, project: Optional[ProjectReference], text: str) -> Optional[NameSpaceLevel]:
        """Record ``namespace <text>``; the first declaring project owns it."""
        if project is None:
            return None
        level = self._find_or_make(text)
        if level is None:
            return None
        if level.project is None:
            level.project = project
        elif level.project is not project:
            _LOGGER.debug(
                "namespace %s is declared in %s and %s",
                level.full_name,
                level.project.name,
                project.name,
            )
        return level

    def display_name(self, name: str) -> str:
        """Return a GraphViz-safe node name."""
        shown = name.replace(".", "_").replace("-", "_").replace("\\", "_")
        if self.unprefix and shown.startswith(self.unprefix):
            shown = shown[len(self.unprefix):]
        return shown

    def is_ignored_package(self, name: str) -> bool:
        return not name.strip() or name.lower() in self.ignored_packages

    def add_package_ref(self, name: str) -> Optional[PackageReference]:
        key = name.lower()
        package = self._packages.get(key)
        if package is not None:
            return package
        if self.is_ignored_package(key):
            return None
        package = PackageReference(name, self.display_name(name))
        self._packages[key] = package
        return package

    def add_project_ref(self, path: Path, is_lib: bool = False) -> Optional[ProjectReference]:
        """Register the project at ``path``, reading it on first sight.

        For ``is_lib`` references (a ``.lib`` named in a link line) an
        unreadable file means the name is a package, so None is returned.
        """
        name = path.stem if path.suffix else path.name
        key = name.lower()
        project = self._projects.get(key)
        if project is not None:
            return project

        project = ProjectReference(path, name, self.display_name(name))
        # registered before reading so reference cycles terminate
        self._projects[key] = project
        project.read_file(self)
        if is_lib and project.read_result < 0:
            del self._projects[key]
            return None
        _LOGGER.debug("Registered project %s", name)
        return project

    def fixup_packages(self) -> None:
        """Re-link package references that turned out to be projects."""
        for key in list(self._packages):
            project = self._projects.get(key)
            if project is None:
                continue
            for other in self._projects.values():
                if other.package_refs.pop(key, None) is not None:
                    other.project_refs[key] = project


def _using_target(text: str) -> Optional[str]:
    """Return the namespace named by a using directive, None for using statements."""
    text = text.strip()
    if text.startswith("static "):
        text = text[len("static "):].strip()
    if "(" in text or text.startswith("var "):
        # using (var x = ...) or using var x = ...;
        return None
    if "=" in text:
        # using Alias = Some.Namespace;
        text = text.split("=", 1)[1].strip()
    return text


__all__ = ["IGNORED_ROOT_NAMESPACE", "NameSpaceLevel", "NameSpaces"]
