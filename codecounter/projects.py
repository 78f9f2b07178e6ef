"""Project and package references read from .csproj/.vcxproj files."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from pathlib import Path, PureWindowsPath
from typing import TYPE_CHECKING, Dict, List, Optional, Set

from .logging import get_logger
from .models import CodeClass

if TYPE_CHECKING:
    from .namespaces import NameSpaceLevel, NameSpaces

_LOGGER = get_logger("projects")

# GraphViz colours, see http://graphviz.org/doc/info/colors.html
COLOR_FAIL = '[color="red1"]'
COLOR_TEST = '[color="gray53"]'
COLOR_EXE = '[color="darkorchid"]'
COLOR_PROJECT = '[color="green2"]'
COLOR_LIB = '[color="royalblue"]'
COLOR_SYSTEM = '[color="gold"]'
COLOR_PACKAGE = '[color="tan1"]'

SYSTEM_PACKAGE_PREFIXES = ("Microsoft.", "System.", "MSTest.", "Xamarin.")

READ_OK = 2
READ_FAILED = -1

_NATIVE_IMPORT_LABELS = {"ExtensionTargets", "Shared"}


class ModuleBase:
    """A node of the dependency graph: a project or a binary package."""

    def __init__(self, name: str, display_name: str) -> None:
        self.name = name
        self.display_name = display_name
        self.path: Optional[Path] = None
        self.package_refs: Dict[str, PackageReference] = {}
        self.read_result = 0

    @property
    def color(self) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class PackageReference(ModuleBase):
    """A NuGet package or binary library we have no sources for."""

    @property
    def is_system(self) -> bool:
        return self.name.startswith(SYSTEM_PACKAGE_PREFIXES)

    @property
    def color(self) -> str:
        return COLOR_SYSTEM if self.is_system else COLOR_PACKAGE


class ProjectReference(ModuleBase):
    """A project file plus everything its sources declare and use."""

    def __init__(self, path: Path, name: str, display_name: str) -> None:
        super().__init__(name, display_name)
        self.path = path
        self.is_exe = False
        self.is_test = "test" in name.lower()
        self.classes: List[CodeClass] = []
        self.project_refs: Dict[str, ProjectReference] = {}
        self.namespace_refs: Set[NameSpaceLevel] = set()
        self.errors: List[str] = []

    @property
    def color(self) -> str:
        if self.read_result < 0:
            return COLOR_FAIL
        if self.is_test:
            return COLOR_TEST
        if self.is_exe:
            return COLOR_EXE
        if self.read_result > 0:
            return COLOR_PROJECT
        return COLOR_LIB

    def read_file(self, namespaces: NameSpaces) -> None:
        """Read the project file once, registering its references."""
        if self.read_result != 0 or self.path is None:
            return
        self.read_result = ProjectReader(namespaces, self).read(self.path)

    def add_namespace_used(self, level: Optional[NameSpaceLevel]) -> None:
        # namespaces declared by this project are not dependencies
        if level is None or level.project is self:
            return
        self.namespace_refs.add(level)

    def trim_namespaces_used(self) -> None:
        """Drop used namespaces that this project turned out to declare itself."""
        self.namespace_refs = {level for level in self.namespace_refs if level.project is not self}


class ProjectReader:
    """Extract references from an MSBuild project file."""

    def __init__(self, namespaces: NameSpaces, project: ProjectReference) -> None:
        self._namespaces = namespaces
        self._project = project

    def read(self, path: Path) -> int:
        if not path.is_file():
            return READ_FAILED
        try:
            root = ET.parse(path).getroot()
        except (ET.ParseError, OSError) as exc:
            _LOGGER.warning("Could not read project file %s: %s", path, exc)
            self._project.errors.append(f"Project File Exception: {path.name}")
            return READ_FAILED

        base_dir = path.parent
        for element in root.iter():
            tag = _local_name(element.tag)
            if tag == "OutputType":
                if (element.text or "").strip() == "Exe":
                    self._project.is_exe = True
            elif tag == "ProjectReference":
                self._add_project_ref(element.get("Include"), base_dir)
            elif tag == "PackageReference":
                self._add_package_ref(element.get("Include"))
            elif tag == "AdditionalDependencies":
                self._add_dependencies(element.text or "", base_dir)
            elif tag == "ImportGroup":
                if element.get("Label") in _NATIVE_IMPORT_LABELS:
                    for child in element:
                        if _local_name(child.tag) == "Import" and (child.get("Project") or "").strip():
                            self._add_import_ref(child.get("Project"))
            elif tag == "Reference":
                # <Reference Include="X, Version=..."><HintPath>..\X.dll</HintPath></Reference>
                for child in element:
                    if _local_name(child.tag) == "HintPath" and child.text:
                        self._add_import_ref(child.text)
        return READ_OK

    def _add_package_ref(self, name: Optional[str]) -> None:
        if not name:
            return
        key = name.lower()
        if key in self._project.package_refs:
            return
        package = self._namespaces.add_package_ref(name)
        if package is not None:
            self._project.package_refs[key] = package

    def _add_import_ref(self, file_path: Optional[str]) -> None:
        if file_path is None:
            return
        name = PureWindowsPath(file_path.strip()).name
        name = re.sub(r"\.(targets|dll)$", "", name, flags=re.IGNORECASE)
        self._add_package_ref(name.lower())

    def _add_project_ref(self, include: Optional[str], base_dir: Path) -> None:
        # Include="..\Other\Other.vcxproj"
        if include is None:
            return
        relative = PureWindowsPath(include)
        key = Path(relative.name).stem.lower()
        if key in self._project.project_refs:
            return
        project = self._namespaces.add_project_ref(base_dir.joinpath(*relative.parts), is_lib=False)
        if project is not None:
            self._project.project_refs[key] = project

    def _add_dependencies(self, text: str, base_dir: Path) -> None:
        # NAME.lib;kernel32.lib;%(AdditionalDependencies)
        for library in text.split(";"):
            self._add_dependency(library.strip(), base_dir)

    def _add_dependency(self, file_name: str, base_dir: Path) -> None:
        if not file_name or file_name.startswith(("$(", "%(")) or file_name == ".":
            return
        name = re.sub(r"\.lib$", "", file_name, flags=re.IGNORECASE)
        key = name.lower()
        if self._namespaces.is_ignored_package(key):
            return
        if key in self._project.project_refs or key in self._project.package_refs:
            return

        # could be a project of ours or an external package
        project = self._namespaces.add_project_ref(base_dir / name, is_lib=True)
        if project is not None:
            self._project.project_refs[key] = project
            return
        package = self._namespaces.add_package_ref(name)
        if package is not None:
            self._project.package_refs[key] = package
            return
        self._project.errors.append(f"Cant add dependency {name}")


def _local_name(tag: str) -> str:
    # strips the MSBuild "{namespace}" prefix
    return tag.rsplit("}", 1)[-1]


__all__ = [
    "COLOR_EXE",
    "COLOR_FAIL",
    "COLOR_LIB",
    "COLOR_PACKAGE",
    "COLOR_PROJECT",
    "COLOR_SYSTEM",
    "COLOR_TEST",
    "ModuleBase",
    "PackageReference",
    "ProjectReader",
    "ProjectReference",
    "READ_FAILED",
    "READ_OK",
]
