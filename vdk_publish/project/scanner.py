import logging
import os
import re
import tomllib
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from vdk_publish.constants import DEFAULT_LANGUAGE, GENERIC_FRAMEWORK, PROJECT_IGNORED_DIRS
from vdk_publish.models import ProjectContext
from vdk_publish.utils import read_json_safe

logger = logging.getLogger(__name__)

LANGUAGE_BY_EXTENSION: dict[str, str] = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".py": "python",
    ".go": "go",
    ".rs": "rust",
    ".java": "java",
    ".cpp": "cpp",
    ".c": "c",
}

# Dependency name -> framework, highest priority first.
FRAMEWORK_DEPENDENCIES: tuple[tuple[str, str], ...] = (
    ("next", "nextjs"),
    ("@angular/core", "angular"),
    ("vue", "vue"),
    ("svelte", "svelte"),
    ("react", "react"),
    ("express", "express"),
    ("django", "django"),
    ("fastapi", "fastapi"),
    ("flask", "flask"),
)

FILE_TECHNOLOGIES: tuple[tuple[str, str], ...] = (
    ("package.json", "nodejs"),
    ("tsconfig.json", "typescript"),
    ("requirements.txt", "python"),
    ("pyproject.toml", "python"),
    ("Dockerfile", "docker"),
    ("docker-compose.yml", "docker"),
    ("docker-compose.yaml", "docker"),
)

_REQUIREMENT_NAME_RE = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9._-]*)")


@dataclass(frozen=True)
class ProjectScan:
    files: list[Path] = field(default_factory=list)
    directories: list[Path] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)
    technologies: list[str] = field(default_factory=list)


class IProjectScanner(ABC):
    @abstractmethod
    def scan_project(self, project_path: Path) -> ProjectScan:
        raise NotImplementedError


def _requirement_name(line: str) -> str | None:
    stripped = line.strip()
    if not stripped or stripped.startswith(("#", "-")):
        return None
    match = _REQUIREMENT_NAME_RE.match(stripped)
    return match.group(1).lower() if match else None


def read_package_dependencies(path: Path) -> list[str]:
    payload, error = read_json_safe(path)
    if error is not None or not isinstance(payload, dict):
        return []
    names: list[str] = []
    for section in ("dependencies", "devDependencies", "peerDependencies"):
        deps = payload.get(section)
        if isinstance(deps, dict):
            names.extend(str(name).lower() for name in deps)
    return names


def read_pyproject_dependencies(path: Path) -> list[str]:
    try:
        payload = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return []
    project = payload.get("project", {})
    raw = project.get("dependencies", []) if isinstance(project, dict) else []
    names = [_requirement_name(item) for item in raw if isinstance(item, str)]
    return [name for name in names if name]


def read_requirements(path: Path) -> list[str]:
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError:
        return []
    names = [_requirement_name(line) for line in lines]
    return [name for name in names if name]


class FileSystemProjectScanner(IProjectScanner):
    def __init__(self, max_files: int = 5000) -> None:
        self.max_files = max_files

    def scan_project(self, project_path: Path) -> ProjectScan:
        root = project_path.resolve()
        if not root.is_dir():
            raise NotADirectoryError(str(project_path))

        files: list[Path] = []
        directories: list[Path] = []
        for current, dir_names, file_names in os.walk(str(root), topdown=True):
            dir_names[:] = sorted(
                name
                for name in dir_names
                if not name.startswith(".") and name not in PROJECT_IGNORED_DIRS
            )
            current_path = Path(current)
            if current_path != root:
                directories.append(current_path.relative_to(root))
            for name in sorted(file_names):
                files.append((current_path / name).relative_to(root))
            if len(files) >= self.max_files:
                logger.debug("project scan stopped at %d files", len(files))
                break

        dependencies = self._dependencies(root)
        return ProjectScan(
            files=files,
            directories=directories,
            dependencies=dependencies,
            technologies=self._technologies(files, dependencies),
        )

    @staticmethod
    def _dependencies(root: Path) -> list[str]:
        names: list[str] = []
        package_json = root / "package.json"
        if package_json.is_file():
            names.extend(read_package_dependencies(package_json))
        pyproject = root / "pyproject.toml"
        if pyproject.is_file():
            names.extend(read_pyproject_dependencies(pyproject))
        requirements = root / "requirements.txt"
        if requirements.is_file():
            names.extend(read_requirements(requirements))
        return list(dict.fromkeys(names))

    @staticmethod
    def _technologies(files: list[Path], dependencies: list[str]) -> list[str]:
        names = {path.name for path in files}
        found: list[str] = []
        for filename, tech in FILE_TECHNOLOGIES:
            if filename in names and tech not in found:
                found.append(tech)
        for dependency, framework in FRAMEWORK_DEPENDENCIES:
            if dependency in dependencies and framework not in found:
                found.append(framework)
        return found


def detect_primary_language(files: list[Path]) -> str:
    counts = Counter(
        LANGUAGE_BY_EXTENSION[path.suffix.lower()]
        for path in files
        if path.suffix.lower() in LANGUAGE_BY_EXTENSION
    )
    if not counts:
        return DEFAULT_LANGUAGE
    return counts.most_common(1)[0][0]


def detect_framework(dependencies: list[str]) -> str:
    for dependency, framework in FRAMEWORK_DEPENDENCIES:
        if dependency in dependencies:
            return framework
    return GENERIC_FRAMEWORK


def summarize_structure(scan: ProjectScan) -> dict[str, object]:
    return {
        "fileCount": len(scan.files),
        "directories": len(scan.directories),
        "hasTests": any("test" in path.name or "spec" in path.name for path in scan.files),
        "hasConfig": any("config" in path.name for path in scan.files),
    }


class ProjectContextExtractor:
    def __init__(self, scanner: IProjectScanner | None = None) -> None:
        self._scanner = scanner or FileSystemProjectScanner()

    def extract(self, project_path: Path) -> ProjectContext:
        name = project_path.resolve().name
        try:
            scan = self._scanner.scan_project(project_path)
        except Exception as exc:
            logger.warning("Project scan failed, using fallback context: %s", exc)
            return fallback_context(name)

        return ProjectContext(
            name=name,
            framework=detect_framework(scan.dependencies),
            language=detect_primary_language(scan.files),
            technologies=tuple(scan.technologies),
            structure_summary=summarize_structure(scan),
        )


def fallback_context(name: str) -> ProjectContext:
    return ProjectContext(
        name=name,
        framework=GENERIC_FRAMEWORK,
        language=DEFAULT_LANGUAGE,
        technologies=(),
    )
