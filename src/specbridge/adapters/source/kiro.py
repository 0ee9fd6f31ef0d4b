"""
Kiro source adapter.

Reads Kiro spec directories (requirements.md, design.md, tasks.md) and
converts them to SpecData.

Layout handled:
    .kiro/specs/                    <- container: every child with spec files
        user-auth/                     is merged, ids become "user-auth:<id>"
            requirements.md
            design.md
            tasks.md

or a single spec directory passed directly, whose ids stay unprefixed.

requirements.md:
    ### Requirement 1: Login
    Free text up to the next heading of any level.

tasks.md:
    - [ ] 1. Set up project (@alice)
      - [x] 1.1 Write models
        - detail lines become the task description

Checkbox markers: ' ' todo, 'x' done, '-' in progress, '~' queued (todo).
"""

from __future__ import annotations

import re
from pathlib import Path

import frontmatter  # type: ignore[import-untyped]
import yaml

from specbridge.adapters.source.base import BaseSourceAdapter, register_source
from specbridge.core.errors import AdapterError
from specbridge.core.models import Design, Requirement, SpecData, SpecMeta, Task, TaskStatus

SPEC_FILES = ("requirements.md", "design.md", "tasks.md")
KIRO_SPECS_DIR = Path(".kiro") / "specs"
SPEC_VERSION = "1.0.0"
EPIC_SEPARATOR = "\n\n---\n\n"

REQUIREMENT_PATTERN = re.compile(
    r"^(?P<level>#{2,3})\s+(?:Requirement|需求)\s+(?P<number>\d+)\s*[：:]\s*(?P<title>.+?)\s*$",
    re.MULTILINE | re.IGNORECASE,
)
HEADING_PATTERN = re.compile(r"^(#{1,6})\s", re.MULTILINE)
PRIORITY_PATTERN = re.compile(
    r"^\**Priority\**:?\**\s*(high|medium|low)\b", re.MULTILINE | re.IGNORECASE
)
TASK_PATTERN = re.compile(
    r"^(?P<indent>[ \t]*)-\s+\[(?P<marker>[ x\-~])\](?:\*|\\\*)?\s+"
    r"(?P<id>\d+(?:\.\d+)*)\.?\s+(?P<title>.+?)(?:\s+\(@(?P<assignee>[\w-]+)\))?\s*$"
)
SECTION_PATTERN = re.compile(r"^##\s+(.+?)\s*$", re.MULTILINE)

# '~' marks a queued task; it has no status of its own and is read as todo
STATUS_MARKERS = {
    " ": TaskStatus.TODO,
    "x": TaskStatus.DONE,
    "-": TaskStatus.IN_PROGRESS,
    "~": TaskStatus.TODO,
}


def marker_to_status(marker: str) -> TaskStatus:
    """Map a checkbox character to a task status."""
    return STATUS_MARKERS.get(marker, TaskStatus.TODO)


def format_epic_title(spec_name: str) -> str:
    """
    Convert a kebab-case spec name to a title.

    Example:
        >>> format_epic_title("user-authentication")
        'User Authentication'
    """
    return " ".join(word[:1].upper() + word[1:] for word in spec_name.split("-"))


def strip_front_matter(text: str) -> str:
    """Return the markdown body with any YAML front matter removed."""
    return str(frontmatter.loads(text).content)


def parse_requirements(markdown: str) -> list[Requirement]:
    """
    Extract requirement sections in document order.

    A requirement's description runs from the end of its heading line to
    the next heading of any level, or the end of the text.
    """
    requirements: list[Requirement] = []

    for match in REQUIREMENT_PATTERN.finditer(markdown):
        start = match.end()
        heading = HEADING_PATTERN.search(markdown, start)
        end = heading.start() if heading else len(markdown)
        description = markdown[start:end].strip()

        priority_match = PRIORITY_PATTERN.search(description)
        requirements.append(
            Requirement(
                id=f"req-{match.group('number')}",
                title=match.group("title").strip(),
                description=description,
                priority=priority_match.group(1).lower() if priority_match else None,
            )
        )

    return requirements


def parse_design(markdown: str) -> Design:
    """Wrap a design document, breaking out its ``##`` sections."""
    sections: dict[str, str] = {}
    headings = list(SECTION_PATTERN.finditer(markdown))
    for index, heading in enumerate(headings):
        end = headings[index + 1].start() if index + 1 < len(headings) else len(markdown)
        sections[heading.group(1)] = markdown[heading.end() : end].strip()
    return Design(content=markdown, sections=sections)


def parse_tasks(text: str) -> list[Task]:
    """
    Extract checkbox tasks in document order.

    Non-checkbox lines indented under a task are collected as its description.
    """
    tasks: list[Task] = []
    current: dict[str, object] | None = None
    current_indent = 0
    detail_lines: list[str] = []

    def _flush() -> None:
        if current is not None:
            current["description"] = "\n".join(detail_lines) or None
            tasks.append(Task.model_validate(current))

    for line in text.splitlines():
        match = TASK_PATTERN.match(line)
        if match:
            _flush()
            task_id = match.group("id")
            current = {
                "id": task_id,
                "title": match.group("title").strip(),
                "status": marker_to_status(match.group("marker")),
                "assignee": match.group("assignee"),
                "parent_id": task_id.rsplit(".", 1)[0] if "." in task_id else None,
            }
            current_indent = len(match.group("indent").expandtabs(4))
            detail_lines = []
            continue

        if current is None or not line.strip():
            continue

        expanded = line.expandtabs(4)
        indent = len(expanded) - len(expanded.lstrip())
        if indent > current_indent:
            detail = line.strip()
            if detail.startswith("- "):
                detail = detail[2:]
            detail_lines.append(detail)
        else:
            _flush()
            current = None

    _flush()
    return tasks


def _has_spec_files(directory: Path) -> bool:
    return any((directory / name).is_file() for name in SPEC_FILES)


@register_source("kiro")
class KiroSource(BaseSourceAdapter):
    """
    Source adapter for Kiro spec documents.

    Example:
        >>> source = KiroSource()
        >>> if source.detect(Path(".")):
        ...     data = source.parse(Path("."))
        ...     print(len(data.tasks))
    """

    name = "kiro"

    def detect(self, path: Path) -> bool:
        try:
            return (Path(path) / KIRO_SPECS_DIR).exists() or Path(path).exists()
        except OSError:
            return False

    def resolve_specs_dir(self, path: Path) -> Path:
        """
        Find the directory holding specs.

        A project root resolves to its .kiro/specs child when present.

        Raises:
            FileNotFoundError: If no such directory exists
        """
        path = Path(path)
        kiro_dir = path / KIRO_SPECS_DIR
        specs_dir = kiro_dir if kiro_dir.is_dir() else path
        if not specs_dir.is_dir():
            raise FileNotFoundError(f"Specifications directory not found: {specs_dir}")
        return specs_dir

    def find_spec_dirs(self, specs_dir: Path) -> tuple[list[Path], bool]:
        """
        List spec directories under ``specs_dir``.

        Returns:
            (spec directories, whether they were found as children of a container)

        Raises:
            FileNotFoundError: If no directory holds spec files
        """
        if _has_spec_files(specs_dir):
            return [specs_dir], False

        spec_dirs = sorted(
            child for child in specs_dir.iterdir() if child.is_dir() and _has_spec_files(child)
        )
        if not spec_dirs:
            raise FileNotFoundError(f"No specification files found in {specs_dir}")
        return spec_dirs, True

    def parse(self, path: Path) -> SpecData:
        """
        Parse all specs under ``path`` into one SpecData.

        Raises:
            AdapterError: Wrapping any read, parse or validation failure
        """
        try:
            specs_dir = self.resolve_specs_dir(Path(path))
            spec_dirs, merged = self.find_spec_dirs(specs_dir)
            self.logger.debug(
                "Parsing %d spec(s) from %s: %s",
                len(spec_dirs),
                specs_dir,
                ", ".join(d.name for d in spec_dirs),
            )

            all_requirements: list[Requirement] = []
            all_tasks: list[Task] = []
            design: Design | None = None
            epic_parts: list[str] = []

            for spec_dir in spec_dirs:
                requirements, tasks, spec_design, raw_requirements = self._parse_spec_dir(
                    spec_dir
                )
                if raw_requirements is not None:
                    epic_parts.append(raw_requirements)

                if merged:
                    requirements, tasks = self._prefix_ids(spec_dir, requirements, tasks)

                all_requirements.extend(requirements)
                all_tasks.extend(tasks)

                if spec_design is not None and design is None:
                    design = spec_design

            spec_data = SpecData(
                meta=SpecMeta(name=specs_dir.name, version=SPEC_VERSION),
                requirements=all_requirements,
                design=design,
                tasks=all_tasks,
                epic_title=format_epic_title(specs_dir.name),
                epic_description=EPIC_SEPARATOR.join(epic_parts),
            )
            self.validate_spec_data(spec_data)
            return spec_data

        except (OSError, UnicodeDecodeError, ValueError, yaml.YAMLError) as e:
            raise AdapterError(self.name, f"Failed to parse Kiro spec: {e}") from e

    def _parse_spec_dir(
        self, spec_dir: Path
    ) -> tuple[list[Requirement], list[Task], Design | None, str | None]:
        requirements: list[Requirement] = []
        tasks: list[Task] = []
        design: Design | None = None
        raw_requirements: str | None = None

        requirements_path = spec_dir / "requirements.md"
        if requirements_path.is_file():
            raw_requirements = requirements_path.read_text(encoding="utf-8")
            requirements = parse_requirements(strip_front_matter(raw_requirements))

        design_path = spec_dir / "design.md"
        if design_path.is_file():
            content = strip_front_matter(design_path.read_text(encoding="utf-8"))
            if content.strip():
                design = parse_design(content)
                design.spec_name = spec_dir.name

        tasks_path = spec_dir / "tasks.md"
        if tasks_path.is_file():
            tasks = parse_tasks(tasks_path.read_text(encoding="utf-8"))

        self.logger.debug(
            "Spec %s: %d requirements, %d tasks, design=%s",
            spec_dir.name,
            len(requirements),
            len(tasks),
            design is not None,
        )
        return requirements, tasks, design, raw_requirements

    def _prefix_ids(
        self, spec_dir: Path, requirements: list[Requirement], tasks: list[Task]
    ) -> tuple[list[Requirement], list[Task]]:
        spec_name = spec_dir.name
        prefixed_requirements = [
            req.model_copy(update={"id": f"{spec_name}:{req.id}"}) for req in requirements
        ]
        prefixed_tasks = [
            task.model_copy(
                update={
                    "id": f"{spec_name}:{task.id}",
                    "parent_id": f"{spec_name}:{task.parent_id}" if task.parent_id else None,
                    "spec_name": spec_name,
                    "spec_path": str(spec_dir),
                }
            )
            for task in tasks
        ]
        return prefixed_requirements, prefixed_tasks
