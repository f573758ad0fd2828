"""Immutable description of one search run.

``SearchConfig`` is built once from CLI/config values and handed to the
orchestrator. Glob and file-type selections are validated up front so a bad
value fails before any worker thread is started.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path


class SearchConfigError(ValueError):
    """Raised when globs, file types, or sort keys are not usable."""


class CaseMode(str, Enum):
    SENSITIVE = "sensitive"
    INSENSITIVE = "insensitive"
    SMART = "smart"


class SortKey(str, Enum):
    PATH = "path"
    MODIFIED = "modified"
    ACCESSED = "accessed"
    CREATED = "created"


# Subset of ripgrep's default type definitions.
DEFAULT_FILE_TYPES: dict[str, tuple[str, ...]] = {
    "c": ("*.c", "*.h"),
    "cpp": ("*.cpp", "*.cc", "*.cxx", "*.hpp", "*.hh", "*.hxx", "*.h"),
    "cs": ("*.cs",),
    "css": ("*.css", "*.scss", "*.sass", "*.less"),
    "go": ("*.go",),
    "html": ("*.html", "*.htm", "*.xhtml"),
    "java": ("*.java",),
    "js": ("*.js", "*.jsx", "*.mjs", "*.cjs", "*.vue"),
    "json": ("*.json", "*.jsonl"),
    "kotlin": ("*.kt", "*.kts"),
    "lua": ("*.lua",),
    "make": ("Makefile", "makefile", "GNUmakefile", "*.mk", "*.mak"),
    "markdown": ("*.md", "*.markdown", "*.mdown", "*.mkd"),
    "md": ("*.md", "*.markdown", "*.mdown", "*.mkd"),
    "php": ("*.php", "*.phtml"),
    "py": ("*.py", "*.pyi"),
    "rst": ("*.rst",),
    "ruby": ("*.rb", "Gemfile", "*.gemspec", "Rakefile"),
    "rust": ("*.rs",),
    "sh": ("*.sh", "*.bash", "*.zsh", ".bashrc", ".zshrc", ".profile"),
    "sql": ("*.sql",),
    "swift": ("*.swift",),
    "toml": ("*.toml", "Cargo.lock"),
    "ts": ("*.ts", "*.tsx", "*.cts", "*.mts"),
    "txt": ("*.txt",),
    "xml": ("*.xml", "*.xsd", "*.xsl", "*.svg"),
    "yaml": ("*.yaml", "*.yml"),
}


def format_type_list(types: dict[str, tuple[str, ...]] | None = None) -> str:
    """Render the type table the way ``--type-list`` prints it."""
    table = DEFAULT_FILE_TYPES if types is None else types
    return "".join(f"{name}: {', '.join(globs)}\n" for name, globs in sorted(table.items()))


def _split_globs(globs: tuple[str, ...]) -> tuple[tuple[str, ...], tuple[str, ...]]:
    include: list[str] = []
    exclude: list[str] = []
    for raw in globs:
        glob = raw.strip()
        if glob.startswith("!"):
            glob = glob[1:]
            target = exclude
        else:
            target = include
        if not glob:
            raise SearchConfigError(f"invalid glob: {raw!r}")
        target.append(glob.rstrip("/") or glob)
    return tuple(include), tuple(exclude)


def _resolve_types(names: tuple[str, ...]) -> tuple[str, ...]:
    globs: list[str] = []
    for name in names:
        try:
            globs.extend(DEFAULT_FILE_TYPES[name])
        except KeyError:
            raise SearchConfigError(f"unrecognized file type: {name}") from None
    return tuple(globs)


@dataclass(frozen=True)
class SearchConfig:
    """Everything a run needs; never mutated once a run starts."""

    pattern: str
    paths: tuple[Path, ...] = (Path("."),)
    case_mode: CaseMode = CaseMode.SENSITIVE
    word_regexp: bool = False
    search_hidden: bool = False
    follow_links: bool = False
    no_ignore: bool = False
    globs: tuple[str, ...] = ()
    types: tuple[str, ...] = ()
    types_not: tuple[str, ...] = ()
    sort_by: SortKey | None = None
    sort_reversed: bool = False
    include_globs: tuple[str, ...] = field(init=False, default=())
    exclude_globs: tuple[str, ...] = field(init=False, default=())
    type_globs: tuple[str, ...] = field(init=False, default=())
    type_not_globs: tuple[str, ...] = field(init=False, default=())

    def __post_init__(self) -> None:
        if not self.paths:
            object.__setattr__(self, "paths", (Path("."),))
        object.__setattr__(self, "paths", tuple(Path(p) for p in self.paths))
        include, exclude = _split_globs(tuple(self.globs))
        object.__setattr__(self, "include_globs", include)
        object.__setattr__(self, "exclude_globs", exclude)
        object.__setattr__(self, "type_globs", _resolve_types(tuple(self.types)))
        object.__setattr__(self, "type_not_globs", _resolve_types(tuple(self.types_not)))

    @property
    def sorted(self) -> bool:
        return self.sort_by is not None

    def with_pattern(self, pattern: str) -> SearchConfig:
        """Return a copy that searches for ``pattern`` with identical options."""
        return replace(self, pattern=pattern)


def parse_sort_key(value: str | None) -> SortKey | None:
    """Map a CLI/config sort value to ``SortKey``; ``None`` means unsorted."""
    if value is None or value == "":
        return None
    try:
        return SortKey(value.strip().lower())
    except ValueError:
        choices = ", ".join(key.value for key in SortKey)
        raise SearchConfigError(f"invalid sort key {value!r} (choose from {choices})") from None
