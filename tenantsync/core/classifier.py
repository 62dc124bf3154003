# tenantsync Path Classifier
# Maps repository paths to tenant configuration categories

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from tenantsync.utils.paths import normalize_path, relative_to, split_extension

STRUCTURED_EXTENSION = ".json"


class Layout(str, Enum):
    """How files of a category are laid out below its pattern."""

    DOCUMENT = "document"  # A single file holds the whole category
    FLAT = "flat"  # Files below the prefix, one entry per file stem
    GROUPED = "grouped"  # One sub-folder per entry, scripts inside


class MatchKind(str, Enum):
    """What a classified path contributes to the bundle."""

    DOCUMENT = "document"
    ENTRY = "entry"
    GROUP = "group"
    CONTAINER = "container"


@dataclass(frozen=True)
class PathMatch:
    """
    Verdict for a relevant path.

    ``slot`` and ``key`` locate the content inside the entry: flat entries
    use ``entry[slot]``, grouped entries use ``entry[slot][key]``.
    """

    path: str
    relative: str
    category: str
    kind: MatchKind
    identifier: Optional[str] = None
    slot: Optional[str] = None
    key: Optional[str] = None
    structured: bool = False

    @property
    def is_file(self) -> bool:
        """Check if the match refers to fetchable content."""
        return self.kind in (MatchKind.DOCUMENT, MatchKind.ENTRY)

    @property
    def is_folder(self) -> bool:
        """Check if the match refers to a folder to traverse."""
        return self.kind in (MatchKind.GROUP, MatchKind.CONTAINER)


@dataclass(frozen=True)
class CategoryRule:
    """
    A single prefix -> category rule.

    Attributes:
        category: Bundle key the rule populates.
        pattern: Path relative to the project root (no trailing slash).
        layout: Layout of files below the pattern.
        extensions: Accepted file extensions (lowercase, with dot).
        text_slot: Slot name for non-structured files of flat entries.
    """

    category: str
    pattern: str
    layout: Layout = Layout.FLAT
    extensions: tuple[str, ...] = (STRUCTURED_EXTENSION,)
    text_slot: str = "script"

    def match(self, path: str, relative: str, is_folder: Optional[bool]) -> Optional[PathMatch]:
        """
        Match a relative path against this rule.

        Args:
            path: Full normalized path.
            relative: Path relative to the project root.
            is_folder: True/False when the caller knows the node type, None otherwise.

        Returns:
            PathMatch or None if the rule does not apply.
        """
        pattern = self.pattern

        # Ancestors of a nested pattern (e.g. "guardian" for "guardian/factors")
        if pattern.startswith(relative + "/"):
            if is_folder is False:
                return None
            return PathMatch(path=path, relative=relative, category=self.category, kind=MatchKind.CONTAINER)

        if self.layout == Layout.DOCUMENT:
            if relative != pattern or is_folder:
                return None
            _, ext = split_extension(relative)
            return PathMatch(
                path=path,
                relative=relative,
                category=self.category,
                kind=MatchKind.DOCUMENT,
                structured=ext == STRUCTURED_EXTENSION,
            )

        if relative == pattern:
            if is_folder is False:
                return None
            return PathMatch(path=path, relative=relative, category=self.category, kind=MatchKind.CONTAINER)

        if not relative.startswith(pattern + "/"):
            return None

        rest = relative[len(pattern) + 1 :]
        if self.layout == Layout.GROUPED:
            return self._match_grouped(path, relative, rest, is_folder)
        return self._match_flat(path, relative, rest, is_folder)

    def _match_flat(self, path: str, relative: str, rest: str, is_folder: Optional[bool]) -> Optional[PathMatch]:
        if is_folder:
            return PathMatch(path=path, relative=relative, category=self.category, kind=MatchKind.CONTAINER)

        stem, ext = split_extension(rest)
        if ext not in self.extensions:
            if is_folder is None and not ext:
                return PathMatch(path=path, relative=relative, category=self.category, kind=MatchKind.CONTAINER)
            return None

        structured = ext == STRUCTURED_EXTENSION
        return PathMatch(
            path=path,
            relative=relative,
            category=self.category,
            kind=MatchKind.ENTRY,
            identifier=stem,
            slot="metadata" if structured else self.text_slot,
            structured=structured,
        )

    def _match_grouped(self, path: str, relative: str, rest: str, is_folder: Optional[bool]) -> Optional[PathMatch]:
        name, _, inner = rest.partition("/")

        if not inner:
            # Files directly under the grouped root do not belong to any entry
            if is_folder is False:
                return None
            return PathMatch(
                path=path,
                relative=relative,
                category=self.category,
                kind=MatchKind.GROUP,
                identifier=name,
            )

        if is_folder:
            return PathMatch(
                path=path,
                relative=relative,
                category=self.category,
                kind=MatchKind.CONTAINER,
                identifier=name,
            )

        stem, ext = split_extension(inner)
        if ext not in self.extensions:
            if is_folder is None and not ext:
                return PathMatch(
                    path=path,
                    relative=relative,
                    category=self.category,
                    kind=MatchKind.CONTAINER,
                    identifier=name,
                )
            return None

        structured = ext == STRUCTURED_EXTENSION
        return PathMatch(
            path=path,
            relative=relative,
            category=self.category,
            kind=MatchKind.ENTRY,
            identifier=name,
            slot="metadata" if structured else "scripts",
            key=stem,
            structured=structured,
        )


# Evaluated in order; the first matching rule wins.
DEFAULT_RULES: tuple[CategoryRule, ...] = (
    CategoryRule("settings", "tenant.json", Layout.DOCUMENT),
    CategoryRule("rules", "rules", Layout.FLAT, (".js", ".json"), "script"),
    CategoryRule("databases", "database-connections", Layout.GROUPED, (".js", ".json")),
    CategoryRule("pages", "pages", Layout.FLAT, (".html", ".json"), "html"),
    CategoryRule("guardian", "guardian", Layout.FLAT),
    CategoryRule("emails", "emails", Layout.FLAT, (".html", ".json"), "body"),
    CategoryRule("hooks", "hooks", Layout.FLAT, (".js", ".json"), "script"),
    CategoryRule("clients", "clients", Layout.FLAT),
    CategoryRule("resource-servers", "resource-servers", Layout.FLAT),
    CategoryRule("connections", "connections", Layout.FLAT),
    CategoryRule("client-grants", "client-grants", Layout.FLAT),
    CategoryRule("rules-configs", "rules-configs", Layout.FLAT),
    CategoryRule("roles", "roles", Layout.FLAT),
)


class PathClassifier:
    """
    Classifies repository paths against an ordered set of category rules.

    Paths are matched as string prefixes after trimming the configured
    project root. The project root itself and paths outside of it are
    never relevant.
    """

    def __init__(self, project_path: str, rules: tuple[CategoryRule, ...] = DEFAULT_RULES):
        """
        Initialize classifier.

        Args:
            project_path: Configured project root (e.g. "$/TFVC-test/tenant").
            rules: Ordered category rules.
        """
        self.project_path = normalize_path(project_path)
        self.rules = tuple(rules)

    @property
    def categories(self) -> list[str]:
        """Category names in rule order, without duplicates."""
        seen: list[str] = []
        for rule in self.rules:
            if rule.category not in seen:
                seen.append(rule.category)
        return seen

    def classify(self, path: str, is_folder: Optional[bool] = None) -> Optional[PathMatch]:
        """
        Classify a repository path.

        Args:
            path: Full repository path.
            is_folder: Node type when known (tree listings), None for change records.

        Returns:
            PathMatch for relevant paths, None otherwise.
        """
        path = normalize_path(path)
        relative = relative_to(path, self.project_path)
        if not relative:
            return None

        for rule in self.rules:
            match = rule.match(path, relative, is_folder)
            if match is not None:
                return match
        return None

    def is_relevant(self, path: str, is_folder: Optional[bool] = None) -> bool:
        """Check if a path maps to a tenant configuration category."""
        return self.classify(path, is_folder) is not None
