"""
Main class discovery in module sources.

Used when the effective POM names no main class. Candidates come from file
names (``*Application.java``, ``*Main.java``) and from entry-point markers in
file contents. The fully qualified name is the declared package plus the file
stem.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from mvnctl.core.store import KeyValueStore

logger = logging.getLogger(__name__)

NAME_PATTERNS = ("*Application.java", "*Main.java")
ENTRY_POINT_MARKERS = (
    "@SpringBootApplication",
    "SpringApplication.run",
    "public static void main",
)
SKIPPED_DIRS = frozenset({"target", "build", "node_modules", ".git", ".idea"})

_PACKAGE_RE = re.compile(r"^\s*package\s+([\w.]+)\s*;", re.MULTILINE)


def extract_fqcn(java_file: Path) -> str | None:
    """Fully qualified class name of a Java source file, or None."""
    try:
        content = java_file.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
    match = _PACKAGE_RE.search(content)
    if not match:
        # Default package
        return java_file.stem
    return f"{match.group(1)}.{java_file.stem}"


def _java_sources(module_dir: Path) -> list[Path]:
    src_root = module_dir / "src" / "main" / "java"
    base = src_root if src_root.is_dir() else module_dir
    return sorted(
        p for p in base.rglob("*.java") if not SKIPPED_DIRS.intersection(p.relative_to(base).parts)
    )


def find_main_class_candidates(module_dir: Path) -> list[str]:
    """
    Scan a module for likely entry points.

    Name matches come first, then content matches; each class appears once.

    Args:
        module_dir: Module directory (``src/main/java`` is preferred when present)

    Returns:
        Fully qualified class names in discovery order
    """
    sources = _java_sources(module_dir)
    candidates: dict[str, None] = {}

    for source in sources:
        if any(source.match(pattern) for pattern in NAME_PATTERNS):
            if fqcn := extract_fqcn(source):
                candidates.setdefault(fqcn, None)

    for source in sources:
        try:
            content = source.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.debug("Skipping unreadable source %s: %s", source, e)
            continue
        if any(marker in content for marker in ENTRY_POINT_MARKERS):
            if fqcn := extract_fqcn(source):
                candidates.setdefault(fqcn, None)

    logger.info("Found %d potential main classes in %s", len(candidates), module_dir)
    return list(candidates)


@dataclass
class Starter:
    """A remembered entry point."""

    fqcn: str
    label: str
    is_default: bool = False

    def display_name(self) -> str:
        marker = "* " if self.is_default else ""
        return f"{marker}{self.label} ({self.fqcn})"


class StarterRegistry:
    """
    Remembered entry points for a project, persisted in a KeyValueStore.

    The preferred starter is the last used one if still registered, else the
    default.
    """

    KEY = "starters"

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store
        self.starters: list[Starter] = []
        self.last_used: str | None = None
        self._load()

    def _load(self) -> None:
        data: Any = self._store.get(self.KEY)
        if not isinstance(data, dict):
            return
        for item in data.get("starters", []):
            if isinstance(item, dict) and item.get("fqcn"):
                self.starters.append(
                    Starter(
                        fqcn=item["fqcn"],
                        label=item.get("label") or item["fqcn"].rsplit(".", 1)[-1],
                        is_default=bool(item.get("is_default", False)),
                    )
                )
        self.last_used = data.get("last_used")

    def save(self) -> None:
        self._store.set(
            self.KEY,
            {
                "starters": [
                    {"fqcn": s.fqcn, "label": s.label, "is_default": s.is_default}
                    for s in self.starters
                ],
                "last_used": self.last_used,
            },
        )

    def get(self, fqcn: str) -> Starter | None:
        for starter in self.starters:
            if starter.fqcn == fqcn:
                return starter
        return None

    def add(self, fqcn: str, label: str | None = None, is_default: bool = False) -> Starter:
        """Register a starter, replacing an existing entry for the same class."""
        self.remove(fqcn)
        if is_default:
            for s in self.starters:
                s.is_default = False
        starter = Starter(fqcn=fqcn, label=label or fqcn.rsplit(".", 1)[-1], is_default=is_default)
        self.starters.append(starter)
        return starter

    def remove(self, fqcn: str) -> bool:
        before = len(self.starters)
        self.starters = [s for s in self.starters if s.fqcn != fqcn]
        return len(self.starters) != before

    def set_default(self, fqcn: str) -> bool:
        found = False
        for starter in self.starters:
            starter.is_default = starter.fqcn == fqcn
            found = found or starter.is_default
        return found

    def default(self) -> Starter | None:
        return next((s for s in self.starters if s.is_default), None)

    def preferred(self) -> Starter | None:
        if self.last_used and (starter := self.get(self.last_used)):
            return starter
        return self.default()

    def mark_used(self, fqcn: str) -> None:
        self.last_used = fqcn
