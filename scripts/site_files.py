"""Filesystem writes and deletes confined to the site root."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

GENERATED_PAGE_RE = re.compile(r"^project-([1-9]\d*)\.html$", re.IGNORECASE)


class UnsafePathError(ValueError):
    pass


@dataclass
class DeleteResult:
    deleted: bool
    reason: str = ""

    def to_dict(self) -> dict:
        out: dict = {"deleted": self.deleted}
        if self.reason:
            out["reason"] = self.reason
        return out


def normalize_relative_path(value) -> str:
    if value is None:
        return ""
    text = str(value).strip()
    return text[2:] if text.startswith("./") else text


def is_generated_page(relative_path) -> bool:
    normalized = normalize_relative_path(relative_path)
    if not normalized:
        return False
    return bool(GENERATED_PAGE_RE.match(Path(normalized).name))


class SiteFiles:
    def __init__(self, root: Path):
        self.root = Path(root).resolve()

    def resolve_inside_root(self, relative_path) -> Path:
        """Resolve ``relative_path`` against the root or raise UnsafePathError."""
        normalized = normalize_relative_path(relative_path)
        if not normalized:
            raise UnsafePathError("empty path")
        if Path(normalized).is_absolute():
            raise UnsafePathError(f"absolute path not allowed: {normalized}")
        resolved = (self.root / normalized).resolve()
        if resolved == self.root or self.root not in resolved.parents:
            raise UnsafePathError(f"path escapes site root: {normalized}")
        return resolved

    def exists(self, relative_path) -> bool:
        return self.resolve_inside_root(relative_path).exists()

    def write(self, relative_path, content: str, overwrite: bool = False) -> bool:
        target = self.resolve_inside_root(relative_path)
        if target.exists() and not overwrite:
            return False
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        logger.info("Wrote %s", target.relative_to(self.root))
        return True

    def write_bytes(self, relative_path, data: bytes) -> Path:
        target = self.resolve_inside_root(relative_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        return target

    def delete_generated(self, relative_path) -> DeleteResult:
        normalized = normalize_relative_path(relative_path)
        if not normalized:
            return DeleteResult(False, "missing")
        try:
            target = self.resolve_inside_root(normalized)
        except UnsafePathError:
            logger.warning("Refusing to delete %s: outside the site root", normalized)
            return DeleteResult(False, "unsafe-path")
        if not is_generated_page(normalized):
            logger.warning("Refusing to delete %s: not a generated page", normalized)
            return DeleteResult(False, "not-generated")
        try:
            target.unlink()
        except FileNotFoundError:
            return DeleteResult(False, "not-found")
        logger.info("Deleted generated detail page: %s", target.relative_to(self.root))
        return DeleteResult(True)

    def next_project_number(self, detail_pages: list[str]) -> int:
        highest = 0
        names = [Path(normalize_relative_path(page)).name for page in detail_pages if page]
        if self.root.is_dir():
            names.extend(entry.name for entry in self.root.iterdir())
        for name in names:
            match = GENERATED_PAGE_RE.match(name)
            if match:
                highest = max(highest, int(match.group(1)))
        return highest + 1
