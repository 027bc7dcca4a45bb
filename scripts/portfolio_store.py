"""JSON-backed records for the portfolio: project summaries and detail bodies."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

PROJECTS_FILE_NAME = "projects.json"
DETAILS_FILE_NAME = "project-details.json"
PLACEHOLDER_IMAGE = "./assets/jpeg/project-placeholder.jpg"
OVERVIEW_PLACEHOLDER = "Project overview coming soon..."


class NotFoundError(LookupError):
    pass


def _text(value) -> str:
    if value is None:
        return ""
    return str(value)


def _list(value) -> list:
    return value if isinstance(value, list) else []


def _record_id(raw: dict, key: str) -> int:
    value = raw.get(key)
    if isinstance(value, bool):
        raise ValueError(f"'{key}' must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"'{key}' must be an integer, got {value!r}") from None


def _unknown_keys(raw: dict, known: frozenset) -> dict:
    return {k: v for k, v in raw.items() if k not in known}


SUMMARY_KEYS = frozenset({"id", "title", "description", "image", "imageStyle", "centerImage", "detailPage"})
DETAIL_KEYS = frozenset(
    {
        "projectId",
        "heroImage",
        "meta",
        "overview",
        "mainContent",
        "additionalImages",
        "keyContributions",
        "futureDevelopment",
        "skills",
        "links",
    }
)


@dataclass
class ProjectSummary:
    id: int
    title: str = ""
    description: str = ""
    image: str = ""
    image_style: str = ""
    center_image: bool = False
    detail_page: str = ""
    # keys this editor does not model, written back untouched
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: dict) -> "ProjectSummary":
        return cls(
            id=_record_id(raw, "id"),
            title=_text(raw.get("title")),
            description=_text(raw.get("description")),
            image=_text(raw.get("image")),
            image_style=_text(raw.get("imageStyle")),
            center_image=bool(raw.get("centerImage", False)),
            detail_page=_text(raw.get("detailPage")),
            extra=_unknown_keys(raw, SUMMARY_KEYS),
        )

    def to_dict(self) -> dict:
        out = {
            **self.extra,
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "image": self.image,
        }
        if self.image_style:
            out["imageStyle"] = self.image_style
        out["centerImage"] = self.center_image
        out["detailPage"] = self.detail_page
        return out


@dataclass
class ProjectMeta:
    role: str = ""
    project_type: str = ""
    company: str = ""
    project_date: str = ""

    @classmethod
    def from_dict(cls, raw) -> "ProjectMeta":
        if not isinstance(raw, dict):
            return cls()
        return cls(
            role=_text(raw.get("role")),
            project_type=_text(raw.get("projectType")),
            company=_text(raw.get("company")),
            project_date=_text(raw.get("projectDate")),
        )

    def to_dict(self) -> dict:
        return {
            "role": self.role,
            "company": self.company,
            "projectType": self.project_type,
            "projectDate": self.project_date,
        }


class ContentKind(str, Enum):
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BULLET = "bullet"
    NOTE = "note"
    IMAGE = "image"


@dataclass
class ContentItem:
    kind: ContentKind
    content: str = ""
    src: str = ""
    caption: str = ""

    @classmethod
    def from_dict(cls, raw) -> "ContentItem | None":
        if not isinstance(raw, dict):
            return None
        try:
            kind = ContentKind(str(raw.get("type", "")).strip().lower())
        except ValueError:
            return None
        return cls(
            kind=kind,
            content=_text(raw.get("content")),
            src=_text(raw.get("src")),
            caption=_text(raw.get("caption")),
        )

    def to_dict(self) -> dict:
        if self.kind is ContentKind.IMAGE:
            out = {"type": self.kind.value, "src": self.src}
            if self.caption:
                out["caption"] = self.caption
            return out
        return {"type": self.kind.value, "content": self.content}


@dataclass
class Block:
    subtitle: str = ""
    description: str = ""
    image_src: str = ""

    @classmethod
    def from_dict(cls, raw) -> "Block | None":
        """Build a normalized block, or None when every field is blank."""
        if not isinstance(raw, dict):
            return None
        image = raw.get("image")
        image_src = _text(image.get("src")).strip() if isinstance(image, dict) else ""
        block = cls(
            subtitle=_text(raw.get("subtitle")).strip(),
            description=_text(raw.get("description")).strip(),
            image_src=image_src,
        )
        if block.is_empty():
            return None
        return block

    def is_empty(self) -> bool:
        return not (self.subtitle or self.description or self.image_src)

    def to_dict(self) -> dict:
        out: dict = {}
        if self.subtitle:
            out["subtitle"] = self.subtitle
        if self.description:
            out["description"] = self.description
        if self.image_src:
            out["image"] = {"src": self.image_src}
        return out


@dataclass
class MainContent:
    title: str
    description: str = ""
    blocks: list[Block] = field(default_factory=list)
    conclusion: str = ""

    @classmethod
    def from_dict(cls, raw) -> "MainContent | None":
        if not isinstance(raw, dict):
            return None
        blocks = [b for b in (Block.from_dict(x) for x in _list(raw.get("blocks"))) if b]
        return cls(
            title=_text(raw.get("title")),
            description=_text(raw.get("description")),
            blocks=blocks,
            conclusion=_text(raw.get("conclusion")),
        )

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "blocks": [b.to_dict() for b in self.blocks],
            "conclusion": self.conclusion,
        }


@dataclass
class LegacyImage:
    src: str
    caption: str = ""

    def to_dict(self) -> dict:
        out = {"src": self.src}
        if self.caption:
            out["caption"] = self.caption
        return out


@dataclass
class ProjectLink:
    label: str
    url: str

    def to_dict(self) -> dict:
        return {"label": self.label, "url": self.url}


@dataclass
class ProjectDetail:
    project_id: int
    hero_image: str = ""
    meta: ProjectMeta = field(default_factory=ProjectMeta)
    overview: list[ContentItem] = field(default_factory=list)
    main_content: MainContent | None = None
    additional_images: list[LegacyImage] = field(default_factory=list)
    key_contributions: list[str] = field(default_factory=list)
    future_development: list[str] = field(default_factory=list)
    skills: list[str] = field(default_factory=list)
    links: list[ProjectLink] = field(default_factory=list)
    extra: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: dict) -> "ProjectDetail":
        overview = [i for i in (ContentItem.from_dict(x) for x in _list(raw.get("overview"))) if i]
        images = [
            LegacyImage(src=_text(img.get("src")), caption=_text(img.get("caption")))
            for img in _list(raw.get("additionalImages"))
            if isinstance(img, dict)
        ]
        links = [
            ProjectLink(label=_text(link.get("label")), url=_text(link.get("url")))
            for link in _list(raw.get("links"))
            if isinstance(link, dict)
        ]
        return cls(
            project_id=_record_id(raw, "projectId"),
            hero_image=_text(raw.get("heroImage")),
            meta=ProjectMeta.from_dict(raw.get("meta")),
            overview=overview,
            main_content=MainContent.from_dict(raw.get("mainContent")),
            additional_images=images,
            key_contributions=[_text(x) for x in _list(raw.get("keyContributions"))],
            future_development=[_text(x) for x in _list(raw.get("futureDevelopment"))],
            skills=[_text(x) for x in _list(raw.get("skills"))],
            links=links,
            extra=_unknown_keys(raw, DETAIL_KEYS),
        )

    def to_dict(self) -> dict:
        return {
            **self.extra,
            "projectId": self.project_id,
            "heroImage": self.hero_image,
            "meta": self.meta.to_dict(),
            "overview": [item.to_dict() for item in self.overview],
            "mainContent": self.main_content.to_dict() if self.main_content else None,
            "additionalImages": [img.to_dict() for img in self.additional_images],
            "keyContributions": list(self.key_contributions),
            "futureDevelopment": list(self.future_development),
            "skills": list(self.skills),
            "links": [link.to_dict() for link in self.links],
        }


def default_detail(project: ProjectSummary, year: int | None = None) -> ProjectDetail:
    if year is None:
        year = datetime.now().year
    return ProjectDetail(
        project_id=project.id,
        hero_image=project.image or PLACEHOLDER_IMAGE,
        meta=ProjectMeta(project_date=str(year) if year else ""),
        overview=[
            ContentItem(
                kind=ContentKind.PARAGRAPH,
                content=project.description or OVERVIEW_PLACEHOLDER,
            )
        ],
    )


def find_project(projects: list[ProjectSummary], project_id: int) -> ProjectSummary | None:
    return next((p for p in projects if p.id == project_id), None)


def find_detail(details: list[ProjectDetail], project_id: int) -> ProjectDetail | None:
    return next((d for d in details if d.project_id == project_id), None)


class PortfolioStore:
    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self.projects_file = self.data_dir / PROJECTS_FILE_NAME
        self.details_file = self.data_dir / DETAILS_FILE_NAME

    def _load(self, path: Path, key: str) -> list:
        if not path.exists():
            logger.info("No existing %s, creating default", path.name)
            self._save(path, key, [])
            return []
        data = json.loads(path.read_text(encoding="utf-8") or "{}")
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a JSON object")
        items = data.get(key, [])
        if not isinstance(items, list):
            raise ValueError(f"{path} must contain a '{key}' array")
        return items

    def _save(self, path: Path, key: str, items: list[dict]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps({key: items}, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")

    def _load_records(self, path: Path, key: str, record_cls):
        records = []
        for index, raw in enumerate(self._load(path, key)):
            if not isinstance(raw, dict):
                continue
            try:
                records.append(record_cls.from_dict(raw))
            except ValueError as exc:
                raise ValueError(f"{path.name}: {key}[{index}]: {exc}") from None
        return records

    def load_projects(self) -> list[ProjectSummary]:
        return self._load_records(self.projects_file, "projects", ProjectSummary)

    def save_projects(self, projects: list[ProjectSummary]) -> None:
        self._save(self.projects_file, "projects", [p.to_dict() for p in projects])

    def load_details(self) -> list[ProjectDetail]:
        return self._load_records(self.details_file, "details", ProjectDetail)

    def save_details(self, details: list[ProjectDetail]) -> None:
        self._save(self.details_file, "details", [d.to_dict() for d in details])
