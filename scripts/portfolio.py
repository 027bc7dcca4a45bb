"""Project and detail mutations behind the local editor.

Each operation runs a full read-modify-write against the JSON records and then
refreshes whatever generated HTML it affects.
"""

from __future__ import annotations

import base64
import binascii
import logging
import mimetypes
import random
import time
from dataclasses import dataclass, field
from pathlib import Path

import listing_section
from detail_form import detail_from_payload, detail_to_form
from detail_page import DEFAULT_CHROME, PageChrome, render
from portfolio_store import (
    PLACEHOLDER_IMAGE,
    NotFoundError,
    PortfolioStore,
    ProjectSummary,
    default_detail,
    find_detail,
    find_project,
)
from site_files import SiteFiles, UnsafePathError

logger = logging.getLogger(__name__)

UPLOAD_DIR = "assets/jpeg"
MAX_UPLOAD_BYTES = 5 * 1024 * 1024


@dataclass
class EditorConfig:
    root: Path
    data_dir_name: str = "data"
    index_name: str = "index.html"
    chrome: PageChrome = field(default_factory=lambda: DEFAULT_CHROME)
    markers: listing_section.ListingMarkers = field(default_factory=lambda: listing_section.DEFAULT_MARKERS)

    @property
    def data_dir(self) -> Path:
        return Path(self.root) / self.data_dir_name


@dataclass
class PageSweep:
    written: list[str] = field(default_factory=list)
    refused: list[str] = field(default_factory=list)


def parse_project_id(value) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValueError(f"invalid project id: {value!r}") from None


def _apply_summary_fields(project: ProjectSummary, payload: dict) -> None:
    if "title" in payload:
        project.title = str(payload.get("title") or "").strip()
    if "description" in payload:
        project.description = str(payload.get("description") or "").strip()
    if "image" in payload:
        project.image = str(payload.get("image") or "").strip()
    if "imageStyle" in payload:
        project.image_style = str(payload.get("imageStyle") or "").strip()
    if "centerImage" in payload:
        project.center_image = bool(payload.get("centerImage"))
    if "detailPage" in payload and str(payload.get("detailPage") or "").strip():
        project.detail_page = str(payload.get("detailPage")).strip()


class Portfolio:
    def __init__(self, config: EditorConfig):
        self.config = config
        self.store = PortfolioStore(config.data_dir)
        self.files = SiteFiles(config.root)

    # projects

    def list_projects(self) -> list[dict]:
        return [p.to_dict() for p in self.store.load_projects()]

    def _new_project_id(self, projects: list[ProjectSummary]) -> int:
        taken = {p.id for p in projects}
        candidate = int(time.time() * 1000)
        while candidate in taken:
            candidate += 1
        return candidate

    def create_project(self, payload: dict) -> dict:
        title = str(payload.get("title", "")).strip()
        if not title:
            raise ValueError("title is required")

        projects = self.store.load_projects()
        project = ProjectSummary(id=self._new_project_id(projects))
        _apply_summary_fields(project, payload)
        if not project.detail_page:
            number = self.files.next_project_number([p.detail_page for p in projects])
            project.detail_page = f"./project-{number}.html"
        # surfaces an unsafe detailPage before anything is saved
        self.files.resolve_inside_root(project.detail_page)

        projects.insert(0, project)
        self.store.save_projects(projects)

        details = self.store.load_details()
        details = [d for d in details if d.project_id != project.id]
        detail = default_detail(project)
        details.append(detail)
        self.store.save_details(details)

        page_written = self.files.write(project.detail_page, self._render_page(detail, project))
        if not page_written:
            logger.warning("Detail page %s already exists, left untouched", project.detail_page)
        return {
            "ok": True,
            "project": project.to_dict(),
            "detailPageWritten": page_written,
            "listingUpdated": self.update_listing(projects),
        }

    def update_project(self, project_id, payload: dict) -> dict:
        project_id = parse_project_id(project_id)
        projects = self.store.load_projects()
        project = find_project(projects, project_id)
        if project is None:
            raise NotFoundError("Project not found")
        if "title" in payload and not str(payload.get("title") or "").strip():
            raise ValueError("title cannot be empty")
        if str(payload.get("detailPage") or "").strip():
            self.files.resolve_inside_root(payload["detailPage"])
        _apply_summary_fields(project, payload)
        self.store.save_projects(projects)
        return {"ok": True, "project": project.to_dict(), "listingUpdated": self.update_listing(projects)}

    def delete_project(self, project_id) -> dict:
        project_id = parse_project_id(project_id)
        projects = self.store.load_projects()
        project = find_project(projects, project_id)
        if project is None:
            raise NotFoundError("Project not found")

        # delete the page first, while the record still knows its path
        result = self.files.delete_generated(project.detail_page)

        projects = [p for p in projects if p.id != project_id]
        self.store.save_projects(projects)
        details = self.store.load_details()
        remaining = [d for d in details if d.project_id != project_id]
        if len(remaining) != len(details):
            self.store.save_details(remaining)
        return {
            "ok": True,
            "deletedDetailPage": result.deleted,
            "detailPageResult": result.to_dict(),
            "listingUpdated": self.update_listing(projects),
        }

    def reorder_projects(self, project_ids) -> dict:
        if not isinstance(project_ids, list):
            raise ValueError("projectIds must be a list")
        ids = [parse_project_id(value) for value in project_ids]
        projects = self.store.load_projects()
        by_id = {p.id: p for p in projects}
        ordered: list[ProjectSummary] = []
        for project_id in ids:
            project = by_id.pop(project_id, None)
            if project is not None:
                ordered.append(project)
        # projects missing from the request keep their relative order at the end
        ordered.extend(p for p in projects if p.id in by_id)
        self.store.save_projects(ordered)
        return {"ok": True, "projects": [p.to_dict() for p in ordered], "listingUpdated": self.update_listing(ordered)}

    # details

    def _render_page(self, detail, project: ProjectSummary) -> str:
        return render(detail, project.title, PLACEHOLDER_IMAGE, self.config.chrome)

    def list_details(self) -> list[dict]:
        return [d.to_dict() for d in self.store.load_details()]

    def get_detail(self, project_id) -> dict:
        project_id = parse_project_id(project_id)
        detail = find_detail(self.store.load_details(), project_id)
        if detail is None:
            raise NotFoundError("Detail page not found for this project")
        return {"ok": True, "detail": detail.to_dict(), "form": detail_to_form(detail)}

    def save_detail(self, project_id, payload: dict) -> dict:
        project_id = parse_project_id(project_id)
        project = find_project(self.store.load_projects(), project_id)
        if project is None:
            raise NotFoundError("Project not found")
        detail = detail_from_payload(project, payload)

        details = self.store.load_details()
        for index, existing in enumerate(details):
            if existing.project_id == project_id:
                detail.extra = dict(existing.extra)
                details[index] = detail
                break
        else:
            details.append(detail)
        self.store.save_details(details)

        written = False
        if project.detail_page:
            written = self.files.write(project.detail_page, self._render_page(detail, project), overwrite=True)
        return {"ok": True, "detail": detail.to_dict(), "detailPageWritten": written}

    def delete_detail(self, project_id) -> dict:
        project_id = parse_project_id(project_id)
        details = self.store.load_details()
        remaining = [d for d in details if d.project_id != project_id]
        if len(remaining) == len(details):
            raise NotFoundError("Detail page not found for this project")
        self.store.save_details(remaining)
        return {"ok": True}

    def generate_detail_page(self, project_id) -> dict:
        project_id = parse_project_id(project_id)
        project = find_project(self.store.load_projects(), project_id)
        if project is None:
            raise NotFoundError("Project not found")
        detail = find_detail(self.store.load_details(), project_id)
        if detail is None:
            raise NotFoundError("Detail data not found for this project")
        if not project.detail_page:
            raise ValueError("Project has no detail page path")
        self.files.write(project.detail_page, self._render_page(detail, project), overwrite=True)
        return {"ok": True, "message": "Detail page generated successfully"}

    def ensure_detail_pages(self) -> PageSweep:
        """Write detail pages that are missing on disk; existing pages are never touched.

        A record whose detailPage points outside the site root is skipped and
        reported in ``refused``; the rest of the pass still runs.
        """
        projects = self.store.load_projects()
        details = self.store.load_details()
        details_changed = False
        written: list[str] = []
        refused: list[str] = []

        for project in projects:
            if not project.detail_page:
                continue
            try:
                if self.files.exists(project.detail_page):
                    continue
            except UnsafePathError as exc:
                logger.warning("Skipping detail page for project %s: %s", project.id, exc)
                refused.append(project.detail_page)
                continue
            detail = find_detail(details, project.id)
            if detail is None:
                detail = default_detail(project, year=0)
                details.append(detail)
                details_changed = True
            if self.files.write(project.detail_page, self._render_page(detail, project)):
                logger.info("Generated missing detail page: %s", project.detail_page)
                written.append(project.detail_page)

        if details_changed:
            self.store.save_details(details)
        return PageSweep(written, refused)

    # site

    def update_listing(self, projects: list[ProjectSummary] | None = None) -> bool:
        if projects is None:
            projects = self.store.load_projects()
        index_path = self.files.resolve_inside_root(self.config.index_name)
        return listing_section.apply(index_path, projects, self.config.markers)

    def regenerate(self) -> dict:
        sweep = self.ensure_detail_pages()
        updated = self.update_listing()
        if not updated:
            raise ValueError(f"Could not find projects section markers in {self.config.index_name}")
        return {
            "ok": True,
            "message": f"{self.config.index_name} generated successfully",
            "generatedDetailPages": sweep.written,
            "refusedDetailPages": sweep.refused,
        }

    def save_upload(self, image_name: str, image_data: str) -> dict:
        try:
            header, encoded = image_data.split(",", 1)
        except ValueError:
            raise ValueError("imageData must be a data URL") from None
        mime = header.split(";")[0].replace("data:", "").strip()
        if not mime.startswith("image/"):
            raise ValueError("Only image files are allowed")
        try:
            data = base64.b64decode(encoded, validate=True)
        except binascii.Error:
            raise ValueError("imageData is not valid base64") from None
        if len(data) > MAX_UPLOAD_BYTES:
            raise ValueError("Image exceeds the 5 MB limit")

        ext = mimetypes.guess_extension(mime) or Path(image_name or "").suffix.lower() or ".png"
        file_name = f"project-{int(time.time() * 1000)}-{random.randint(0, 10**9)}{ext}"
        self.files.write_bytes(f"{UPLOAD_DIR}/{file_name}", data)
        return {"ok": True, "path": f"./{UPLOAD_DIR}/{file_name}"}
