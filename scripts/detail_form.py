"""Convert between the admin page's plain-text fields and ProjectDetail records.

The overview textarea uses a small convention, one chunk per blank-line
separated paragraph: ``NOTE:`` starts a note, ``•`` starts a bullet and a chunk
wholly wrapped in ``<strong>`` is a heading. Image items have no text form and
are dropped when the overview is edited as text.
"""

from __future__ import annotations

import re

from detail_page import sanitize_list_item, strip_bullet_marker
from portfolio_store import (
    Block,
    ContentItem,
    ContentKind,
    MainContent,
    ProjectDetail,
    ProjectSummary,
)

OVERVIEW_CHUNK_RE = re.compile(r"\n\n+")
MAIN_CONTENT_TITLE_REQUIRED = (
    "Please enter a Main Content Section Title "
    "(or clear the content fields to hide this section)."
)


def parse_overview_text(text: str) -> list[ContentItem]:
    items: list[ContentItem] = []
    for chunk in OVERVIEW_CHUNK_RE.split(str(text or "").replace("\r\n", "\n")):
        trimmed = chunk.strip()
        if not trimmed:
            continue
        if trimmed.startswith("NOTE:"):
            items.append(ContentItem(ContentKind.NOTE, trimmed[5:].strip()))
        elif trimmed.startswith("•"):
            items.append(ContentItem(ContentKind.BULLET, trimmed[1:].strip()))
        elif trimmed.startswith("<strong>") and trimmed.endswith("</strong>"):
            heading = trimmed.replace("<strong>", "").replace("</strong>", "")
            items.append(ContentItem(ContentKind.HEADING, heading))
        else:
            items.append(ContentItem(ContentKind.PARAGRAPH, trimmed))
    return items


def overview_to_text(items: list[ContentItem]) -> str:
    chunks = []
    for item in items:
        if item.kind is ContentKind.PARAGRAPH:
            chunks.append(item.content)
        elif item.kind is ContentKind.HEADING:
            chunks.append(f"<strong>{item.content}</strong>")
        elif item.kind is ContentKind.BULLET:
            chunks.append(f"• {item.content}")
        elif item.kind is ContentKind.NOTE:
            chunks.append(f"NOTE: {item.content}")
        else:
            chunks.append("")
    return "\n\n".join(chunks)


def _lines(text: str) -> list[str]:
    return str(text or "").replace("\r\n", "\n").split("\n")


def parse_contribution_lines(text: str) -> list[str]:
    return [item for item in (sanitize_list_item(line) for line in _lines(text)) if item]


def parse_future_lines(text: str) -> list[str]:
    return [item for item in (strip_bullet_marker(line) for line in _lines(text)) if item]


def parse_skills(text: str) -> list[str]:
    return [skill.strip() for skill in str(text or "").split(",") if skill.strip()]


def build_main_content(title, description, blocks, conclusion) -> MainContent | None:
    title = str(title or "").strip()
    description = str(description or "")
    conclusion = str(conclusion or "")
    normalized = [b for b in (Block.from_dict(raw) for raw in (blocks or [])) if b]

    if not (title or description.strip() or conclusion.strip() or normalized):
        return None
    if not title:
        raise ValueError(MAIN_CONTENT_TITLE_REQUIRED)
    return MainContent(title=title, description=description, blocks=normalized, conclusion=conclusion)


def _structured_or_text(payload: dict, list_key: str, text_key: str, parse) -> list:
    if text_key in payload:
        return parse(payload.get(text_key))
    raw = payload.get(list_key)
    if isinstance(raw, list):
        return raw
    return []


def detail_from_payload(project: ProjectSummary, payload: dict) -> ProjectDetail:
    """Build the detail record for ``project`` from an editor save request.

    Text fields (``overviewText``, ``contributionsText``, ``futureText``,
    ``skillsText``) win over the structured list keys when both are sent.
    Raises ValueError before anything is written when main content is
    incomplete.
    """
    if "overviewText" in payload:
        overview = parse_overview_text(payload.get("overviewText"))
    else:
        overview = ProjectDetail.from_dict({"projectId": project.id, "overview": payload.get("overview")}).overview

    raw_main = payload.get("mainContent")
    if isinstance(raw_main, dict):
        main_content = build_main_content(
            raw_main.get("title"),
            raw_main.get("description"),
            raw_main.get("blocks"),
            raw_main.get("conclusion"),
        )
    else:
        main_content = None

    contributions = _structured_or_text(payload, "keyContributions", "contributionsText", parse_contribution_lines)
    future = _structured_or_text(payload, "futureDevelopment", "futureText", parse_future_lines)
    skills = _structured_or_text(payload, "skills", "skillsText", parse_skills)

    partial = ProjectDetail.from_dict(
        {
            "projectId": project.id,
            "additionalImages": payload.get("additionalImages"),
            "links": payload.get("links"),
            "meta": payload.get("meta"),
        }
    )
    links = [link for link in partial.links if link.label.strip() or link.url.strip()]

    return ProjectDetail(
        project_id=project.id,
        hero_image=str(payload.get("heroImage") or "").strip() or project.image,
        meta=partial.meta,
        overview=overview,
        main_content=main_content,
        additional_images=partial.additional_images,
        key_contributions=[str(item) for item in contributions],
        future_development=[str(item) for item in future],
        skills=[str(item) for item in skills],
        links=links,
    )


def detail_to_form(detail: ProjectDetail) -> dict:
    main = detail.main_content
    return {
        "heroImage": detail.hero_image,
        "role": detail.meta.role or detail.meta.project_type,
        "company": detail.meta.company,
        "projectDate": detail.meta.project_date,
        "overviewText": overview_to_text(detail.overview),
        "contributionsText": "\n".join(detail.key_contributions),
        "futureText": "\n".join(detail.future_development),
        "skillsText": ", ".join(detail.skills),
        "mainContent": main.to_dict() if main else {"title": "", "description": "", "blocks": [], "conclusion": ""},
        "additionalImages": [img.to_dict() for img in detail.additional_images],
        "links": [link.to_dict() for link in detail.links],
    }
