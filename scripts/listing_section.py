"""Regenerate the project listing inside the hand-authored index page.

The listing region is found by two marker strings rather than by parsing the
document, so every byte outside the region survives a rewrite untouched:

1. ``start`` is the opening tag of the listing section;
2. ``next_section`` is the first marker after it that belongs to unrelated
   markup;
3. scanning back from ``next_section``, the nearest ``</section>`` closes the
   region.

The replacement section begins exactly at the start marker (the document keeps
its own indentation before it) and ends with ``</section>``, which makes a
second patch with the same projects a no-op.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from portfolio_store import ProjectSummary

logger = logging.getLogger(__name__)

SECTION_CLOSE = "</section>"
DESC_CLASS = "projects__row-content-desc"
PARAGRAPH_TAG_RE = re.compile(r"<p[\s>]", re.IGNORECASE)


class ListingNotFound(ValueError):
    pass


@dataclass(frozen=True)
class ListingMarkers:
    start: str = '<section id="projects" class="projects sec-pad">'
    next_section: str = '<script src="./index.js">'


DEFAULT_MARKERS = ListingMarkers()


def locate_listing(document: str, markers: ListingMarkers = DEFAULT_MARKERS) -> tuple[int, int]:
    start = document.find(markers.start)
    if start == -1:
        raise ListingNotFound(f"listing start marker not found: {markers.start}")
    next_start = document.find(markers.next_section, start)
    if next_start == -1:
        raise ListingNotFound(f"next section marker not found: {markers.next_section}")
    close = document.rfind(SECTION_CLOSE, start, next_start)
    if close == -1:
        raise ListingNotFound("no closing </section> before the next section marker")
    return start, close + len(SECTION_CLOSE)


def wrap_description(raw: str) -> str:
    if PARAGRAPH_TAG_RE.search(raw):
        if f'class="{DESC_CLASS}' in raw or f"class='{DESC_CLASS}" in raw:
            return raw
        return f'<div class="{DESC_CLASS}">{raw}</div>'
    return f'<p class="{DESC_CLASS}">{raw}</p>'


def render_row(project: ProjectSummary) -> str:
    image_style = f' style="{project.image_style}"' if project.image_style else ""
    center_class = " projects__row--center-img" if project.center_image else ""
    return f"""        <div class="projects__row{center_class}">
          <div class="projects__row-img-cont">
            <img
              src="{project.image}"
              alt="{project.title}"
              class="projects__row-img"
              loading="lazy"{image_style}
            />
          </div>
          <div class="projects__row-content">
            <h3 class="projects__row-content-title">{project.title}</h3>
            {wrap_description(project.description)}
            <a
              href="{project.detail_page}"
              class="btn btn--med btn--theme dynamicBgClr"
              target="_blank"
              >More Details</a
            >
          </div>
        </div>"""


def render_section(projects: list[ProjectSummary], markers: ListingMarkers = DEFAULT_MARKERS) -> str:
    rows = "\n".join(render_row(project) for project in projects)
    return f"""{markers.start}
      <div class="main-container">
        <h2 class="heading heading-sec heading-sec__mb-bg">
          <span class="heading-sec__main">Projects</span>
        </h2>
{rows}
      </div>
    {SECTION_CLOSE}"""


def patch(document: str, projects: list[ProjectSummary], markers: ListingMarkers = DEFAULT_MARKERS) -> str:
    start, end = locate_listing(document, markers)
    return document[:start] + render_section(projects, markers) + document[end:]


def apply(path: Path, projects: list[ProjectSummary], markers: ListingMarkers = DEFAULT_MARKERS) -> bool:
    """Patch the listing in ``path``; False when the document can't be patched."""
    path = Path(path)
    if not path.exists():
        logger.error("Listing document %s does not exist", path)
        return False
    # newline="" keeps CRLF documents byte-identical outside the region
    with path.open(encoding="utf-8", newline="") as handle:
        document = handle.read()
    try:
        updated = patch(document, projects, markers)
    except ListingNotFound as exc:
        logger.error("Could not find projects section markers in %s: %s", path, exc)
        return False
    if updated != document:
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(updated)
    logger.info("Generated %s with %d projects", path.name, len(projects))
    return True
