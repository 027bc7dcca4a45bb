"""Render a standalone project detail page from a ProjectDetail record.

Every section except the title block is optional and is left out entirely when
its source data is empty. Record text is emitted verbatim: descriptions and list
items may carry inline HTML written by hand or returned by the suggestion
service.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from portfolio_store import (
    PLACEHOLDER_IMAGE,
    Block,
    ContentItem,
    ContentKind,
    LegacyImage,
    MainContent,
    ProjectDetail,
    ProjectLink,
    ProjectMeta,
)

PARAGRAPH_BREAK_RE = re.compile(r"\n\s*\n+")
LIST_WRAPPER_RE = re.compile(r"</?(ul|ol)[^>]*>", re.IGNORECASE)
LEADING_LI_RE = re.compile(r"^\s*<li[^>]*>\s*", re.IGNORECASE)
TRAILING_LI_RE = re.compile(r"\s*</?li>\s*$", re.IGNORECASE)
BULLET_MARKER_RE = re.compile(r"^\s*(?:[-*•]+(?:\s+|$)|\d+[.)](?:\s+|$))")

DESC_CLASS = "projects__row-content-desc2"


@dataclass(frozen=True)
class PageChrome:
    owner_name: str = "Portfolio"
    logo_src: str = "./assets/png/logo.png"
    stylesheet: str = "css/style.css"
    script_src: str = "./index.js"
    home_href: str = "./index.html"


DEFAULT_CHROME = PageChrome()


def strip_bullet_marker(value) -> str:
    if value is None:
        return ""
    return BULLET_MARKER_RE.sub("", str(value).strip(), count=1).strip()


def sanitize_list_item(value) -> str:
    """Reduce a list entry to its inner markup.

    Drops <ul>/<ol> wrappers and an enclosing <li> that upstream text may still
    carry, then any leading bullet marker.
    """
    if value is None:
        return ""
    text = LIST_WRAPPER_RE.sub("", str(value).strip()).strip()
    text = LEADING_LI_RE.sub("", text, count=1)
    text = TRAILING_LI_RE.sub("", text, count=1).strip()
    return strip_bullet_marker(text)


def split_paragraphs(value) -> list[str]:
    if value is None:
        return []
    text = str(value).strip()
    if not text:
        return []
    return [part.strip() for part in PARAGRAPH_BREAK_RE.split(text) if part.strip()]


def render_paragraphs(value, class_name: str = DESC_CLASS) -> str:
    return "".join(f'<p class="{class_name}">{part}</p>' for part in split_paragraphs(value))


def _image_container(src: str, container_class: str, indent: str) -> str:
    return f"""
{indent}<div class="{container_class}">
{indent}  <img
{indent}    src="{src}"
{indent}    alt="Project Image"
{indent}    class="project-details__showcase-img"
{indent}  />
{indent}</div>"""


def render_meta(meta: ProjectMeta) -> str:
    out = ""
    if meta.role or meta.project_type:
        label = "Role" if meta.role else "Project Type"
        out += f"<strong>{label}:</strong> {meta.role or meta.project_type}<br>"
    if meta.company:
        out += f"<strong>Company:</strong> {meta.company}<br>"
    if meta.project_date:
        out += f"<strong>Project Date:</strong> {meta.project_date}"
    return out


def _render_paragraph(item: ContentItem) -> str:
    return f'<p class="{DESC_CLASS}">{item.content}</p>'


def _render_heading(item: ContentItem) -> str:
    return f'<p class="{DESC_CLASS}"><strong>{item.content}</strong></p>'


def _render_bullet(item: ContentItem) -> str:
    return f'<ul class="project-details__desc-list" style="margin-bottom: 1rem;"><li>{item.content}</li></ul>'


def _render_note(item: ContentItem) -> str:
    return f'<p class="{DESC_CLASS}"><strong>NOTE:</strong> {item.content}</p>'


def _render_image(item: ContentItem) -> str:
    out = _image_container(item.src, "project-details__showcase-img-cont3", "              ")
    if item.caption:
        out += f'<p class="projects__row-content-desc">{item.caption}</p>'
    return out


OVERVIEW_RENDERERS = {
    ContentKind.PARAGRAPH: _render_paragraph,
    ContentKind.HEADING: _render_heading,
    ContentKind.BULLET: _render_bullet,
    ContentKind.NOTE: _render_note,
    ContentKind.IMAGE: _render_image,
}


def render_overview(items: list[ContentItem]) -> str:
    return "".join(OVERVIEW_RENDERERS[item.kind](item) for item in items)


def render_block(block: Block) -> str:
    subtitle = block.subtitle.strip()
    description = block.description.strip()
    image_src = block.image_src.strip()
    if not (subtitle or description or image_src):
        return ""
    out = '<div class="project-details__main-content-block">'
    if subtitle:
        out += f'<h4 class="project-details__content-subtitle">{subtitle}</h4>'
    if image_src:
        out += _image_container(image_src, "project-details__showcase-img-cont3", "                ")
    if description:
        out += render_paragraphs(description)
    return out + "</div>"


def render_main_content(main_content: MainContent | None) -> str:
    if main_content is None or not main_content.title.strip():
        return ""
    blocks = "".join(render_block(block) for block in main_content.blocks)
    return f"""
            <div class="project-details__tools-used project-details__main-content">
              <h3 class="project-details__content-title">{main_content.title.strip()}</h3>
              {render_paragraphs(main_content.description)}
              {blocks}
              {render_paragraphs(main_content.conclusion)}
            </div>"""


def render_legacy_images(images: list[LegacyImage]) -> str:
    if not images:
        return ""
    out = ""
    for image in images:
        caption = image.caption.strip()
        if caption:
            out += f'<p class="project-details__image-title">{caption}</p>'
        out += _image_container(image.src, "project-details__showcase-img-cont", "            ")
    return f"""
            <div class="project-details__tools-used">
              <h3 class="project-details__content-title">Images</h3>
              {out}
            </div>"""


def render_list_section(title: str, items: list[str]) -> str:
    cleaned = [text for text in (sanitize_list_item(item) for item in items) if text]
    if not cleaned:
        return ""
    rows = "\n                ".join(f"<li>{text}</li>" for text in cleaned)
    return f"""
            <div class="project-details__tools-used">
              <h3 class="project-details__content-title">{title}</h3>
              <ul class="project-details__desc-list">
                {rows}
              </ul>
            </div>"""


def render_skills(skills: list[str]) -> str:
    if not skills:
        return ""
    tags = "\n                ".join(f'<div class="skills__skill">{skill}</div>' for skill in skills)
    return f"""
            <div class="project-details__tools-used">
              <h3 class="project-details__content-title">Skills and Tools Used</h3>
              <div class="skills">
                {tags}
              </div>
            </div>"""


def render_links(links: list[ProjectLink]) -> str:
    if not links:
        return ""
    buttons = "\n              ".join(
        f"""
              <a
                href="{link.url}"
                class="btn btn--med btn--theme project-details__links-btn"
                target="_blank"
                >{link.label}</a
              >"""
        for link in links
    )
    return f"""
            <div class="project-details__links">
              <h3 class="project-details__content-title">Project Links</h3>
              {buttons}
            </div>"""


def render_header(chrome: PageChrome) -> str:
    home = chrome.home_href
    return f"""    <header class="header">
      <div class="header__content">
        <div class="header__logo-container">
          <div class="header__logo-img-cont">
            <img
              src="{chrome.logo_src}"
              class="header__logo-img"
            />
          </div>
          <span class="header__logo-sub">{chrome.owner_name}</span>
        </div>
        <div class="header__main">
          <ul class="header__links">
            <li class="header__link-wrapper">
              <a href="{home}" class="header__link"> Home </a>
            </li>
            <li class="header__link-wrapper">
              <a href="{home}#about" class="header__link">About </a>
            </li>
            <li class="header__link-wrapper">
              <a href="{home}#projects" class="header__link">
                Projects
              </a>
            </li>
          </ul>
          <div class="header__main-ham-menu-cont">
            <img
              src="./assets/svg/ham-menu.svg"
              alt="hamburger menu"
              class="header__main-ham-menu"
            />
            <img
              src="./assets/svg/ham-menu-close.svg"
              alt="hamburger menu close"
              class="header__main-ham-menu-close d-none"
            />
          </div>
        </div>
      </div>
      <div class="header__sm-menu">
        <div class="header__sm-menu-content">
          <ul class="header__sm-menu-links">
            <li class="header__sm-menu-link">
              <a href="{home}"> Home </a>
            </li>

            <li class="header__sm-menu-link">
              <a href="{home}#about"> About </a>
            </li>

            <li class="header__sm-menu-link">
              <a href="{home}#projects"> Projects </a>
            </li>
          </ul>
        </div>
      </div>
    </header>"""


def render(
    detail: ProjectDetail,
    project_title: str,
    hero_fallback: str = PLACEHOLDER_IMAGE,
    chrome: PageChrome = DEFAULT_CHROME,
) -> str:
    main_content = render_main_content(detail.main_content)
    # Legacy images are superseded by the main content section.
    legacy_images = "" if main_content else render_legacy_images(detail.additional_images)
    hero = detail.hero_image or hero_fallback

    return f"""<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <meta http-equiv="X-UA-Compatible" content="ie=edge" />
    <title>More Details on {project_title}</title>
    <meta name="description" content="Case study page of Project" />

    <link rel="stylesheet" href="{chrome.stylesheet}" />

    <link rel="preconnect" href="https://fonts.googleapis.com" />
    <link rel="preconnect" href="https://fonts.gstatic.com" crossorigin />
    <link
      href="https://fonts.googleapis.com/css2?family=Source+Sans+Pro:wght@400;600;700;900&display=swap"
      rel="stylesheet"
    />
  </head>
  <body>
{render_header(chrome)}
    <section class="project-details">
      <div class="main-container">
        <div class="project-details__content">
          <div class="project-details__showcase-img-cont">
            <img
              src="{hero}"
              alt="Project Image"
              class="project-details__showcase-img"
            />
          </div>
          <div class="project-details__content-main">
            <div class="project-details__desc">
              <h3 class="project-details__content-title--big">{project_title}</h3>
              <p class="project-details__desc-para">
                {render_meta(detail.meta)}
              </p>
            </div>
            <div class="project-details__tools-used">
              <h3 class="project-details__content-title">Project Overview</h3>
              {render_overview(detail.overview)}
            </div>
            {main_content}
            {legacy_images}
            {render_list_section("Key Contributions", detail.key_contributions)}
            {render_list_section("Future Development", detail.future_development)}
            {render_skills(detail.skills)}
            {render_links(detail.links)}
          </div>
        </div>
      </div>
    </section>
    <script src="{chrome.script_src}"></script>
  </body>
</html>"""
