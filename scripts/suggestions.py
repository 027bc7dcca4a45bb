"""Draft and polish project text with an OpenAI chat model.

The editor consults this before a save; rendering never calls it. Output is
plain string content that flows into ordinary description or detail fields.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from enum import Enum

from openai import OpenAI, OpenAIError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
MIN_POLISH_LENGTH = 10

LI_ITEM_RE = re.compile(r"<li[^>]*>([\s\S]*?)</?li>", re.IGNORECASE)
LIST_WRAPPER_RE = re.compile(r"</?(ul|ol)[^>]*>", re.IGNORECASE)
STRAY_LI_RE = re.compile(r"</?li[^>]*>", re.IGNORECASE)
BULLET_MARKER_RE = re.compile(r"^\s*(?:[-*•]+(?:\s+|$)|\d+[.)](?:\s+|$))")

WRITER_ROLE = "You are a professional technical writer specializing in portfolio case studies."
COPYWRITER_ROLE = (
    "You are a professional copywriter specializing in portfolio project descriptions. "
    "You write concise, impactful descriptions that showcase technical projects effectively."
)
EDITOR_ROLE = (
    "You are a professional editor specializing in polishing technical writing. You improve "
    "clarity and professionalism while preserving the author's original meaning and voice."
)
NO_LIST_MARKUP = """Formatting rules:
- Do not use <ul>, <ol>, or <li> tags
- Do not include bullet characters like '-', '*', or '•'
- Output one item per line"""


class SuggestionMode(str, Enum):
    DRAFT = "draft"
    POLISH = "polish"
    LIST_GENERATE = "listGenerate"


class SectionKind(str, Enum):
    OVERVIEW = "overview"
    CONTRIBUTIONS = "contributions"
    FUTURE = "future"
    SKILLS = "skills"


class SuggestionError(Exception):
    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason


@dataclass
class SuggestionRequest:
    subject: str
    mode: SuggestionMode
    current_content: str = ""
    section_kind: SectionKind | None = None
    context: str = ""

    @classmethod
    def from_payload(cls, payload: dict) -> "SuggestionRequest":
        try:
            mode = SuggestionMode(str(payload.get("mode", "draft")).strip())
        except ValueError:
            raise ValueError("mode must be draft, polish, or listGenerate") from None
        raw_section = str(payload.get("sectionKind") or "").strip()
        try:
            section = SectionKind(raw_section) if raw_section else None
        except ValueError:
            raise ValueError("sectionKind must be overview, contributions, future, or skills") from None
        subject = str(payload.get("subject", "")).strip()
        if not subject:
            raise ValueError("subject is required")
        return cls(
            subject=subject,
            mode=mode,
            current_content=str(payload.get("currentContent") or ""),
            section_kind=section,
            context=str(payload.get("context") or ""),
        )


def normalize_list_lines(value) -> str:
    """Turn list-ish model output into one clean item per line."""
    if value is None:
        return ""
    text = str(value).strip()
    items = [match.strip() for match in LI_ITEM_RE.findall(text)]
    if items:
        text = "\n".join(items)
    text = LIST_WRAPPER_RE.sub("", text).strip()
    text = STRAY_LI_RE.sub("", text).strip()
    lines = (BULLET_MARKER_RE.sub("", line, count=1).strip() for line in text.splitlines())
    return "\n".join(line for line in lines if line)


def _context_line(context: str) -> str:
    return f"Context: {context}\n" if context.strip() else ""


def draft_prompt(request: SuggestionRequest) -> str:
    notes = request.current_content.strip()
    return f"""Write a professional, engaging project description for a portfolio website.

Project Title: {request.subject}
{f"Current Notes/Description: {notes}" if notes else "No current description provided."}

Write 2-3 short paragraphs (under 150 words) that highlight the project's purpose and
impact and mention key technologies. Use <p> tags for paragraphs and <strong> for emphasis.

Return only the HTML-formatted description."""


def polish_prompt(request: SuggestionRequest) -> str:
    section = request.section_kind
    if section is SectionKind.CONTRIBUTIONS:
        return f"""Polish these key contribution points for a portfolio case study.

Project: {request.subject}

Current contributions:
{request.current_content}

Fix grammar and phrasing, start each point with a strong action verb, use <strong> for key
terms and keep the same number of points.

{NO_LIST_MARKUP}

Return only the polished points, one per line."""
    if section is SectionKind.FUTURE:
        return f"""Polish these future development ideas for a portfolio project.

Project: {request.subject}

Current ideas:
{request.current_content}

Fix grammar and phrasing, keep them realistic and keep the same number of ideas.

Return only the polished ideas, one per line, without bullet markers."""
    label = "project overview" if section is SectionKind.OVERVIEW else "project description"
    return f"""Polish and enhance the following {label} for a portfolio website.

Project: {request.subject}

Current text (may be a rough draft or notes):
{request.current_content}

Fix grammar, spelling and awkward phrasing while keeping the original meaning, technical
details and a similar length. Use <p> tags for paragraphs and <strong> for emphasis.

Return only the polished HTML-formatted text."""


def list_generate_prompt(request: SuggestionRequest) -> str:
    section = request.section_kind or SectionKind.OVERVIEW
    header = f"Project: {request.subject}\n{_context_line(request.context)}"
    if section is SectionKind.CONTRIBUTIONS:
        return f"""Write 3-5 key contribution points for a portfolio case study.

{header}
Start each with an action verb, mention technologies where relevant and use <strong> for
key terms.

{NO_LIST_MARKUP}

Return only the points, one per line."""
    if section is SectionKind.SKILLS:
        return f"""List 5-10 technical skills or tools used in a portfolio project.

{header}
Return only a comma-separated list."""
    if section is SectionKind.FUTURE:
        return f"""Write 2-4 realistic future development ideas for a portfolio project.

{header}
Return only plain text ideas, one per line."""
    return f"""Write a detailed project overview for a portfolio case study page.

{header}
Write 2-4 paragraphs (150-300 words) explaining what the project does, the problem it
solves and its key technical features. Use <strong> for emphasis.

Current draft (if any): {request.current_content or "None"}

Return only the HTML-formatted overview text."""


class OpenAISuggestionService:
    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, client=None):
        self.api_key = api_key
        self.model = model or DEFAULT_MODEL
        self._client = client

    @classmethod
    def from_env(cls) -> "OpenAISuggestionService":
        return cls(
            api_key=os.environ.get("OPENAI_API_KEY", "").strip(),
            model=os.environ.get("OPENAI_MODEL", "").strip() or DEFAULT_MODEL,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key) or self._client is not None

    def _get_client(self):
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def _messages(self, request: SuggestionRequest) -> tuple[str, str, float, int]:
        if request.mode is SuggestionMode.DRAFT:
            return COPYWRITER_ROLE, draft_prompt(request), 0.7, 500
        if request.mode is SuggestionMode.POLISH:
            return EDITOR_ROLE, polish_prompt(request), 0.5, 800
        return WRITER_ROLE, list_generate_prompt(request), 0.7, 800

    def suggest(self, request: SuggestionRequest) -> str:
        if not self.configured:
            raise SuggestionError(
                "not-configured",
                "OpenAI API key not configured. Please add OPENAI_API_KEY to your .env file.",
            )
        if request.mode is SuggestionMode.POLISH and len(request.current_content.strip()) < MIN_POLISH_LENGTH:
            raise SuggestionError(
                "too-short",
                "Please write at least a few sentences before enhancing.",
            )

        system, prompt, temperature, max_tokens = self._messages(request)
        try:
            completion = self._get_client().chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except OpenAIError as exc:
            logger.error("OpenAI error: %s", exc)
            raise SuggestionError("upstream-error", f"Failed to generate content: {exc}") from exc

        content = (completion.choices[0].message.content or "").strip()
        if request.mode is SuggestionMode.LIST_GENERATE and request.section_kind in {
            SectionKind.CONTRIBUTIONS,
            SectionKind.FUTURE,
        }:
            return normalize_list_lines(content)
        return content
