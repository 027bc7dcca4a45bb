from types import SimpleNamespace

import pytest
from openai import OpenAIError

from suggestions import (
    OpenAISuggestionService,
    SectionKind,
    SuggestionError,
    SuggestionMode,
    SuggestionRequest,
    normalize_list_lines,
)


class FakeCompletions:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _service(reply=None, error=None):
    completions = FakeCompletions(reply, error)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAISuggestionService(api_key="", model="test-model", client=client), completions


def test_not_configured_without_key():
    service = OpenAISuggestionService(api_key="")

    with pytest.raises(SuggestionError) as info:
        service.suggest(SuggestionRequest(subject="Rover", mode=SuggestionMode.DRAFT))
    assert info.value.reason == "not-configured"


def test_polish_needs_enough_text():
    service, completions = _service("unused")

    with pytest.raises(SuggestionError) as info:
        service.suggest(SuggestionRequest(subject="Rover", mode=SuggestionMode.POLISH, current_content=" short "))
    assert info.value.reason == "too-short"
    assert completions.calls == []


def test_draft_returns_trimmed_reply():
    service, completions = _service("  <p>A rover.</p>\n")

    result = service.suggest(SuggestionRequest(subject="Rover", mode=SuggestionMode.DRAFT, current_content="notes"))

    assert result == "<p>A rover.</p>"
    call = completions.calls[0]
    assert call["model"] == "test-model"
    assert "Project Title: Rover" in call["messages"][1]["content"]
    assert "Current Notes/Description: notes" in call["messages"][1]["content"]


def test_list_generate_normalizes_contributions():
    service, _ = _service("<ul>\n<li>- Built it</li>\n<li>2. Shipped it</li>\n</ul>")

    result = service.suggest(
        SuggestionRequest(subject="Rover", mode=SuggestionMode.LIST_GENERATE, section_kind=SectionKind.CONTRIBUTIONS)
    )

    assert result == "Built it\nShipped it"


def test_list_generate_skills_is_returned_as_is():
    service, _ = _service("Python, C")

    result = service.suggest(
        SuggestionRequest(subject="Rover", mode=SuggestionMode.LIST_GENERATE, section_kind=SectionKind.SKILLS)
    )

    assert result == "Python, C"


def test_upstream_failure_is_wrapped():
    service, _ = _service(error=OpenAIError("quota exceeded"))

    with pytest.raises(SuggestionError) as info:
        service.suggest(SuggestionRequest(subject="Rover", mode=SuggestionMode.DRAFT))
    assert info.value.reason == "upstream-error"
    assert "quota exceeded" in str(info.value)


def test_request_from_payload():
    request = SuggestionRequest.from_payload(
        {"subject": " Rover ", "mode": "listGenerate", "sectionKind": "future", "currentContent": None}
    )

    assert request.subject == "Rover"
    assert request.mode is SuggestionMode.LIST_GENERATE
    assert request.section_kind is SectionKind.FUTURE
    assert request.current_content == ""


@pytest.mark.parametrize(
    "payload",
    [{"subject": "x", "mode": "rewrite"}, {"subject": "x", "sectionKind": "links"}, {"subject": " "}],
)
def test_request_from_payload_rejects_bad_values(payload):
    with pytest.raises(ValueError):
        SuggestionRequest.from_payload(payload)


def test_normalize_list_lines_plain_text():
    assert normalize_list_lines("• one\n\n* two\n3) three") == "one\ntwo\nthree"
    assert normalize_list_lines(None) == ""
