import pytest

from detail_page import (
    PageChrome,
    render,
    render_meta,
    sanitize_list_item,
    split_paragraphs,
    strip_bullet_marker,
)
from portfolio_store import (
    Block,
    ContentItem,
    ContentKind,
    LegacyImage,
    MainContent,
    ProjectDetail,
    ProjectLink,
    ProjectMeta,
)


def test_minimal_detail_renders_a_complete_document():
    html = render(ProjectDetail(project_id=1), "Empty Project", "./fallback.jpg")

    assert html.startswith("<!DOCTYPE html>")
    assert html.rstrip().endswith("</html>")
    assert "<title>More Details on Empty Project</title>" in html
    assert 'src="./fallback.jpg"' in html
    assert "Project Overview" in html
    for absent in ("project-details__main-content", ">Images<", "Key Contributions", "Future Development",
                   "Skills and Tools Used", "Project Links"):
        assert absent not in html


def test_hero_image_wins_over_fallback():
    html = render(ProjectDetail(project_id=1, hero_image="./hero.png"), "T", "./fallback.jpg")

    assert 'src="./hero.png"' in html
    assert "fallback.jpg" not in html


def test_meta_prefers_role_then_project_type():
    assert render_meta(ProjectMeta(role="Lead", project_type="Thesis", company="ACME", project_date="2024")) == (
        "<strong>Role:</strong> Lead<br><strong>Company:</strong> ACME<br><strong>Project Date:</strong> 2024"
    )
    assert render_meta(ProjectMeta(project_type="Thesis")) == "<strong>Project Type:</strong> Thesis<br>"
    assert render_meta(ProjectMeta()) == ""


def test_overview_items_render_in_order_without_merging_bullets():
    detail = ProjectDetail(
        project_id=1,
        overview=[
            ContentItem(ContentKind.HEADING, "Goal"),
            ContentItem(ContentKind.BULLET, "one"),
            ContentItem(ContentKind.BULLET, "two"),
            ContentItem(ContentKind.NOTE, "beta only"),
            ContentItem(ContentKind.IMAGE, src="./shot.png", caption="Screenshot"),
            ContentItem(ContentKind.PARAGRAPH, "Closing"),
        ],
    )

    html = render(detail, "T")

    assert html.count('<ul class="project-details__desc-list" style="margin-bottom: 1rem;">') == 2
    assert "<li>one</li></ul><ul" in html
    assert "<strong>Goal</strong>" in html
    assert "<strong>NOTE:</strong> beta only" in html
    assert 'src="./shot.png"' in html
    assert '<p class="projects__row-content-desc">Screenshot</p>' in html
    assert html.index("Goal") < html.index("<li>one<") < html.index("<li>two<") < html.index("beta only") < html.index("Closing")


def test_main_content_supersedes_legacy_images():
    detail = ProjectDetail(
        project_id=1,
        main_content=MainContent(title="How it works", blocks=[Block(subtitle="Step 1")]),
        additional_images=[LegacyImage(src="./legacy.png", caption="Old")],
    )

    html = render(detail, "T")

    assert "How it works" in html
    assert "legacy.png" not in html
    assert ">Images<" not in html


def test_legacy_images_render_without_main_content():
    detail = ProjectDetail(
        project_id=1,
        main_content=MainContent(title="   ", description="ignored"),
        additional_images=[LegacyImage(src="./legacy.png", caption="Old")],
    )

    html = render(detail, "T")

    assert "ignored" not in html
    assert '<p class="project-details__image-title">Old</p>' in html
    assert 'src="./legacy.png"' in html


def test_main_content_paragraphs_and_blocks():
    detail = ProjectDetail(
        project_id=1,
        main_content=MainContent(
            title="Build",
            description="First para.\n\n\n  Second para.  ",
            blocks=[
                Block(subtitle="Wiring", image_src="./wire.png", description="Soldered."),
                Block(),
            ],
            conclusion="Done.",
        ),
    )

    html = render(detail, "T")

    assert '<p class="projects__row-content-desc2">First para.</p><p class="projects__row-content-desc2">Second para.</p>' in html
    assert html.count("project-details__main-content-block") == 1
    assert '<h4 class="project-details__content-subtitle">Wiring</h4>' in html
    assert html.index("Wiring") < html.index("wire.png") < html.index("Soldered.") < html.index("Done.")


def test_list_sections_are_sanitized_and_empty_items_dropped():
    detail = ProjectDetail(
        project_id=1,
        key_contributions=["<ul><li>Built <strong>X</strong></li></ul>", "- Shipped it", "  ", "•"],
        future_development=["1. Add tests", "2) Port to ARM"],
    )

    html = render(detail, "T")

    assert "<li>Built <strong>X</strong></li>" in html
    assert "<li>Shipped it</li>" in html
    assert "<li></li>" not in html
    assert "<li>Add tests</li>" in html
    assert "<li>Port to ARM</li>" in html


def test_list_section_left_out_when_every_item_is_blank():
    html = render(ProjectDetail(project_id=1, key_contributions=["", "- "]), "T")

    assert "Key Contributions" not in html


def test_skills_keep_order_and_duplicates():
    html = render(ProjectDetail(project_id=1, skills=["Python", "C", "Python"]), "T")

    assert html.count('<div class="skills__skill">Python</div>') == 2
    assert html.index(">Python<") < html.index(">C<")


def test_links_are_emitted_verbatim():
    detail = ProjectDetail(project_id=1, links=[ProjectLink(label="Repo & Docs", url="https://example.com/?a=1&b=2")])

    html = render(detail, "T")

    assert 'href="https://example.com/?a=1&b=2"' in html
    assert ">Repo & Docs</a" in html
    assert 'target="_blank"' in html


def test_chrome_controls_header():
    html = render(ProjectDetail(project_id=1), "T", chrome=PageChrome(owner_name="Ada Lovelace"))

    assert '<span class="header__logo-sub">Ada Lovelace</span>' in html


def test_render_is_deterministic():
    detail = ProjectDetail(project_id=1, skills=["a"], overview=[ContentItem(ContentKind.PARAGRAPH, "x")])

    assert render(detail, "T") == render(detail, "T")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("<ul><li>Built <strong>X</strong></li></ul>", "Built <strong>X</strong>"),
        ("<ol class='x'><li class='y'>Item</li></ol>", "Item"),
        ("* starred", "starred"),
        ("• dotted", "dotted"),
        ("12. numbered", "numbered"),
        ("-no space kept", "-no space kept"),
        (None, ""),
    ],
)
def test_sanitize_list_item(raw, expected):
    assert sanitize_list_item(raw) == expected


def test_strip_bullet_marker_leaves_markup():
    assert strip_bullet_marker("- <li>x</li>") == "<li>x</li>"


def test_split_paragraphs():
    assert split_paragraphs("a\nb\n\n  \n c ") == ["a\nb", "c"]
    assert split_paragraphs("   ") == []
    assert split_paragraphs(None) == []
