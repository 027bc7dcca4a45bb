import pytest

import listing_section
from listing_section import (
    ListingMarkers,
    ListingNotFound,
    locate_listing,
    patch,
    render_row,
    wrap_description,
)
from portfolio_store import ProjectSummary


def _projects():
    return [
        ProjectSummary(id=2, title="Second", description="Plain text", image="./b.jpg", detail_page="./project-2.html"),
        ProjectSummary(
            id=1,
            title="First",
            description='<p class="projects__row-content-desc">Styled</p>',
            image="./a.jpg",
            image_style="object-position: top;",
            center_image=True,
            detail_page="./custom.html",
        ),
    ]


def test_patch_is_idempotent(index_html):
    once = patch(index_html, _projects())

    assert patch(once, _projects()) == once


def test_patch_preserves_bytes_outside_the_region(index_html):
    start, end = locate_listing(index_html)
    patched = patch(index_html, _projects())

    assert patched.startswith(index_html[:start])
    assert patched.endswith(index_html[end:])
    assert "hand-written placeholder" not in patched
    assert "<p>About me</p>" in patched
    assert '<footer class="main-footer">Contact me</footer>' in patched


def test_patch_keeps_crlf_and_odd_whitespace_outside_region():
    document = (
        "<html>\r\n\t<body>  \r\n"
        '<section id="projects" class="projects sec-pad">old</section>\r\n\r\n'
        '   <script src="./index.js"></script>\r\n</html>'
    )

    patched = patch(document, [])

    assert patched.startswith("<html>\r\n\t<body>  \r\n")
    assert patched.endswith('</section>\r\n\r\n   <script src="./index.js"></script>\r\n</html>')


def test_rows_follow_collection_order(index_html):
    patched = patch(index_html, _projects())

    assert patched.index(">Second</h3>") < patched.index(">First</h3>")
    reordered = patch(index_html, list(reversed(_projects())))
    assert reordered.index(">First</h3>") < reordered.index(">Second</h3>")


def test_empty_project_list_keeps_section_shell(index_html):
    patched = patch(index_html, [])

    assert '<span class="heading-sec__main">Projects</span>' in patched
    assert "projects__row" not in patched


def test_missing_start_marker_raises():
    with pytest.raises(ListingNotFound):
        patch('<html><script src="./index.js"></script></html>', [])


def test_missing_next_marker_raises():
    with pytest.raises(ListingNotFound):
        patch('<section id="projects" class="projects sec-pad"></section>', [])


def test_next_marker_before_start_is_not_used():
    document = '<script src="./index.js"></script><section id="projects" class="projects sec-pad"></section>'

    with pytest.raises(ListingNotFound):
        locate_listing(document)


def test_custom_markers():
    markers = ListingMarkers(start='<section id="work">', next_section="<!-- end work -->")
    document = '<body><section id="work">x</section>\n<!-- end work --></body>'

    patched = patch(document, [], markers)

    assert patched.startswith('<body><section id="work">\n')
    assert patched.endswith("</section>\n<!-- end work --></body>")


def test_row_markup_options():
    row = render_row(_projects()[1])

    assert '<div class="projects__row projects__row--center-img">' in row
    assert 'loading="lazy" style="object-position: top;"' in row
    assert 'href="./custom.html"' in row

    plain = render_row(_projects()[0])
    assert '<div class="projects__row">' in plain
    assert "style=" not in plain


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Hello", '<p class="projects__row-content-desc">Hello</p>'),
        ('<p class="projects__row-content-desc">Hi</p>', '<p class="projects__row-content-desc">Hi</p>'),
        ("<p class='projects__row-content-desc'>Hi</p>", "<p class='projects__row-content-desc'>Hi</p>"),
        ("<p>One</p><p>Two</p>", '<div class="projects__row-content-desc"><p>One</p><p>Two</p></div>'),
        ("Uses <pre>code</pre>", '<p class="projects__row-content-desc">Uses <pre>code</pre></p>'),
    ],
)
def test_wrap_description(raw, expected):
    assert wrap_description(raw) == expected


def test_apply_writes_patched_document(tmp_path, index_html):
    path = tmp_path / "index.html"
    path.write_text(index_html, encoding="utf-8")

    assert listing_section.apply(path, _projects()) is True
    assert path.read_text(encoding="utf-8") == patch(index_html, _projects())


def test_apply_leaves_document_untouched_when_markers_missing(tmp_path):
    path = tmp_path / "index.html"
    original = "<html><body>No listing here</body></html>"
    path.write_text(original, encoding="utf-8")

    assert listing_section.apply(path, _projects()) is False
    assert path.read_text(encoding="utf-8") == original


def test_apply_reports_missing_file(tmp_path):
    assert listing_section.apply(tmp_path / "absent.html", []) is False
