import pytest

from site_files import SiteFiles, UnsafePathError, is_generated_page, normalize_relative_path


@pytest.fixture
def files(tmp_path):
    root = tmp_path / "site"
    root.mkdir()
    return SiteFiles(root)


def test_delete_generated_page(files):
    page = files.root / "project-3.html"
    page.write_text("<html></html>", encoding="utf-8")

    result = files.delete_generated("./project-3.html")

    assert result.deleted is True
    assert not page.exists()


def test_delete_refuses_non_generated_page(files):
    page = files.root / "about.html"
    page.write_text("<html></html>", encoding="utf-8")

    result = files.delete_generated("./about.html")

    assert (result.deleted, result.reason) == (False, "not-generated")
    assert page.exists()


def test_delete_refuses_path_outside_root(files):
    outside = files.root.parent / "outside.html"
    outside.write_text("keep", encoding="utf-8")

    result = files.delete_generated("../outside.html")

    assert (result.deleted, result.reason) == (False, "unsafe-path")
    assert outside.exists()


def test_delete_refuses_generated_name_outside_root(files):
    outside = files.root.parent / "project-9.html"
    outside.write_text("keep", encoding="utf-8")

    assert files.delete_generated("../project-9.html").reason == "unsafe-path"
    assert outside.exists()


def test_delete_reports_missing_file(files):
    result = files.delete_generated("project-42.html")

    assert (result.deleted, result.reason) == (False, "not-found")
    assert result.to_dict() == {"deleted": False, "reason": "not-found"}


def test_delete_without_path(files):
    assert files.delete_generated(None).reason == "missing"
    assert files.delete_generated("  ").reason == "missing"


def test_generated_name_is_case_insensitive_basename():
    assert is_generated_page("./PROJECT-7.HTML")
    assert is_generated_page("pages/project-12.html")
    assert not is_generated_page("project-.html")
    assert not is_generated_page("project-3.html.bak")
    assert not is_generated_page("project-0.html")
    assert not is_generated_page("project-007.html")
    assert not is_generated_page("")


def test_normalize_relative_path():
    assert normalize_relative_path(" ./project-1.html ") == "project-1.html"
    assert normalize_relative_path(None) == ""
    assert normalize_relative_path("../x.html") == "../x.html"


def test_write_never_overwrites_by_default(files):
    assert files.write("./project-1.html", "first") is True
    assert files.write("./project-1.html", "second") is False
    assert (files.root / "project-1.html").read_text(encoding="utf-8") == "first"

    assert files.write("./project-1.html", "third", overwrite=True) is True
    assert (files.root / "project-1.html").read_text(encoding="utf-8") == "third"


def test_write_creates_subdirectories(files):
    files.write("pages/project-2.html", "x")

    assert (files.root / "pages" / "project-2.html").exists()


@pytest.mark.parametrize("bad", ["../escape.html", "pages/../../escape.html", "/etc/passwd", "", "."])
def test_write_refuses_paths_outside_root(files, bad):
    with pytest.raises(UnsafePathError):
        files.write(bad, "x")
    assert not (files.root.parent / "escape.html").exists()


def test_next_project_number_checks_records_and_files(files):
    (files.root / "project-7.html").write_text("x", encoding="utf-8")

    assert files.next_project_number(["./project-2.html", "./custom.html"]) == 8
    assert files.next_project_number(["./project-11.html"]) == 12


def test_next_project_number_starts_at_one(files):
    assert files.next_project_number([]) == 1
