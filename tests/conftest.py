from __future__ import annotations

from pathlib import Path

import pytest

from portfolio import EditorConfig, Portfolio

INDEX_HTML = """<!DOCTYPE html>
<html lang="en">
  <body>
    <section id="about" class="about sec-pad">
      <p>About me</p>
    </section>
    <section id="projects" class="projects sec-pad">
      <div class="main-container">
        <p>hand-written placeholder</p>
      </div>
    </section>
    <footer class="main-footer">Contact me</footer>
    <script src="./index.js"></script>
  </body>
</html>
"""


@pytest.fixture
def index_html() -> str:
    return INDEX_HTML


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    root = tmp_path / "site"
    root.mkdir()
    (root / "index.html").write_text(INDEX_HTML, encoding="utf-8")
    return root


@pytest.fixture
def portfolio(site_root: Path) -> Portfolio:
    return Portfolio(EditorConfig(root=site_root))
