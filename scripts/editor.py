#!/usr/bin/env python3
"""Local editor for the portfolio's project cards and detail pages.

Run:
  python3 scripts/editor.py

Open:
  http://127.0.0.1:8787/admin
"""

from __future__ import annotations

import argparse
import functools
import json
import logging
import os
import re
from http import HTTPStatus
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from urllib.parse import urlparse

from dotenv import load_dotenv

from detail_page import PageChrome
from portfolio import EditorConfig, Portfolio
from portfolio_store import NotFoundError
from suggestions import OpenAISuggestionService, SuggestionError, SuggestionRequest

ROOT = Path(__file__).resolve().parent.parent
HOST = "127.0.0.1"
PORT = 8787

logger = logging.getLogger("editor")

PROJECT_ROUTE = re.compile(r"^/api/projects/(-?\d+)$")
DETAIL_ROUTE = re.compile(r"^/api/project-details/(-?\d+)$")
DETAIL_GENERATE_ROUTE = re.compile(r"^/api/project-details/(-?\d+)/generate$")


def admin_page() -> str:
    return r"""<!doctype html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>Portfolio Editor</title>
  <style>
    :root { --ink:#242424; --muted:#6b6b6b; --line:#e6e6e6; --bg:#fff; --green:#1a8917; }
    * { box-sizing:border-box; }
    body { margin:0; background:var(--bg); color:var(--ink); font:400 0.95rem Inter, system-ui, sans-serif; }
    .topbar { position:sticky; top:0; z-index:10; background:#fff; border-bottom:1px solid var(--line); }
    .topbar-inner { max-width:1260px; margin:0 auto; padding:12px 20px; display:flex; justify-content:space-between; align-items:center; gap:12px; }
    .brand { font-weight:700; font-size:1.05rem; }
    .controls { display:flex; gap:10px; align-items:center; }
    .btn { border:1px solid var(--line); border-radius:999px; padding:8px 12px; background:#fff; cursor:pointer; font:500 0.88rem Inter, system-ui, sans-serif; }
    .btn-main { border:none; background:var(--green); color:#fff; }
    .btn-dark { border:none; background:#242424; color:#fff; }
    .btn-danger { border-color:#ffd8d8; color:#b71c1c; }
    .shell { max-width:1260px; margin:0 auto; padding:20px; display:grid; grid-template-columns:340px minmax(0, 1fr); gap:22px; }
    .card { border:1px solid var(--line); border-radius:10px; padding:14px; background:#fff; margin-bottom:18px; }
    .card h3 { margin:0 0 10px; font-size:0.95rem; }
    label { display:block; margin:10px 0 6px; color:var(--muted); font-size:0.8rem; }
    input[type="text"], textarea { width:100%; border:1px solid var(--line); border-radius:8px; padding:10px 12px; font:400 0.93rem Inter, system-ui, sans-serif; }
    textarea { min-height:110px; resize:vertical; }
    .row { display:flex; gap:8px; margin-top:10px; flex-wrap:wrap; }
    .status { margin-top:12px; font-size:0.88rem; }
    .ok { color:#1a8917; } .err { color:#c62828; }
    .items { display:grid; gap:10px; max-height:78vh; overflow:auto; }
    .item { border:1px solid var(--line); border-radius:8px; padding:10px; }
    .item b { display:block; margin-bottom:4px; }
    .block { border:1px dashed var(--line); border-radius:8px; padding:10px; margin-top:10px; }
    .hidden { display:none; }
    @media (max-width:1000px){ .shell{ grid-template-columns:1fr; } }
  </style>
</head>
<body>
  <header class="topbar">
    <div class="topbar-inner">
      <div class="brand">Portfolio Editor</div>
      <div class="controls">
        <button id="newBtn" class="btn" type="button">New project</button>
        <button id="generateBtn" class="btn btn-dark" type="button">Regenerate site</button>
      </div>
    </div>
  </header>

  <main class="shell">
    <aside class="card">
      <h3>Projects</h3>
      <div id="items" class="items"></div>
      <div id="status" class="status"></div>
    </aside>

    <section>
      <div class="card">
        <h3 id="projectHeading">New project</h3>
        <label for="title">Title</label>
        <input id="title" type="text" />
        <label for="description">Description (plain text or HTML)</label>
        <textarea id="description"></textarea>
        <div class="row">
          <button class="btn" type="button" data-suggest="draft">Draft with AI</button>
          <button class="btn" type="button" data-suggest="polish">Polish with AI</button>
        </div>
        <label for="image">Image path</label>
        <input id="image" type="text" placeholder="./assets/jpeg/example.jpg" />
        <input id="imageFile" type="file" accept="image/*" />
        <label for="imageStyle">Image style (CSS)</label>
        <input id="imageStyle" type="text" placeholder="object-position: top;" />
        <label><input id="centerImage" type="checkbox" /> Center image vertically</label>
        <label for="detailPage">Detail page (blank for generated)</label>
        <input id="detailPage" type="text" placeholder="./project-1.html" />
        <div class="row">
          <button id="saveProjectBtn" class="btn btn-main" type="button">Save project</button>
        </div>
      </div>

      <div id="detailCard" class="card hidden">
        <h3>Detail page</h3>
        <label for="heroImage">Hero image</label>
        <input id="heroImage" type="text" />
        <label for="role">Role / project type</label>
        <input id="role" type="text" />
        <label for="company">Company</label>
        <input id="company" type="text" />
        <label for="projectDate">Project date</label>
        <input id="projectDate" type="text" />
        <label for="overviewText">Overview (blank line between items; "• " bullet, "NOTE: " note, &lt;strong&gt;heading&lt;/strong&gt;)</label>
        <textarea id="overviewText"></textarea>
        <div class="row"><button class="btn" type="button" data-section="overview">Generate</button><button class="btn" type="button" data-polish="overview">Polish</button></div>
        <label for="mainTitle">Main content title</label>
        <input id="mainTitle" type="text" />
        <label for="mainDescription">Main content description</label>
        <textarea id="mainDescription"></textarea>
        <div id="blocks"></div>
        <div class="row"><button id="addBlockBtn" class="btn" type="button">Add block</button></div>
        <label for="mainConclusion">Main content conclusion</label>
        <textarea id="mainConclusion"></textarea>
        <label for="contributionsText">Key contributions (one per line)</label>
        <textarea id="contributionsText"></textarea>
        <div class="row"><button class="btn" type="button" data-section="contributions">Generate</button><button class="btn" type="button" data-polish="contributions">Polish</button></div>
        <label for="futureText">Future development (one per line)</label>
        <textarea id="futureText"></textarea>
        <div class="row"><button class="btn" type="button" data-section="future">Generate</button><button class="btn" type="button" data-polish="future">Polish</button></div>
        <label for="skillsText">Skills (comma separated)</label>
        <input id="skillsText" type="text" />
        <div class="row"><button class="btn" type="button" data-section="skills">Generate</button></div>
        <label for="linksText">Links (one "Label | https://url" per line)</label>
        <textarea id="linksText"></textarea>
        <div class="row">
          <button id="saveDetailBtn" class="btn btn-main" type="button">Save detail page</button>
          <a id="previewLink" class="btn" target="_blank" href="#">Preview</a>
        </div>
      </div>
    </section>
  </main>

  <script>
    const state = { projects: [], currentId: null, blocks: [], additionalImages: [] };
    const byId = (id) => document.getElementById(id);

    function setStatus(msg, kind = "") {
      byId("status").className = `status ${kind}`.trim();
      byId("status").textContent = msg;
    }

    async function api(method, url, payload) {
      const options = { method, headers: { "Content-Type": "application/json" } };
      if (payload !== undefined) options.body = JSON.stringify(payload);
      const response = await fetch(url, options);
      const data = await response.json();
      if (!response.ok) throw new Error(data.error || `${method} ${url} failed`);
      return data;
    }

    function current() {
      return state.projects.find((p) => p.id === state.currentId) || null;
    }

    async function loadList() {
      const data = await api("GET", "/api/projects");
      state.projects = data.projects;
      const root = byId("items");
      root.innerHTML = "";
      if (!state.projects.length) {
        root.innerHTML = "<p style='margin:0;color:#6b6b6b'>No projects yet.</p>";
        return;
      }
      state.projects.forEach((project, index) => {
        const card = document.createElement("div");
        card.className = "item";
        const title = document.createElement("b");
        title.textContent = project.title || "Untitled";
        card.appendChild(title);
        const actions = document.createElement("div");
        actions.className = "row";
        [["Up", () => move(index, -1)], ["Down", () => move(index, 1)], ["Edit", () => fillProject(project)],
         ["Delete", () => deleteProject(project)]].forEach(([label, handler]) => {
          const btn = document.createElement("button");
          btn.type = "button";
          btn.className = label === "Delete" ? "btn btn-danger" : "btn";
          btn.textContent = label;
          btn.addEventListener("click", () => handler().catch((err) => setStatus(err.message, "err")));
          actions.appendChild(btn);
        });
        card.appendChild(actions);
        root.appendChild(card);
      });
    }

    async function move(index, delta) {
      const target = index + delta;
      if (target < 0 || target >= state.projects.length) return;
      const ids = state.projects.map((p) => p.id);
      [ids[index], ids[target]] = [ids[target], ids[index]];
      const data = await api("POST", "/api/projects/reorder", { projectIds: ids });
      setStatus(data.listingUpdated ? "Order saved" : "Order saved, but index.html could not be updated", data.listingUpdated ? "ok" : "err");
      await loadList();
    }

    function clearProject() {
      state.currentId = null;
      ["title", "description", "image", "imageStyle", "detailPage"].forEach((id) => (byId(id).value = ""));
      byId("centerImage").checked = false;
      byId("projectHeading").textContent = "New project";
      byId("detailCard").classList.add("hidden");
    }

    async function fillProject(project) {
      state.currentId = project.id;
      byId("title").value = project.title || "";
      byId("description").value = project.description || "";
      byId("image").value = project.image || "";
      byId("imageStyle").value = project.imageStyle || "";
      byId("centerImage").checked = Boolean(project.centerImage);
      byId("detailPage").value = project.detailPage || "";
      byId("projectHeading").textContent = `Editing: ${project.title}`;
      byId("previewLink").href = project.detailPage || "#";
      await loadDetail(project.id);
    }

    async function loadDetail(projectId) {
      let form = { mainContent: { title: "", description: "", blocks: [], conclusion: "" }, links: [], additionalImages: [] };
      try {
        form = (await api("GET", `/api/project-details/${projectId}`)).form;
      } catch (err) {
        setStatus("No detail record yet; saving will create one.");
      }
      ["heroImage", "role", "company", "projectDate", "overviewText", "contributionsText", "futureText", "skillsText"]
        .forEach((id) => (byId(id).value = form[id] || ""));
      byId("mainTitle").value = form.mainContent.title || "";
      byId("mainDescription").value = form.mainContent.description || "";
      byId("mainConclusion").value = form.mainContent.conclusion || "";
      state.blocks = (form.mainContent.blocks || []).map((b) => ({
        subtitle: b.subtitle || "", description: b.description || "", image: (b.image && b.image.src) || "",
      }));
      state.additionalImages = form.additionalImages || [];
      byId("linksText").value = (form.links || []).map((l) => `${l.label} | ${l.url}`).join("\n");
      renderBlocks();
      byId("detailCard").classList.remove("hidden");
    }

    function renderBlocks() {
      const root = byId("blocks");
      root.innerHTML = "";
      state.blocks.forEach((block, index) => {
        const wrap = document.createElement("div");
        wrap.className = "block";
        ["subtitle", "image", "description"].forEach((field) => {
          const label = document.createElement("label");
          label.textContent = `Block ${index + 1} ${field}`;
          const input = document.createElement(field === "description" ? "textarea" : "input");
          if (field !== "description") input.type = "text";
          input.value = block[field];
          input.addEventListener("input", (e) => (block[field] = e.target.value));
          wrap.appendChild(label);
          wrap.appendChild(input);
        });
        const remove = document.createElement("button");
        remove.type = "button";
        remove.className = "btn btn-danger";
        remove.textContent = "Remove block";
        remove.addEventListener("click", () => { state.blocks.splice(index, 1); renderBlocks(); });
        wrap.appendChild(remove);
        root.appendChild(wrap);
      });
    }

    async function saveProject() {
      const payload = {
        title: byId("title").value,
        description: byId("description").value,
        image: byId("image").value,
        imageStyle: byId("imageStyle").value,
        centerImage: byId("centerImage").checked,
        detailPage: byId("detailPage").value,
      };
      const data = state.currentId
        ? await api("PUT", `/api/projects/${state.currentId}`, payload)
        : await api("POST", "/api/projects", payload);
      setStatus(data.listingUpdated ? `Saved ${data.project.title}` : "Saved, but index.html could not be updated", data.listingUpdated ? "ok" : "err");
      await loadList();
      await fillProject(data.project);
    }

    async function deleteProject(project) {
      if (!confirm(`Delete ${project.title}?`)) return;
      await api("DELETE", `/api/projects/${project.id}`);
      setStatus(`Deleted ${project.title}`, "ok");
      if (state.currentId === project.id) clearProject();
      await loadList();
    }

    async function saveDetail() {
      const links = byId("linksText").value.split("\n").map((line) => line.split("|"))
        .filter((parts) => parts.length >= 2)
        .map((parts) => ({ label: parts[0].trim(), url: parts.slice(1).join("|").trim() }));
      const payload = {
        heroImage: byId("heroImage").value,
        meta: { role: byId("role").value, company: byId("company").value, projectDate: byId("projectDate").value },
        overviewText: byId("overviewText").value,
        contributionsText: byId("contributionsText").value,
        futureText: byId("futureText").value,
        skillsText: byId("skillsText").value,
        mainContent: {
          title: byId("mainTitle").value,
          description: byId("mainDescription").value,
          conclusion: byId("mainConclusion").value,
          blocks: state.blocks.map((b) => ({ subtitle: b.subtitle, description: b.description, image: b.image ? { src: b.image } : null })),
        },
        additionalImages: state.additionalImages,
        links,
      };
      await api("PUT", `/api/project-details/${state.currentId}`, payload);
      setStatus("Detail page saved", "ok");
    }

    async function suggest(mode, sectionKind, target) {
      const subject = byId("title").value.trim();
      if (!subject) throw new Error("Enter a title first");
      setStatus("Asking the writing assistant...");
      const data = await api("POST", "/api/suggest", {
        subject, mode, sectionKind, currentContent: byId(target).value, context: byId("description").value,
      });
      byId(target).value = data.content;
      setStatus("Suggestion inserted; review before saving", "ok");
    }

    async function uploadImage(file) {
      const dataUrl = await new Promise((resolve, reject) => {
        const reader = new FileReader();
        reader.onload = () => resolve(String(reader.result || ""));
        reader.onerror = reject;
        reader.readAsDataURL(file);
      });
      const data = await api("POST", "/api/upload", { imageName: file.name, imageData: dataUrl });
      byId("image").value = data.path;
    }

    const guard = (fn) => () => fn().catch((err) => setStatus(err.message || String(err), "err"));
    const targets = { overview: "overviewText", contributions: "contributionsText", future: "futureText", skills: "skillsText" };

    byId("newBtn").addEventListener("click", () => { clearProject(); setStatus("New draft"); });
    byId("saveProjectBtn").addEventListener("click", guard(saveProject));
    byId("saveDetailBtn").addEventListener("click", guard(saveDetail));
    byId("addBlockBtn").addEventListener("click", () => { state.blocks.push({ subtitle: "", description: "", image: "" }); renderBlocks(); });
    byId("imageFile").addEventListener("change", (e) => {
      const file = e.target.files && e.target.files[0];
      if (file) guard(() => uploadImage(file))();
    });
    byId("generateBtn").addEventListener("click", guard(async () => {
      const data = await api("POST", "/api/generate");
      setStatus(data.message, "ok");
    }));
    document.querySelectorAll("[data-suggest]").forEach((btn) =>
      btn.addEventListener("click", guard(() => suggest(btn.dataset.suggest, null, "description"))));
    document.querySelectorAll("[data-section]").forEach((btn) =>
      btn.addEventListener("click", guard(() => suggest("listGenerate", btn.dataset.section, targets[btn.dataset.section]))));
    document.querySelectorAll("[data-polish]").forEach((btn) =>
      btn.addEventListener("click", guard(() => suggest("polish", btn.dataset.polish, targets[btn.dataset.polish]))));

    loadList().catch((err) => setStatus(err.message || String(err), "err"));
  </script>
</body>
</html>
"""


class EditorHandler(SimpleHTTPRequestHandler):
    def __init__(self, *args, portfolio: Portfolio, suggestions: OpenAISuggestionService, **kwargs):
        self.portfolio = portfolio
        self.suggestions = suggestions
        super().__init__(*args, directory=str(portfolio.config.root), **kwargs)

    def log_message(self, format, *args):
        logger.debug("%s - %s", self.address_string(), format % args)

    def _json(self, status: HTTPStatus, payload: dict):
        body = json.dumps(payload).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _payload(self) -> dict:
        size = int(self.headers.get("Content-Length", "0") or "0")
        payload = json.loads((self.rfile.read(size) or b"{}").decode("utf-8"))
        if not isinstance(payload, dict):
            raise ValueError("request body must be a JSON object")
        return payload

    def _dispatch(self, action) -> None:
        try:
            self._json(HTTPStatus.OK, action())
        except NotFoundError as exc:
            self._json(HTTPStatus.NOT_FOUND, {"ok": False, "error": str(exc)})
        except SuggestionError as exc:
            status = HTTPStatus.BAD_GATEWAY if exc.reason == "upstream-error" else HTTPStatus.BAD_REQUEST
            self._json(status, {"ok": False, "error": str(exc), "reason": exc.reason})
        except ValueError as exc:
            self._json(HTTPStatus.BAD_REQUEST, {"ok": False, "error": str(exc)})
        except Exception as exc:  # noqa: BLE001
            logger.exception("Request failed: %s %s", self.command, self.path)
            self._json(HTTPStatus.INTERNAL_SERVER_ERROR, {"ok": False, "error": str(exc)})

    def _suggest(self, payload: dict) -> dict:
        request = SuggestionRequest.from_payload(payload)
        return {"ok": True, "content": self.suggestions.suggest(request)}

    def do_GET(self):
        route = urlparse(self.path).path
        if route in {"/", "/admin", "/admin/", "/editor", "/editor/"}:
            html = admin_page().encode("utf-8")
            self.send_response(HTTPStatus.OK)
            self.send_header("Content-Type", "text/html; charset=utf-8")
            self.send_header("Cache-Control", "no-store")
            self.send_header("Content-Length", str(len(html)))
            self.end_headers()
            self.wfile.write(html)
            return
        if route == "/api/projects":
            self._dispatch(lambda: {"ok": True, "projects": self.portfolio.list_projects()})
            return
        if route == "/api/project-details":
            self._dispatch(lambda: {"ok": True, "details": self.portfolio.list_details()})
            return
        match = DETAIL_ROUTE.match(route)
        if match:
            self._dispatch(lambda: self.portfolio.get_detail(match.group(1)))
            return
        return super().do_GET()

    def do_POST(self):
        route = urlparse(self.path).path
        portfolio = self.portfolio
        match = DETAIL_GENERATE_ROUTE.match(route)
        if match:
            self._dispatch(lambda: portfolio.generate_detail_page(match.group(1)))
            return
        actions = {
            "/api/projects": lambda p: portfolio.create_project(p),
            "/api/projects/reorder": lambda p: portfolio.reorder_projects(p.get("projectIds")),
            "/api/upload": lambda p: portfolio.save_upload(
                str(p.get("imageName", "")), str(p.get("imageData", ""))
            ),
            "/api/generate": lambda p: portfolio.regenerate(),
            "/api/suggest": self._suggest,
        }
        action = actions.get(route)
        if action is None:
            self.send_error(HTTPStatus.NOT_FOUND, "Not Found")
            return
        self._dispatch(lambda: action(self._payload()))

    def do_PUT(self):
        route = urlparse(self.path).path
        project = PROJECT_ROUTE.match(route)
        detail = DETAIL_ROUTE.match(route)
        if project:
            self._dispatch(lambda: self.portfolio.update_project(project.group(1), self._payload()))
        elif detail:
            self._dispatch(lambda: self.portfolio.save_detail(detail.group(1), self._payload()))
        else:
            self.send_error(HTTPStatus.NOT_FOUND, "Not Found")

    def do_DELETE(self):
        route = urlparse(self.path).path
        project = PROJECT_ROUTE.match(route)
        detail = DETAIL_ROUTE.match(route)
        if project:
            self._dispatch(lambda: self.portfolio.delete_project(project.group(1)))
        elif detail:
            self._dispatch(lambda: self.portfolio.delete_detail(detail.group(1)))
        else:
            self.send_error(HTTPStatus.NOT_FOUND, "Not Found")


def build_server(portfolio: Portfolio, host: str, port: int, suggestions: OpenAISuggestionService) -> ThreadingHTTPServer:
    handler = functools.partial(EditorHandler, portfolio=portfolio, suggestions=suggestions)
    return ThreadingHTTPServer((host, port), handler)


def main() -> None:
    parser = argparse.ArgumentParser(description="Edit portfolio projects and regenerate the site locally.")
    parser.add_argument("--root", type=Path, default=ROOT, help="Site root holding index.html and data/.")
    parser.add_argument("--host", default=HOST)
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--owner", default=None, help="Name shown in the detail page header.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every request.")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    root = args.root.resolve()
    load_dotenv(root / ".env")

    owner = args.owner or os.environ.get("PORTFOLIO_OWNER", "").strip() or PageChrome.owner_name
    config = EditorConfig(root=root, chrome=PageChrome(owner_name=owner))
    portfolio = Portfolio(config)
    # pages missing on disk are written, existing ones are left alone
    portfolio.ensure_detail_pages()

    server = build_server(portfolio, args.host, args.port, OpenAISuggestionService.from_env())
    print(f"Editor running on http://{args.host}:{args.port}/admin")
    print(f"Preview the site at http://{args.host}:{args.port}/{config.index_name}")
    print("Press Ctrl+C to stop.")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()


if __name__ == "__main__":
    main()
