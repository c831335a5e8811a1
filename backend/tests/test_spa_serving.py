"""End-to-end tests for the front-end serving pipeline.

Every test runs the full FastAPI app against a temporary build directory,
so API routes, static files and the SPA fallback interact exactly as in
production.
"""

import logging

import pytest
from httpx import AsyncClient, ASGITransport

from lptagger.main import create_app
from lptagger.static.locator import BuildRoot
from lptagger.static.pipeline import Outcome, SPAStaticMiddleware, decide

INDEX_HTML = b"<!doctype html><html><body><div id=\"root\"></div></body></html>"
APP_JS = b"import{a as b}from\"./vendor.js\";console.log(\"\\u00e9\");\n"
LOGO_PNG = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"
DOCS_HTML = b"<h1>Docs</h1>"
NOT_FOUND_HTML = b"<h1>Custom 404</h1>"
SECRET = b"DB_PASSWORD=hunter2"


# ── Fixtures ─────────────────────────────────────────────────────────────────

@pytest.fixture
def build_dir(tmp_path):
    dist = tmp_path / "dist"
    assets = dist / "assets"
    assets.mkdir(parents=True)
    (dist / "index.html").write_bytes(INDEX_HTML)
    (assets / "app.js").write_bytes(APP_JS)
    (assets / "app.js.map").write_bytes(b"{\"version\":3}")
    (assets / "logo.png").write_bytes(LOGO_PNG)
    (assets / "data.bin").write_bytes(b"\x00\x01\x02")
    (dist / "docs").mkdir()
    (dist / "docs" / "index.html").write_bytes(DOCS_HTML)
    (dist / "404.html").write_bytes(NOT_FOUND_HTML)
    (tmp_path / "secret.txt").write_bytes(SECRET)
    (tmp_path / "passwd").write_bytes(SECRET)
    return dist


async def _client_for(build_dir):
    app = create_app(build_root=BuildRoot(path=build_dir, found=build_dir.is_dir()))
    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")


@pytest.fixture
async def client(build_dir):
    async with await _client_for(build_dir) as c:
        yield c


# ── Direct matches ───────────────────────────────────────────────────────────

class TestStaticHits:
    @pytest.mark.asyncio
    async def test_root_serves_index(self, client):
        r = await client.get("/")
        assert r.status_code == 200
        assert r.headers["content-type"] == "text/html; charset=utf-8"
        assert r.content == INDEX_HTML

    @pytest.mark.asyncio
    async def test_script_bytes_and_type(self, client):
        r = await client.get("/assets/app.js")
        assert r.status_code == 200
        assert r.headers["content-type"] == "application/javascript; charset=utf-8"
        assert r.content == APP_JS

    @pytest.mark.asyncio
    async def test_source_map(self, client):
        r = await client.get("/assets/app.js.map")
        assert r.status_code == 200
        assert r.headers["content-type"] == "application/json; charset=utf-8"

    @pytest.mark.asyncio
    async def test_image(self, client):
        r = await client.get("/assets/logo.png")
        assert r.status_code == 200
        assert r.headers["content-type"] == "image/png"
        assert r.content == LOGO_PNG

    @pytest.mark.asyncio
    async def test_unknown_extension_is_octet_stream(self, client):
        r = await client.get("/assets/data.bin")
        assert r.status_code == 200
        assert r.headers["content-type"] == "application/octet-stream"
        assert r.content == b"\x00\x01\x02"

    @pytest.mark.asyncio
    async def test_head_request(self, client):
        r = await client.head("/assets/app.js")
        assert r.status_code == 200
        assert r.headers["content-type"] == "application/javascript; charset=utf-8"

    @pytest.mark.asyncio
    async def test_query_string_ignored(self, client):
        r = await client.get("/assets/app.js?v=123")
        assert r.status_code == 200
        assert r.content == APP_JS


# ── Misses and SPA fallback ──────────────────────────────────────────────────

class TestStaticMisses:
    @pytest.mark.asyncio
    async def test_missing_asset_is_404_not_spa(self, client):
        r = await client.get("/assets/missing.png")
        assert r.status_code == 404
        assert r.text == "Not Found"
        assert INDEX_HTML not in r.content

    @pytest.mark.asyncio
    async def test_missing_script_is_404(self, client):
        r = await client.get("/dashboard/chunk-abc123.js")
        assert r.status_code == 404

    @pytest.mark.asyncio
    async def test_missing_root_document_is_404(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        async with await _client_for(empty) as c:
            r = await c.get("/")
        assert r.status_code == 404


class TestSpaFallback:
    @pytest.mark.asyncio
    async def test_client_route_gets_index(self, client):
        r = await client.get("/dashboard/settings")
        assert r.status_code == 200
        assert r.headers["content-type"] == "text/html; charset=utf-8"
        assert r.content == INDEX_HTML

    @pytest.mark.asyncio
    async def test_existing_directory_without_index_gets_spa(self, client):
        r = await client.get("/assets")
        assert r.status_code == 200
        assert r.content == INDEX_HTML

    @pytest.mark.asyncio
    async def test_custom_404_page_does_not_replace_spa(self, client):
        r = await client.get("/landing-pages/42")
        assert r.status_code == 200
        assert r.content == INDEX_HTML

    @pytest.mark.asyncio
    async def test_missing_index_logs_error(self, tmp_path, caplog):
        empty = tmp_path / "empty"
        empty.mkdir()
        with caplog.at_level(logging.ERROR, logger="lptagger.static.pipeline"):
            async with await _client_for(empty) as c:
                r = await c.get("/dashboard")
        assert r.status_code == 404
        assert "SPA entry document not found" in caplog.text

    @pytest.mark.asyncio
    async def test_nonexistent_build_root(self, tmp_path):
        async with await _client_for(tmp_path / "never-built") as c:
            assert (await c.get("/dashboard")).status_code == 404
            assert (await c.get("/assets/app.js")).status_code == 404
            assert (await c.get("/api/health")).json()["static_root_found"] is False


class TestGenericFallback:
    @pytest.mark.asyncio
    async def test_directory_index(self, client):
        r = await client.get("/docs/")
        assert r.status_code == 200
        assert r.content == DOCS_HTML

    @pytest.mark.asyncio
    async def test_directory_redirects_to_trailing_slash(self, client):
        r = await client.get("/docs")
        assert r.status_code in (301, 302, 307, 308)
        assert r.headers["location"].endswith("/docs/")


# ── Path traversal ───────────────────────────────────────────────────────────

class TestTraversal:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", [
        "/%2e%2e/%2e%2e/etc/passwd",
        "/%2e%2e/passwd",
        "/%2e%2e/secret.txt",
        "/assets/%2e%2e/%2e%2e/secret.txt",
        "/%2Fetc%2Fpasswd",
    ])
    async def test_escaping_paths_are_404(self, client, path):
        r = await client.get(path)
        assert r.status_code == 404
        assert SECRET not in r.content
        assert INDEX_HTML not in r.content

    @pytest.mark.asyncio
    async def test_rejection_is_logged(self, client, caplog):
        with caplog.at_level(logging.WARNING, logger="lptagger.static.pipeline"):
            await client.get("/%2e%2e/secret.txt")
        assert "Rejected request path" in caplog.text

    @pytest.mark.asyncio
    async def test_dot_segments_inside_root_are_fine(self, client):
        r = await client.get("/assets/%2e%2e/assets/app.js")
        assert r.status_code == 200
        assert r.content == APP_JS


# ── API prefix ───────────────────────────────────────────────────────────────

class TestApiBypass:
    @pytest.mark.asyncio
    async def test_api_route_reaches_router(self, client):
        r = await client.get("/api/health")
        assert r.status_code == 200
        assert r.json()["status"] == "healthy"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/api/unknown", "/api/app.js", "/api/index.html", "/api"])
    async def test_unknown_api_path_never_serves_spa(self, client, path):
        r = await client.get(path)
        assert r.status_code == 404
        assert r.headers["content-type"].startswith("application/json")
        assert INDEX_HTML not in r.content

    @pytest.mark.asyncio
    async def test_api_path_matching_a_file_is_not_served(self, build_dir, client):
        (build_dir / "api").mkdir()
        (build_dir / "api" / "leak.json").write_bytes(b"{\"leak\":true}")
        r = await client.get("/api/leak.json")
        assert r.status_code == 404
        assert r.json() == {"detail": "Not Found"}

    @pytest.mark.asyncio
    async def test_non_read_methods_pass_through(self, client):
        r = await client.post("/dashboard")
        assert r.status_code in (404, 405)
        assert INDEX_HTML not in r.content


async def _downstream(scope, receive, send):
    raise AssertionError("request should not reach the downstream app")


class TestSpaFallbackGuard:
    def test_api_path_gets_plain_404(self, build_dir):
        middleware = SPAStaticMiddleware(_downstream, build_root=BuildRoot(build_dir, True))
        r = middleware._spa_fallback("/api/x")
        assert r.status_code == 404
        assert r.body == b"Not Found"

    def test_custom_prefix_path_gets_plain_404(self, build_dir):
        middleware = SPAStaticMiddleware(
            _downstream, build_root=BuildRoot(build_dir, True), api_prefix="/rpc/"
        )
        assert middleware._spa_fallback("/rpc/tags").status_code == 404
        assert middleware._spa_fallback("/api/x").status_code == 200

    def test_application_route_gets_index(self, build_dir):
        middleware = SPAStaticMiddleware(_downstream, build_root=BuildRoot(build_dir, True))
        r = middleware._spa_fallback("/dashboard")
        assert r.status_code == 200
        assert r.path == build_dir / "index.html"
        assert r.media_type == "text/html; charset=utf-8"


# ── Decision function ────────────────────────────────────────────────────────

class TestDecide:
    def test_api(self, build_dir):
        assert decide(build_dir, "/api/tags").outcome is Outcome.API_BYPASS

    def test_hit(self, build_dir):
        decision = decide(build_dir, "/assets/app.js")
        assert decision.outcome is Outcome.STATIC_HIT
        assert decision.asset.path == build_dir / "assets" / "app.js"
        assert decision.asset.content_type == "application/javascript; charset=utf-8"

    def test_root_hit(self, build_dir):
        decision = decide(build_dir, "/")
        assert decision.outcome is Outcome.STATIC_HIT
        assert decision.asset.path == build_dir / "index.html"

    def test_miss(self, build_dir):
        assert decide(build_dir, "/assets/missing.css").outcome is Outcome.STATIC_MISS

    def test_rejected_is_miss(self, build_dir):
        decision = decide(build_dir, "/../../etc/passwd")
        assert decision.outcome is Outcome.STATIC_MISS
        assert decision.asset is None

    def test_spa(self, build_dir):
        assert decide(build_dir, "/dashboard/settings").outcome is Outcome.SPA_FALLBACK

    def test_existing_file_without_known_extension_is_hit(self, build_dir):
        (build_dir / "CNAME").write_bytes(b"example.com")
        assert decide(build_dir, "/CNAME").outcome is Outcome.STATIC_HIT
