"""Shared fixtures: a fake DevDocs server and a DocService over tmp_path."""

from pathlib import Path

import httpx
import pytest

from pydocs_mcp.cache import CacheStore
from pydocs_mcp.config import DocsConfig
from pydocs_mcp.docs.service import DocService, set_doc_service
from pydocs_mcp.docs.source import DocSource

BASE_URL = "https://devdocs.test"

SAMPLE_ENTRIES = [
    {"name": "asyncio", "path": "library/asyncio", "type": "Asynchronous I/O"},
    {"name": "asyncio.run()", "path": "library/asyncio-runner#asyncio.run", "type": "Asynchronous I/O"},
    {"name": "asyncio.Queue", "path": "library/asyncio-queue#asyncio.Queue", "type": "Asynchronous I/O"},
    {
        "name": "asyncio.create_task()",
        "path": "library/asyncio-task#asyncio.create_task",
        "type": "Asynchronous I/O",
    },
    {"name": "json", "path": "library/json", "type": "Internet Data Handling"},
    {"name": "json.loads()", "path": "library/json#json.loads", "type": "Internet Data Handling"},
    {"name": "json.dumps()", "path": "library/json#json.dumps", "type": "Internet Data Handling"},
    {"name": "print()", "path": "library/functions#print", "type": "Built-in Functions"},
    {"name": "open()", "path": "library/functions#open", "type": "Built-in Functions"},
    {"name": "4. More Control Flow Tools", "path": "tutorial/controlflow", "type": "Tutorial"},
    {"name": "9. Classes", "path": "tutorial/classes", "type": "Tutorial"},
]

JSON_PAGE = """
<h1 id="module-json">json — JSON encoder and decoder</h1>
<p>Source code: <a href="https://github.com/python/cpython/tree/3.14/Lib/json">Lib/json</a></p>
<h2 id="basic-usage">Basic Usage</h2>
<dl class="py function">
<dt class="sig sig-object py" id="json.dumps">json.dumps(obj, *, skipkeys=False)</dt>
<dd><p>Serialize <em>obj</em> to a JSON formatted <code>str</code>.</p></dd>
</dl>
<dl class="py function">
<dt class="sig sig-object py" id="json.loads">json.loads(s, *, cls=None)</dt>
<dd><p>Deserialize <em>s</em> to a Python object.</p></dd>
</dl>
<pre data-language="python">&gt;&gt;&gt; import json
&gt;&gt;&gt; json.dumps([1, 2])
'[1, 2]'</pre>
<h2 id="exceptions">Exceptions</h2>
<p>Raised when decoding fails.</p>
"""


class FakeDevDocs:
    """httpx.MockTransport handler serving an index and a few pages."""

    def __init__(self, entries=None, pages=None) -> None:
        self.entries = SAMPLE_ENTRIES if entries is None else entries
        self.pages = {"library/json": JSON_PAGE} if pages is None else pages
        self.requests: list[str] = []
        self.status_override: int | None = None
        self.raw_index: str | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(str(request.url))
        if self.status_override is not None:
            return httpx.Response(self.status_override)

        _, _, rest = request.url.path.lstrip("/").partition("/")
        if rest == "index.json":
            if self.raw_index is not None:
                return httpx.Response(200, text=self.raw_index)
            return httpx.Response(200, json={"entries": self.entries, "types": []})
        if rest.endswith(".html") and rest[: -len(".html")] in self.pages:
            return httpx.Response(200, text=self.pages[rest[: -len(".html")]])
        return httpx.Response(404, text="not found")

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def make_config(cache_root: Path, **overrides) -> DocsConfig:
    values = {
        "base_url": BASE_URL,
        "product": "python",
        "cache_root": cache_root,
        "index_ttl_s": 3600.0,
        "doc_ttl_s": 3600.0,
        "fetch_timeout_s": 5.0,
        "max_window": 12_000,
        "default_limit": 20,
        "default_version": "3.14",
    }
    values.update(overrides)
    return DocsConfig(**values)


def make_service(config: DocsConfig, transport: httpx.AsyncBaseTransport) -> DocService:
    return DocService(
        cache=CacheStore(config.cache_root, product=config.product),
        source=DocSource(config.base_url, config.product, config.fetch_timeout_s, transport=transport),
        config=config,
    )


@pytest.fixture()
def devdocs() -> FakeDevDocs:
    return FakeDevDocs()


@pytest.fixture()
def docs_config(tmp_path) -> DocsConfig:
    return make_config(tmp_path / "cache")


@pytest.fixture()
def service(docs_config, devdocs) -> DocService:
    return make_service(docs_config, devdocs.transport())


@pytest.fixture()
def installed_service(service):
    """Install the test service as the process-wide DocService used by tools."""
    set_doc_service(service)
    yield service
    set_doc_service(None)
