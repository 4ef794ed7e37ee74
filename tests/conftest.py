"""
Shared test fixtures.

MockContentfulBackend stands in for requests.Session and answers the
Content Management API calls the importer makes, keeping every entry and
asset in memory so tests can assert on the final state.
"""

import sys
from pathlib import Path

# Add project root to Python path
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

import json
import re
import threading
import pytest
from unittest.mock import patch
from typing import Any, Generator, Optional

from config.settings import Settings
from config.mappings import parse_mapping

BASE_URL = "https://api.contentful.com"
ENV_PREFIX = r"/spaces/(?P<space>[^/]+)/environments/(?P<env>[^/]+)"


# ===================
# MOCK CONTENTFUL API
# ===================

class MockResponse:
    """Minimal requests.Response stand-in."""

    REASONS = {
        200: "OK",
        201: "Created",
        204: "No Content",
        404: "Not Found",
        409: "Conflict",
        422: "Unprocessable Entity",
    }

    def __init__(self, status_code: int, body: Optional[Any] = None):
        self.status_code = status_code
        self.reason = self.REASONS.get(status_code, "Error")
        self._body = body
        self.content = b"" if body is None else json.dumps(body).encode("utf-8")
        self.text = self.content.decode("utf-8")

    def json(self) -> Any:
        if self._body is None:
            raise ValueError("No JSON body")
        # Fresh copy, like a real decoded body
        return json.loads(self.content)


def error_body(error_id: str, message: str, details: Optional[dict] = None) -> dict:
    return {
        "sys": {"type": "Error", "id": error_id},
        "message": message,
        "details": details or {},
        "requestId": f"req-{error_id.lower()}",
    }


class MockContentfulBackend:
    """
    In-memory Contentful space.

    Failure injection:
        fail_entry_create_on: 1-based create-entry call numbers answered with 409
        process_assets: False leaves assets unprocessed forever
    """

    def __init__(
        self,
        space_id: str = "space-1",
        environment_id: str = "master",
        locales: Optional[dict[str, str]] = None,
        content_types: Optional[set[str]] = None,
    ):
        self.space_id = space_id
        self.environment_id = environment_id
        self.locales = locales if locales is not None else {"locale-1": "en-US"}
        self.content_types = content_types if content_types is not None else {"blogPost"}
        self.entries: dict[str, dict] = {}
        self.assets: dict[str, dict] = {}
        self.calls: list[tuple[str, str]] = []
        self.request_headers: list[dict] = []
        self.fail_entry_create_on: set[int] = set()
        self.process_assets = True
        self._entry_creates = 0
        self._asset_creates = 0
        self._lock = threading.Lock()

    # requests.Session interface
    def mount(self, prefix, adapter):
        pass

    def request(self, method, url, json=None, headers=None, timeout=None):
        path = url[len(BASE_URL):] if url.startswith(BASE_URL) else url
        with self._lock:
            self.calls.append((method, path))
            self.request_headers.append(dict(headers or {}))
            return self._route(method, path, json, headers or {})

    # helpers for assertions
    def count(self, method: str, pattern: str) -> int:
        return sum(1 for m, p in self.calls if m == method and re.fullmatch(pattern, p))

    @property
    def entry_create_calls(self) -> int:
        return self.count("POST", ENV_PREFIX + "/entries")

    @property
    def published_entries(self) -> list[dict]:
        return [e for e in self.entries.values() if e["sys"].get("publishedVersion")]

    @property
    def published_assets(self) -> list[dict]:
        return [a for a in self.assets.values() if a["sys"].get("publishedVersion")]

    # routing
    def _route(self, method, path, body, headers):
        match = re.fullmatch(r"/spaces/(?P<space>[^/]+)", path)
        if match and method == "GET":
            if match["space"] != self.space_id:
                return MockResponse(404, error_body("NotFound", "The resource could not be found."))
            return MockResponse(200, {"sys": {"id": self.space_id, "type": "Space"}})

        match = re.fullmatch(ENV_PREFIX + r"(?P<rest>.*)", path)
        if not match or match["space"] != self.space_id or match["env"] != self.environment_id:
            return MockResponse(404, error_body("NotFound", "The resource could not be found."))

        rest = match["rest"]
        if rest == "" and method == "GET":
            return MockResponse(200, {"sys": {"id": self.environment_id, "type": "Environment"}})

        match = re.fullmatch(r"/locales/(?P<id>[^/]+)", rest)
        if match:
            code = self.locales.get(match["id"])
            if code is None:
                return MockResponse(404, error_body("NotFound", "The resource could not be found."))
            return MockResponse(200, {"sys": {"id": match["id"]}, "code": code})

        match = re.fullmatch(r"/content_types/(?P<id>[^/]+)", rest)
        if match:
            if match["id"] not in self.content_types:
                return MockResponse(404, error_body("NotFound", "The resource could not be found."))
            return MockResponse(200, {"sys": {"id": match["id"], "type": "ContentType"}})

        if rest == "/entries" and method == "POST":
            return self._create_entry(headers, body)
        if rest == "/assets" and method == "POST":
            return self._create_asset(body)

        match = re.fullmatch(r"/(?P<kind>entries|assets)/(?P<id>[^/]+)(?P<action>/published)?", rest)
        if match:
            store = self.entries if match["kind"] == "entries" else self.assets
            resource = store.get(match["id"])
            if resource is None:
                return MockResponse(404, error_body("NotFound", "The resource could not be found."))
            if method == "GET":
                return MockResponse(200, resource)
            conflict = self._version_conflict(resource, headers)
            if conflict:
                return conflict
            if match["action"]:
                resource["sys"]["version"] += 1
                resource["sys"]["publishedVersion"] = resource["sys"]["version"]
            else:
                resource["fields"] = body["fields"]
                resource["sys"]["version"] += 1
            return MockResponse(200, resource)

        match = re.fullmatch(r"/assets/(?P<id>[^/]+)/files/(?P<locale>[^/]+)/process", rest)
        if match and method == "PUT":
            asset = self.assets[match["id"]]
            conflict = self._version_conflict(asset, headers)
            if conflict:
                return conflict
            if self.process_assets:
                file = asset["fields"]["file"][match["locale"]]
                file["url"] = f"//images.ctfassets.net/{self.space_id}/{asset['sys']['id']}/{file['fileName']}"
                file.pop("upload", None)
                asset["sys"]["version"] += 1
            return MockResponse(204)

        return MockResponse(404, error_body("NotFound", f"No route for {method} {path}"))

    def _version_conflict(self, resource, headers) -> Optional[MockResponse]:
        if str(resource["sys"]["version"]) != str(headers.get("X-Contentful-Version")):
            return MockResponse(409, error_body("VersionMismatch", "Version mismatch"))
        return None

    def _create_entry(self, headers, body):
        self._entry_creates += 1
        if self._entry_creates in self.fail_entry_create_on:
            return MockResponse(409, error_body(
                "VersionMismatch",
                "Version mismatch",
                {"reason": "entry already exists"}
            ))
        content_type = headers.get("X-Contentful-Content-Type")
        if content_type not in self.content_types:
            return MockResponse(422, error_body("InvalidEntry", "Validation error"))

        entry_id = f"entry-{self._entry_creates}"
        self.entries[entry_id] = {
            "sys": {"id": entry_id, "type": "Entry", "version": 1, "contentType": content_type},
            "fields": body["fields"],
        }
        return MockResponse(201, self.entries[entry_id])

    def _create_asset(self, body):
        self._asset_creates += 1
        asset_id = f"asset-{self._asset_creates}"
        self.assets[asset_id] = {
            "sys": {"id": asset_id, "type": "Asset", "version": 1},
            "fields": json.loads(json.dumps(body["fields"])),
        }
        return MockResponse(201, self.assets[asset_id])


# ===================
# FIXTURES
# ===================

@pytest.fixture
def contentful_backend() -> Generator[MockContentfulBackend, None, None]:
    """
    Route every ContentfulClient built during the test to the mock backend.

    Usage:
        def test_something(contentful_backend):
            contentful_backend.fail_entry_create_on = {2}
            ...
    """
    backend = MockContentfulBackend()
    with patch("integrations.contentful.requests.Session", return_value=backend):
        yield backend


@pytest.fixture
def sample_mapping():
    """Mapping with a plain field, a rich text field and an asset link field."""
    return parse_mapping({
        "title": {"type": "Symbol", "externalKey": "id"},
        "postBody": {"type": "RichText", "externalKey": "text"},
        "postAuthor": {"type": "Symbol", "externalKey": "likes"},
        "image": {"type": "Link", "externalKey": "image"},
        "assetLabels": {"title": "title", "upload": "image", "contentType": "image"},
    })


@pytest.fixture
def sample_raw_records() -> list:
    """Three raw posts, each with a resolvable image URL."""
    return [
        {"id": "post-1", "text": "First post", "likes": 3, "image": "https://cdn.example.com/1.jpg"},
        {"id": "post-2", "text": "Second post", "likes": 5, "image": "https://cdn.example.com/2.png"},
        {"id": "post-3", "text": "Third post", "likes": 8, "image": "https://cdn.example.com/3.jpg"},
    ]


@pytest.fixture
def config_dir(tmp_path, sample_raw_records) -> Path:
    """Config directory holding posts.json with the sample records."""
    (tmp_path / "posts.json").write_text(
        json.dumps({"data": sample_raw_records}),
        encoding="utf-8"
    )
    return tmp_path


@pytest.fixture
def make_settings(config_dir):
    """
    Build Settings for a test run without reading the real environment.

    Usage:
        settings = make_settings(contentful_locale_id="missing")
    """
    def _make(**overrides) -> Settings:
        values = {
            "contentful_access_token": "test-token",
            "contentful_space_id": "space-1",
            "contentful_environment_id": "master",
            "contentful_locale_id": "locale-1",
            "contentful_content_type_id": "blogPost",
            "external_source": "posts.json",
            "external_source_url": None,
            "source_config_dir": str(config_dir),
            "asset_processing_check_wait_s": 0,
            "import_max_workers": 3,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make
