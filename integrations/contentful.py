"""
Contentful Content Management API integration.

Thin requests-based client covering the calls the importer needs:
space/environment lookup, locale and content type lookup, entry
create/update/publish and asset create/process/publish.

Resources are returned as small handle objects (ContentfulEntry,
ContentfulAsset) bound to their environment, so an import chain reads
entry.update().publish() the same way the official SDKs do.
"""

import time
from typing import Any, Optional
import requests
from requests.adapters import HTTPAdapter
import structlog

from exceptions import (
    ContentfulApiError,
    ContentfulRequestError,
    AssetProcessingTimeoutError,
)

logger = structlog.get_logger(__name__)

DEFAULT_API_URL = "https://api.contentful.com"
CMA_CONTENT_TYPE = "application/vnd.contentful.management.v1+json"


def _redact_headers(headers: dict[str, str]) -> dict[str, str]:
    return {
        key: ("Bearer ***" if key.lower() == "authorization" else value)
        for key, value in headers.items()
    }


def build_error_payload(
    response: requests.Response,
    method: str,
    url: str,
    headers: dict[str, str],
    payload: Any = None
) -> dict[str, Any]:
    """
    Build the structured error payload for a non-2xx response.

    Contentful error bodies look like:
        {"sys": {"type": "Error", "id": "VersionMismatch"},
         "message": "...", "details": {...}, "requestId": "..."}
    """
    try:
        body = response.json()
    except ValueError:
        body = {"message": response.text}

    if not isinstance(body, dict):
        body = {"message": str(body)}

    return {
        "status": response.status_code,
        "statusText": response.reason,
        "message": body.get("message", ""),
        "details": body.get("details", {}),
        "request": {
            "url": url,
            "method": method,
            "headers": _redact_headers(headers),
            "payloadData": payload,
        },
        "requestId": body.get("requestId"),
    }


class ContentfulClient:
    """
    HTTP client for the Content Management API.

    One requests.Session is shared by every thread of a run; its connection
    pool is sized to pool_size so concurrent import chains do not discard
    connections.
    """

    def __init__(
        self,
        access_token: str,
        *,
        base_url: str = DEFAULT_API_URL,
        headers: Optional[dict[str, str]] = None,
        timeout_s: float = 30.0,
        pool_size: int = 10,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._headers = {
            **(headers or {}),
            "Authorization": f"Bearer {access_token}",
            "Content-Type": CMA_CONTENT_TYPE,
        }

        if session is None:
            session = requests.Session()
            adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
            session.mount("https://", adapter)
            session.mount("http://", adapter)
        self._session = session

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        headers: Optional[dict[str, str]] = None,
    ) -> dict[str, Any]:
        """
        Issue one API call.

        Args:
            method: HTTP method
            path: Path below the base URL (starting with /)
            json: Request body
            headers: Extra headers (version, content type id)

        Returns:
            Decoded JSON body ({} for empty responses)

        Raises:
            ContentfulApiError: Non-2xx response
            ContentfulRequestError: No response (timeout, connection error)
        """
        url = f"{self._base_url}{path}"
        request_headers = {**self._headers, **(headers or {})}

        logger.debug("contentful_request", method=method, url=url)

        try:
            response = self._session.request(
                method=method,
                url=url,
                json=json,
                headers=request_headers,
                timeout=self._timeout_s,
            )
        except requests.exceptions.RequestException as e:
            logger.warning("contentful_request_failed", method=method, url=url, error=str(e))
            raise ContentfulRequestError(method, url, str(e)) from e

        if not 200 <= response.status_code < 300:
            payload = build_error_payload(response, method, url, request_headers, json)
            logger.debug(
                "contentful_api_error",
                method=method,
                url=url,
                status=response.status_code,
                message=payload["message"]
            )
            raise ContentfulApiError(payload)

        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    def get_space(self, space_id: str) -> dict[str, Any]:
        """GET /spaces/{space_id}"""
        return self.request("GET", f"/spaces/{space_id}")

    def get_environment(
        self,
        space_id: str,
        environment_id: str = "master",
        **options: Any
    ) -> "ContentfulEnvironment":
        """GET /spaces/{space_id}/environments/{environment_id}"""
        data = self.request("GET", f"/spaces/{space_id}/environments/{environment_id}")
        return ContentfulEnvironment(self, space_id, environment_id, data, **options)


class ContentfulEnvironment:
    """
    Handle bound to one space environment.

    Read-only after creation; safe to share between import threads.
    """

    def __init__(
        self,
        client: ContentfulClient,
        space_id: str,
        environment_id: str,
        data: Optional[dict[str, Any]] = None,
        *,
        processing_check_wait_s: float = 0.5,
        processing_check_retries: int = 5,
    ) -> None:
        self.client = client
        self.space_id = space_id
        self.environment_id = environment_id
        self.sys = (data or {}).get("sys", {})
        self.processing_check_wait_s = processing_check_wait_s
        self.processing_check_retries = processing_check_retries

    def path(self, suffix: str) -> str:
        return f"/spaces/{self.space_id}/environments/{self.environment_id}{suffix}"

    def get_locale(self, locale_id: str) -> dict[str, Any]:
        """GET locale by identifier; the locale code is under 'code'."""
        return self.client.request("GET", self.path(f"/locales/{locale_id}"))

    def get_content_type(self, content_type_id: str) -> dict[str, Any]:
        return self.client.request("GET", self.path(f"/content_types/{content_type_id}"))

    def create_entry(self, content_type_id: str, fields: dict[str, Any]) -> "ContentfulEntry":
        data = self.client.request(
            "POST",
            self.path("/entries"),
            json={"fields": fields},
            headers={"X-Contentful-Content-Type": content_type_id},
        )
        return ContentfulEntry(self, data)

    def get_entry(self, entry_id: str) -> "ContentfulEntry":
        return ContentfulEntry(self, self.client.request("GET", self.path(f"/entries/{entry_id}")))

    def create_asset(self, fields: dict[str, Any]) -> "ContentfulAsset":
        data = self.client.request("POST", self.path("/assets"), json={"fields": fields})
        return ContentfulAsset(self, data)

    def get_asset(self, asset_id: str) -> "ContentfulAsset":
        return ContentfulAsset(self, self.client.request("GET", self.path(f"/assets/{asset_id}")))


class ContentfulResource:
    """Entry or asset as returned by the API: sys metadata plus localized fields."""

    collection = ""

    def __init__(self, environment: ContentfulEnvironment, data: dict[str, Any]) -> None:
        self.environment = environment
        self.sys: dict[str, Any] = data.get("sys", {})
        self.fields: dict[str, Any] = data.get("fields", {})

    @property
    def id(self) -> str:
        return str(self.sys.get("id"))

    @property
    def version(self) -> Optional[int]:
        return self.sys.get("version")

    @property
    def resource_path(self) -> str:
        return self.environment.path(f"/{self.collection}/{self.id}")

    def _versioned(self, method: str, suffix: str = "", body: Any = None) -> dict[str, Any]:
        return self.environment.client.request(
            method,
            f"{self.resource_path}{suffix}",
            json=body,
            headers={"X-Contentful-Version": str(self.version)},
        )

    def publish(self):
        """PUT .../published with the current version; returns the published resource."""
        return type(self)(self.environment, self._versioned("PUT", "/published"))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id} version={self.version}>"


class ContentfulEntry(ContentfulResource):
    collection = "entries"

    def update(self) -> "ContentfulEntry":
        """PUT the local fields; returns the entry at its new version."""
        return ContentfulEntry(
            self.environment,
            self._versioned("PUT", body={"fields": self.fields})
        )


class ContentfulAsset(ContentfulResource):
    collection = "assets"

    def _is_processed(self, locales: list[str]) -> bool:
        files = self.fields.get("file") or {}
        return all((files.get(locale) or {}).get("url") for locale in locales)

    def process_for_all_locales(self) -> "ContentfulAsset":
        """
        Trigger file processing for every locale and wait until it finishes.

        Processing is asynchronous on Contentful's side: the asset is polled
        until every locale's file carries a url.

        Raises:
            AssetProcessingTimeoutError: If processing does not finish in time
        """
        locales = list((self.fields.get("file") or {}).keys())
        for locale in locales:
            self._versioned("PUT", f"/files/{locale}/process")

        env = self.environment
        for attempt in range(1, env.processing_check_retries + 1):
            if env.processing_check_wait_s:
                time.sleep(env.processing_check_wait_s)

            current = env.get_asset(self.id)
            if current._is_processed(locales):
                logger.debug("asset_processed", asset_id=self.id, attempts=attempt)
                return current

        raise AssetProcessingTimeoutError(self.id, env.processing_check_retries)


def create_client(
    access_token: str,
    *,
    base_url: str = DEFAULT_API_URL,
    headers: Optional[dict[str, str]] = None,
    timeout_s: float = 30.0,
    pool_size: int = 10,
) -> ContentfulClient:
    """Build a ContentfulClient (mirrors the SDK's createClient)."""
    return ContentfulClient(
        access_token,
        base_url=base_url,
        headers=headers,
        timeout_s=timeout_s,
        pool_size=pool_size,
    )
