"""
Asset file naming.

Asset files are named after their owning entry (<entry_id><ext>) so every
upload gets a unique filename. The extension and MIME type come from the
upload URL; URLs without a recognizable extension fall back to JPEG.
"""

import mimetypes
from pathlib import PurePosixPath
from typing import Optional
from urllib.parse import urlparse

DEFAULT_CONTENT_TYPE = "image/jpeg"
DEFAULT_EXTENSION = ".jpg"

# mimetypes.guess_extension() picks odd spellings for a few common types
PREFERRED_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/svg+xml": ".svg",
    "image/tiff": ".tiff",
}


def url_extension(url: Optional[str]) -> Optional[str]:
    """Lowercased extension of the URL path (query string ignored), or None."""
    if not url:
        return None
    suffix = PurePosixPath(urlparse(str(url)).path).suffix.lower()
    return suffix or None


def guess_content_type(url: Optional[str]) -> str:
    """
    MIME type for an upload URL.

    Args:
        url: Source URL of the binary

    Returns:
        MIME type, DEFAULT_CONTENT_TYPE when it cannot be guessed
    """
    extension = url_extension(url)
    if extension:
        content_type, _ = mimetypes.guess_type(f"file{extension}")
        if content_type:
            return content_type
    return DEFAULT_CONTENT_TYPE


def extension_for(content_type: str, url: Optional[str] = None) -> str:
    """Extension matching content_type, preferring the URL's own extension."""
    extension = url_extension(url)
    if extension and mimetypes.guess_type(f"file{extension}")[0] == content_type:
        return extension

    if content_type in PREFERRED_EXTENSIONS:
        return PREFERRED_EXTENSIONS[content_type]

    return mimetypes.guess_extension(content_type) or DEFAULT_EXTENSION


def asset_file_name(entry_id: str, url: Optional[str]) -> tuple[str, str]:
    """
    Build the asset filename and content type for an entry.

    Examples:
        ("abc123", "https://cdn.example.com/p/1.png")  → ("abc123.png", "image/png")
        ("abc123", "https://picsum.photos/200")         → ("abc123.jpg", "image/jpeg")

    Returns:
        (file_name, content_type)
    """
    content_type = guess_content_type(url)
    return f"{entry_id}{extension_for(content_type, url)}", content_type
