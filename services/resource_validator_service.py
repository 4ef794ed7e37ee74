"""
Resource validation service.

Confirms the target locale and content type exist before any record is
touched, and resolves the locale identifier to its locale code.
"""

import structlog

from integrations.contentful import ContentfulEnvironment

logger = structlog.get_logger(__name__)


def validate_and_resolve_locale(
    environment: ContentfulEnvironment,
    content_type_id: str,
    locale_id: str,
    *,
    log=None,
) -> str:
    """
    Validate the content type and locale; return the locale code.

    Args:
        environment: Connected environment handle
        content_type_id: Content type the entries will be created with
        locale_id: Locale identifier (not the code)
        log: Run logger

    Returns:
        Locale code, e.g. "en-US"

    Raises:
        ContentfulApiError: If either resource does not exist
    """
    log = log or logger

    log.info("validating_locale", locale_id=locale_id)
    locale_code = environment.get_locale(locale_id)["code"]

    log.info("validating_content_type", content_type_id=content_type_id)
    environment.get_content_type(content_type_id)

    log.info(
        "resources_validated",
        locale_id=locale_id,
        locale_code=locale_code,
        content_type_id=content_type_id
    )
    return locale_code
