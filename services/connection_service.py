"""
Connection service.

Authenticates against Contentful and resolves the environment handle the
rest of the run works with.
"""

import structlog

from integrations.contentful import ContentfulEnvironment, create_client, DEFAULT_API_URL
from models.source import ContentfulConnection

logger = structlog.get_logger(__name__)


def establish_connection(
    credentials: ContentfulConnection,
    *,
    base_url: str = DEFAULT_API_URL,
    timeout_s: float = 30.0,
    pool_size: int = 10,
    processing_check_wait_s: float = 0.5,
    processing_check_retries: int = 5,
    log=None,
) -> ContentfulEnvironment:
    """
    Connect to Contentful and return the environment handle.

    Args:
        credentials: Access token, space ID, environment ID, extra headers
        base_url: Content Management API base URL
        timeout_s: Timeout for every call made through the handle
        pool_size: HTTP connection pool size (match the worker count)
        processing_check_wait_s: Delay between asset processing checks
        processing_check_retries: Asset processing checks before giving up
        log: Run logger (module logger when omitted)

    Returns:
        ContentfulEnvironment bound to the requested environment

    Raises:
        ContentfulApiError: If the token, space or environment is rejected
        ContentfulRequestError: If Contentful cannot be reached
    """
    log = log or logger
    environment_id = credentials.environment_id or "master"

    log.info("connecting_to_contentful", space_id=credentials.space_id)
    client = create_client(
        credentials.access_token,
        base_url=base_url,
        headers=credentials.headers,
        timeout_s=timeout_s,
        pool_size=pool_size,
    )

    log.info("getting_contentful_space", space_id=credentials.space_id)
    client.get_space(credentials.space_id)

    log.info("getting_contentful_environment", environment_id=environment_id)
    environment = client.get_environment(
        credentials.space_id,
        environment_id,
        processing_check_wait_s=processing_check_wait_s,
        processing_check_retries=processing_check_retries,
    )

    log.info(
        "contentful_connected",
        space_id=credentials.space_id,
        environment_id=environment_id
    )
    return environment
