"""
CSRF guard.

Requires a fixed custom header on state-changing auth requests. Browsers
cannot add custom headers to cross-site requests without a CORS preflight,
which the server rejects for foreign origins. This is a header-presence
check, not a per-session token.
"""

import logging

from fastapi import Request

from shared.config import Settings

from .exceptions import CSRFError

logger = logging.getLogger(__name__)


def is_valid(request: Request, settings: Settings) -> bool:
    """True iff the CSRF marker header carries the expected value."""
    return request.headers.get(settings.csrf_header_name) == settings.csrf_header_value


def ensure_valid(request: Request, settings: Settings) -> None:
    """
    Raise CSRFError unless the request carries the marker header.

    Raises:
        CSRFError: If the header is missing or has the wrong value
    """
    if not is_valid(request, settings):
        logger.warning(
            "Rejected request without CSRF marker: %s %s",
            request.method,
            request.url.path,
        )
        raise CSRFError()
