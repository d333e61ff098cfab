"""Pocket authorization handshake.

The handshake has three network steps and one manual one:

1. request_code: the consumer key is exchanged for a short-lived request code.
2. present_authorization_url: the user opens the provider's authorize page
   and approves the app, then confirms in the terminal.
3. request_token: the approved code is exchanged for a long-lived token.

validate_session checks a stored session by fetching the authorize URL.
Every step takes a Credentials value and returns an updated copy.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from enum import Enum

from pocketsync.config.models import DEFAULT_AUTHORIZE_BASE, Credentials
from pocketsync.core.api import (
    REQUEST_CODE_ENDPOINT,
    REQUEST_TOKEN_ENDPOINT,
    PocketClient,
    TransportError,
    require_str,
)

logger = logging.getLogger(__name__)

# Called with the authorize URL; returns once the user has approved the app
ConfirmCallback = Callable[[str], None]


class AuthorizationAborted(Exception):
    """The user did not confirm the authorize step."""


class AuthState(Enum):
    """Where a credential document stands in the handshake."""

    NO_CODE = "no-code"
    CODE_REQUESTED = "code-requested"
    AWAITING_USER_AUTHORIZATION = "awaiting-user-authorization"
    TOKEN_OBTAINED = "token-obtained"
    VALIDATED = "validated"


def auth_state(credentials: Credentials) -> AuthState:
    """Derive the handshake state from a credential document."""
    if credentials.code is None:
        return AuthState.NO_CODE
    if credentials.token is not None:
        if credentials.code_valid:
            return AuthState.VALIDATED
        return AuthState.TOKEN_OBTAINED
    if credentials.auth_url is not None:
        return AuthState.AWAITING_USER_AUTHORIZATION
    return AuthState.CODE_REQUESTED


def needs_authorization(credentials: Credentials) -> bool:
    """Check if the full handshake must run before links can be fetched."""
    return (
        credentials.code is None
        or credentials.token is None
        or credentials.code_valid is not True
    )


def build_authorize_url(
    code: str,
    redirect_url: str,
    authorize_base: str = DEFAULT_AUTHORIZE_BASE,
) -> str:
    """Build the user-facing authorization URL for a request code."""
    return f"{authorize_base}?request_token={code}&redirect_uri={redirect_url}"


def request_code(client: PocketClient, credentials: Credentials) -> Credentials:
    """Obtain a new request code.

    Any previous authorize URL and validation result belong to the old
    code and are cleared.

    Raises:
        TransportError: If the request fails
        DecodeError: If the response has no code
    """
    data = client.post(
        REQUEST_CODE_ENDPOINT,
        {
            "consumer_key": credentials.consumer_key,
            "redirect_uri": credentials.redirect_url,
        },
    )
    code = require_str(data, "code", REQUEST_CODE_ENDPOINT)
    logger.info("Obtained request code")
    return replace(credentials, code=code, auth_url=None, code_valid=None)


def present_authorization_url(
    credentials: Credentials,
    confirm: ConfirmCallback,
    authorize_base: str = DEFAULT_AUTHORIZE_BASE,
) -> Credentials:
    """Show the authorize URL and wait for the user to approve the app.

    Blocks for as long as ``confirm`` blocks.
    """
    if credentials.code is None:
        raise ValueError("Cannot build an authorize URL without a request code")

    auth_url = build_authorize_url(
        credentials.code, credentials.redirect_url, authorize_base
    )
    logger.info("Open the following URL in your browser and authorize: %s", auth_url)
    confirm(auth_url)
    return replace(credentials, auth_url=auth_url)


def request_token(client: PocketClient, credentials: Credentials) -> Credentials:
    """Exchange the approved request code for an access token.

    Raises:
        TransportError: If the request fails (e.g. the code was not approved)
        DecodeError: If the response has no access token
    """
    if credentials.code is None:
        raise ValueError("Cannot request a token without a request code")

    data = client.post(
        REQUEST_TOKEN_ENDPOINT,
        {
            "consumer_key": credentials.consumer_key,
            "code": credentials.code,
        },
    )
    token = require_str(data, "access_token", REQUEST_TOKEN_ENDPOINT)
    username = data.get("username")
    if username:
        logger.info("Authorized as %s", username)
    else:
        logger.info("Obtained access token")
    return replace(credentials, token=token)


def validate_session(client: PocketClient, credentials: Credentials) -> Credentials:
    """Check whether the stored session is still usable.

    Fetches the stored authorize URL and treats any 2xx as valid. Without
    an authorize URL the session is invalid and no request is made.
    """
    if credentials.auth_url is None:
        logger.info("No authorize URL stored, authorization required")
        return replace(credentials, code_valid=False)

    try:
        status = client.get_status(credentials.auth_url)
    except TransportError as e:
        logger.warning(
            "Cannot reach authorize URL (%s), the session will be re-authorized", e
        )
        return replace(credentials, code_valid=False)

    valid = 200 <= status < 300
    if not valid:
        logger.info("Authorize URL returned HTTP %d, authorization required", status)
    return replace(credentials, code_valid=valid)


def authorize(
    client: PocketClient,
    credentials: Credentials,
    confirm: ConfirmCallback,
    authorize_base: str = DEFAULT_AUTHORIZE_BASE,
) -> Credentials:
    """Run the full handshake: request code, user approval, request token.

    Nothing is persisted here. Errors from any step propagate unchanged.
    """
    credentials = request_code(client, credentials)
    credentials = present_authorization_url(credentials, confirm, authorize_base)
    return request_token(client, credentials)
