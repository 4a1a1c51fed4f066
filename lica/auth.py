"""OAuth2 sign-in: configuration, token exchange, user info and the auth handlers."""

from __future__ import annotations

import logging
import os
import secrets
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import urlencode

import requests
from werkzeug.utils import redirect
from werkzeug.wrappers import Request, Response

from lica.domain import NIL_UUID, User, new_email
from lica.errors import LicaError

log = logging.getLogger(__name__)

TOKEN_COOKIE_NAME = "token"
REFRESH_TOKEN_COOKIE_NAME = "token_refresh"
TOKEN_EXPIRY_COOKIE_NAME = "token_expiry"

DEFAULT_HOST = "http://localhost:3000"
GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
SCOPES = ("openid", "https://www.googleapis.com/auth/userinfo.email")
_TIMEOUT = 30


class AuthError(LicaError):
    """Signing in with the identity provider failed."""

    default_message = "authentication error"


@dataclass(frozen=True)
class Token:
    """Tokens handed out by the identity provider."""

    access_token: str
    refresh_token: str = ""
    token_type: str = "Bearer"
    expiry: datetime | None = None

    def expiry_timestamp(self) -> int:
        """Expiry as seconds since the epoch; 0 when unknown."""
        return int(self.expiry.timestamp()) if self.expiry is not None else 0


@dataclass(frozen=True)
class UserInfo:
    """What the identity provider tells about the signed-in user."""

    id: str = ""
    email: str = ""
    verified_email: bool = False
    picture: str = ""
    hd: str = ""

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> UserInfo:
        """Build from a JSON object, matching keys to field names case-insensitively."""
        wanted = {"id": "id", "email": "email", "verifiedemail": "verified_email",
                  "picture": "picture", "hd": "hd"}
        values: dict[str, Any] = {}
        for key, value in payload.items():
            name = wanted.get(key.lower())
            if name is not None:
                values[name] = value
        return cls(**values)


@dataclass(frozen=True)
class OAuthConfig:
    """Client settings for the OAuth2 authorization-code flow."""

    client_id: str
    client_secret: str
    redirect_url: str
    scopes: tuple[str, ...] = SCOPES
    auth_url: str = GOOGLE_AUTH_URL
    token_url: str = GOOGLE_TOKEN_URL
    extra: dict[str, str] = field(default_factory=dict)

    def auth_code_url(self, state: str) -> str:
        """URL that sends the user to the provider's consent page, asking for offline access."""
        query = {
            "access_type": "offline",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_url,
            "response_type": "code",
            "scope": " ".join(self.scopes),
            "state": state,
        }
        separator = "&" if "?" in self.auth_url else "?"
        return f"{self.auth_url}{separator}{urlencode(query)}"

    def exchange(self, code: str, session: requests.Session | None = None) -> Token:
        """Trade an authorization code for tokens."""
        http = session if session is not None else requests.Session()
        response = http.post(
            self.token_url,
            data={
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.redirect_url,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
            },
            timeout=_TIMEOUT,
        )
        if not 200 <= response.status_code < 300:
            raise AuthError(f"token exchange failed with status {response.status_code}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise AuthError("token response is not JSON") from exc
        access_token = payload.get("access_token")
        if not access_token:
            raise AuthError("token response holds no access token")
        expires_in = payload.get("expires_in")
        expiry = None
        if expires_in:
            expiry = datetime.now(timezone.utc) + timedelta(seconds=int(expires_in))
        return Token(
            access_token=access_token,
            refresh_token=payload.get("refresh_token", ""),
            token_type=payload.get("token_type", "Bearer"),
            expiry=expiry,
        )


def new_oauth2_config(base_url: str, environ: Mapping[str, str] | None = None) -> OAuthConfig:
    """Client settings from GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET and LICA_HOST."""
    env = os.environ if environ is None else environ
    client_id = env.get("GOOGLE_CLIENT_ID", "")
    if not client_id:
        log.warning("Client ID not specified. Please set env variable GOOGLE_CLIENT_ID")
    client_secret = env.get("GOOGLE_CLIENT_SECRET", "")
    if not client_secret:
        log.warning("Client Secret not specified. Please set env variable GOOGLE_CLIENT_SECRET")
    host = env.get("LICA_HOST", "") or DEFAULT_HOST
    log.debug("Host: %s", host)
    return OAuthConfig(
        client_id=client_id,
        client_secret=client_secret,
        redirect_url=host + base_url + "/callback",
    )


def get_user_info(token: Token, session: requests.Session | None = None) -> UserInfo:
    """Fetch the signed-in user's details with an access token."""
    http = session if session is not None else requests.Session()
    try:
        response = http.get(
            USERINFO_URL,
            headers={"Authorization": f"{token.token_type} {token.access_token}"},
            timeout=_TIMEOUT,
        )
    except requests.RequestException as exc:
        raise AuthError("userinfo request failed") from exc
    if response.status_code < 200 or response.status_code > 300:
        raise AuthError(f"userinfo response status is non-success: {response.status_code}")
    try:
        payload = response.json()
    except ValueError as exc:
        raise AuthError("failed to decode userinfo") from exc
    if not isinstance(payload, Mapping):
        raise AuthError("userinfo is not a JSON object")
    return UserInfo.from_json(payload)


def state_check(environ: Mapping[str, str] | None = None) -> str:
    """Anti-forgery state: LICA_STATE_CHECK, or 20 random bytes in hex."""
    env = os.environ if environ is None else environ
    value = env.get("LICA_STATE_CHECK")
    if value is None:
        value = secrets.token_hex(20)
        log.info("State check: %s", value)
    return value


def auth_login(config: OAuthConfig, state: str) -> Response:
    """Send the browser to the provider's consent page."""
    return redirect(config.auth_code_url(state), code=303)


def auth_callback(
    request: Request,
    config: OAuthConfig,
    user_service: Any,
    state: str,
    session: requests.Session | None = None,
) -> Response:
    """Finish sign-in: check state, get tokens, find or create the user, set cookies."""
    if request.args.get("state", "") != state:
        log.error("CSRF detected")
        return Response(status=403)

    try:
        token = config.exchange(request.args.get("code", ""), session)
    except (LicaError, requests.RequestException, ValueError) as exc:
        log.error("Failed code exchange: %s", exc)
        return Response(status=500)

    try:
        info = get_user_info(token, session)
    except LicaError as exc:
        log.error("Failed to get userinfo: %s", exc)
        return Response(status=500)

    try:
        email = new_email(info.email)
    except LicaError as exc:
        log.error("Failed to validate email from userinfo: %s", exc)
        return Response(status=500)

    try:
        user: User = user_service.get(email)
        if user.id == NIL_UUID:
            user = user_service.create(email)
    except Exception as exc:  # noqa: BLE001 - any storage failure ends the request
        log.error("Failed to get or create user: %s", exc)
        return Response(status=500)

    response = redirect("/", code=307)
    response.set_cookie(TOKEN_COOKIE_NAME, token.access_token, path="/")
    response.set_cookie(TOKEN_EXPIRY_COOKIE_NAME, str(token.expiry_timestamp()), path="/")
    response.set_cookie(REFRESH_TOKEN_COOKIE_NAME, token.refresh_token, path="/")
    return response


def auth_logout() -> Response:
    """Clear the auth cookies."""
    response = Response(status=204)
    for name in (TOKEN_COOKIE_NAME, TOKEN_EXPIRY_COOKIE_NAME, REFRESH_TOKEN_COOKIE_NAME):
        response.delete_cookie(name, path="/")
    return response