"""Authentication routes.

Sign-in goes through the provider's authorization page and comes back to
`/auth/callback/{provider}`, which sets the session cookie. The session
endpoints only decode that cookie; they read the user store on an explicit
refresh (`POST /auth/session`) and nowhere else.
"""

import secrets
from typing import Any
from urllib.parse import urlencode

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Body, HTTPException, Query, Request, Response, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from guild.adapter.error import OAuthProviderError
from guild.application.usecase.auth import (
    GetSessionUseCase,
    LoginUseCase,
    UpdateSessionUseCase,
)
from guild.application.usecase.auth.get_session import GetSessionRequest
from guild.application.usecase.auth.login import LoginRequest
from guild.application.usecase.auth.update_session import UpdateSessionRequest
from guild.config import Settings
from guild.domain.error import SignInRefusedError
from guild.domain.service import AuthService, OAuthClient
from guild.domain.value import AuthProvider
from guild.util.jwt import JWTError
from guild.util.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)

# Remembers the requested post sign-in target between sign-in and callback
CALLBACK_URL_COOKIE = "callback_url"
CALLBACK_URL_MAX_AGE = 10 * 60


class ProviderInfo(BaseModel):
    """Sign-in entry point for one provider."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    type: str = "oauth"
    signin_url: str
    callback_url: str


class PagesInfo(BaseModel):
    """Frontend pages used by the auth flow."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    sign_in: str
    error: str
    new_user: str


class ProvidersResponse(BaseModel):
    """Configured providers and auth pages."""

    providers: dict[str, ProviderInfo]
    pages: PagesInfo


class SessionUpdateBody(BaseModel):
    """Optional payload of a session refresh."""

    data: dict[str, Any] | None = None


class SignOutResponse(BaseModel):
    """Sign-out response."""

    success: bool
    url: str


def _error_redirect(page: str, error: str) -> RedirectResponse:
    return RedirectResponse(
        url=f"{page}?{urlencode({'error': error})}",
        status_code=status.HTTP_302_FOUND,
    )


def _cookie_options(settings: Settings) -> dict[str, Any]:
    # Plain HTTP in development and tests
    is_production = settings.environment == "production"
    return {
        "httponly": True,
        "secure": is_production,
        "samesite": "lax",
        "path": "/",
    }


def _set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.auth.cookie_name,
        value=token,
        max_age=settings.auth.session_max_age_seconds,
        **_cookie_options(settings),
    )


@router.get("/providers", response_model=ProvidersResponse)
async def list_providers(
    oauth_clients: FromDishka[dict[AuthProvider, OAuthClient]],
    settings: FromDishka[Settings],
) -> ProvidersResponse:
    """List the providers a user can sign in with."""
    base_url = settings.api.base_url
    providers = {
        provider.value: ProviderInfo(
            id=provider.value,
            name=provider.value.capitalize(),
            signin_url=f"{base_url}/auth/signin/{provider.value}",
            callback_url=f"{base_url}/auth/callback/{provider.value}",
        )
        for provider in oauth_clients
    }
    return ProvidersResponse(
        providers=providers,
        pages=PagesInfo(
            sign_in=settings.pages.sign_in,
            error=settings.pages.error,
            new_user=settings.pages.new_user,
        ),
    )


@router.get("/signin/{provider}")
async def sign_in(
    provider: str,
    auth_service: FromDishka[AuthService],
    settings: FromDishka[Settings],
    callback_url: str | None = Query(default=None, alias="callbackUrl"),
) -> RedirectResponse:
    """Redirect to the provider's authorization page.

    Example:
        GET /auth/signin/discord?callbackUrl=/dashboard

        Redirects to: https://discord.com/oauth2/authorize?...
    """
    try:
        auth_provider = AuthProvider(provider)
    except ValueError:
        logger.warning(f"Sign-in requested for unknown provider: {provider}")
        return _error_redirect(settings.pages.sign_in, "OAuthSignin")

    state = secrets.token_urlsafe(32)
    logger.info(f"Initiating {auth_provider.value} sign-in")

    try:
        authorization_url = await auth_service.initiate_login(auth_provider, state)
    except OAuthProviderError as e:
        logger.error(f"Could not initiate {auth_provider.value} sign-in: {e}")
        return _error_redirect(settings.pages.error, "OAuthSignin")

    response = RedirectResponse(url=authorization_url, status_code=status.HTTP_302_FOUND)
    if callback_url:
        response.set_cookie(
            key=CALLBACK_URL_COOKIE,
            value=callback_url,
            max_age=CALLBACK_URL_MAX_AGE,
            **_cookie_options(settings),
        )
    return response


@router.get("/callback/{provider}")
async def oauth_callback(
    provider: str,
    request: Request,
    login_use_case: FromDishka[LoginUseCase],
    settings: FromDishka[Settings],
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
) -> RedirectResponse:
    """Complete sign-in and set the session cookie.

    Example:
        GET /auth/callback/google?code=abc123&state=xyz789

        Redirects to: the base URL
        Sets cookie: session_token
    """
    if error:
        # The user declined on the provider's consent screen
        logger.info(f"Provider {provider} returned error: {error}")
        return _error_redirect(settings.pages.error, "AccessDenied")

    try:
        auth_provider = AuthProvider(provider)
    except ValueError:
        logger.warning(f"Callback received for unknown provider: {provider}")
        return _error_redirect(settings.pages.error, "Callback")

    if not code or not state:
        logger.warning(f"Callback for {provider} is missing code or state")
        return _error_redirect(settings.pages.error, "Callback")

    try:
        login_response = await login_use_case.execute(
            LoginRequest(
                provider=auth_provider,
                code=code,
                state=state,
                callback_url=request.cookies.get(CALLBACK_URL_COOKIE),
            )
        )
    except SignInRefusedError as e:
        logger.warning(f"Sign-in refused: {e}")
        return _error_redirect(settings.pages.error, "AccessDenied")
    except OAuthProviderError as e:
        logger.error(f"{auth_provider.value} OAuth error during callback: {e}")
        return _error_redirect(settings.pages.error, "Callback")
    except Exception as e:
        logger.exception(f"Unexpected error during OAuth callback: {e}")
        return _error_redirect(settings.pages.error, "Callback")

    logger.info(
        f"Sign-in complete: user_id={login_response.user_id}, "
        f"new_user={login_response.is_new_user}"
    )

    response = RedirectResponse(
        url=login_response.redirect_url, status_code=status.HTTP_302_FOUND
    )
    _set_session_cookie(response, login_response.token, settings)
    response.delete_cookie(CALLBACK_URL_COOKIE, path="/")
    return response


@router.get("/session")
async def get_session(
    request: Request,
    get_session_use_case: FromDishka[GetSessionUseCase],
    settings: FromDishka[Settings],
) -> dict[str, Any]:
    """Return the current session, or `{}` when not signed in.

    Example:
        {
            "user": {
                "id": "...",
                "displayName": "Ada",
                "username": "ada",
                "rank": "recruit",
                "roles": ["user"],
                "isBanned": false,
                ...
            },
            "expires": "2026-11-01T12:00:00Z"
        }
    """
    session = await get_session_use_case.execute(
        GetSessionRequest(token=request.cookies.get(settings.auth.cookie_name))
    )
    if session is None:
        return {}
    return session.model_dump(mode="json", by_alias=True)


@router.post("/session")
async def update_session(
    request: Request,
    response: Response,
    update_session_use_case: FromDishka[UpdateSessionUseCase],
    settings: FromDishka[Settings],
    body: SessionUpdateBody | None = Body(default=None),
) -> dict[str, Any]:
    """Refresh the session token from the user record.

    Fields in `data` are merged into the token after the refresh.

    Raises:
        HTTPException: 401 if there is no valid session
        HTTPException: 422 if `data` does not fit the token fields
    """
    token = request.cookies.get(settings.auth.cookie_name)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated"
        )

    try:
        result = await update_session_use_case.execute(
            UpdateSessionRequest(token=token, data=body.data if body else None)
        )
    except JWTError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except ValidationError as e:
        # Merged values must still fit the token claim types
        logger.warning(f"Rejected session update payload: {e.error_count()} errors")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Session data does not match the token fields",
        )

    _set_session_cookie(response, result.token, settings)
    return result.session.model_dump(mode="json", by_alias=True)


@router.post("/signout", response_model=SignOutResponse)
async def sign_out(
    response: Response,
    settings: FromDishka[Settings],
) -> SignOutResponse:
    """Clear the session cookie."""
    response.delete_cookie(key=settings.auth.cookie_name, path="/")
    return SignOutResponse(success=True, url=settings.api.base_url)
