"""
FastAPI Endpoints for the URL Shortener

Endpoints only handle:
- Request parsing (Pydantic models)
- Choosing the public base for short links
- Delegating to the service layer

Domain errors raised by the services are rendered by the exception handler
registered in shortener.main, so endpoints contain no error mapping.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from shortener.api.schemas import ErrorResponse, ShortenRequest, ShortenResponse
from shortener.services.redirect_service import RedirectService
from shortener.services.url_service import URLShorteningService

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_url_service(request: Request) -> URLShorteningService:
    """Dependency returning the shortening service bound to the app's store."""
    return request.app.state.url_service


def get_redirect_service(request: Request) -> RedirectService:
    """Dependency returning the redirect service bound to the app's store."""
    return request.app.state.redirect_service


def get_public_base(request: Request) -> str:
    """
    Return the base that short links are built on.

    BASE_URL from settings wins; otherwise the request's scheme and Host
    header are used.

    Raises:
        HTTPException 400: If neither is available
    """
    configured = request.app.state.settings.BASE_URL
    if configured:
        return configured

    host = request.headers.get("Host")
    if not host:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing Host header"
        )
    return f"{request.url.scheme}://{host}"


@router.post(
    "/",
    response_model=ShortenResponse,
    responses=ERROR_RESPONSES,
    summary="Create a short URL",
    description="Takes a long URL and returns the short link for it"
)
@router.post(
    "/shorten",
    response_model=ShortenResponse,
    responses=ERROR_RESPONSES,
    include_in_schema=False,
)
async def create_short_url(
    body: ShortenRequest,
    base: str = Depends(get_public_base),
    url_service: URLShorteningService = Depends(get_url_service),
) -> ShortenResponse:
    """
    Shorten a URL. Submitting the same URL again returns the same link.
    """
    short_link = await url_service.shorten(body.url, base)
    return ShortenResponse(url=short_link)


@router.get(
    "/{token}",
    status_code=status.HTTP_302_FOUND,
    responses=ERROR_RESPONSES,
    summary="Redirect to original URL",
    description="Takes a token and redirects to the original long URL"
)
async def redirect_to_url(
    token: str,
    redirect_service: RedirectService = Depends(get_redirect_service),
) -> RedirectResponse:
    """
    Redirect to the original URL for a given token.

    Raises:
        MalformedTokenError: If the token has characters outside the alphabet
        NotFoundError: If the token names no stored URL
    """
    original_url = await redirect_service.resolve(token)

    return RedirectResponse(
        url=original_url,
        status_code=status.HTTP_302_FOUND
    )
