"""FastAPI server for place submissions from the web forms."""

import json
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from maginhawa.config import Config, get_config, setup_logging
from maginhawa.errors import GitHubError, SubmissionRejected
from maginhawa.guardrails import (
    CSRF_TOKEN_HEADER,
    RateLimiter,
    cookie_name,
    get_or_create_secret,
    verify_token,
)
from maginhawa.guardrails.csrf import COOKIE_MAX_AGE
from maginhawa.models.submission import (
    CreatePlaceRequest,
    DeletePlaceRequest,
    UpdatePlaceRequest,
)
from maginhawa.services import GitHubService, PlaceRepository, SubmissionService

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """Get client IP address for rate limiting (reverse proxy aware)."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host
    return "unknown"


def _error(status_code: int, message: str, details: list | None = None) -> JSONResponse:
    content = {"success": False, "error": message}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _validation_details(error: ValidationError) -> list[dict]:
    return [
        {
            "path": ".".join(str(part) for part in err["loc"]) or "root",
            "message": err["msg"],
            "code": err["type"],
        }
        for err in error.errors(include_url=False)
    ]


def create_app(
    cfg: Config | None = None,
    github: GitHubService | None = None,
    rate_limiter: RateLimiter | None = None,
) -> FastAPI:
    """Build the submission API.

    Args:
        cfg: Configuration (global config if omitted)
        github: GitHub service (built from cfg if omitted)
        rate_limiter: Submission rate limiter (built from cfg if omitted)
    """
    cfg = cfg or get_config()

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        """Application lifespan manager."""
        logger.info(f"Starting Maginhawa submission API on {cfg.server_host}:{cfg.server_port}")
        logger.info(f"Places directory: {cfg.places_dir}")
        if not _app.state.submissions.github.is_configured():
            logger.warning("Change proposals disabled until GITHUB_PAT is set")
        yield
        logger.info("Shutting down Maginhawa submission API")

    app = FastAPI(
        title="Where In Maginhawa API",
        description="Submission API for the Where In Maginhawa places directory",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.config = cfg
    app.state.rate_limiter = rate_limiter or RateLimiter(
        cfg.rate_limit_max_requests, cfg.rate_limit_window_seconds
    )
    app.state.submissions = SubmissionService(
        github or GitHubService(cfg), PlaceRepository(cfg.places_dir)
    )

    csrf_cookie = cookie_name(cfg.is_production)

    def guard(request: Request) -> JSONResponse | None:
        """CSRF and rate limit checks shared by every submission endpoint."""
        secret = request.cookies.get(csrf_cookie)
        if not verify_token(secret, request.headers.get(CSRF_TOKEN_HEADER)):
            return _error(403, "Invalid or missing CSRF token")

        limiter: RateLimiter = request.app.state.rate_limiter
        if not limiter.check(get_client_ip(request)):
            return _error(
                429,
                "Rate limit exceeded. Please try again later. "
                f"(Maximum {limiter.limit} submissions per hour)",
            )
        return None

    async def handle(request: Request, model: type[BaseModel], submit, message: str):
        rejection = guard(request)
        if rejection is not None:
            return rejection

        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return _error(400, "Invalid JSON in request body")

        try:
            payload = model.model_validate(body)
        except ValidationError as e:
            return _error(400, "Validation failed", _validation_details(e))

        try:
            result = await run_in_threadpool(submit, payload)
        except SubmissionRejected as e:
            return _error(e.status_code, e.message, e.details)
        except ValueError as e:
            logger.error(f"Submission not possible: {e}")
            return _error(500, str(e))
        except GitHubError as e:
            logger.error(f"PR creation failed: {e}")
            return _error(500, f"Failed to create PR: {e}")

        return {
            "success": True,
            "prUrl": result.pr_url,
            "prNumber": result.pr_number,
            "message": message,
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint for monitoring."""
        return {"status": "healthy", "service": "maginhawa-api"}

    @app.get("/api/csrf")
    async def csrf_token(request: Request):
        """Issue the CSRF secret cookie and return the matching token."""
        secret = get_or_create_secret(request.cookies.get(csrf_cookie))
        response = JSONResponse({"csrfToken": secret})
        response.set_cookie(
            csrf_cookie,
            secret,
            max_age=COOKIE_MAX_AGE,
            path="/",
            secure=cfg.is_production,
            httponly=True,
            samesite="strict",
        )
        return response

    @app.post("/api/places/create-pr")
    async def create_place(request: Request):
        """Propose a new place."""
        return await handle(
            request,
            CreatePlaceRequest,
            request.app.state.submissions.submit_new_place,
            "Submission successful! Your place will be reviewed shortly.",
        )

    @app.post("/api/places/update-pr")
    async def update_place(request: Request):
        """Propose changes to an existing place."""
        return await handle(
            request,
            UpdatePlaceRequest,
            request.app.state.submissions.submit_update,
            "Changes submitted successfully! Your updates will be reviewed shortly.",
        )

    @app.post("/api/places/delete-pr")
    async def delete_place(request: Request):
        """Report a closed place for removal."""
        return await handle(
            request,
            DeletePlaceRequest,
            request.app.state.submissions.submit_removal,
            "Closure report submitted! The removal will be reviewed shortly.",
        )

    return app


def run_server(cfg: Config | None = None) -> None:
    """Run the FastAPI server using uvicorn."""
    cfg = cfg or get_config()
    setup_logging(cfg)

    uvicorn.run(
        create_app(cfg),
        host=cfg.server_host,
        port=cfg.server_port,
        log_level=cfg.log_level.lower(),
    )


if __name__ == "__main__":
    run_server()
