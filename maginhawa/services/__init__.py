"""Services behind the submission endpoints."""

from maginhawa.services.github_service import GitHubService
from maginhawa.services.place_repository import PlaceRepository
from maginhawa.services.submission_service import SubmissionService, generate_slug

__all__ = ["GitHubService", "PlaceRepository", "SubmissionService", "generate_slug"]
