"""GitHub service for opening place change proposals as pull requests."""

import base64
import logging
from typing import Any

import httpx

from maginhawa.config import Config, get_config
from maginhawa.errors import GitHubError
from maginhawa.models.submission import ProposalResult

logger = logging.getLogger(__name__)

GITHUB_API_VERSION = "2022-11-28"


class GitHubService:
    """Service for proposing changes to the places repository.

    Every change is made on a fresh branch cut from the base branch and
    offered as a pull request; nothing is ever committed to the base branch
    directly.
    """

    def __init__(
        self, config: Config | None = None, client: httpx.Client | None = None
    ) -> None:
        """Initialize the GitHub service.

        Args:
            config: Application configuration (global config if omitted)
            client: HTTP client to use (one is created if omitted)
        """
        self.config = config or get_config()
        if not self.config.has_github_config():
            logger.warning("GitHub not configured - service will not be functional")
            self.client = None
            return

        self.client = client or httpx.Client(timeout=30.0)
        self.client.headers.update(
            {
                "Authorization": f"Bearer {self.config.github_pat}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": GITHUB_API_VERSION,
            }
        )
        logger.info(
            f"GitHub service initialized for "
            f"{self.config.github_owner}/{self.config.github_repo}"
        )

    def is_configured(self) -> bool:
        """Check if GitHub is properly configured.

        Returns:
            True if a token and target repository are set, False otherwise
        """
        return self.client is not None

    def _repo_url(self, path: str) -> str:
        base = self.config.github_api_url.rstrip("/")
        return f"{base}/repos/{self.config.github_owner}/{self.config.github_repo}/{path}"

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        if not self.client:
            msg = "GitHub is not configured. Please set GITHUB_PAT environment variable."
            raise ValueError(msg)

        try:
            response = self.client.request(method, self._repo_url(path), **kwargs)
        except httpx.HTTPError as e:
            raise GitHubError(f"GitHub request failed: {e}") from e

        if response.is_error and response.status_code != 404:
            try:
                message = response.json().get("message", response.text)
            except ValueError:
                message = response.text
            raise GitHubError(
                f"GitHub API error {response.status_code} on {method} {path}: {message}",
                status_code=response.status_code,
            )
        return response

    def _file_path(self, slug: str) -> str:
        return f"{self.config.github_places_path.strip('/')}/{slug}.json"

    def _create_branch(self, branch: str) -> None:
        base = self.config.github_base_branch
        response = self._request("GET", f"git/ref/heads/{base}")
        if response.status_code == 404:
            raise GitHubError(f"Base branch not found: {base}", status_code=404)
        sha = response.json()["object"]["sha"]

        self._request("POST", "git/refs", json={"ref": f"refs/heads/{branch}", "sha": sha})
        logger.info(f"Created branch {branch} from {base}")

    def _file_sha(self, file_path: str, branch: str) -> str | None:
        response = self._request("GET", f"contents/{file_path}", params={"ref": branch})
        if response.status_code == 404:
            return None
        data = response.json()
        if not isinstance(data, dict) or "sha" not in data:
            raise GitHubError(f"{file_path} is not a file")
        return data["sha"]

    def _open_pull_request(self, branch: str, title: str, body: str) -> ProposalResult:
        response = self._request(
            "POST",
            "pulls",
            json={
                "title": title,
                "body": body,
                "head": branch,
                "base": self.config.github_base_branch,
            },
        )
        data = response.json()
        logger.info(f"Opened PR #{data['number']}: {title}")
        return ProposalResult(pr_url=data["html_url"], pr_number=data["number"], branch=branch)

    def propose_file(
        self,
        slug: str,
        content: str,
        *,
        branch: str,
        title: str,
        body: str,
        commit_message: str,
    ) -> ProposalResult:
        """Write a place file on a new branch and open a pull request.

        Args:
            slug: Place slug (determines the file name)
            content: Full file content
            branch: Name of the branch to create
            title: Pull request title
            body: Pull request description (Markdown)
            commit_message: Commit message for the file change

        Returns:
            The opened pull request

        Raises:
            ValueError: If GitHub is not configured
            GitHubError: If any GitHub call fails
        """
        file_path = self._file_path(slug)
        self._create_branch(branch)

        payload = {
            "message": commit_message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": branch,
        }
        sha = self._file_sha(file_path, branch)
        if sha:
            payload["sha"] = sha

        self._request("PUT", f"contents/{file_path}", json=payload)
        logger.info(f"Committed {file_path} to {branch}")

        return self._open_pull_request(branch, title, body)

    def propose_deletion(
        self,
        slug: str,
        *,
        branch: str,
        title: str,
        body: str,
        commit_message: str,
    ) -> ProposalResult:
        """Delete a place file on a new branch and open a pull request.

        Raises:
            ValueError: If GitHub is not configured
            GitHubError: If the file does not exist or any GitHub call fails
        """
        file_path = self._file_path(slug)
        self._create_branch(branch)

        sha = self._file_sha(file_path, branch)
        if not sha:
            raise GitHubError(f"File not found: {file_path}", status_code=404)

        self._request(
            "DELETE",
            f"contents/{file_path}",
            json={"message": commit_message, "sha": sha, "branch": branch},
        )
        logger.info(f"Deleted {file_path} on {branch}")

        return self._open_pull_request(branch, title, body)
