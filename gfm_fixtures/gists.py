r"""Thin client for the GitHub gist endpoints used to render fixtures.

GitHub renders markdown differently in gist files and gist comments, so a
fixture run creates one secret gist, appends comments to it, downloads the
rendered gist page, and deletes the gist again. This module wraps those four
calls, surfaces HTTP failures as :class:`GistError`, and checks the parts of
the creation payload the rest of the pipeline relies on.

Example
-------
>>> from gfm_fixtures.gists import GistClient, resolve_token
>>> client = GistClient(token=resolve_token())  # doctest: +SKIP
>>> gist = client.create({"slot-0.md": {"content": "# hi"}})  # doctest: +SKIP
>>> html = client.fetch_page(gist.html_url)  # doctest: +SKIP
>>> client.delete(gist.gist_id)  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import os
import typing as typ
from http import HTTPStatus

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ._constants import MARKDOWN_LANGUAGE, TOKEN_ENV_VARS
from .models import CreatedGist

DEFAULT_API_BASE = "https://api.github.com"
_ACCEPT_HEADER = "application/vnd.github+json"

logger = logging.getLogger(__name__)


class CredentialError(RuntimeError):
    """Raised when no GitHub token is available."""


class GistError(RuntimeError):
    """Raised when the GitHub API returns an unexpected error response."""


class RemoteContractError(RuntimeError):
    """Raised when GitHub's response does not have the expected shape.

    This most often means the submitted markdown contained characters GitHub
    cannot treat as plain text, such as raw control characters or lone
    surrogates.
    """


def resolve_token(environ: typ.Mapping[str, str] | None = None) -> str:
    """Return the GitHub token from ``GH_TOKEN`` or ``GITHUB_TOKEN``.

    The token needs the ``gist`` scope. The ``GITHUB_TOKEN`` provided to
    GitHub Actions does not have it, so ``GH_TOKEN`` is checked first.
    """
    env = os.environ if environ is None else environ
    for name in TOKEN_ENV_VARS:
        token = env.get(name)
        if token:
            return token
    msg = "Missing GitHub token: expected `GH_TOKEN` in env"
    raise CredentialError(msg)


class GistClient:
    """Create, comment on, fetch, and delete gists.

    Every call is a single request; nothing is retried except the idempotent
    page download, which goes through a ``Retry`` adapter on transient
    server errors.
    """

    default_api_base = DEFAULT_API_BASE

    def __init__(
        self,
        *,
        token: str,
        api_base: str = DEFAULT_API_BASE,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialise the client with a token and optional transport.

        Parameters
        ----------
        token : str
            GitHub token with the ``gist`` scope.
        api_base : str, optional
            Base URL for the GitHub API; override for GitHub Enterprise.
        session : requests.Session, optional
            Preconfigured session to reuse connections. Defaults to a new
            session with a retrying adapter mounted for page downloads.
        timeout : float, optional
            Per-request timeout in seconds. Defaults to ``30.0``.
        """
        self._api_base = api_base.rstrip("/") or DEFAULT_API_BASE
        self._session = session or _build_session()
        self.timeout = timeout
        self._headers = {
            "Accept": _ACCEPT_HEADER,
            "User-Agent": "gfm-fixtures/0.1",
            "Authorization": f"Bearer {token}",
        }

    def create(self, files: dict[str, dict[str, str]]) -> CreatedGist:
        """Create a secret gist holding ``files`` and validate the response.

        A gist that was created but fails validation is discarded before the
        error is raised.

        Raises
        ------
        RemoteContractError
            If the response lacks ``files``, ``html_url`` or ``id``, or if any
            file was not detected as markdown or was truncated.
        """
        payload = self._request(
            "POST",
            f"{self._api_base}/gists",
            body={"files": files, "public": False},
            action="create gist",
        )
        gist_id = payload.get("id")
        if not gist_id:
            msg = "expected `id` to be returned by GitHub"
            raise RemoteContractError(msg)
        try:
            gist = _validate_created(str(gist_id), payload, files)
        except RemoteContractError:
            self.discard(str(gist_id))
            raise
        logger.debug("created gist %s with %d file(s)", gist.gist_id, len(files))
        return gist

    def create_comment(self, gist_id: str, body: str) -> None:
        """Append a comment to the gist; returns once GitHub has stored it."""
        self._request(
            "POST",
            f"{self._api_base}/gists/{gist_id}/comments",
            body={"body": body},
            action="post gist comment",
        )

    def fetch_page(self, html_url: str) -> str:
        """Download the rendered gist page."""
        try:
            response = self._session.get(
                html_url,
                headers={"Authorization": self._headers["Authorization"]},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            msg = f"Failed to fetch rendered gist page '{html_url}': {exc}"
            raise GistError(msg) from exc
        _raise_for_status(response, f"fetch of '{html_url}'")
        return response.text

    def delete(self, gist_id: str) -> None:
        """Delete the gist."""
        self._request(
            "DELETE",
            f"{self._api_base}/gists/{gist_id}",
            action="delete gist",
            expect_json=False,
        )
        logger.debug("deleted gist %s", gist_id)

    def discard(self, gist_id: str) -> None:
        """Delete the gist after a failure, logging rather than raising errors.

        Used on abort paths so a failing cleanup never masks the error that
        caused the abort.
        """
        try:
            self.delete(gist_id)
        except GistError as exc:
            logger.warning("could not delete gist %s: %s", gist_id, exc)

    def _request(
        self,
        method: str,
        url: str,
        *,
        action: str,
        body: dict[str, typ.Any] | None = None,
        expect_json: bool = True,
    ) -> dict[str, typ.Any]:
        try:
            response = self._session.request(
                method, url, headers=self._headers, json=body, timeout=self.timeout
            )
        except requests.RequestException as exc:
            msg = f"Failed to reach GitHub to {action}: {exc}"
            raise GistError(msg) from exc

        _raise_for_status(response, action)
        if not expect_json:
            return {}
        try:
            payload = response.json()
        except ValueError as exc:
            msg = f"GitHub response to {action} was not valid JSON"
            raise GistError(msg) from exc
        if not isinstance(payload, dict):
            msg = f"GitHub response to {action} was not a JSON object"
            raise GistError(msg)
        return payload


def _build_session() -> requests.Session:
    session = requests.Session()
    retry = Retry(
        total=5,
        read=5,
        connect=3,
        backoff_factor=0.5,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("GET", "HEAD"),
    )
    adapter = HTTPAdapter(max_retries=retry)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def _raise_for_status(response: requests.Response, action: str) -> None:
    if response.status_code >= HTTPStatus.BAD_REQUEST:
        snippet = response.text[:200]
        msg = f"GitHub {action} failed with status {response.status_code}: {snippet}"
        raise GistError(msg)


def _validate_created(
    gist_id: str, payload: dict[str, typ.Any], files: dict[str, dict[str, str]]
) -> CreatedGist:
    outputs = payload.get("files")
    html_url = payload.get("html_url")
    if not outputs or not isinstance(outputs, dict):
        msg = "expected `files` to be returned by GitHub"
        raise RemoteContractError(msg)
    if not html_url:
        msg = "expected `html_url` to be returned by GitHub"
        raise RemoteContractError(msg)
    for name in files:
        _check_file(name, outputs.get(name))
    return CreatedGist(gist_id=gist_id, html_url=str(html_url), files=outputs)


def _check_file(name: str, info: object) -> None:
    """Validate the per-file metadata GitHub returns for an uploaded slot."""
    if not isinstance(info, dict):
        msg = f"expected `{name}` to be returned by GitHub"
        raise RemoteContractError(msg)
    if info.get("language") != MARKDOWN_LANGUAGE:
        msg = (
            f"expected GitHub seeing `{name}` as plain text data (markdown), "
            "instead it saw it as binary data; this is likely because there are "
            "weird characters (such as control characters or lone surrogates) in it"
        )
        raise RemoteContractError(msg)
    if info.get("truncated"):
        msg = f"expected GitHub not truncating `{name}`"
        raise RemoteContractError(msg)


__all__ = [
    "CredentialError",
    "DEFAULT_API_BASE",
    "GistClient",
    "GistError",
    "RemoteContractError",
    "resolve_token",
]
