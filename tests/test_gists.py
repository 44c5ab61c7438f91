"""Unit tests for the gist API client."""

from __future__ import annotations

import typing as typ

import pytest
import requests

from gfm_fixtures.gists import (
    CredentialError,
    GistClient,
    GistError,
    RemoteContractError,
    resolve_token,
)

if typ.TYPE_CHECKING:
    from pytest_mock import MockerFixture

FILES = {"slot-0.md": {"content": "# hi"}}


def _response(
    mocker: MockerFixture, status: int = 200, payload: object = None, text: str = ""
) -> typ.Any:
    response = mocker.Mock()
    response.status_code = status
    response.json.return_value = payload
    response.text = text
    return response


def _created(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": "abc123",
        "html_url": "https://gist.github.com/someone/abc123",
        "files": {"slot-0.md": {"language": "Markdown", "truncated": False}},
    }
    payload.update(overrides)
    return payload


def _client(session: typ.Any) -> GistClient:
    return GistClient(
        token="secret-token", api_base="https://example.invalid/", session=session
    )


def test_create_posts_secret_gist_with_token(mocker: MockerFixture) -> None:
    """The client should authenticate and submit the files privately."""
    session = mocker.Mock(spec=requests.Session)
    session.request.return_value = _response(mocker, 201, _created())

    gist = _client(session).create(FILES)

    assert gist.gist_id == "abc123"
    assert gist.html_url == "https://gist.github.com/someone/abc123"
    method, url = session.request.call_args.args
    assert (method, url) == ("POST", "https://example.invalid/gists"), (
        f"expected POST to the gists endpoint, got {method} {url}"
    )
    kwargs = session.request.call_args.kwargs
    assert kwargs["json"] == {"files": FILES, "public": False}
    assert kwargs["headers"]["Authorization"] == "Bearer secret-token", (
        "expected Authorization header to include Bearer token"
    )
    assert kwargs["headers"]["Accept"] == "application/vnd.github+json"


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        (_created(files={}), "`files`"),
        (_created(html_url=None), "`html_url`"),
        (
            _created(files={"slot-0.md": {"language": "Text"}}),
            "plain text data",
        ),
        (
            _created(files={"slot-0.md": {"language": "Markdown", "truncated": True}}),
            "not truncating",
        ),
        (_created(files={"other.md": {"language": "Markdown"}}), "`slot-0.md`"),
    ],
)
def test_create_rejects_unexpected_payloads_and_discards(
    mocker: MockerFixture, payload: dict[str, object], message: str
) -> None:
    """A created gist failing validation is deleted before raising."""
    session = mocker.Mock(spec=requests.Session)
    session.request.side_effect = [
        _response(mocker, 201, payload),
        _response(mocker, 204),
    ]

    with pytest.raises(RemoteContractError, match=message):
        _client(session).create(FILES)

    method, url = session.request.call_args.args
    assert (method, url) == ("DELETE", "https://example.invalid/gists/abc123"), (
        "expected the invalid gist to be deleted"
    )


def test_create_without_id_cannot_clean_up(mocker: MockerFixture) -> None:
    session = mocker.Mock(spec=requests.Session)
    session.request.return_value = _response(mocker, 201, _created(id=None))

    with pytest.raises(RemoteContractError, match="`id`"):
        _client(session).create(FILES)

    session.request.assert_called_once()


def test_http_errors_raise_gist_error(mocker: MockerFixture) -> None:
    session = mocker.Mock(spec=requests.Session)
    session.request.return_value = _response(
        mocker, 401, text='{"message": "Bad credentials"}'
    )

    with pytest.raises(GistError, match="status 401: .*Bad credentials"):
        _client(session).create_comment("abc123", "a\nb")


def test_network_errors_raise_gist_error(mocker: MockerFixture) -> None:
    session = mocker.Mock(spec=requests.Session)
    session.request.side_effect = requests.ConnectionError("boom")

    with pytest.raises(GistError, match="Failed to reach GitHub"):
        _client(session).delete("abc123")


def test_comment_and_delete_endpoints(mocker: MockerFixture) -> None:
    session = mocker.Mock(spec=requests.Session)
    session.request.side_effect = [
        _response(mocker, 201, {"id": 1}),
        _response(mocker, 204),
    ]
    client = _client(session)

    client.create_comment("abc123", "a\nb")
    client.delete("abc123")

    calls = [(call.args, call.kwargs["json"]) for call in session.request.call_args_list]
    assert calls == [
        (("POST", "https://example.invalid/gists/abc123/comments"), {"body": "a\nb"}),
        (("DELETE", "https://example.invalid/gists/abc123"), None),
    ]


def test_fetch_page_sends_token(mocker: MockerFixture) -> None:
    session = mocker.Mock(spec=requests.Session)
    session.get.return_value = _response(mocker, 200, text="<html></html>")

    page = _client(session).fetch_page("https://gist.github.com/someone/abc123")

    assert page == "<html></html>"
    headers = session.get.call_args.kwargs["headers"]
    assert headers == {"Authorization": "Bearer secret-token"}


def test_discard_logs_instead_of_raising(
    mocker: MockerFixture, caplog: pytest.LogCaptureFixture
) -> None:
    session = mocker.Mock(spec=requests.Session)
    session.request.return_value = _response(mocker, 500, text="oops")

    with caplog.at_level("WARNING", logger="gfm_fixtures.gists"):
        _client(session).discard("abc123")

    assert "could not delete gist abc123" in caplog.text


@pytest.mark.parametrize(
    ("environ", "expected"),
    [
        ({"GH_TOKEN": "a", "GITHUB_TOKEN": "b"}, "a"),
        ({"GITHUB_TOKEN": "b"}, "b"),
        ({"GH_TOKEN": "", "GITHUB_TOKEN": "b"}, "b"),
    ],
)
def test_resolve_token_prefers_gh_token(
    environ: dict[str, str], expected: str
) -> None:
    assert resolve_token(environ) == expected


def test_resolve_token_requires_a_token() -> None:
    with pytest.raises(CredentialError, match="Missing GitHub token"):
        resolve_token({})
