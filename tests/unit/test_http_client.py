"""
Unit tests for HttpRemoteStoreClient.

httpx.AsyncClient is patched; tests check URLs, payload encoding and the
mapping of transport and status failures onto sync errors.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from application.context import SyncContext
from application.exceptions import (
    ConnectivityError,
    RemoteNotFoundError,
    RemoteRejectedError,
    RemoteServerError,
)
from infrastructure.remote import HttpRemoteStoreClient
from tests.fakes import make_session
from domain.converters import session_to_create_request

BASE_URL = "https://store.example.com"
CONTEXT = SyncContext(athlete_id="uid-1", auth_token="token-abc")


def _response(status_code=200, json_data=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.content = b"" if json_data is None else b"{}"
    response.json.return_value = json_data
    response.text = text
    return response


@pytest.fixture
def http():
    """Patched AsyncClient; yields the inner client mock."""
    with patch("infrastructure.remote.http_client.httpx.AsyncClient") as mock_client_class:
        mock_client = MagicMock()
        mock_client.request = AsyncMock(return_value=_response(json_data=[]))
        mock_client_class.return_value.__aenter__ = AsyncMock(return_value=mock_client)
        mock_client_class.return_value.__aexit__ = AsyncMock(return_value=False)
        mock_client.client_class = mock_client_class
        yield mock_client


@pytest.fixture
def client():
    return HttpRemoteStoreClient(BASE_URL + "/", timeout=5.0)


@pytest.mark.unit
class TestRequests:
    @pytest.mark.asyncio
    async def test_list_sessions_url_and_params(self, http, client):
        http.request.return_value = _response(
            json_data=[{"id": "w-1", "startedAt": "2025-03-01T09:00:00Z", "exercises": []}]
        )

        sessions = await client.list_sessions(CONTEXT, include_incomplete=True, limit=10, offset=20)

        assert [s.id for s in sessions] == ["w-1"]
        method, url = http.request.call_args.args
        kwargs = http.request.call_args.kwargs
        assert method == "GET"
        assert url == f"{BASE_URL}/users/firebase/uid-1/workouts"
        assert kwargs["params"] == {"includeIncomplete": "true", "limit": 10, "offset": 20}
        assert kwargs["headers"]["Authorization"] == "Bearer token-abc"
        http.client_class.assert_called_with(timeout=5.0)

    @pytest.mark.asyncio
    async def test_wrapped_list_is_accepted(self, http, client):
        http.request.return_value = _response(
            json_data={"exercises": [{"id": "run", "name": "Run"}]}
        )

        entries = await client.list_exercises(CONTEXT)

        assert [e.name for e in entries] == ["Run"]
        assert http.request.call_args.args[1] == f"{BASE_URL}/exercises"

    @pytest.mark.asyncio
    async def test_create_session_sends_camel_case(self, http, client):
        http.request.return_value = _response(
            json_data={"id": "w-9", "startedAt": "2025-03-01T09:00:00Z", "exercises": []}
        )
        payload = session_to_create_request(make_session(), {"Run": "run"})

        created = await client.create_session(CONTEXT, payload)

        assert created.id == "w-9"
        body = http.request.call_args.kwargs["json"]
        assert "startedAt" in body
        assert body["exercises"][0] == {
            "exerciseId": "run",
            "order": 0,
            "targetDuration": 240,
            "targetDistance": 1000.0,
        }

    @pytest.mark.asyncio
    async def test_assigned_templates_are_not_personal(self, http, client):
        http.request.return_value = _response(
            json_data=[{"id": "t-1", "name": "Coach Plan", "isPersonal": True, "exercises": []}]
        )

        templates = await client.list_assigned_templates(CONTEXT)

        assert templates[0].is_personal is False
        assert http.request.call_args.args[1].endswith("/assigned-templates")

    @pytest.mark.asyncio
    async def test_delete_with_empty_body(self, http, client):
        http.request.return_value = _response(status_code=204)

        assert await client.delete_session(CONTEXT, "w-1") is None
        assert http.request.call_args.args == ("DELETE", f"{BASE_URL}/users/firebase/uid-1/workouts/w-1")

    @pytest.mark.asyncio
    async def test_no_token_no_auth_header(self, http, client):
        await client.list_personal_bests(SyncContext(athlete_id="uid-1"))

        assert "Authorization" not in http.request.call_args.kwargs["headers"]


@pytest.mark.unit
class TestErrorMapping:
    @pytest.mark.parametrize(
        "status,error_type",
        [
            (404, RemoteNotFoundError),
            (500, RemoteServerError),
            (503, RemoteServerError),
            (401, RemoteRejectedError),
            (403, RemoteRejectedError),
            (422, RemoteRejectedError),
        ],
    )
    @pytest.mark.asyncio
    async def test_status_codes(self, http, client, status, error_type):
        http.request.return_value = _response(status_code=status, text="nope")

        with pytest.raises(error_type) as exc_info:
            await client.list_personal_templates(CONTEXT)

        assert exc_info.value.status_code == status

    @pytest.mark.parametrize(
        "error",
        [
            httpx.ConnectError("refused"),
            httpx.ReadTimeout("slow"),
            httpx.ReadError("reset"),
        ],
    )
    @pytest.mark.asyncio
    async def test_transport_errors_are_connectivity(self, http, client, error):
        http.request.side_effect = error

        with pytest.raises(ConnectivityError):
            await client.list_exercises(CONTEXT)
