"""Tests for the Linode REST provider."""

import json
import sys
from pathlib import Path

import pytest
import requests

sys.path.insert(0, str(Path(__file__).parent))

import fakes  # noqa: E402,F401

from commander.errors import (  # noqa: E402
    AuthenticationError,
    NotFoundError,
    TransportError,
)
from commander.linode_provider import LinodeProvider  # noqa: E402
from commander.providers import InstanceStatus  # noqa: E402


def make_response(status_code=200, body=None, raw=None):
    response = requests.Response()
    response.status_code = status_code
    response.url = "https://api.example.test"
    if raw is not None:
        response._content = raw
    elif body is not None:
        response._content = json.dumps(body).encode()
    else:
        response._content = b""
    return response


class Recorder:
    """Stands in for Session.request, replaying queued responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        outcome = self.responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def provider():
    with LinodeProvider(token="secret", api_url="https://api.example.test/v4/") as p:
        yield p


INSTANCE = {
    "id": 7,
    "label": "web-1",
    "status": "running",
    "type": "g6-nanode-1",
    "region": "eu-west",
    "ipv4": ["203.0.113.7"],
}


class TestRequests:
    """Tests for request construction and payload mapping."""

    def test_token_is_sent_as_bearer_header(self, provider) -> None:
        assert provider.session.headers["Authorization"] == "Bearer secret"
        assert provider.api_url == "https://api.example.test/v4"

    def test_get_instance_maps_fields(self, provider, monkeypatch) -> None:
        recorder = Recorder(make_response(body=INSTANCE))
        monkeypatch.setattr(provider.session, "request", recorder)

        instance = provider.get_instance(7)

        assert recorder.calls[0][:2] == ("GET", "https://api.example.test/v4/linode/instances/7")
        assert instance.label == "web-1"
        assert instance.status is InstanceStatus.RUNNING
        assert instance.ipv4 == ("203.0.113.7",)
        assert instance.region == "eu-west"

    def test_unknown_status_folds_to_other(self, provider, monkeypatch) -> None:
        body = dict(INSTANCE, status="migrating")
        monkeypatch.setattr(provider.session, "request", Recorder(make_response(body=body)))

        assert provider.get_instance(7).status is InstanceStatus.OTHER

    def test_list_instances_follows_pages(self, provider, monkeypatch) -> None:
        second = dict(INSTANCE, id=8, label="web-2")
        recorder = Recorder(
            make_response(body={"data": [INSTANCE], "page": 1, "pages": 2}),
            make_response(body={"data": [second], "page": 2, "pages": 2}),
        )
        monkeypatch.setattr(provider.session, "request", recorder)

        instances = provider.list_instances()

        assert [i.label for i in instances] == ["web-1", "web-2"]
        assert [c[2]["params"]["page"] for c in recorder.calls] == [1, 2]

    def test_notifications_and_account(self, provider, monkeypatch) -> None:
        recorder = Recorder(
            make_response(body={"data": [{"label": "Maintenance", "message": "soon"}], "pages": 1}),
            make_response(body={"first_name": "Ada", "last_name": "Lovelace", "email": "a@b.c"}),
        )
        monkeypatch.setattr(provider.session, "request", recorder)

        notifications = provider.list_notifications()
        account = provider.get_account()

        assert notifications[0].label == "Maintenance"
        assert account.name == "Ada Lovelace"
        assert account.email == "a@b.c"

    def test_boot_and_shutdown_post_to_actions(self, provider, monkeypatch) -> None:
        recorder = Recorder(make_response(body={}), make_response(204))
        monkeypatch.setattr(provider.session, "request", recorder)

        provider.boot_instance(7)
        provider.shutdown_instance(7)

        assert [(c[0], c[1].rsplit("/", 1)[-1]) for c in recorder.calls] == [
            ("POST", "boot"),
            ("POST", "shutdown"),
        ]


class TestErrors:
    """Every failure surfaces as a TransportError."""

    def test_401_is_authentication_error(self, provider, monkeypatch) -> None:
        monkeypatch.setattr(provider.session, "request", Recorder(make_response(401, {})))

        with pytest.raises(AuthenticationError) as excinfo:
            provider.list_instances()
        assert excinfo.value.status_code == 401

    def test_404_is_not_found(self, provider, monkeypatch) -> None:
        monkeypatch.setattr(provider.session, "request", Recorder(make_response(404, {})))

        with pytest.raises(NotFoundError):
            provider.get_instance(99)

    def test_server_error_keeps_status_code(self, provider, monkeypatch) -> None:
        monkeypatch.setattr(provider.session, "request", Recorder(make_response(500, {})))

        with pytest.raises(TransportError) as excinfo:
            provider.get_account()
        assert excinfo.value.status_code == 500

    def test_timeout_and_connection_errors(self, provider, monkeypatch) -> None:
        recorder = Recorder(requests.Timeout("slow"), requests.ConnectionError("refused"))
        monkeypatch.setattr(provider.session, "request", recorder)

        with pytest.raises(TransportError, match="timed out"):
            provider.list_instances()
        with pytest.raises(TransportError):
            provider.list_instances()

    def test_invalid_json(self, provider, monkeypatch) -> None:
        monkeypatch.setattr(provider.session, "request", Recorder(make_response(raw=b"<html>")))

        with pytest.raises(TransportError, match="Invalid JSON"):
            provider.get_account()
