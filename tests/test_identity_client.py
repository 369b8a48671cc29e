import pytest
import requests

from tiffin.services.identity_client import CurrentUser, IdentityClient


class FakeResponse:
    def __init__(self, status_code, payload=None):
        self.status_code = status_code
        self._payload = payload or {}

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code}")


def test_valid_token(monkeypatch):
    calls = []

    def fake_post(url, json, timeout):
        calls.append((url, json))
        return FakeResponse(200, {"uid": "alice", "email": "alice@example.com"})

    monkeypatch.setattr(requests, "post", fake_post)

    user = IdentityClient(base_url="http://identity/").verify_token("abc")

    assert user == CurrentUser(uid="alice", email="alice@example.com")
    assert calls == [("http://identity/tokens/verify", {"token": "abc"})]


def test_rejected_token_is_not_retried(monkeypatch):
    calls = []

    def fake_post(url, json, timeout):
        calls.append(url)
        return FakeResponse(401)

    monkeypatch.setattr(requests, "post", fake_post)

    assert IdentityClient(base_url="http://identity").verify_token("bad") is None
    assert len(calls) == 1


def test_server_error_propagates(monkeypatch):
    monkeypatch.setattr(requests, "post", lambda url, json, timeout: FakeResponse(500))

    with pytest.raises(requests.HTTPError):
        IdentityClient(base_url="http://identity").verify_token("abc")


def test_malformed_token_is_invalid_without_retry(monkeypatch):
    calls = []

    def fake_post(url, json, timeout):
        calls.append(url)
        return FakeResponse(400)

    monkeypatch.setattr(requests, "post", fake_post)

    assert IdentityClient(base_url="http://identity").verify_token("???") is None
    assert len(calls) == 1
