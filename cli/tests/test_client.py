from __future__ import annotations

import hashlib
import json

import httpx
import pytest

from yourls_client import (
    ApiError,
    ClientConfig,
    DecodeError,
    HttpStatusError,
    MalformedResponseError,
    SignatureAuth,
    TransportError,
    YourlsClient,
)
from yourls_client import transport as transport_mod

API_URL = "https://sho.rt/yourls-api.php"


def _client(handler, **kwargs) -> tuple[YourlsClient, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def _record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    kwargs.setdefault("token", "tok")
    client = YourlsClient.from_credentials(API_URL, transport=httpx.MockTransport(_record), **kwargs)
    return client, seen


def _json(data, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(data).encode("utf-8"))


def test_shorten_returns_short_url() -> None:
    client, seen = _client(lambda r: _json({"status": "success", "shorturl": "http://x/y"}))

    assert client.shorten("http://example.com/long", "kw") == "http://x/y"

    params = seen[0].url.params
    assert seen[0].method == "GET"
    assert params["action"] == "shorturl"
    assert params["url"] == "http://example.com/long"
    assert params["keyword"] == "kw"
    assert params["format"] == "json"


def test_shorten_omits_missing_keyword() -> None:
    client, seen = _client(lambda r: _json({"status": "success", "shorturl": "http://x/y"}))

    client.shorten("http://example.com/long")

    assert "keyword" not in seen[0].url.params


def test_shorten_fail_uses_payload_message() -> None:
    client, _ = _client(lambda r: _json({"status": "fail", "message": "bad url"}))

    with pytest.raises(ApiError) as exc:
        client.shorten("http://example.com/long")

    assert exc.value.message == "bad url"
    assert exc.value.payload == {"status": "fail", "message": "bad url"}


def test_shorten_fail_without_message_names_url_and_keyword() -> None:
    client, _ = _client(lambda r: _json({"status": "fail"}))

    with pytest.raises(ApiError) as exc:
        client.shorten("http://example.com/long", "kw")

    assert "http://example.com/long" in str(exc.value)
    assert "kw" in str(exc.value)


def test_shorten_missing_status_is_api_error() -> None:
    client, _ = _client(lambda r: _json({"shorturl": "http://x/y"}))

    with pytest.raises(ApiError):
        client.shorten("http://example.com/long")


def test_shorten_success_without_shorturl_is_malformed() -> None:
    client, _ = _client(lambda r: _json({"status": "success"}))

    with pytest.raises(MalformedResponseError) as exc:
        client.shorten("http://example.com/long")

    assert exc.value.field == "shorturl"


def test_expand_returns_long_url() -> None:
    client, seen = _client(lambda r: _json({"longurl": "http://long.example/path"}))

    assert client.expand("http://x/y") == "http://long.example/path"
    assert seen[0].url.params["action"] == "expand"
    assert seen[0].url.params["shorturl"] == "http://x/y"


def test_expand_without_longurl_is_malformed() -> None:
    client, _ = _client(lambda r: _json({"message": "success"}))

    with pytest.raises(MalformedResponseError) as exc:
        client.expand("http://x/y")

    assert exc.value.field == "longurl"


def test_url_stats_returned_unmodified() -> None:
    payload = {
        "statusCode": 200,
        "message": "success",
        "link": {"shorturl": "http://x/y", "url": "http://long", "clicks": "12"},
    }
    client, seen = _client(lambda r: _json(payload))

    assert client.get_url_stats("http://x/y") == payload
    assert seen[0].url.params["action"] == "url-stats"


def test_http_404_without_json_uses_status_phrase() -> None:
    client, _ = _client(lambda r: httpx.Response(404, text="<html>nope</html>"))

    with pytest.raises(HttpStatusError) as exc:
        client.expand("http://x/y")

    assert exc.value.message == "Not Found"
    assert exc.value.status_code == 404
    assert exc.value.code == 404


def test_http_error_prefers_json_message() -> None:
    client, _ = _client(lambda r: _json({"message": "Please log in"}, status_code=403))

    with pytest.raises(HttpStatusError) as exc:
        client.get_url_stats("abc")

    assert exc.value.message == "Please log in"
    assert exc.value.status_code == 403


def test_http_error_unknown_code() -> None:
    client, _ = _client(lambda r: httpx.Response(599, text=""))

    with pytest.raises(HttpStatusError) as exc:
        client.get_url_stats("abc")

    assert exc.value.message == "HTTP 599"


def test_invalid_json_raises_decode_error() -> None:
    client, _ = _client(lambda r: httpx.Response(200, text="not-json"))

    with pytest.raises(DecodeError) as exc:
        client.get_url_stats("abc")

    assert exc.value.message == "JSON decode error"
    assert exc.value.code == 0


def test_json_null_raises_decode_error() -> None:
    client, _ = _client(lambda r: httpx.Response(200, text="null"))

    with pytest.raises(DecodeError):
        client.get_url_stats("abc")


def test_non_object_json_is_malformed() -> None:
    client, _ = _client(lambda r: httpx.Response(200, text="[1, 2]"))

    with pytest.raises(MalformedResponseError):
        client.get_url_stats("abc")


def test_transport_failure_raises_transport_error() -> None:
    def _boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused") from OSError(111, "Connection refused")

    client, _ = _client(_boom)

    with pytest.raises(TransportError) as exc:
        client.expand("http://x/y")

    assert "connection refused" in exc.value.message
    assert exc.value.code == 111
    assert client.get_last_response() is None


def test_last_response_tracks_raw_body() -> None:
    bodies = iter([
        httpx.Response(200, text='{"longurl": "http://a"}'),
        httpx.Response(500, text="server exploded"),
    ])
    client, _ = _client(lambda r: next(bodies))

    assert client.get_last_response() is None
    client.expand("x")
    assert client.get_last_response() == '{"longurl": "http://a"}'

    with pytest.raises(HttpStatusError):
        client.expand("x")
    assert client.get_last_response() == "server exploded"
    assert client.last_response == "server exploded"


def test_signature_mode_params() -> None:
    client, seen = _client(lambda r: _json({"longurl": "http://a"}), token="tok", clock=lambda: 1000)

    client.expand("x")

    params = seen[0].url.params
    assert params["timestamp"] == "1000"
    assert params["signature"] == hashlib.md5(b"tok1000").hexdigest()
    assert "username" not in params
    assert "password" not in params


def test_password_mode_sends_real_password() -> None:
    client, seen = _client(lambda r: _json({"longurl": "http://a"}), username="joe", password="secret")

    client.expand("x")

    params = seen[0].url.params
    assert params["username"] == "joe"
    assert params["password"] == "secret"
    assert "signature" not in params


def test_password_mode_echo_username() -> None:
    client, seen = _client(
        lambda r: _json({"longurl": "http://a"}),
        username="joe",
        password="secret",
        echo_username=True,
    )

    client.expand("x")

    assert seen[0].url.params["password"] == "joe"


def test_endpoint_with_query_string() -> None:
    seen: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _json({"longurl": "http://a"})

    client = YourlsClient.from_credentials(f"{API_URL}?lang=en", token="tok", transport=httpx.MockTransport(_handler))
    client.expand("x")

    assert seen[0].url.params["lang"] == "en"
    assert seen[0].url.params["action"] == "expand"


def test_construction_does_no_io() -> None:
    def _fail(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with YourlsClient.from_credentials("", transport=httpx.MockTransport(_fail)) as client:
        assert client.get_last_response() is None


def test_sends_empty_expect_header() -> None:
    client, seen = _client(lambda r: _json({"longurl": "http://a"}))

    client.expand("x")

    assert seen[0].headers.get("expect") == ""


def test_follows_redirects_to_final_response() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old/yourls-api.php":
            location = f"https://sho.rt/new/yourls-api.php?{request.url.query.decode()}"
            return httpx.Response(302, headers={"Location": location})
        return _json({"longurl": "http://long.example/path"})

    client = YourlsClient.from_credentials(
        "https://sho.rt/old/yourls-api.php", token="tok", transport=httpx.MockTransport(_handler)
    )

    assert client.expand("x") == "http://long.example/path"
    assert client.get_last_response() == '{"longurl": "http://long.example/path"}'


def test_transport_client_options(monkeypatch) -> None:
    captured: dict = {}

    class _FakeClient:
        def __init__(self, **kwargs):
            captured.update(kwargs)

        def close(self) -> None:
            return None

    monkeypatch.setattr(transport_mod.httpx, "Client", _FakeClient)

    YourlsClient(ClientConfig(API_URL, SignatureAuth("tok"))).close()

    assert captured["verify"] is False
    assert captured["follow_redirects"] is True
    assert captured["timeout"] is None
    assert captured["headers"]["Expect"] == ""
