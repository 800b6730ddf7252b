"""Tests for the Teamleader relay, with httpx's mock transport."""

import json
from urllib.parse import parse_qs

import httpx

from pricebook.infrastructure.teamleader.relay import TeamleaderRelay

AUTH_URL = "https://focus.teamleader.eu"


def _relay(handler):
    seen: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    client = httpx.Client(transport=httpx.MockTransport(record))
    return TeamleaderRelay(client, AUTH_URL), seen


class TestTokenActions:

    def test_exchange_posts_authorization_code_grant(self):
        relay, seen = _relay(lambda r: httpx.Response(200, json={"access_token": "at"}))
        answer = relay.handle({
            "action": "exchange",
            "client_id": "id",
            "client_secret": "secret",
            "code": "abc",
            "redirect_uri": "https://app.example/callback",
        })

        assert answer == {"access_token": "at"}
        request = seen[0]
        assert str(request.url) == "https://focus.teamleader.eu/oauth2/access_token"
        form = parse_qs(request.content.decode())
        assert form["grant_type"] == ["authorization_code"]
        assert form["code"] == ["abc"]

    def test_refresh_posts_refresh_grant(self):
        relay, seen = _relay(lambda r: httpx.Response(200, json={"access_token": "new"}))
        relay.handle({"action": "refresh", "client_id": "id", "client_secret": "s", "refresh_token": "rt"})
        form = parse_qs(seen[0].content.decode())
        assert form["grant_type"] == ["refresh_token"]
        assert form["refresh_token"] == ["rt"]

    def test_rejected_refresh_reports_upstream_status(self):
        relay, _ = _relay(lambda r: httpx.Response(400, json={"error": "invalid_grant"}))
        answer = relay.handle({"action": "refresh", "refresh_token": "old"})
        assert answer == {"error": {"error": "invalid_grant"}, "upstreamStatus": 400}


class TestRequestAction:

    def test_forwards_to_teamleader(self):
        relay, seen = _relay(lambda r: httpx.Response(200, json={"data": {"id": "u1"}}))
        answer = relay.handle({
            "action": "request",
            "url": "https://api.focus.teamleader.eu/users.me",
            "method": "POST",
            "headers": {"Authorization": "Bearer at"},
            "body": json.dumps({"x": 1}),
        })
        assert answer == {"data": {"id": "u1"}}
        assert seen[0].method == "POST"
        assert seen[0].headers["Authorization"] == "Bearer at"
        assert json.loads(seen[0].content) == {"x": 1}

    def test_action_defaults_to_request(self):
        relay, seen = _relay(lambda r: httpx.Response(200, json={}))
        relay.handle({"url": "https://api.focus.teamleader.eu/products.list"})
        assert seen[0].method == "GET"

    def test_other_hosts_refused(self):
        relay, seen = _relay(lambda r: httpx.Response(200, json={}))
        for url in ("https://example.com/x", "https://teamleader.eu.evil.com/x", "not a url", ""):
            answer = relay.handle({"action": "request", "url": url})
            assert answer == {"error": "Only Teamleader URLs allowed", "upstreamStatus": 403}
        assert seen == []

    def test_upstream_error_wrapped(self):
        relay, _ = _relay(
            lambda r: httpx.Response(401, json={"errors": [{"title": "Unauthorized"}]})
        )
        answer = relay.handle({"url": "https://api.focus.teamleader.eu/users.me"})
        assert answer["upstreamStatus"] == 401
        assert answer["error"] == {"errors": [{"title": "Unauthorized"}]}

    def test_empty_body_is_empty_object(self):
        relay, _ = _relay(lambda r: httpx.Response(204))
        assert relay.handle({"url": "https://api.focus.teamleader.eu/products.update"}) == {}

    def test_transport_failure(self):
        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        relay, _ = _relay(fail)
        answer = relay.handle({"url": "https://api.focus.teamleader.eu/users.me"})
        assert answer == {"error": "Transport error: connection refused", "upstreamStatus": 500}


class TestBadInput:

    def test_unknown_action(self):
        relay, _ = _relay(lambda r: httpx.Response(200))
        assert relay.handle({"action": "delete"}) == {"error": "Invalid Action"}

    def test_body_must_be_an_object(self):
        relay, _ = _relay(lambda r: httpx.Response(200))
        assert relay.handle(["exchange"]) == {"error": "Invalid JSON body"}
