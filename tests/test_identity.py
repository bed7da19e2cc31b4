"""
SupabaseAuthProvider against a mocked GoTrue endpoint.
"""
import httpx

from vine_portal.core.result import Err, Ok
from vine_portal.services.identity import Identity, SupabaseAuthProvider


def _provider(handler):
    return SupabaseAuthProvider(
        base_url="https://auth.example.org/",
        anon_key="anon-key",
        transport=httpx.MockTransport(handler),
    )


class TestSupabaseAuthProvider:
    def test_valid_token(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["apikey"] = request.headers["apikey"]
            seen["auth"] = request.headers["authorization"]
            return httpx.Response(200, json={"id": "uid-1", "email": "a@example.org"})

        result = _provider(handler).get_user("tok")
        assert result == Ok(Identity(id="uid-1", email="a@example.org"))
        assert seen == {
            "url": "https://auth.example.org/auth/v1/user",
            "apikey": "anon-key",
            "auth": "Bearer tok",
        }

    def test_rejected_token(self):
        result = _provider(lambda request: httpx.Response(401, json={"msg": "bad jwt"})).get_user("tok")
        assert result == Err("invalid_token")

    def test_provider_error_status(self):
        result = _provider(lambda request: httpx.Response(502)).get_user("tok")
        assert result == Err("auth_provider_status_502")

    def test_unreachable(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        assert _provider(handler).get_user("tok") == Err("auth_provider_unreachable")

    def test_payload_without_id(self):
        result = _provider(lambda request: httpx.Response(200, json={"email": "x@example.org"})).get_user("tok")
        assert result == Err("no_identity")

    def test_non_json_payload(self):
        result = _provider(lambda request: httpx.Response(200, text="<html>")).get_user("tok")
        assert result == Err("auth_provider_invalid_payload")
