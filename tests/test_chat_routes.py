"""Tests for the HTTP surface: chat proxy, fallback, company, health, CORS, 404.

The upstream is replaced either by a StubChatClient (service-level outcomes)
or by an httpx.MockTransport behind the real Perplexity client (end to end).
"""

import asyncio

import httpx
import pytest

from chat_proxy.services.fallback_service import DEFAULT_ANSWER

VALID_BODY = {"messages": [{"role": "user", "content": "Halo"}]}


class TestChatEndpoint:
    def test_success_forwards_upstream_body(self, client, stub_client) -> None:
        response = client.post("/api/chat", json=VALID_BODY)

        assert response.status_code == 200
        assert response.json() == stub_client.response
        assert stub_client.calls == 1

    def test_max_tokens_is_clamped_before_forwarding(self, client, stub_client) -> None:
        client.post("/api/chat", json={**VALID_BODY, "max_tokens": 5000})

        assert stub_client.payloads[0]["max_tokens"] == 1000

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"messages": "Halo"},
            {"messages": []},
            {"messages": {"role": "user", "content": "Halo"}},
        ],
    )
    def test_invalid_messages_rejected_without_upstream_call(self, client, stub_client, body) -> None:
        response = client.post("/api/chat", json=body)

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Invalid request format"
        assert data["fallback"] is True
        assert stub_client.calls == 0

    def test_non_json_body_rejected(self, client, stub_client) -> None:
        response = client.post(
            "/api/chat",
            content=b"messages=hello",
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_json"
        assert stub_client.calls == 0

    def test_missing_api_key_degrades_softly(self, make_client, settings_factory) -> None:
        client = make_client(settings=settings_factory(api_key=None))

        response = client.post("/api/chat", json=VALID_BODY)

        assert response.status_code == 200
        data = response.json()
        assert data["fallback"] is True
        assert data["error"] == "API configuration error"
        assert data["message"]

    def test_unexpected_fault_degrades_softly(self, make_client, stub_factory) -> None:
        client = make_client(chat_client=stub_factory(error=RuntimeError("boom")))

        response = client.post("/api/chat", json=VALID_BODY)

        assert response.status_code == 200
        data = response.json()
        assert data == {
            "error": "Internal server error",
            "fallback": True,
            "message": data["message"],
        }
        assert "boom" not in response.text


class TestChatEndpointAgainstHttpUpstream:
    """Drive the real Perplexity client through a mocked transport."""

    def test_upstream_500_yields_soft_success(self, make_client) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(500, text="overloaded"))
        client = make_client(http_client=httpx.AsyncClient(transport=transport))

        response = client.post("/api/chat", json=VALID_BODY)

        assert response.status_code == 200
        data = response.json()
        assert data["fallback"] is True
        assert data["error"] == "API Error: 500"
        assert data["message"]

    def test_upstream_timeout_yields_same_degraded_shape(self, make_client, settings_factory) -> None:
        async def hang(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            return httpx.Response(200, json={})

        client = make_client(
            settings=settings_factory(upstream={"timeout_seconds": 0.05}),
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(hang)),
        )

        response = client.post("/api/chat", json=VALID_BODY)

        assert response.status_code == 200
        data = response.json()
        assert set(data) == {"error", "fallback", "message"}
        assert data["fallback"] is True
        assert data["message"]

    def test_upstream_success_is_forwarded_verbatim(self, make_client) -> None:
        body = {"id": "abc", "choices": [{"message": {"content": "hi"}}], "citations": ["u"]}
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json=body))
        client = make_client(http_client=httpx.AsyncClient(transport=transport))

        response = client.post("/api/chat", json=VALID_BODY)

        assert response.status_code == 200
        assert response.json() == body

    def test_non_finite_upstream_number_yields_soft_success(self, make_client) -> None:
        transport = httpx.MockTransport(
            lambda request: httpx.Response(
                200,
                content=b'{"choices": [], "score": NaN}',
                headers={"content-type": "application/json"},
            )
        )
        client = make_client(http_client=httpx.AsyncClient(transport=transport))

        response = client.post("/api/chat", json=VALID_BODY)

        assert response.status_code == 200
        data = response.json()
        assert data["fallback"] is True
        assert set(data) == {"error", "fallback", "message"}


class TestRateLimit:
    def test_thirty_first_request_is_rejected(self, client, stub_client) -> None:
        statuses = [client.post("/api/chat", json=VALID_BODY).status_code for _ in range(31)]

        assert statuses[:30] == [200] * 30
        assert statuses[30] == 429
        assert stub_client.calls == 30

    def test_rejection_body_and_headers(self, make_client, stub_client, settings_factory) -> None:
        client = make_client(chat_client=stub_client, settings=settings_factory(rate_limit_requests=1))
        client.post("/api/chat", json=VALID_BODY)

        response = client.post("/api/chat", json=VALID_BODY)

        assert response.status_code == 429
        data = response.json()
        assert data["error"] == "Too many requests"
        assert data["message"] == "Rate limit exceeded. Please try again later."
        assert data["fallback"] is True
        assert int(response.headers["Retry-After"]) > 0
        assert response.headers["X-RateLimit-Limit"] == "1"
        assert response.headers["X-RateLimit-Remaining"] == "0"

    def test_headers_can_be_disabled(self, make_client, stub_client, settings_factory) -> None:
        client = make_client(
            chat_client=stub_client,
            settings=settings_factory(rate_limit_requests=1, rate_limit_include_headers=False),
        )
        client.post("/api/chat", json=VALID_BODY)

        response = client.post("/api/chat", json=VALID_BODY)

        assert response.status_code == 429
        assert "Retry-After" not in response.headers

    def test_rate_limit_runs_before_validation(self, make_client, stub_client, settings_factory) -> None:
        client = make_client(chat_client=stub_client, settings=settings_factory(rate_limit_requests=1))
        client.post("/api/chat", json={})

        response = client.post("/api/chat", json={})

        assert response.status_code == 429

    def test_disabled_rate_limit_admits_everything(self, make_client, stub_client, settings_factory) -> None:
        client = make_client(
            chat_client=stub_client,
            settings=settings_factory(rate_limit_requests=1, rate_limit_enabled=False),
        )

        statuses = {client.post("/api/chat", json=VALID_BODY).status_code for _ in range(3)}

        assert statuses == {200}

    def test_other_endpoints_are_not_limited(self, make_client, stub_client, settings_factory) -> None:
        client = make_client(chat_client=stub_client, settings=settings_factory(rate_limit_requests=1))

        statuses = {client.get("/api/health").status_code for _ in range(3)}

        assert statuses == {200}

    def test_each_app_owns_its_limiter(self, make_client, stub_client, settings_factory) -> None:
        settings = settings_factory(rate_limit_requests=1)
        first = make_client(chat_client=stub_client, settings=settings)
        second = make_client(chat_client=stub_client, settings=settings)

        assert first.post("/api/chat", json=VALID_BODY).status_code == 200
        assert first.post("/api/chat", json=VALID_BODY).status_code == 429
        assert second.post("/api/chat", json=VALID_BODY).status_code == 200


class TestFallbackEndpoint:
    def test_keyword_match(self, client) -> None:
        response = client.post("/api/fallback", json={"message": "Ada LOWONGAN?"})

        assert response.status_code == 200
        data = response.json()
        assert data["fallback"] is True
        assert "4 posisi" in data["choices"][0]["message"]["content"]

    def test_missing_message_gets_default_answer(self, client) -> None:
        response = client.post("/api/fallback", json={})

        assert response.status_code == 200
        assert response.json()["choices"][0]["message"]["content"] == DEFAULT_ANSWER


class TestStaticEndpoints:
    def test_health(self, client) -> None:
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "PT. Teknologi Maju Indonesia API Proxy"
        assert data["timestamp"]

    def test_company(self, client) -> None:
        response = client.get("/api/company")

        assert response.status_code == 200
        data = response.json()
        assert data["profile"]["name"] == "PT. Teknologi Maju Indonesia"
        assert [job["title"] for job in data["jobs"]] == [
            "Senior Frontend Developer",
            "Data Scientist",
            "Product Manager",
            "DevOps Engineer",
        ]

    def test_unknown_route_returns_404_json(self, client) -> None:
        response = client.get("/api/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {
            "error": "Endpoint not found",
            "message": "The requested endpoint does not exist",
        }

    def test_static_directory_is_served(self, make_client, settings_factory, tmp_path) -> None:
        (tmp_path / "index.html").write_text("<h1>Teknologi Maju</h1>", encoding="utf-8")
        client = make_client(settings=settings_factory(static_dir=str(tmp_path)))

        assert "Teknologi Maju" in client.get("/").text
        assert client.get("/api/health").status_code == 200
        assert client.get("/missing.js").status_code == 404

    @pytest.mark.parametrize(("method", "path"), [("GET", "/api/chat"), ("POST", "/api/health")])
    def test_wrong_method_returns_404_json(self, client, method, path) -> None:
        response = client.request(method, path)

        assert response.status_code == 404
        assert response.json()["error"] == "Endpoint not found"

    def test_unknown_post_with_static_directory_returns_404_json(
        self, make_client, settings_factory, tmp_path
    ) -> None:
        (tmp_path / "index.html").write_text("<h1>Teknologi Maju</h1>", encoding="utf-8")
        client = make_client(settings=settings_factory(static_dir=str(tmp_path)))

        for method, path in [("POST", "/api/nope"), ("POST", "/"), ("GET", "/api/chat")]:
            response = client.request(method, path)

            assert response.status_code == 404
            assert response.json() == {
                "error": "Endpoint not found",
                "message": "The requested endpoint does not exist",
            }


class TestCors:
    @pytest.mark.parametrize("path", ["/api/chat", "/api/health", "/api/company", "/api/fallback"])
    def test_preflight_succeeds(self, client, path) -> None:
        response = client.options(
            path,
            headers={
                "Origin": "http://localhost:5500",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] in ("*", "http://localhost:5500")
        assert "POST" in response.headers["access-control-allow-methods"]

    def test_simple_request_gets_cors_header(self, client) -> None:
        response = client.get("/api/health", headers={"Origin": "http://localhost:5500"})

        assert "access-control-allow-origin" in response.headers
