"""
/**
 * @file backend/tests/test_translate_controller.py
 * @description 翻译接口端到端测试（TestClient + 依赖替换 + 上游 MockTransport）。
 */
"""

import os
import sys
import unittest
from unittest import mock

import httpx
from fastapi.testclient import TestClient

ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from backend.config.settings import Settings
from backend.controllers.dependencies import get_rate_limiter, get_settings, get_translation_service
from backend.main import app
from backend.services.chat_completion_client_service import ChatCompletionClient
from backend.services.rate_limiter_service import FixedWindowRateLimiter, InMemoryRateLimitStore
from backend.services.translation_service import TranslationService


VALID = {"inputText": "Hello, how are you?", "inputLang": "en", "outputLang": "es"}


class TestTranslateController(unittest.TestCase):
    def setUp(self):
        env = mock.patch.dict(os.environ)
        env.start()
        self.addCleanup(env.stop)
        os.environ.pop("OPENAI_API_KEY", None)

        self.settings = Settings(raw={"api_keys": {"openai": "sk-test"}, "rate_limit": {"limit": 3, "window_ms": 60000}})
        self.now = 5_000_000.0
        self.store = InMemoryRateLimitStore()
        self.limiter = FixedWindowRateLimiter(store=self.store, clock=lambda: self.now)

        self.upstream_calls = []
        self.upstream_reply = httpx.Response(200, json={"choices": [{"message": {"content": "  Hola, ¿cómo está?  "}}]})

        def handler(request: httpx.Request) -> httpx.Response:
            self.upstream_calls.append(request)
            if isinstance(self.upstream_reply, Exception):
                raise self.upstream_reply
            return self.upstream_reply

        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        provider = lambda: self.settings
        self.service = TranslationService(ChatCompletionClient(http, settings_provider=provider), settings_provider=provider)

        app.dependency_overrides[get_settings] = provider
        app.dependency_overrides[get_rate_limiter] = lambda: self.limiter
        app.dependency_overrides[get_translation_service] = lambda: self.service
        self.addCleanup(app.dependency_overrides.clear)
        self.client = TestClient(app)

    def test_success_returns_trimmed_translation(self):
        r = self.client.post("/api/translate", json=VALID, headers={"X-Forwarded-For": "10.0.0.1"})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"translated": "Hola, ¿cómo está?"})
        self.assertEqual(r.headers["X-RateLimit-Limit"], "3")
        self.assertEqual(r.headers["X-RateLimit-Remaining"], "2")
        self.assertEqual(len(self.upstream_calls), 1)

    def test_translate_alias_route(self):
        r = self.client.post("/translate", json=VALID)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["translated"], "Hola, ¿cómo está?")

    def test_missing_fields_do_not_touch_rate_limiter(self):
        for body in (
            {"inputLang": "en", "outputLang": "es"},
            {"inputText": "hi", "outputLang": "es"},
            {"inputText": "hi", "inputLang": "en"},
            {"inputText": "", "inputLang": "en", "outputLang": "es"},
            {"inputText": "   ", "inputLang": "en", "outputLang": "es"},
            {"inputText": 5, "inputLang": "en", "outputLang": "es"},
            ["not", "an", "object"],
        ):
            r = self.client.post("/api/translate", json=body, headers={"X-Forwarded-For": "10.0.0.2"})
            self.assertEqual(r.status_code, 400, body)
            self.assertIn("Missing required fields", r.json()["error"])
        self.assertEqual(len(self.store), 0)
        self.assertEqual(self.upstream_calls, [])

    def test_malformed_json(self):
        r = self.client.post("/api/translate", content=b"{oops", headers={"Content-Type": "application/json"})
        self.assertEqual(r.status_code, 400)
        self.assertIn("error", r.json())

    def test_rate_limit_then_window_reset(self):
        headers = {"X-Forwarded-For": "10.0.0.3"}
        for _ in range(3):
            self.assertEqual(self.client.post("/api/translate", json=VALID, headers=headers).status_code, 200)

        r = self.client.post("/api/translate", json=VALID, headers=headers)
        self.assertEqual(r.status_code, 429)
        self.assertIn("Rate limit exceeded", r.json()["error"])
        self.assertEqual(r.headers["Retry-After"], "60")
        self.assertEqual(len(self.upstream_calls), 3)

        # Another client has its own budget.
        other = self.client.post("/api/translate", json=VALID, headers={"X-Forwarded-For": "10.0.0.4"})
        self.assertEqual(other.status_code, 200)

        self.now += 60000
        r = self.client.post("/api/translate", json=VALID, headers=headers)
        self.assertEqual(r.status_code, 200)
        self.assertEqual(self.store.get("10.0.0.3").count, 1)

    def test_clients_without_headers_share_unknown_bucket(self):
        for _ in range(3):
            self.client.post("/api/translate", json=VALID)
        self.assertEqual(self.store.get("unknown").count, 3)
        self.assertEqual(self.client.post("/api/translate", json=VALID).status_code, 429)

    def test_real_ip_header_used_when_no_forwarded_for(self):
        self.client.post("/api/translate", json=VALID, headers={"X-Real-IP": "192.168.1.9"})
        self.assertIsNotNone(self.store.get("192.168.1.9"))

    def test_missing_api_key(self):
        self.settings = Settings(raw={})
        r = self.client.post("/api/translate", json=VALID)
        self.assertEqual(r.status_code, 500)
        self.assertIn("API key is not configured", r.json()["error"])
        self.assertEqual(self.upstream_calls, [])

    def test_upstream_rate_limit(self):
        self.upstream_reply = httpx.Response(429, json={"error": {"message": "Rate limit reached for gpt-3.5-turbo"}})
        r = self.client.post("/api/translate", json=VALID)
        self.assertEqual(r.status_code, 429)
        self.assertIn("OpenAI rate limit exceeded", r.json()["error"])
        self.assertIn("Rate limit reached for gpt-3.5-turbo", r.json()["error"])
        self.assertEqual(len(self.upstream_calls), 1)

    def test_upstream_error_status_mirrored(self):
        self.upstream_reply = httpx.Response(503, json={"error": "overloaded"})
        r = self.client.post("/api/translate", json=VALID)
        self.assertEqual(r.status_code, 503)
        self.assertIn("overloaded", r.json()["error"])

    def test_upstream_timeout(self):
        self.upstream_reply = httpx.ReadTimeout("slow")
        r = self.client.post("/api/translate", json=VALID)
        self.assertEqual(r.status_code, 504)
        self.assertIn("timed out", r.json()["error"])

    def test_empty_translation(self):
        self.upstream_reply = httpx.Response(200, json={"choices": [{"message": {"content": ""}}]})
        r = self.client.post("/api/translate", json=VALID)
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json(), {"error": "No translation received from OpenAI"})

    def test_openapi_documents_response_bodies(self):
        responses = app.openapi()["paths"]["/api/translate"]["post"]["responses"]
        self.assertTrue(responses["200"]["content"]["application/json"]["schema"]["$ref"].endswith("/TranslateResponse"))
        for code in ("400", "429", "500"):
            self.assertTrue(responses[code]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse"))

    def test_unexpected_exception_becomes_generic_500(self):
        self.upstream_reply = RuntimeError("boom")
        r = self.client.post("/api/translate", json=VALID)
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json(), {"error": "Internal server error during translation"})


if __name__ == "__main__":
    unittest.main()
