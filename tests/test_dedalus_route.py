"""
Tests for the advice proxy (/api/dedalus) and the canned farming guidance.
"""

import pytest

from integrations.core.canned import GENERIC_RESPONSE, canned_advice, match_topic
from integrations.dedalus import NOTE_NOT_CONFIGURED, NOTE_UPSTREAM_FAILED


class TestCannedAdvice:

    @pytest.mark.parametrize(
        "prompt,topic",
        [
            ("Is my soil too acidic?", "soil"),
            ("Aphids are all over my beans", "pest"),
            ("How often should I irrigate tomatoes?", "water"),
            ("Which NPK ratio for maize?", "fertilizer"),
            ("Frost expected tonight", "weather"),
            ("My seeds are not germinating", "seed"),
            ("When do I harvest onions?", "harvest"),
            ("What crop rotation suits my beans?", "crop"),
            ("How should I grow wheat?", "crop"),
            ("How do I store my grain?", "harvest"),
            ("The field will not drain after storms", "weather"),
            ("pH of my field is 5.2", "soil"),
        ],
    )
    def test_keyword_topics(self, prompt, topic):
        assert match_topic(prompt) == topic

    def test_match_is_case_insensitive(self):
        assert match_topic("SOIL pH problems") == "soil"

    def test_generic_fallback(self):
        assert match_topic("Hello neighbours!") is None
        assert canned_advice("Hello neighbours!") == GENERIC_RESPONSE

    def test_deterministic(self):
        prompt = "Is my soil too acidic?"
        assert canned_advice(prompt) == canned_advice(prompt)
        assert "soil" in canned_advice(prompt).lower()


class TestAdviceRoute:

    def test_no_key_returns_canned_with_note(self, make_settings, make_client, providers):
        client = make_client(make_settings())

        response = client.post("/api/dedalus", json={"input": "Is my soil too acidic?"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["final_output"] == canned_advice("Is my soil too acidic?")
        assert data["note"] == NOTE_NOT_CONFIGURED
        assert providers.requests == []

    def test_no_key_repeated_calls_identical(self, make_settings, make_client):
        client = make_client(make_settings())

        first = client.post("/api/dedalus", json={"input": "pests on my cabbage"}).json()
        second = client.post("/api/dedalus", json={"input": "pests on my cabbage"}).json()

        assert first == second

    def test_live_answer(self, make_settings, make_client, providers):
        client = make_client(make_settings(DEDALUS_API_KEY="d-key"))

        response = client.post("/api/dedalus", json={"input": "Is my soil too acidic?"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "final_output": "Test the soil pH, then lime."}

    def test_request_shape_and_model_override(self, make_settings, make_client, providers):
        client = make_client(make_settings(DEDALUS_API_KEY="d-key"))

        client.post("/api/dedalus", json={"input": "Why are my leaves yellow?", "model": "openai/gpt-4o"})

        request = providers.requests_to("dedalus")[-1]
        assert request.url.path.endswith("/chat/completions")
        assert request.headers["authorization"] == "Bearer d-key"
        body = providers.last_json("dedalus")
        assert body["model"] == "openai/gpt-4o"
        assert body["messages"][0]["role"] == "system"
        assert body["messages"][-1] == {"role": "user", "content": "Why are my leaves yellow?"}

    def test_default_model(self, make_settings, make_client, providers):
        client = make_client(make_settings(DEDALUS_API_KEY="d-key"))

        client.post("/api/dedalus", json={"input": "Hi"})

        assert providers.last_json("dedalus")["model"] == "openai/gpt-5-mini"

    @pytest.mark.parametrize(
        "setup",
        [
            lambda p: setattr(p, "dedalus_status", 500),
            lambda p: setattr(p, "dedalus_status", 401),
            lambda p: setattr(p, "dedalus_body", {"choices": []}),
            lambda p: setattr(p, "dedalus_body", {"choices": [{"message": {"content": ""}}]}),
            lambda p: setattr(p, "fail_transport", True),
        ],
    )
    def test_upstream_failure_degrades_to_canned(self, make_settings, make_client, providers, setup):
        setup(providers)
        client = make_client(make_settings(DEDALUS_API_KEY="d-key"))

        response = client.post("/api/dedalus", json={"input": "How much water for rice?"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["final_output"] == canned_advice("How much water for rice?")
        assert data["note"] == NOTE_UPSTREAM_FAILED

    @pytest.mark.parametrize("payload", [{}, {"input": ""}, {"input": "  "}])
    def test_missing_input_400(self, make_settings, make_client, payload):
        client = make_client(make_settings())

        response = client.post("/api/dedalus", json=payload)

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "input is required"}

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"json": {"input": ["not", "a", "string"]}},
            {"content": b"not json", "headers": {"content-type": "application/json"}},
        ],
    )
    def test_malformed_body_keeps_error_shape(self, make_settings, make_client, kwargs):
        client = make_client(make_settings())

        response = client.post("/api/dedalus", **kwargs)

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["error"]
