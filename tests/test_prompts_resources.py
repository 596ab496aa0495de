"""Tests for prompt templates and URI-templated resources."""
import json

import pytest

from instagram_mcp.prompts import PROMPTS
from instagram_mcp.registry import CallKind
from instagram_mcp.resources import DOC_TEMPLATES, RESOURCES


class TestPrompts:
    def test_all_prompts_registered(self, dispatcher):
        names = [entry.name for entry in dispatcher.registry.entries(CallKind.PROMPT)]
        assert names == [
            "greeting", "code_generator", "tech_documentation", "data_analysis",
            "creative_writing", "problem_solver", "explain_concept", "review_feedback",
        ]
        assert len(names) == len(PROMPTS)

    @pytest.mark.asyncio
    async def test_greeting(self, dispatcher):
        envelope = await dispatcher.dispatch(CallKind.PROMPT, "greeting", {"name": "Bob"})
        assert envelope.payload == "Hello, Bob! How can I help you today?"

    @pytest.mark.asyncio
    async def test_optional_arguments_change_the_text(self, dispatcher):
        plain = await dispatcher.dispatch(
            CallKind.PROMPT, "code_generator", {"language": "Python", "functionality": "parses CSV files"}
        )
        styled = await dispatcher.dispatch(
            CallKind.PROMPT, "code_generator",
            {"language": "Python", "functionality": "parses CSV files", "style": "PEP 8"},
        )
        assert plain.payload.startswith("Generate Python code that parses CSV files.\n")
        assert "Follow PEP 8 coding conventions" in styled.payload
        assert "Follow PEP 8" not in plain.payload

    @pytest.mark.asyncio
    async def test_defaults_for_missing_optionals(self, dispatcher):
        docs = await dispatcher.dispatch(
            CallKind.PROMPT, "tech_documentation",
            {"type": "README", "project_name": "demo", "description": "A demo"},
        )
        writing = await dispatcher.dispatch(CallKind.PROMPT, "creative_writing", {"genre": "poem", "theme": "rain"})
        assert "Target Audience: developers" in docs.payload
        assert writing.payload.startswith("Write a medium poem with a engaging tone")

    @pytest.mark.asyncio
    async def test_problem_solver_sections(self, dispatcher):
        envelope = await dispatcher.dispatch(
            CallKind.PROMPT, "problem_solver", {"problem": "slow builds", "context": "monorepo"}
        )
        assert "Context and Constraints: monorepo" in envelope.payload
        assert "Preferred Approach" not in envelope.payload
        assert "5. **Success Metrics**" in envelope.payload

    @pytest.mark.asyncio
    async def test_explain_concept_requires_level(self, dispatcher):
        envelope = await dispatcher.dispatch(CallKind.PROMPT, "explain_concept", {"concept": "Machine Learning"})
        assert envelope.error_message == "Missing required argument: 'level'"

    @pytest.mark.asyncio
    async def test_review_feedback(self, dispatcher):
        envelope = await dispatcher.dispatch(
            CallKind.PROMPT, "review_feedback", {"content_type": "code", "criteria": "readability"}
        )
        assert "Evaluation Criteria: readability" in envelope.payload
        assert envelope.payload.endswith("improve the quality of the code.")


class TestResources:
    def test_all_templates_registered(self, dispatcher):
        templates = [entry.name for entry in dispatcher.registry.entries(CallKind.RESOURCE)]
        assert templates == [uri for uri, *_ in RESOURCES]

    @pytest.mark.asyncio
    async def test_config(self, dispatcher):
        prod = await dispatcher.read_resource("config://prod/api-service")
        dev = await dispatcher.read_resource("config://dev/api-service")
        assert prod.payload["settings"]["database"] == {
            "host": "api-service-prod.db.example.com", "port": 5432, "ssl": True,
        }
        assert dev.payload["settings"]["cache"]["ttl"] == 300
        assert dev.payload["settings"]["features"]["newFeatureEnabled"] is True
        json.loads(prod.payload_text())

    @pytest.mark.asyncio
    async def test_logs(self, dispatcher):
        info = await dispatcher.read_resource("logs://web-server/2025-05-30/info")
        error = await dispatcher.read_resource("logs://web-server/2025-05-30/error")
        assert info.payload.splitlines()[0] == "2025-05-30 09:15:32 [INFO] web-server: Service started successfully"
        assert len(info.payload.splitlines()) == 5
        assert len(error.payload.splitlines()) == 8

    @pytest.mark.asyncio
    async def test_metrics_ranges(self, dispatcher):
        envelope = await dispatcher.read_resource("metrics://api-service/24h")
        performance = envelope.payload["performance"]
        assert envelope.payload["timeframe"] == "24h"
        assert 50 <= performance["averageResponseTime"] <= 250
        assert 0 <= performance["errorRate"] <= 0.05
        assert [e["path"] for e in envelope.payload["endpoints"]] == ["/api/users", "/api/products"]

    @pytest.mark.asyncio
    async def test_schema_and_api_docs(self, dispatcher):
        schema = await dispatcher.read_resource("schema://shop/orders")
        api = await dispatcher.read_resource("api://v2/users")
        assert schema.payload["indexes"][0]["name"] == "idx_orders_name"
        assert api.payload["endpoint"] == "/v2/users"
        assert "https://api.example.com/v2/users/123" in api.payload["examples"]["curl"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind,template", [(k, t) for k, ts in DOC_TEMPLATES.items() for t in ts])
    async def test_docs_templates(self, dispatcher, kind, template):
        envelope = await dispatcher.read_resource(f"docs://{kind}/{template}")
        assert envelope.payload == DOC_TEMPLATES[kind][template]

    @pytest.mark.asyncio
    async def test_unknown_doc_template(self, dispatcher):
        envelope = await dispatcher.read_resource("docs://readme/fancy")
        assert envelope.error_message == "Template not found: readme/fancy"
        assert envelope.error_type == "NotFoundError"

    @pytest.mark.asyncio
    async def test_snippets(self, dispatcher):
        found = await dispatcher.read_resource("snippets://python/utils")
        missing = await dispatcher.read_resource("snippets://rust/utils")
        assert "def retry" in found.payload
        assert missing.error_message == "Snippet not found: rust/utils"

    @pytest.mark.asyncio
    async def test_example(self, dispatcher):
        envelope = await dispatcher.read_resource("example://42")
        assert envelope.payload == "This is an example resource with ID: 42"
