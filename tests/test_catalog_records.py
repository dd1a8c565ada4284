"""Tests for catalog record validation."""

import logging

import pytest

from modelregistry.server.discovery.base import (
    DEFAULT_MODALITY,
    ModelRecord,
    UpstreamFetchError,
    parse_catalog,
)


class TestParseCatalog:
    """Tests for parse_catalog payload handling."""

    def test_object_with_data_array(self):
        models = parse_catalog({"data": [{"id": "openai/gpt-4o"}, {"id": "anthropic/claude-3-opus"}]})

        assert [m.id for m in models] == ["openai/gpt-4o", "anthropic/claude-3-opus"]

    def test_bare_array(self):
        models = parse_catalog([{"id": "openai/gpt-4o"}])

        assert len(models) == 1
        assert models[0].id == "openai/gpt-4o"

    @pytest.mark.parametrize("payload", [{"error": "nope"}, "models", None, {"data": "x"}])
    def test_unexpected_shape_raises(self, payload):
        with pytest.raises(UpstreamFetchError):
            parse_catalog(payload)

    def test_malformed_entries_are_quarantined(self, caplog):
        payload = [
            {"id": "openai/gpt-4o"},
            "not-an-object",
            {"name": "No id"},
            {"id": ""},
            {"id": 42},
            {"id": "mistralai/mistral-7b-instruct"},
        ]

        with caplog.at_level(logging.WARNING):
            models = parse_catalog(payload)

        assert [m.id for m in models] == ["openai/gpt-4o", "mistralai/mistral-7b-instruct"]
        assert "Quarantined 4 malformed catalog entries" in caplog.text

    def test_empty_catalog(self):
        assert parse_catalog({"data": []}) == []


class TestModelRecord:
    """Tests for field defaulting on individual records."""

    def test_full_record(self):
        record = ModelRecord.model_validate(
            {
                "id": "openai/gpt-4o",
                "name": "OpenAI: GPT-4o",
                "description": "Omni model",
                "context_length": 128000,
                "architecture": {
                    "modality": "text+image->text",
                    "input_modalities": ["text", "image"],
                    "output_modalities": ["text"],
                    "tokenizer": "GPT",
                },
                "pricing": {"prompt": "0.000005", "completion": "0.000015", "image": "0.007225"},
                "supported_parameters": ["temperature", "tools"],
                "created": 1715558400,
            }
        )

        assert record.provider == "openai"
        assert record.modality == "text+image->text"
        assert record.context_tokens == 128000
        assert record.architecture.input_modalities == ["text", "image"]
        assert record.architecture.model_extra == {"tokenizer": "GPT"}
        assert record.pricing.model_extra == {"image": "0.007225"}
        assert record.supported_parameters == ["temperature", "tools"]
        assert record.created == 1715558400

    def test_minimal_record_defaults(self):
        record = ModelRecord.model_validate({"id": "openrouter/auto"})

        assert record.name is None
        assert record.description is None
        assert record.context_length is None
        assert record.context_tokens == 0
        assert record.architecture is None
        assert record.pricing is None
        assert record.modality == DEFAULT_MODALITY
        assert record.supported_parameters == []
        assert record.created is None

    def test_provider_without_slash_is_whole_id(self):
        assert ModelRecord.model_validate({"id": "gpt-4o"}).provider == "gpt-4o"

    def test_provider_splits_on_first_slash(self):
        record = ModelRecord.model_validate({"id": "meta-llama/llama-3.1-8b/instruct"})
        assert record.provider == "meta-llama"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("4096", 4096), (4096.0, 4096), ("abc", None), (None, None), (True, None), ("inf", None)],
    )
    def test_context_length_coercion(self, value, expected):
        record = ModelRecord.model_validate({"id": "a/b", "context_length": value})
        assert record.context_length == expected

    def test_non_numeric_created_is_none(self):
        record = ModelRecord.model_validate({"id": "a/b", "created": "yesterday"})
        assert record.created is None

    def test_wrongly_typed_blocks_default(self):
        record = ModelRecord.model_validate(
            {
                "id": "a/b",
                "name": 7,
                "architecture": "text->text",
                "pricing": ["0", "0"],
                "supported_parameters": "temperature",
            }
        )

        assert record.name is None
        assert record.architecture is None
        assert record.pricing is None
        assert record.supported_parameters == []

    def test_missing_modality_uses_default(self):
        record = ModelRecord.model_validate({"id": "a/b", "architecture": {"modality": None}})
        assert record.modality == DEFAULT_MODALITY

    def test_numeric_prices_become_strings(self):
        record = ModelRecord.model_validate({"id": "a/b", "pricing": {"prompt": 0, "completion": 0.5}})
        assert record.pricing.prompt == "0"
        assert record.pricing.completion == "0.5"
