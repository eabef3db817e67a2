"""
Tests for the configuration models.

These tests cover defaults, enumerations, input aliases, null handling and
immutability of the schema objects.
"""

import json

import pytest
from pydantic import ValidationError

from kreuzberg_config.config import (
    ChunkingConfig,
    ExtractionConfig,
    ImageExtractionConfig,
    OcrConfig,
    PageConfig,
    PdfConfig,
    get_default_config,
    load_config_from_dict,
)


class TestDefaults:
    """Default values of the root and sub-configurations."""

    def test_root_defaults(self):
        config = get_default_config()

        assert config.use_cache is True
        assert config.enable_quality_processing is True
        assert config.force_ocr is False
        assert config.enabled_sections() == []

    def test_absent_sections_are_none(self):
        config = load_config_from_dict({})

        for name in ("ocr", "pdf_options", "images", "chunking", "token_reduction",
                     "language_detection", "keywords", "postprocessor", "hierarchy", "pages"):
            assert getattr(config, name) is None

    def test_empty_section_gets_defaults(self):
        config = load_config_from_dict({"ocr": {}, "chunking": {}, "pdf_options": {}})

        assert config.ocr.enabled is True
        assert config.ocr.backend == "tesseract"
        assert config.ocr.languages == ("eng",)
        assert config.chunking.chunk_size == 512
        assert config.chunking.overlap == 50
        assert config.chunking.strategy == "fixed"
        assert config.pdf_options.render_quality == 150
        assert config.enabled_sections() == ["ocr", "pdf_options", "chunking"]

    def test_page_defaults(self):
        pages = PageConfig()

        assert pages.start_page == 1
        assert pages.end_page is None
        assert pages.page_numbers == ()
        assert pages.exclude_pages == ()

    def test_enum_defaults_are_plain_strings(self):
        config = load_config_from_dict({"chunking": {"embedding_config": {}}})
        embedding = config.chunking.embedding_config

        assert embedding.provider == "local"
        assert type(embedding.pool_strategy) is str
        assert embedding.model == "sentence-transformers/all-MiniLM-L6-v2"
        assert embedding.dimensions == 384


class TestInputHandling:
    """How decoded input is mapped onto the models."""

    def test_chunk_size_aliases(self):
        config = load_config_from_dict({"chunking": {"size": 1024, "max_overlap": 100}})

        assert config.chunking.chunk_size == 1024
        assert config.chunking.overlap == 100
        assert "size" not in config.to_map()["chunking"]

    def test_field_names_accepted_in_constructor(self):
        chunking = ChunkingConfig(chunk_size=256, overlap=32)

        assert chunking.chunk_size == 256
        assert chunking.overlap == 32

    def test_null_toggle_means_default(self):
        config = load_config_from_dict({
            "images": {"preprocessing": {"enabled": False, "denoise": None, "deskew": None}}
        })
        preprocessing = config.images.preprocessing

        assert preprocessing.enabled is False
        assert preprocessing.denoise is False
        assert preprocessing.deskew is False

    def test_null_optional_field_stays_none(self):
        config = load_config_from_dict({"pages": {"start_page": 5, "end_page": None}})

        assert config.pages.start_page == 5
        assert config.pages.end_page is None

    def test_unknown_keys_are_dropped(self):
        config = load_config_from_dict({
            "chunking": {"chunk_size": 512, "convert_to_tensor": True},
            "future_section": {"anything": 1},
        })

        assert "convert_to_tensor" not in config.to_map()["chunking"]
        assert "future_section" not in config.to_map()

    def test_image_format_is_case_insensitive(self):
        images = ImageExtractionConfig(format="PNG")

        assert images.format == "png"

    def test_integral_float_accepted_for_int_field(self):
        config = load_config_from_dict({"pdf_options": {"render_quality": 300.0}})

        assert config.pdf_options.render_quality == 300
        assert isinstance(config.pdf_options.render_quality, int)

    def test_int_accepted_for_float_field(self):
        config = load_config_from_dict({"pdf_options": {"font_config": {"min_font_size": 6}}})

        assert config.pdf_options.font_config.min_font_size == 6.0
        assert isinstance(config.pdf_options.font_config.min_font_size, float)


class TestImmutability:
    """Validated configurations are not mutated after construction."""

    def test_assignment_is_rejected(self):
        config = load_config_from_dict({"ocr": {"languages": ["eng"]}})

        with pytest.raises(ValidationError):
            config.force_ocr = True

        with pytest.raises(ValidationError):
            config.ocr.languages = ["fra"]

    def test_model_copy_builds_new_instance(self):
        config = load_config_from_dict({"ocr": {}})
        updated = config.model_copy(update={"force_ocr": True})

        assert config.force_ocr is False
        assert updated.force_ocr is True

    def test_sequence_fields_cannot_be_mutated_in_place(self):
        config = load_config_from_dict({
            "ocr": {"languages": ["eng"]},
            "keywords": {"custom_keywords": ["invoice"]},
            "pages": {"page_numbers": [1, 2]},
        })

        with pytest.raises(AttributeError):
            config.ocr.languages.append("fra")
        with pytest.raises(AttributeError):
            config.keywords.custom_keywords.append("receipt")
        with pytest.raises(TypeError):
            config.pages.page_numbers[0] = 5

        assert config.ocr.languages == ("eng",)

    def test_sequences_serialize_as_lists(self):
        data = load_config_from_dict({"ocr": {"languages": ["eng", "deu"]}}).to_map()

        assert data["ocr"]["languages"] == ["eng", "deu"]


class TestSecrets:
    """Secret fields stay out of repr but survive serialization."""

    def test_password_not_in_repr(self):
        pdf = PdfConfig(password="hunter2")

        assert "hunter2" not in repr(pdf)
        assert pdf.password == "hunter2"

    def test_api_key_kept_in_map(self):
        config = load_config_from_dict({
            "chunking": {"embedding_config": {"provider": "openai", "api_key": "sk-test"}}
        })

        assert "sk-test" not in repr(config)
        assert config.to_map()["chunking"]["embedding_config"]["api_key"] == "sk-test"


class TestToMap:
    """Conversion to plain mappings."""

    def test_to_map_is_json_compatible(self, sample_config_dict):
        data = load_config_from_dict(sample_config_dict).to_map()

        assert data["ocr"]["backend"] == "tesseract"
        assert data["images"]["format"] == "webp"
        assert data["pages"]["exclude_pages"] == [3]
        assert data["ocr"]["tesseract_config"]["datapath"] is None
        assert isinstance(data["pdf_options"]["render_quality"], int)

    def test_to_map_encodes_as_strict_json(self, sample_config_dict):
        data = load_config_from_dict(sample_config_dict).to_map()

        assert json.loads(json.dumps(data, allow_nan=False)) == data

    def test_round_trip_through_map(self, sample_config_dict):
        config = load_config_from_dict(sample_config_dict)
        restored = load_config_from_dict(config.to_map())

        assert restored.to_map() == config.to_map()

    def test_ocr_config_defaults_round_trip(self):
        ocr = OcrConfig(backend="paddleocr", languages=["eng", "chi_sim"])
        restored = ExtractionConfig.model_validate({"ocr": ocr.model_dump()})

        assert restored.ocr.backend == "paddleocr"
        assert restored.ocr.languages == ("eng", "chi_sim")
