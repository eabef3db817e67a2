"""
Configuration system with Pydantic models and validation.

Provides the extraction schema, format adapters for TOML/YAML/JSON,
configuration discovery and loading.
"""

from .models import (
    ExtractionConfig,
    OcrConfig,
    TesseractConfig,
    PdfConfig,
    FontConfig,
    ImageExtractionConfig,
    ImagePreprocessingConfig,
    ChunkingConfig,
    EmbeddingConfig,
    TokenReductionConfig,
    LanguageDetectionConfig,
    KeywordConfig,
    PostProcessorConfig,
    HierarchyConfig,
    PageConfig,
    OcrBackend,
    ImageFormat,
    ChunkingStrategy,
    EmbeddingProvider,
    PoolStrategy,
    TokenReductionStrategy,
    LanguageDetectionStrategy,
    KeywordStrategy,
    QuoteStyle,
)
from .formats import ConfigFormat, decode, encode
from .validation import FieldViolation, collect_violations, validate_config
from .discovery import (
    CANDIDATE_FILENAMES,
    CONFIG_PATH_ENV_VAR,
    DiscoveryContext,
    find_config_file,
)
from .loader import (
    discover_config,
    load_config,
    load_config_from_dict,
    save_config,
    get_default_config,
    validate_config_file,
)

__all__ = [
    # Configuration models
    "ExtractionConfig",
    "OcrConfig",
    "TesseractConfig",
    "PdfConfig",
    "FontConfig",
    "ImageExtractionConfig",
    "ImagePreprocessingConfig",
    "ChunkingConfig",
    "EmbeddingConfig",
    "TokenReductionConfig",
    "LanguageDetectionConfig",
    "KeywordConfig",
    "PostProcessorConfig",
    "HierarchyConfig",
    "PageConfig",
    # Enumerations
    "OcrBackend",
    "ImageFormat",
    "ChunkingStrategy",
    "EmbeddingProvider",
    "PoolStrategy",
    "TokenReductionStrategy",
    "LanguageDetectionStrategy",
    "KeywordStrategy",
    "QuoteStyle",
    # Formats
    "ConfigFormat",
    "decode",
    "encode",
    # Validation
    "FieldViolation",
    "collect_violations",
    "validate_config",
    # Discovery
    "CANDIDATE_FILENAMES",
    "CONFIG_PATH_ENV_VAR",
    "DiscoveryContext",
    "find_config_file",
    # Configuration loading
    "discover_config",
    "load_config",
    "load_config_from_dict",
    "save_config",
    "get_default_config",
    "validate_config_file",
]
