"""
Pydantic models for the extraction configuration.

Defines the canonical schema for how a document is processed: every
sub-configuration, its defaults, its bounds and the rules that relate
sibling fields. Validation of a whole document is driven by these models.
"""

import logging
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional, Tuple

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    FiniteFloat,
    StrictBool,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic_core import PydanticCustomError

logger = logging.getLogger(__name__)

def _numeric_input(kind: str, message: str) -> BeforeValidator:
    """Reject text and booleans before pydantic's numeric coercion sees them."""
    def check(value: Any) -> Any:
        if isinstance(value, (str, bytes, bool)):
            raise PydanticCustomError(kind, message)
        return value

    return BeforeValidator(check)


# Integral floats such as 300.0 are still accepted for integer fields.
ConfigInt = Annotated[int, _numeric_input("int_type", "Input should be a valid integer")]
ConfigFloat = Annotated[FiniteFloat, _numeric_input("float_type", "Input should be a valid number")]
PageNumber = Annotated[ConfigInt, Field(gt=0)]
LanguageCode = Annotated[str, Field(min_length=1)]


class OcrBackend(str, Enum):
    """Supported OCR backends."""
    TESSERACT = "tesseract"
    EASYOCR = "easyocr"
    PADDLEOCR = "paddleocr"
    AUTO = "auto"


class ImageFormat(str, Enum):
    """Output formats for extracted images."""
    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"
    BMP = "bmp"
    TIFF = "tiff"


class ChunkingStrategy(str, Enum):
    """Text chunking strategies."""
    FIXED = "fixed"
    SEMANTIC = "semantic"
    ADAPTIVE = "adaptive"


class EmbeddingProvider(str, Enum):
    """Embedding model providers."""
    LOCAL = "local"
    OPENAI = "openai"
    HUGGINGFACE = "huggingface"
    COHERE = "cohere"
    CUSTOM = "custom"


class PoolStrategy(str, Enum):
    """Token pooling strategies for embeddings."""
    MEAN = "mean"
    MAX = "max"
    CLS = "cls"
    SUM = "sum"


class TokenReductionStrategy(str, Enum):
    """Token reduction strategies."""
    NONE = "none"
    TRUNCATE = "truncate"
    SUMMARIZE = "summarize"
    EXTRACTIVE = "extractive"


class LanguageDetectionStrategy(str, Enum):
    """Language detection strategies."""
    AUTO = "auto"
    FAST = "fast"
    ACCURATE = "accurate"


class KeywordStrategy(str, Enum):
    """Keyword extraction strategies."""
    FREQUENCY = "frequency"
    TFIDF = "tfidf"
    NLP = "nlp"
    CUSTOM = "custom"


class QuoteStyle(str, Enum):
    """Quote conversion modes for post-processing."""
    STRAIGHT = "straight"
    SMART = "smart"
    NONE = "none"


def _ordering_error(kind: str, field: str, relation: str, other: str, bound: Any) -> PydanticCustomError:
    return PydanticCustomError(
        kind,
        "{field} must be {relation} {other} ({bound})",
        {"field": field, "relation": relation, "other": other, "bound": bound},
    )


class ConfigSection(BaseModel):
    """Common behaviour of every configuration section."""

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
    )

    @classmethod
    def _input_keys(cls) -> Dict[str, str]:
        """Map every accepted input key (names and aliases) to its field name."""
        keys = {}
        for name, field in cls.model_fields.items():
            keys[name] = name
            alias = field.validation_alias
            if isinstance(alias, AliasChoices):
                for choice in alias.choices:
                    if isinstance(choice, str):
                        keys[choice] = name
            elif isinstance(alias, str):
                keys[alias] = name
        return keys

    @model_validator(mode="before")
    @classmethod
    def _prepare_input(cls, data: Any) -> Any:
        """Drop nulls that stand for defaults and report unknown keys."""
        if not isinstance(data, dict):
            return data

        keys = cls._input_keys()
        unknown = sorted(str(key) for key in data if key not in keys)
        if unknown:
            logger.debug(f"Ignoring unknown keys in {cls.__name__}: {', '.join(unknown)}")

        prepared = {}
        for key, value in data.items():
            name = keys.get(key)
            if value is None and name is not None and cls.model_fields[name].default is not None:
                continue
            prepared[key] = value
        return prepared


class ImagePreprocessingConfig(ConfigSection):
    """Image preprocessing applied before OCR or image extraction."""

    enabled: StrictBool = Field(default=True, description="Whether preprocessing runs at all")
    denoise: StrictBool = Field(default=False, description="Apply noise reduction")
    denoise_strength: ConfigInt = Field(
        default=5,
        gt=0,
        description="Strength of the noise reduction filter"
    )
    bilateral_sigma: ConfigFloat = Field(
        default=75.0,
        description="Sigma of the bilateral filter used for denoising"
    )
    deskew: StrictBool = Field(default=False, description="Correct page rotation")
    deskew_angle_threshold: ConfigFloat = Field(
        default=0.5,
        gt=0.0,
        description="Minimum detected angle (degrees) before deskewing is applied"
    )
    adjust_contrast: StrictBool = Field(default=False, description="Apply contrast adjustment")
    contrast_value: ConfigFloat = Field(
        default=1.0,
        ge=0.5,
        le=3.0,
        description="Contrast multiplier"
    )
    normalize_brightness: StrictBool = Field(default=True, description="Normalize image brightness")
    auto_crop: StrictBool = Field(default=False, description="Crop empty borders")
    auto_enhance: StrictBool = Field(default=False, description="Apply automatic enhancement")


class TesseractConfig(ConfigSection):
    """Tesseract specific OCR settings."""

    psm_mode: ConfigInt = Field(
        default=3,
        ge=0,
        le=13,
        description="Page segmentation mode"
    )
    oem_mode: ConfigInt = Field(
        default=3,
        ge=0,
        le=3,
        description="OCR engine mode"
    )
    datapath: Optional[str] = Field(
        default=None,
        description="Directory holding the tessdata files"
    )
    config_file: Optional[str] = Field(
        default=None,
        description="Path to a Tesseract config file"
    )
    enable_table_detection: StrictBool = Field(
        default=False,
        description="Detect tables from Tesseract word boxes"
    )
    preprocessing: Optional[ImagePreprocessingConfig] = Field(
        default=None,
        description="Preprocessing applied to images before Tesseract runs"
    )


class OcrConfig(ConfigSection):
    """OCR configuration."""

    enabled: StrictBool = Field(default=True, description="Whether OCR is performed")
    backend: OcrBackend = Field(default=OcrBackend.TESSERACT, description="OCR backend")
    languages: Tuple[LanguageCode, ...] = Field(
        default=("eng",),
        description="Ordered language codes passed to the backend"
    )
    tesseract_config: Optional[TesseractConfig] = Field(
        default=None,
        description="Tesseract specific settings"
    )

    @field_validator("languages")
    @classmethod
    def validate_languages(cls, v: Tuple[str, ...], info: ValidationInfo) -> Tuple[str, ...]:
        """At least one language is needed when OCR is enabled."""
        if info.data.get("enabled") and not v:
            raise PydanticCustomError(
                "languages_empty",
                "languages must contain at least one code when OCR is enabled",
            )
        return v


class FontConfig(ConfigSection):
    """Font handling for PDF extraction."""

    enabled: StrictBool = Field(default=True, description="Whether font handling is active")
    extract_font_info: StrictBool = Field(default=True, description="Report font information")
    preserve_font_styles: StrictBool = Field(default=True, description="Keep bold/italic styling")
    min_font_size: ConfigFloat = Field(
        default=6.0,
        gt=0.0,
        description="Smallest font size (points) that is kept"
    )
    max_font_size: ConfigFloat = Field(
        default=72.0,
        gt=0.0,
        description="Largest font size (points) that is kept"
    )
    ignore_small_text: StrictBool = Field(
        default=False,
        description="Drop text below min_font_size"
    )
    substitute_missing_fonts: StrictBool = Field(
        default=False,
        description="Replace fonts that are not available"
    )
    substitute_map: Optional[Dict[str, str]] = Field(
        default=None,
        description="Font family replacements, keyed by original family"
    )
    default_font_family: Optional[str] = Field(
        default=None,
        description="Family used when no substitution matches"
    )

    @field_validator("max_font_size")
    @classmethod
    def validate_font_size_range(cls, v: float, info: ValidationInfo) -> float:
        """Font size range must not be inverted."""
        minimum = info.data.get("min_font_size")
        if minimum is not None and v < minimum:
            raise _ordering_error(
                "font_size_range_inverted", "max_font_size", ">=", "min_font_size", minimum
            )
        return v


class PdfConfig(ConfigSection):
    """PDF extraction configuration."""

    enabled: StrictBool = Field(default=True, description="Whether PDF specific handling is active")
    extract_forms: StrictBool = Field(default=False, description="Extract form fields")
    extract_form_data: StrictBool = Field(default=False, description="Extract filled-in form values")
    preserve_form_structure: StrictBool = Field(default=False, description="Keep form layout")
    render_quality: ConfigInt = Field(
        default=150,
        ge=72,
        le=600,
        description="Rendering resolution in DPI"
    )
    render_images: StrictBool = Field(default=False, description="Render pages to images")
    extract_annotations: StrictBool = Field(default=False, description="Extract annotations")
    extract_comments: StrictBool = Field(default=False, description="Extract comments")
    extract_metadata: StrictBool = Field(default=True, description="Extract document metadata")
    password: Optional[str] = Field(
        default=None,
        repr=False,
        description="Password for encrypted documents"
    )
    font_config: Optional[FontConfig] = Field(
        default=None,
        description="Font handling settings"
    )


class ImageExtractionConfig(ConfigSection):
    """Configuration for images extracted from documents."""

    extract_images: StrictBool = Field(default=True, description="Whether images are extracted")
    format: ImageFormat = Field(default=ImageFormat.PNG, description="Output image format")
    quality: ConfigInt = Field(
        default=85,
        ge=1,
        le=100,
        description="Encoder quality"
    )
    compression: ConfigInt = Field(
        default=6,
        ge=0,
        description="Encoder compression level"
    )
    min_width: ConfigInt = Field(default=0, ge=0, description="Smallest image width kept (pixels)")
    max_width: ConfigInt = Field(default=4096, ge=0, description="Largest image width kept (pixels)")
    min_height: ConfigInt = Field(default=0, ge=0, description="Smallest image height kept (pixels)")
    max_height: ConfigInt = Field(default=4096, ge=0, description="Largest image height kept (pixels)")
    dpi_threshold: ConfigInt = Field(
        default=150,
        description="Resolution below which images are treated as low quality"
    )
    preprocessing: Optional[ImagePreprocessingConfig] = Field(
        default=None,
        description="Preprocessing applied to extracted images"
    )

    @field_validator("format", mode="before")
    @classmethod
    def normalize_format(cls, v: Any) -> Any:
        """Image format names are case-insensitive."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("max_width")
    @classmethod
    def validate_width_range(cls, v: int, info: ValidationInfo) -> int:
        minimum = info.data.get("min_width")
        if minimum is not None and v <= minimum:
            raise _ordering_error("width_range_inverted", "max_width", ">", "min_width", minimum)
        return v

    @field_validator("max_height")
    @classmethod
    def validate_height_range(cls, v: int, info: ValidationInfo) -> int:
        minimum = info.data.get("min_height")
        if minimum is not None and v <= minimum:
            raise _ordering_error("height_range_inverted", "max_height", ">", "min_height", minimum)
        return v


class EmbeddingConfig(ConfigSection):
    """Embedding generation for chunks."""

    enabled: StrictBool = Field(default=True, description="Whether embeddings are generated")
    provider: EmbeddingProvider = Field(
        default=EmbeddingProvider.LOCAL,
        description="Embedding provider"
    )
    model: str = Field(
        default="sentence-transformers/all-MiniLM-L6-v2",
        description="Model identifier understood by the provider"
    )
    dimensions: ConfigInt = Field(default=384, gt=0, description="Embedding vector size")
    batch_size: ConfigInt = Field(default=32, gt=0, description="Chunks embedded per batch")
    normalize: StrictBool = Field(default=True, description="L2-normalize vectors")
    pool_strategy: PoolStrategy = Field(
        default=PoolStrategy.MEAN,
        description="Token pooling strategy"
    )
    device: Optional[str] = Field(default=None, description="Inference device, e.g. cpu or cuda")
    api_key: Optional[str] = Field(
        default=None,
        repr=False,
        description="API key for hosted providers"
    )


class ChunkingConfig(ConfigSection):
    """Text chunking configuration."""

    enabled: StrictBool = Field(default=True, description="Whether text is chunked")
    chunk_size: ConfigInt = Field(
        default=512,
        gt=0,
        validation_alias=AliasChoices("chunk_size", "size", "max_chars"),
        description="Maximum characters per chunk"
    )
    overlap: ConfigInt = Field(
        default=50,
        ge=0,
        validation_alias=AliasChoices("overlap", "max_overlap"),
        description="Characters shared between consecutive chunks"
    )
    strategy: ChunkingStrategy = Field(
        default=ChunkingStrategy.FIXED,
        description="Chunking strategy"
    )
    separator: Optional[str] = Field(
        default=None,
        description="Preferred split marker"
    )
    preserve_headers: StrictBool = Field(
        default=False,
        description="Repeat section headers in each chunk"
    )
    embedding_config: Optional[EmbeddingConfig] = Field(
        default=None,
        description="Embedding generation for chunks"
    )

    @field_validator("overlap")
    @classmethod
    def validate_overlap(cls, v: int, info: ValidationInfo) -> int:
        """Overlap must leave room for new content in every chunk."""
        chunk_size = info.data.get("chunk_size")
        if chunk_size is not None and v >= chunk_size:
            raise _ordering_error(
                "overlap_not_less_than_chunk_size", "overlap", "<", "chunk_size", chunk_size
            )
        return v


class TokenReductionConfig(ConfigSection):
    """Token reduction configuration."""

    enabled: StrictBool = Field(default=True, description="Whether token reduction runs")
    strategy: TokenReductionStrategy = Field(
        default=TokenReductionStrategy.SUMMARIZE,
        description="Reduction strategy"
    )
    target_reduction: ConfigFloat = Field(
        default=0.3,
        ge=0.0,
        le=1.0,
        description="Fraction of tokens to remove"
    )
    max_tokens: ConfigInt = Field(default=4096, gt=0, description="Token budget for the output")
    keep_first_percentage: ConfigFloat = Field(
        default=0.2,
        ge=0.0,
        le=1.0,
        description="Leading fraction of the text that is always kept"
    )
    num_sentences: ConfigInt = Field(
        default=5,
        ge=0,
        description="Sentences kept by extractive reduction"
    )
    sentence_importance_threshold: ConfigFloat = Field(
        default=0.5,
        description="Score a sentence needs to be kept"
    )


class LanguageDetectionConfig(ConfigSection):
    """Language detection configuration."""

    enabled: StrictBool = Field(default=True, description="Whether language detection runs")
    strategy: LanguageDetectionStrategy = Field(
        default=LanguageDetectionStrategy.AUTO,
        description="Detection strategy"
    )
    confidence_threshold: ConfigFloat = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Minimum confidence for a detected language"
    )
    predefined_languages: Optional[Tuple[LanguageCode, ...]] = Field(
        default=None,
        description="Restrict detection to these language codes"
    )
    detect_mixed_languages: StrictBool = Field(
        default=False,
        description="Report every language found in mixed documents"
    )


class KeywordConfig(ConfigSection):
    """Keyword extraction configuration."""

    enabled: StrictBool = Field(default=True, description="Whether keywords are extracted")
    strategy: KeywordStrategy = Field(
        default=KeywordStrategy.FREQUENCY,
        description="Extraction strategy"
    )
    max_keywords: ConfigInt = Field(default=10, gt=0, description="Maximum keywords returned")
    min_frequency: ConfigInt = Field(default=1, ge=0, description="Occurrences needed to qualify")
    custom_keywords: Tuple[str, ...] = Field(
        default=(),
        description="Keywords that are always reported when present"
    )
    language: Optional[str] = Field(default=None, description="Language of the stop-word list")


class PostProcessorConfig(ConfigSection):
    """Text post-processing configuration."""

    enabled: StrictBool = Field(default=True, description="Whether post-processing runs")
    normalize_whitespace: StrictBool = Field(default=True, description="Collapse runs of whitespace")
    remove_duplicates: StrictBool = Field(default=False, description="Drop near-duplicate passages")
    duplicate_threshold: ConfigFloat = Field(
        default=0.9,
        ge=0.0,
        le=1.0,
        description="Similarity above which passages count as duplicates"
    )
    remove_empty_lines: StrictBool = Field(default=True, description="Drop blank lines")
    trim_text: StrictBool = Field(default=True, description="Strip leading and trailing whitespace")
    normalize_unicode: StrictBool = Field(default=True, description="Apply Unicode normalization")
    fix_punctuation: StrictBool = Field(default=False, description="Repair common punctuation errors")
    fix_hyphens: StrictBool = Field(default=False, description="Join words split by line-end hyphens")
    convert_dashes: StrictBool = Field(default=False, description="Normalize dash characters")
    convert_quotes: QuoteStyle = Field(default=QuoteStyle.NONE, description="Quote conversion")


class HierarchyConfig(ConfigSection):
    """Document hierarchy detection."""

    enabled: StrictBool = Field(default=True, description="Whether hierarchy is detected")
    preserve_structure: StrictBool = Field(default=True, description="Keep the detected structure")
    extract_headings: StrictBool = Field(default=True, description="Report headings")
    create_table_of_contents: StrictBool = Field(default=False, description="Build a table of contents")
    min_heading_level: ConfigInt = Field(default=1, gt=0, description="Shallowest heading level")
    max_heading_level: ConfigInt = Field(default=6, gt=0, description="Deepest heading level")
    max_depth: ConfigInt = Field(default=6, gt=0, description="Maximum nesting depth")

    @field_validator("max_heading_level")
    @classmethod
    def validate_heading_range(cls, v: int, info: ValidationInfo) -> int:
        minimum = info.data.get("min_heading_level")
        if minimum is not None and v < minimum:
            raise _ordering_error(
                "heading_range_inverted", "max_heading_level", ">=", "min_heading_level", minimum
            )
        return v


class PageConfig(ConfigSection):
    """Page selection and per-page extraction toggles."""

    enabled: StrictBool = Field(default=True, description="Whether page selection applies")
    start_page: ConfigInt = Field(default=1, gt=0, description="First page processed (1-based)")
    end_page: Optional[ConfigInt] = Field(
        default=None,
        description="Last page processed; None means the end of the document"
    )
    page_numbers: Tuple[PageNumber, ...] = Field(
        default=(),
        description="Explicit pages to process"
    )
    exclude_pages: Tuple[PageNumber, ...] = Field(
        default=(),
        description="Pages to skip; exclusion wins over page_numbers"
    )
    extract_text: StrictBool = Field(default=True, description="Extract page text")
    extract_tables: StrictBool = Field(default=True, description="Extract tables")
    extract_images: StrictBool = Field(default=False, description="Extract page images")
    extract_headers_footers: StrictBool = Field(default=False, description="Keep running headers and footers")

    @field_validator("end_page")
    @classmethod
    def validate_page_range(cls, v: Optional[int], info: ValidationInfo) -> Optional[int]:
        start = info.data.get("start_page")
        if v is not None and start is not None and v < start:
            raise _ordering_error("page_range_inverted", "end_page", ">=", "start_page", start)
        return v


class ExtractionConfig(ConfigSection):
    """Root configuration handed to the extraction engine."""

    use_cache: StrictBool = Field(default=True, description="Reuse cached extraction results")
    enable_quality_processing: StrictBool = Field(
        default=True,
        description="Run text quality heuristics"
    )
    force_ocr: StrictBool = Field(default=False, description="OCR even when text is extractable")

    ocr: Optional[OcrConfig] = Field(default=None, description="OCR configuration")
    pdf_options: Optional[PdfConfig] = Field(default=None, description="PDF configuration")
    images: Optional[ImageExtractionConfig] = Field(
        default=None,
        description="Image extraction configuration"
    )
    chunking: Optional[ChunkingConfig] = Field(default=None, description="Chunking configuration")
    token_reduction: Optional[TokenReductionConfig] = Field(
        default=None,
        description="Token reduction configuration"
    )
    language_detection: Optional[LanguageDetectionConfig] = Field(
        default=None,
        description="Language detection configuration"
    )
    keywords: Optional[KeywordConfig] = Field(
        default=None,
        description="Keyword extraction configuration"
    )
    postprocessor: Optional[PostProcessorConfig] = Field(
        default=None,
        description="Post-processing configuration"
    )
    hierarchy: Optional[HierarchyConfig] = Field(
        default=None,
        description="Hierarchy detection configuration"
    )
    pages: Optional[PageConfig] = Field(default=None, description="Page selection configuration")

    def to_map(self) -> Dict[str, Any]:
        """Convert to a plain mapping of JSON-compatible values."""
        return self.model_dump(mode="json", warnings=False)

    def enabled_sections(self) -> List[str]:
        """Names of the sub-configurations that are present."""
        return [
            name for name in type(self).model_fields
            if isinstance(getattr(self, name), BaseModel)
        ]
