"""
Pytest configuration and shared fixtures for configuration tests.

Provides temporary directories, sample configuration documents in every
supported format and quiet logging for all test modules.
"""

import errno
import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Dict, Any, Generator

from kreuzberg_config.config import DiscoveryContext
from kreuzberg_config.utils.logging_utils import setup_logging


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    temp_path = Path(tempfile.mkdtemp()).resolve()

    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def isolated_context(temp_dir: Path) -> DiscoveryContext:
    """Discovery context confined to the temporary directory with no environment."""
    return DiscoveryContext(start_dir=temp_dir, environ={}, root_dir=temp_dir)


@pytest.fixture
def sample_config_dict() -> Dict[str, Any]:
    """Create a sample configuration dictionary touching every section."""
    return {
        "use_cache": True,
        "force_ocr": False,
        "ocr": {
            "enabled": True,
            "backend": "tesseract",
            "languages": ["eng", "deu"],
            "tesseract_config": {"psm_mode": 6, "oem_mode": 1},
        },
        "pdf_options": {
            "render_quality": 300,
            "extract_forms": True,
            "font_config": {"min_font_size": 8.5, "max_font_size": 48.0},
        },
        "images": {
            "extract_images": True,
            "format": "webp",
            "quality": 90,
            "preprocessing": {"denoise": True, "contrast_value": 1.25},
        },
        "chunking": {
            "chunk_size": 1024,
            "overlap": 128,
            "strategy": "semantic",
            "embedding_config": {"provider": "openai", "model": "text-embedding-3-small", "dimensions": 1536},
        },
        "token_reduction": {"strategy": "extractive", "target_reduction": 0.35},
        "language_detection": {"confidence_threshold": 0.85, "predefined_languages": ["en", "de"]},
        "keywords": {"strategy": "tfidf", "max_keywords": 25, "custom_keywords": ["invoice"]},
        "postprocessor": {"remove_duplicates": True, "convert_quotes": "straight"},
        "hierarchy": {"min_heading_level": 2, "max_heading_level": 4},
        "pages": {"start_page": 2, "end_page": 10, "page_numbers": [2, 3], "exclude_pages": [3]},
    }


SAMPLE_TOML = """\
use_cache = true
force_ocr = false

[ocr]
backend = "easyocr"
languages = ["eng", "fra"]

[pdf_options]
render_quality = 200

[chunking]
chunk_size = 800
overlap = 100

[chunking.embedding_config]
dimensions = 768
batch_size = 16

[token_reduction]
target_reduction = 0.25
"""

SAMPLE_YAML = """\
use_cache: true
force_ocr: false
ocr:
  backend: easyocr
  languages:
    - eng
    - fra
pdf_options:
  render_quality: 200
chunking:
  chunk_size: 800
  overlap: 100
  embedding_config:
    dimensions: 768
    batch_size: 16
token_reduction:
  target_reduction: 0.25
"""

SAMPLE_JSON = """\
{
  "use_cache": true,
  "force_ocr": false,
  "ocr": {"backend": "easyocr", "languages": ["eng", "fra"]},
  "pdf_options": {"render_quality": 200},
  "chunking": {
    "chunk_size": 800,
    "overlap": 100,
    "embedding_config": {"dimensions": 768, "batch_size": 16}
  },
  "token_reduction": {"target_reduction": 0.25}
}
"""


@pytest.fixture
def sample_documents() -> Dict[str, str]:
    """The same logical configuration written in every supported format."""
    return {"toml": SAMPLE_TOML, "yaml": SAMPLE_YAML, "json": SAMPLE_JSON}


@pytest.fixture(autouse=True)
def setup_test_logging():
    """Setup logging for tests."""
    setup_logging(
        level="WARNING",  # Only show warnings and errors in tests
        use_rich=False,   # Disable rich formatting for cleaner test output
        format_style="minimal"
    )


@pytest.fixture
def write_file():
    """Return a helper writing a UTF-8 text file and returning its path."""
    def _write(directory: Path, name: str, content: str) -> Path:
        path = directory / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def deny_access(monkeypatch):
    """Make Path.stat fail with EACCES for everything below the given directories."""
    locked = []
    original_stat = Path.stat

    def guarded_stat(self, *args, **kwargs):
        if any(directory in self.parents for directory in locked):
            raise PermissionError(errno.EACCES, "Permission denied", str(self))
        return original_stat(self, *args, **kwargs)

    monkeypatch.setattr(Path, "stat", guarded_stat)

    def _deny(directory: Path) -> None:
        locked.append(directory)

    return _deny


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests (deselect with '-m \"not unit\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


def pytest_collection_modifyitems(config, items):
    """Add markers based on test location."""
    for item in items:
        if "unit" in str(item.path):
            item.add_marker(pytest.mark.unit)

        if "integration" in str(item.path):
            item.add_marker(pytest.mark.integration)
