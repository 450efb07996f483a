"""Pytest configuration and fixtures for embedcompare tests."""

import sys
from collections.abc import Generator
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from embedcompare import config
from embedcompare.config import (
    EmbedcompareConfig,
    LocalConfig,
    ModelsConfig,
    OpenAIConfig,
    ReportConfig,
)
from test_helpers import FakeEmbeddingProvider, vector_at_distance


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch) -> Generator[Path]:
    """Automatically point the config file at a test-specific location."""
    config_dir = tmp_path / "config"
    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_PATH", config_dir / "config.toml")
    for name in (
        "EMBEDCOMPARE_MODELS",
        "EMBEDCOMPARE_DEVICE",
        "EMBEDCOMPARE_OPENAI_DIMENSIONS",
    ):
        monkeypatch.delenv(name, raising=False)
    config.reset_config()

    yield config_dir / "config.toml"

    config.reset_config()


@pytest.fixture
def test_config() -> EmbedcompareConfig:
    """Config with two model slots and local device forced to cpu."""
    return EmbedcompareConfig(
        models=ModelsConfig(slots=("model-a", "model-b", None)),
        openai=OpenAIConfig(large_dimensions=1536),
        local=LocalConfig(device="cpu"),
        report=ReportConfig(open_browser=False),
    )


@pytest.fixture
def cat_provider() -> FakeEmbeddingProvider:
    """Provider where "cat" vs "feline" is 0.05 and "cat" vs "car" is 0.80."""
    return FakeEmbeddingProvider(
        {
            "cat": [1.0, 0.0],
            "feline": vector_at_distance(0.05),
            "car": vector_at_distance(0.80),
        }
    )
