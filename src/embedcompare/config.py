"""Configuration management for embedcompare.

Loads configuration from ~/.config/embedcompare/config.toml.
Priority chain: CLI flags > env vars > config file.
"""

import os
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path

CONFIG_DIR = Path.home() / ".config" / "embedcompare"
CONFIG_PATH = CONFIG_DIR / "config.toml"

DEFAULT_CONFIG = """\
# embedcompare configuration

[models]
# Models bound to the comparison columns, in order (empty string = unused)
# OpenAI: text-embedding-3-small, text-embedding-3-large, text-embedding-ada-002
# Local:  BAAI/bge-small-en-v1.5
slots = ["text-embedding-3-small", "text-embedding-3-large", ""]

[openai]
# Output dimensions requested for text-embedding-3-large (native 3072)
large_dimensions = 1536

[local]
# Compute device for sentence-transformers: "auto", "mps" (Apple Silicon), "cuda", "cpu"
device = "auto"

[report]
# Open the HTML box-plot report in a browser after writing it
open_browser = false

# API keys are read from environment variables, not this file:
#   OPENAI_API_KEY  - OpenAI provider
"""


@dataclass(frozen=True)
class ModelsConfig:
    """Model slot configuration."""

    slots: tuple[str | None, ...]


@dataclass(frozen=True)
class OpenAIConfig:
    """OpenAI provider configuration."""

    large_dimensions: int


@dataclass(frozen=True)
class LocalConfig:
    """Local sentence-transformers configuration."""

    device: str


@dataclass(frozen=True)
class ReportConfig:
    """Box-plot report configuration."""

    open_browser: bool


@dataclass(frozen=True)
class EmbedcompareConfig:
    """Top-level embedcompare configuration."""

    models: ModelsConfig
    openai: OpenAIConfig
    local: LocalConfig
    report: ReportConfig


_cached_config: EmbedcompareConfig | None = None


def generate_config() -> Path:
    """Generate default config file at ~/.config/embedcompare/config.toml."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    CONFIG_PATH.write_text(DEFAULT_CONFIG)
    return CONFIG_PATH


def reset_config() -> None:
    """Forget the cached configuration so the next load rereads the file."""
    global _cached_config
    _cached_config = None


def parse_slots(value: str | list) -> tuple[str | None, ...]:
    """Normalize a comma-separated string or list of models into slots."""
    items = value.split(",") if isinstance(value, str) else value
    return tuple(str(item).strip() or None for item in items)


def load_config() -> EmbedcompareConfig:
    """Load configuration from config file with env var overrides.

    On first run, generates the config file and exits so the user
    can review it before proceeding.

    Returns:
        Loaded and validated EmbedcompareConfig.

    Raises:
        SystemExit: If config is missing (after generating) or invalid.
    """
    global _cached_config
    if _cached_config is not None:
        return _cached_config

    if not CONFIG_PATH.exists():
        path = generate_config()
        print(
            f"No config found. Generated {path} - review and run again.",
            file=sys.stderr,
        )
        raise SystemExit(1)

    with open(CONFIG_PATH, "rb") as f:
        data = tomllib.load(f)

    models = data.get("models", {})
    openai_cfg = data.get("openai", {})
    local = data.get("local", {})
    report = data.get("report", {})

    # Validate required fields
    missing = []
    if "slots" not in models:
        missing.append("models.slots")
    if "large_dimensions" not in openai_cfg:
        missing.append("openai.large_dimensions")

    if missing:
        print(
            f"Missing required config values: {', '.join(missing)}",
            file=sys.stderr,
        )
        print(f"Edit {CONFIG_PATH} or delete it to regenerate.", file=sys.stderr)
        raise SystemExit(1)

    # Env vars override config file values
    slots = os.getenv("EMBEDCOMPARE_MODELS")
    dimensions = os.getenv("EMBEDCOMPARE_OPENAI_DIMENSIONS")

    _cached_config = EmbedcompareConfig(
        models=ModelsConfig(
            slots=parse_slots(slots if slots is not None else models["slots"]),
        ),
        openai=OpenAIConfig(
            large_dimensions=int(dimensions or openai_cfg["large_dimensions"]),
        ),
        local=LocalConfig(
            device=os.getenv("EMBEDCOMPARE_DEVICE", local.get("device", "auto")),
        ),
        report=ReportConfig(
            open_browser=bool(report.get("open_browser", False)),
        ),
    )

    return _cached_config
