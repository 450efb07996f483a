"""Unit tests for configuration loading."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from embedcompare import config


class TestParseSlots:
    """Test model slot normalization."""

    def test_comma_separated_string(self) -> None:
        """Test that blanks become empty slots and names are trimmed."""
        assert config.parse_slots(" model-a , ,model-b") == ("model-a", None, "model-b")

    def test_list(self) -> None:
        """Test that TOML lists are accepted."""
        assert config.parse_slots(["model-a", ""]) == ("model-a", None)


class TestLoadConfig:
    """Test load_config file handling and overrides."""

    def test_first_run_generates_and_exits(self, isolated_config, capsys) -> None:
        """Test that a missing config is generated before exiting."""
        with pytest.raises(SystemExit) as exc_info:
            config.load_config()

        assert exc_info.value.code == 1
        assert isolated_config.exists()
        assert "No config found" in capsys.readouterr().err

    def test_loads_defaults(self, isolated_config) -> None:
        """Test the generated defaults load cleanly."""
        config.generate_config()

        loaded = config.load_config()

        assert loaded.models.slots == (
            "text-embedding-3-small",
            "text-embedding-3-large",
            None,
        )
        assert loaded.openai.large_dimensions == 1536
        assert loaded.local.device == "auto"
        assert loaded.report.open_browser is False

    def test_result_is_cached(self, isolated_config) -> None:
        """Test repeated loads return the same object until reset."""
        config.generate_config()
        first = config.load_config()

        assert config.load_config() is first
        config.reset_config()
        assert config.load_config() is not first

    def test_env_overrides(self, isolated_config, monkeypatch) -> None:
        """Test that environment variables win over the file."""
        config.generate_config()
        monkeypatch.setenv("EMBEDCOMPARE_MODELS", "BAAI/bge-small-en-v1.5,")
        monkeypatch.setenv("EMBEDCOMPARE_OPENAI_DIMENSIONS", "512")
        monkeypatch.setenv("EMBEDCOMPARE_DEVICE", "cpu")

        loaded = config.load_config()

        assert loaded.models.slots == ("BAAI/bge-small-en-v1.5", None)
        assert loaded.openai.large_dimensions == 512
        assert loaded.local.device == "cpu"

    def test_missing_required_values_exit(self, isolated_config, capsys) -> None:
        """Test that a config without required keys is rejected."""
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text('[local]\ndevice = "cpu"\n')

        with pytest.raises(SystemExit):
            config.load_config()

        err = capsys.readouterr().err
        assert "models.slots" in err
        assert "openai.large_dimensions" in err

    def test_optional_sections_default(self, isolated_config) -> None:
        """Test that [local] and [report] may be omitted."""
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text(
            '[models]\nslots = ["model-a"]\n\n[openai]\nlarge_dimensions = 3072\n'
        )

        loaded = config.load_config()

        assert loaded.models.slots == ("model-a",)
        assert loaded.openai.large_dimensions == 3072
        assert loaded.local.device == "auto"
        assert loaded.report.open_browser is False
