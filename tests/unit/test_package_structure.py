"""Test package structure and imports."""

import sys
from pathlib import Path

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))


def test_package_imports() -> None:
    """Test that embedcompare package can be imported."""
    import embedcompare

    assert embedcompare.__version__ == "0.1.0"


def test_main_module_imports() -> None:
    """Test that main module can be imported without error."""
    from embedcompare.__main__ import main

    assert callable(main)


def test_lazy_top_level_exports() -> None:
    """Test that the orchestrator and router are reachable from the package."""
    import embedcompare
    from embedcompare.comparison.orchestrator import ComparisonOrchestrator
    from embedcompare.providers import ModelRouter

    assert embedcompare.ComparisonOrchestrator is ComparisonOrchestrator
    assert embedcompare.ModelRouter is ModelRouter
