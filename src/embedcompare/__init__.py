"""embedcompare - compare text pairs across embedding models."""

__version__ = "0.1.0"
__all__ = ["ComparisonOrchestrator", "ModelRouter"]


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    if name == "ComparisonOrchestrator":
        from .comparison.orchestrator import ComparisonOrchestrator

        return ComparisonOrchestrator
    if name == "ModelRouter":
        from .providers import ModelRouter

        return ModelRouter
    raise AttributeError(f"module 'embedcompare' has no attribute {name!r}")
