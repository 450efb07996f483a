"""Custom embedcompare exceptions."""


class ComparisonError(Exception):
    """Base exception for embedding comparison errors."""

    def __init__(
        self, message: str, original_error: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_error = original_error


class DimensionMismatch(ComparisonError):
    """Exception raised when two vectors of different length are compared."""

    def __init__(self, len_a: int, len_b: int) -> None:
        super().__init__(
            f"Embedding dimensions must match. A: {len_a}, B: {len_b}"
        )
        self.len_a = len_a
        self.len_b = len_b


class ZeroMagnitude(ComparisonError):
    """Exception raised when cosine distance is undefined for a zero vector."""

    def __init__(self) -> None:
        super().__init__("Cannot calculate distance for zero vectors")


class InvalidEmbedding(ComparisonError, ValueError):
    """Exception raised for pasted embeddings that cannot be parsed."""

    pass


class ProviderError(ComparisonError):
    """Exception raised for embedding provider failures.

    This typically occurs when:
    - Rate limits are exceeded (429 error)
    - The provider returns a malformed response
    - The requested model is not supported
    - Network connectivity issues
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.status_code = status_code


class ProviderAuthError(ProviderError):
    """Exception raised for authentication failures.

    This typically occurs when:
    - API key is missing or invalid
    - Account has insufficient quota
    """

    pass


class ImportFormatError(ComparisonError):
    """Exception raised when a CSV file cannot be read at all."""

    pass
