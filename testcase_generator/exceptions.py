"""Custom exceptions for the test case generator."""

from typing import List, Optional


class TestCaseGeneratorError(Exception):
    """Base exception for test case generator errors."""
    pass


class ConfigurationError(TestCaseGeneratorError):
    """Raised when configuration is invalid or missing."""
    pass


class DocumentError(TestCaseGeneratorError):
    """Base class for failures while reading the requirements document."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(message)


class DocumentNotFoundError(DocumentError):
    """Raised when the requirements document does not exist."""

    def __init__(self, path: str):
        super().__init__(path, f"Document not found: {path}")


class UnsupportedDocumentError(DocumentError):
    """Raised when the document suffix has no reader."""

    def __init__(self, path: str, supported: List[str]):
        self.supported = supported
        super().__init__(
            path,
            f"Unsupported file format for {path}. Use {', '.join(s.lstrip('.').upper() for s in supported)}."
        )


class DocumentReadError(DocumentError):
    """Raised when a reader fails or the document holds no text."""
    pass


class LLMRuntimeError(TestCaseGeneratorError):
    """Raised when LLM runtime encounters an error."""
    pass


class GenerationError(TestCaseGeneratorError):
    """
    Raised when no usable response was produced after all attempts.

    Attributes:
        attempts: Number of attempts made
        raw_response: Last raw response received (may be empty)
    """

    def __init__(self, attempts: int, raw_response: Optional[str] = None, details: str = ""):
        self.attempts = attempts
        self.raw_response = raw_response
        self.details = details
        message = f"Failed to generate test cases after {attempts} attempt(s)"
        if details:
            message = f"{message}: {details}"
        super().__init__(message)


class NoTestCasesError(TestCaseGeneratorError):
    """Raised when the response parsed into zero test cases."""

    def __init__(self, skipped_rows: int = 0):
        self.skipped_rows = skipped_rows
        self.details = f"{skipped_rows} malformed row(s) skipped" if skipped_rows else None
        super().__init__(
            "No valid test cases parsed from the response. "
            "Run with --verbose to inspect the raw model output."
        )


class OutputWriteError(TestCaseGeneratorError):
    """Raised when the output file cannot be written."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Failed to write {path}: {message}")
