"""
errors.py

Test-flow error kinds. Every one of them is recoverable: the session that
raised it keeps its previous state and the user may retry.
"""


class TestFlowError(Exception):
    """Base class for all test-flow errors."""


class InvalidFormat(TestFlowError, ValueError):
    """Payload does not have the expected shape (e.g. empty or non-list)."""


class IngestionFailed(TestFlowError):
    """Uploaded content could not be read or decoded."""


class GenerationFailed(TestFlowError, RuntimeError):
    """The question generator failed or returned unusable data."""


class InvalidTransition(TestFlowError):
    """Operation requested from a mode where it is not allowed."""
