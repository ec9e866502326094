"""Custom exceptions for Guessmeter."""


class GuessmeterError(Exception):
    """Base exception for Guessmeter."""


class InvalidMatchError(GuessmeterError, ValueError):
    """Match offsets fall outside the password they claim to explain."""


class EntropyDecodeError(GuessmeterError):
    """Serialized analysis result does not match the expected format."""
