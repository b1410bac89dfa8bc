from typing import Optional


class SynthesisError(Exception):
    """Any failure after request validation. Always surfaced as a 500."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(SynthesisError):
    pass


class ProviderError(SynthesisError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TransportError(SynthesisError):
    pass
