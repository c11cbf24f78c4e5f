class ActionApiError(Exception):
    """Base exception for all actionapi errors."""


class InvalidDurationError(ActionApiError, ValueError):
    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"invalid duration {text!r}")


class WriteTimeoutError(ActionApiError):
    def __init__(self, path: str, timeout: float) -> None:
        self.path = path
        self.timeout = timeout
        super().__init__(f"Response for {path} not written within {timeout}s")
