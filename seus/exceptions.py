from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ShortLink


class SeusError(Exception):
    """Base class for errors raised by the shortener."""


class InvalidInput(SeusError):
    pass


class InvalidURL(InvalidInput):
    def __init__(self, url: str):
        super().__init__(f"Invalid URL: {url!r}")
        self.url = url


class StoreUnavailable(SeusError):
    """The store could not complete an operation (network, auth, driver error)."""


class StoreTimeout(StoreUnavailable):
    pass


class GenerationExhausted(SeusError):
    def __init__(self, attempts: int):
        super().__init__(f"Could not generate a unique code after {attempts} attempts")
        self.attempts = attempts


class DuplicateCode(SeusError):
    def __init__(self, code: str):
        super().__init__(f"Code already taken: {code!r}")
        self.code = code


class DuplicateURL(SeusError):
    def __init__(self, url: str, existing: Optional["ShortLink"] = None):
        super().__init__(f"URL already shortened: {url!r}")
        self.url = url
        self.existing = existing

