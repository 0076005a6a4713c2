from typing import Optional


class CopyError(Exception):
    """Base class of every error that aborts a copy run."""


class UsageError(CopyError):
    pass


class ArgumentParseError(CopyError):
    pass


class ZoneResolutionError(CopyError):
    pass


class TransportError(CopyError):
    """The request could not be completed."""


class HTTPStatusError(TransportError):
    status_code: int

    def __init__(self, status_code: int, url: Optional[str] = None):
        super().__init__(f'{url or "request"} failed with HTTP {status_code}')
        self.status_code = status_code


class DecodeError(CopyError):
    pass


class TimestampParseError(CopyError):
    pass
