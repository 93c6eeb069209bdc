class WpHmrError(Exception):
    """Base class for all wphmr errors."""

    pass


class InvalidOriginError(WpHmrError, ValueError):
    """The dev server origin is not an absolute http(s) URL."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Invalid dev server origin {url!r}: {reason}")
        self.url = url
        self.reason = reason


class ConfigLoadError(WpHmrError):
    """A configuration file could not be read or parsed."""

    pass
