"""weblog error hierarchy."""


class WeblogError(Exception):
    """Base error for content store operations."""


class URIConflict(WeblogError):
    """The URI is already used by another content piece."""

    def __init__(self, uri: str) -> None:
        self.uri = uri
        super().__init__(f"URI in use: {uri!r}")


class ContentNotFound(WeblogError):
    """No content piece matched."""

    def __init__(self, message: str = "content not found") -> None:
        super().__init__(message)


class InvalidID(WeblogError):
    """An update was attempted without an id."""

    def __init__(self) -> None:
        super().__init__("invalid id")


class ValidationError(WeblogError):
    """The content piece is not storable as given."""


class FetchError(WeblogError):
    """A URL preview could not be fetched or parsed."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"failed to fetch preview for {url}: {reason}")
