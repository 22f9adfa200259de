"""Errors raised while aggregating the component catalog."""


class KompassError(Exception):
    """Base class for kompass errors."""


class SourceUnavailableError(KompassError):
    """A catalog source could not be fetched."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(message)
        self.source = source
        self.message = message


class EmptyAggregateError(KompassError):
    """Both listings came back empty."""

    def __init__(self, message: str = "no deployable components found") -> None:
        super().__init__(message)


REGISTRY_MISCONFIGURED = (
    "Please run 'kompass registry add <registry name> <registry URL>' "
    "to add a registry for listing devfile components"
)
