"""Error types raised by the alt text pipeline and collection."""


class AltTextError(Exception):
    """Base class for failures that end up as a per-record or overall message."""

    def describe(self) -> str:
        """Return `"<ErrorName>: <detail>"` for display on a record."""
        detail = str(self) or "no details"
        return f"{type(self).__name__}: {detail}"


class NoValidImages(AltTextError):
    """Intake received files but none of them declared an image content type."""


class FetchFailed(AltTextError):
    """A remote image could not be downloaded."""


class ApiError(AltTextError):
    """The captioning endpoint returned a non-success response."""


class EmptyCompletion(AltTextError):
    """The captioning endpoint answered but produced no text."""


class NothingToExport(AltTextError):
    """Export was requested with no captioned images."""


class RecordNotFound(AltTextError, KeyError):
    """No record with the requested id exists in the collection."""

    def __str__(self) -> str:
        # KeyError.__str__ wraps the message in quotes.
        return Exception.__str__(self)
