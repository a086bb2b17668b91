import logging
import traceback


class LocationResolutionError(Exception):
    """Base class for errors raised around sighting location resolution."""


# --- Device positioning ---

class PositionError(LocationResolutionError):
    pass


class PositionPermissionDenied(PositionError):
    pass


class PositionDismissed(PositionPermissionDenied):
    """The user closed the permission prompt without answering."""


class PositionTimeout(PositionError):
    pass


class PositionUnavailable(PositionError):
    pass


# --- Submission gate ---

class SightingValidationError(LocationResolutionError):
    pass


class SubdivisionRequired(SightingValidationError):
    def __init__(self, message: str = "Select a barangay: no location could be read from this report."):
        super().__init__(message)


def custom_exception_hook(exc_type, exc_value, tb):
    full_traceback = "".join(traceback.format_exception(exc_type, exc_value, tb))
    first_line = f"{exc_type.__name__}: {exc_value}"
    short_message = f"{exc_type.__name__}"

    # Log full traceback silently
    logging.error(full_traceback)

    # Also log just the first line for quick visibility
    logging.error(f"First line: {first_line}")

    return short_message
