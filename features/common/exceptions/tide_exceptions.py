from typing import Optional

from features.tides.models.tide_types import TideErrorInfo

class TideServiceError(Exception):
    """Base exception for tide data errors."""
    kind: str = "tide_error"
    retryable: bool = True
    suggestion: Optional[str] = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_info(self) -> TideErrorInfo:
        """Snapshot of the error for publishing in session state."""
        return TideErrorInfo(
            kind=self.kind,
            message=self.message,
            suggestion=self.suggestion,
            retryable=self.retryable
        )

class NoTidalDataError(TideServiceError):
    """Raised when the provider has no tide data for a (usually inland) location."""
    kind = "no_tidal_data"
    retryable = False
    suggestion = "Try searching for a location closer to the coast"

    def __init__(self):
        super().__init__("There is no tide data here")

class ServerError(TideServiceError):
    """Raised on any other non-2xx response from the provider."""
    kind = "server_error"

    def __init__(self, status_code: int):
        super().__init__(f"Server error (code: {status_code}). Please try again later.")
        self.status_code = status_code

class DecodingError(TideServiceError):
    """Raised when a 2xx response body does not match the expected schema."""
    kind = "decoding_error"

    def __init__(self, detail: str):
        super().__init__(f"Error processing tide data: {detail}")
        self.detail = detail

class TransportError(TideServiceError):
    """Raised when the request never produced an HTTP response."""
    kind = "transport_error"

    def __init__(self, detail: str):
        super().__init__(f"Unable to reach the tide service: {detail}")
        self.detail = detail

class SearchError(Exception):
    """Raised by the geocoding client; independent of tide errors."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

class NoLocationSelectedError(Exception):
    """Raised when an action needs a current location and there is none."""
    pass
