from typing import Dict, Optional

class RequestError(Exception):
    """
    Batch-level failure: the request itself is unusable.
    Raised before any fetch is started and rendered as a plain-text response.
    """

    def __init__(self, message: str, status_code: int = 400, headers: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.headers = headers
