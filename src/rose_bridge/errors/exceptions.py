"""Custom exception classes for the merge bridge."""


class BridgeError(Exception):
    """Base exception for the bridge."""

    def __init__(self, code: str, message: str, details=None, status_code: int = 500):
        self.code = code
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class GitHubAPIError(BridgeError):
    """Non-success response from the GitHub REST API."""

    def __init__(self, status_code: int, message: str, details=None):
        super().__init__("GITHUB_API_ERROR", message, details, status_code=status_code)


class GitHubResponseError(GitHubAPIError):
    """Success status from GitHub with a body that could not be read."""

    def __init__(self, status_code: int, message: str, details=None):
        super().__init__(status_code, message, details)
        self.code = "GITHUB_BAD_RESPONSE"
