from typing import Optional


class GithubProbeError(Exception):
    """Base class for every failure the GitHub probe reports."""


class NotFound(GithubProbeError):
    def __init__(self, username: str):
        self.username = username
        super().__init__(f'GitHub user "{username}" not found.')


class AuthError(GithubProbeError):
    def __init__(self, message: str, status_code: int):
        self.status_code = status_code
        super().__init__(message)


class UpstreamError(GithubProbeError):
    def __init__(self, message: str, status_code: Optional[int] = None, status_text: Optional[str] = None):
        self.status_code = status_code
        self.status_text = status_text
        super().__init__(message)


class MalformedResponse(UpstreamError):
    """A success status whose payload does not have the expected shape."""
