# errors.py


class CollabError(Exception):
    """Base class for every error raised by CollabKill."""


class ConfigurationError(CollabError):
    """A required setting (usually an API key) is missing."""


class AuthError(CollabError):
    pass


class StoreError(CollabError):
    """The backing store rejected a read or write."""


class VideoGenerationError(CollabError):
    def __init__(self, message: str, state=None):
        super().__init__(message)
        self.state = state
