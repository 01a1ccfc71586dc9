class SanitarrError(Exception):
    """Base class for errors that end a cleanup run."""


class ConfigError(SanitarrError):
    pass


class UserNotFoundError(SanitarrError):
    def __init__(self, username: str):
        super().__init__(f"User {username} not found in Jellyfin")
        self.username = username


class DelugeError(SanitarrError):
    pass


class DeletionFailedError(SanitarrError):
    def __init__(self, failed: int, total: int):
        super().__init__(f"failed to delete {failed} out of {total} episodes")
        self.failed = failed
        self.total = total
