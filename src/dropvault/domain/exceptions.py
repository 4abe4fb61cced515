class DropVaultError(Exception):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(DropVaultError):
    """Requested resource does not exist (or belongs to another user)."""


class ConflictError(DropVaultError):
    """Operation conflicts with existing state (e.g. email already registered)."""


class AuthError(DropVaultError):
    """Missing, expired or invalid credentials."""


class SizeLimitExceeded(DropVaultError):
    """Upload is larger than the configured maximum."""

    def __init__(self, name: str, size_bytes: int, limit_bytes: int, message: str) -> None:
        self.name = name
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        super().__init__(message)
