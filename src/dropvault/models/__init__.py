"""Import every table module so SQLModel.metadata sees all mappers."""
from dropvault.models.core import User, AuthSession, VaultFile  # noqa: F401
