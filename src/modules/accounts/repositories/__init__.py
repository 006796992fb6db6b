"""Account repositories package."""

from modules.accounts.repositories.django_repository import (
    ApplicationUserDjangoRepository,
)
from modules.accounts.repositories.interfaces import IApplicationUserRepository

__all__ = ["ApplicationUserDjangoRepository", "IApplicationUserRepository"]
