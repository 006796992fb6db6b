from modules.core.repositories.django_repository import DjangoRepository
from modules.core.repositories.interfaces import IRepository

__all__ = ["DjangoRepository", "IRepository"]
