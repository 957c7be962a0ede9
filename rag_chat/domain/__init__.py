"""Domain layer: documents, chat entities, repository interfaces and services."""

from . import entities
from . import repositories
from . import services

__all__ = ['entities', 'repositories', 'services']
