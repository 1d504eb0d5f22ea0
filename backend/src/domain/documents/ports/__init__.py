"""Port interfaces for documents domain.

Defines abstract interfaces that infrastructure adapters must implement.
This maintains hexagonal architecture - domain doesn't depend on infrastructure.
"""

from .object_storage_port import (
    ObjectStoragePort,
    NamespaceConstraints,
    PutResult,
    StorageError,
)
from .document_repository_port import DocumentRepositoryPort, RepositoryError
from .diff_explainer_port import DiffExplainerPort

__all__ = [
    "ObjectStoragePort",
    "NamespaceConstraints",
    "PutResult",
    "StorageError",
    "DocumentRepositoryPort",
    "RepositoryError",
    "DiffExplainerPort",
]
