"""
Storage package for qdrant-harness.

Provides the Qdrant manager handle and document ID utilities.
"""

from .manager import QdrantManager, BulkOperation
from .utils import document_id_to_point_id

__all__ = [
    "QdrantManager",
    "BulkOperation",
    "document_id_to_point_id"
]
