"""
Storage utilities for fixture documents.

Provides the canonical conversion from fixture document identities to
Qdrant point IDs, plus the reserved document field names.
"""

import hashlib
import uuid
from typing import Any, Union

# Reserved fixture document fields
ID_FIELD = "_id"
VECTOR_FIELD = "_vector"
TYPE_FIELD = "_type"


def document_id_to_point_id(type_name: str, document_id: Any) -> Union[int, str]:
    """
    Convert a fixture document identity to a Qdrant point ID.

    Non-negative integers are used as-is so tests can address points by
    the IDs they declared. Anything else is hashed together with the
    document type using SHA256, so equal IDs under different types map
    to different points.

    Args:
        type_name: Document type the document was declared under
        document_id: Value of the document's ``_id`` field, or None

    Returns:
        Integer point ID, or a random UUID string when no ID was given

    Example:
        >>> document_id_to_point_id("article", 7)
        7
    """
    if document_id is None:
        return str(uuid.uuid4())

    if isinstance(document_id, int) and not isinstance(document_id, bool) and document_id >= 0:
        return document_id

    # First 8 bytes of SHA256 as unsigned integer
    key = f"{type_name}::{document_id}"
    hash_digest = hashlib.sha256(key.encode('utf-8')).digest()
    return int.from_bytes(hash_digest[:8], byteorder='big', signed=False)
