"""
Fixture loading for test managers.

Fixture data is declared per manager as a mapping of document type to an
ordered sequence of documents:

    {
        "default": {
            "article": [
                {"_id": 1, "title": "foo"},
                {"_id": 2, "title": "bar"},
            ]
        }
    }
"""

import logging
from typing import Any, Dict, Mapping, Sequence

from ..storage.manager import BulkOperation

logger = logging.getLogger(__name__)

Document = Dict[str, Any]
DocumentsByType = Mapping[str, Sequence[Document]]
FixtureSpec = Mapping[str, DocumentsByType]


def populate(manager: Any, documents_by_type: DocumentsByType) -> int:
    """
    Populate a manager's collection with fixture documents.

    Documents are queued in declaration order, then committed and refreshed
    once. An empty mapping does nothing.

    Args:
        manager: Manager handle to write through
        documents_by_type: Mapping of document type to documents

    Returns:
        Number of documents queued
    """
    if not documents_by_type:
        return 0

    queued = 0
    for type_name, documents in documents_by_type.items():
        for document in documents:
            manager.bulk(BulkOperation.INDEX, type_name, document)
            queued += 1

    manager.commit()
    manager.refresh()

    logger.debug(f"Populated manager '{getattr(manager, 'name', manager)}' with {queued} documents")
    return queued
