"""
Qdrant manager handle for qdrant-harness.

A manager is a named connection bound to one Qdrant collection. It exposes
the operations the harness needs to provision test state: version lookup,
queued bulk writes, commit/refresh and collection (re)creation.
"""

import logging
import time
from contextlib import contextmanager
from itertools import groupby
from typing import Any, Dict, Iterator, List, Optional, Tuple

import requests
from qdrant_client import QdrantClient
from qdrant_client.models import CollectionStatus, Distance, PointIdsList, PointStruct, VectorParams
from qdrant_client.http.exceptions import ResponseHandlingException, UnexpectedResponse

from .utils import ID_FIELD, TYPE_FIELD, VECTOR_FIELD, document_id_to_point_id
from ..errors import BackendError
from ..models.config import ManagerConfig

logger = logging.getLogger(__name__)


class BulkOperation:
    """Bulk operation constants"""
    INDEX = "index"
    DELETE = "delete"

    ALL = (INDEX, DELETE)


_DISTANCES = {
    "cosine": Distance.COSINE,
    "euclidean": Distance.EUCLID,
    "dot": Distance.DOT,
    "manhattan": Distance.MANHATTAN,
}


class QdrantManager:
    """
    Handle to one Qdrant collection used by integration tests.

    Writes submitted through ``bulk`` are queued locally and only sent on
    ``commit``. Every backend failure is re-raised as ``BackendError`` so
    the retrying executor can tell it apart from test failures.
    """

    def __init__(
        self,
        name: str,
        collection_name: str,
        url: str = "http://localhost:6333",
        api_key: Optional[str] = None,
        timeout: float = 30.0,
        vector_size: int = 4,
        distance: str = "dot",
        bulk_size: int = 100
    ):
        """
        Initialize manager handle.

        Args:
            name: Manager name the handle was resolved under
            collection_name: Collection this manager owns
            url: Qdrant server URL
            api_key: Optional API key for authentication
            timeout: Request timeout in seconds
            vector_size: Vector dimensions of the collection
            distance: Distance metric name (cosine, euclidean, dot, manhattan)
            bulk_size: Maximum points per upsert request on commit
        """
        self.name = name
        self.collection_name = collection_name
        self.url = url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self.vector_size = vector_size
        self.distance = distance
        self.bulk_size = bulk_size

        self._client: Optional[QdrantClient] = None
        self._queue: List[Tuple[str, Any]] = []

    @classmethod
    def from_config(cls, name: str, config: ManagerConfig) -> 'QdrantManager':
        """Create a manager from a fully resolved manager configuration"""
        return cls(
            name=name,
            collection_name=config.collection,
            url=config.url,
            api_key=config.api_key,
            timeout=config.timeout,
            vector_size=config.vector_size,
            distance=config.distance,
            bulk_size=config.bulk_size
        )

    def __repr__(self) -> str:
        return f"QdrantManager(name={self.name!r}, collection={self.collection_name!r}, url={self.url!r})"

    @property
    def client(self) -> QdrantClient:
        """Get Qdrant client instance"""
        if self._client is None:
            self._client = QdrantClient(
                url=self.url,
                api_key=self.api_key,
                timeout=self.timeout
            )
        return self._client

    @property
    def pending_operations(self) -> int:
        """Number of queued bulk operations not yet committed"""
        return len(self._queue)

    @contextmanager
    def _backend_call(self, operation: str) -> Iterator[None]:
        try:
            yield
        except BackendError:
            raise
        except (UnexpectedResponse, ResponseHandlingException, requests.RequestException) as e:
            error_msg = f"Failed to {operation} for collection {self.collection_name}: {e}"
            logger.error(error_msg)
            raise BackendError(
                error_msg, operation=operation, collection_name=self.collection_name
            ) from e

    def get_version_number(self) -> str:
        """
        Get the version reported by the Qdrant server.

        Returns:
            Version string, e.g. "1.12.4"
        """
        headers = {"api-key": self.api_key} if self.api_key else {}

        with self._backend_call("get version"):
            response = requests.get(f"{self.url}/", headers=headers, timeout=self.timeout)
            response.raise_for_status()
            version = response.json().get("version")

        if not version:
            raise BackendError(
                f"Qdrant at {self.url} did not report a version",
                operation="get version", collection_name=self.collection_name
            )
        return str(version)

    def index_exists(self) -> bool:
        """Check whether the collection exists"""
        with self._backend_call("list collections"):
            collections = self.client.get_collections()
        return self.collection_name in [c.name for c in collections.collections]

    def create_index(self) -> None:
        """Create the collection"""
        start_time = time.time()

        with self._backend_call("create collection"):
            self.client.create_collection(
                collection_name=self.collection_name,
                vectors_config=VectorParams(
                    size=self.vector_size,
                    distance=_DISTANCES[self.distance]
                )
            )

        processing_time = (time.time() - start_time) * 1000
        logger.info(f"Created collection '{self.collection_name}' in {processing_time:.2f}ms")

    def drop_index(self) -> None:
        """Delete the collection and discard queued operations"""
        self._queue.clear()

        with self._backend_call("delete collection"):
            self.client.delete_collection(collection_name=self.collection_name)

        logger.debug(f"Deleted collection '{self.collection_name}'")

    def drop_and_create_index(self) -> None:
        """Recreate the collection from scratch"""
        if self.index_exists():
            self.drop_index()
        else:
            self._queue.clear()
        self.create_index()

    def bulk(self, operation: str, type_name: str, document: Dict[str, Any]) -> None:
        """
        Queue a bulk operation for the next commit.

        Args:
            operation: "index" to upsert the document, "delete" to remove it by ``_id``
            type_name: Document type the document belongs to
            document: Field mapping; ``_id`` and ``_vector`` are reserved
        """
        if operation not in BulkOperation.ALL:
            raise ValueError(
                f"Unsupported bulk operation '{operation}', expected one of {BulkOperation.ALL}"
            )

        if operation == BulkOperation.DELETE:
            if document.get(ID_FIELD) is None:
                raise ValueError("Bulk delete requires the document '_id' field")
            self._queue.append((operation, document_id_to_point_id(type_name, document[ID_FIELD])))
            return

        self._queue.append((operation, self._to_point(type_name, document)))

    def _to_point(self, type_name: str, document: Dict[str, Any]) -> PointStruct:
        """Convert a fixture document to a Qdrant point"""
        document_id = document.get(ID_FIELD)
        vector = document.get(VECTOR_FIELD)
        if vector is None:
            vector = [0.0] * self.vector_size
        elif len(vector) != self.vector_size:
            raise ValueError(
                f"Document vector must have {self.vector_size} dimensions, got {len(vector)}"
            )

        payload = {k: v for k, v in document.items() if k not in (ID_FIELD, VECTOR_FIELD)}
        payload[TYPE_FIELD] = type_name
        if document_id is not None:
            payload[ID_FIELD] = document_id

        return PointStruct(
            id=document_id_to_point_id(type_name, document_id),
            vector=list(vector),
            payload=payload
        )

    def commit(self) -> int:
        """
        Send all queued operations to Qdrant in submission order.

        Returns:
            Number of operations sent
        """
        queue, self._queue = self._queue, []
        if not queue:
            return 0

        start_time = time.time()

        with self._backend_call("commit bulk operations"):
            for operation, group in groupby(queue, key=lambda item: item[0]):
                items = [item for _, item in group]
                if operation == BulkOperation.DELETE:
                    self.client.delete(
                        collection_name=self.collection_name,
                        points_selector=PointIdsList(points=items),
                        wait=True
                    )
                    continue

                for i in range(0, len(items), self.bulk_size):
                    batch = items[i:i + self.bulk_size]
                    self.client.upsert(
                        collection_name=self.collection_name,
                        points=batch,
                        wait=True
                    )
                    logger.debug(
                        f"Upserted batch {i // self.bulk_size + 1}: "
                        f"{len(batch)} points to {self.collection_name}"
                    )

        processing_time = (time.time() - start_time) * 1000
        logger.info(
            f"Committed {len(queue)} operations to {self.collection_name} in {processing_time:.2f}ms"
        )
        return len(queue)

    def refresh(self) -> int:
        """
        Make committed writes visible and verify the collection is usable.

        Returns:
            Exact number of points in the collection
        """
        with self._backend_call("refresh collection"):
            info = self.client.get_collection(collection_name=self.collection_name)
            if info.status == CollectionStatus.RED:
                raise BackendError(
                    f"Collection {self.collection_name} is in red status",
                    operation="refresh collection", collection_name=self.collection_name
                )
            return self.count()

    def count(self) -> int:
        """Exact number of points in the collection"""
        with self._backend_call("count points"):
            result = self.client.count(collection_name=self.collection_name, exact=True)
        return result.count if result else 0

    def close(self) -> None:
        """Close the underlying client"""
        if self._client is not None:
            try:
                self._client.close()
            finally:
                self._client = None
