"""
Vector index adapters over LangChain vector stores.

Exposes a narrow interface (upsert, scored search, MMR search, delete,
listing) over two backends: the in-process InMemoryVectorStore and a FAISS
index persisted to disk. Both report cosine similarity, higher is better.

Dependencies: langchain_core.vectorstores, langchain_community.vectorstores, faiss-cpu, numpy
System role: Vector store adapter for ingestion and retrieval
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import numpy as np
from langchain_community.vectorstores import FAISS
from langchain_community.vectorstores.utils import DistanceStrategy, maximal_marginal_relevance
from langchain_core.documents import Document
from langchain_core.embeddings import Embeddings
from langchain_core.vectorstores import InMemoryVectorStore

from kb_assistant.core.exceptions import VectorStoreError
from kb_assistant.models.chunk import DocumentChunk, ScoredCandidate

logger = logging.getLogger(__name__)

MetadataFilter = dict[str, Any]


def metadata_matches(metadata: dict[str, Any], filter: MetadataFilter | None) -> bool:
    """True when every filter key equals the corresponding metadata value."""
    if not filter:
        return True
    return all(metadata.get(key) == value for key, value in filter.items())


class VectorIndex(ABC):
    """
    Base adapter for a LangChain vector store.

    Subclasses provide access to the stored documents and a
    backend-specific predicate form; search, delete and listing are shared.
    Reads and writes are serialized with one lock, and a failed upsert
    restores the entries it replaced.
    """

    backend: str = "base"

    def __init__(self, embeddings: Embeddings) -> None:
        self._embeddings = embeddings
        self._lock = threading.RLock()

    @property
    def embeddings(self) -> Embeddings:
        return self._embeddings

    @abstractmethod
    def _stored_documents(self) -> Iterable[tuple[str, Document]]:
        """Yield (id, document) for every stored chunk."""

    @abstractmethod
    def _predicate(self, filter: MetadataFilter | None) -> Callable[..., bool] | None:
        """Translate an equality filter into the store's callable filter."""

    @abstractmethod
    def _add(self, documents: list[Document], ids: list[str]) -> None:
        """Insert documents under the given ids."""

    @abstractmethod
    def _delete(self, ids: list[str]) -> None:
        """Remove documents by id."""

    @abstractmethod
    def _snapshot(self, ids: list[str]) -> Any:
        """Capture stored entries for ids so a failed write can be undone."""

    @abstractmethod
    def _restore(self, snapshot: Any, added_ids: list[str]) -> None:
        """Drop added_ids and put the snapshot entries back."""

    @property
    @abstractmethod
    def _store(self) -> Any:
        """Underlying LangChain vector store, or None while empty."""

    def _search_kwargs(self, k: int, filter: MetadataFilter | None) -> dict[str, Any]:
        """Keyword arguments for the store's scored search."""
        return {"k": k, "filter": self._predicate(filter)}

    def upsert(self, chunks: list[DocumentChunk]) -> list[str]:
        """
        Insert chunks, replacing any stored under the same chunk ids.

        The write is all-or-nothing: when embedding or insertion fails, the
        entries that were replaced are put back before the error is raised.

        Args:
            chunks: Chunks to embed and store

        Returns:
            list[str]: Stored chunk ids in input order

        Raises:
            VectorStoreError: When embedding or insertion fails
        """
        if not chunks:
            return []

        ids = [chunk.chunk_id for chunk in chunks]
        documents = [chunk.to_document() for chunk in chunks]

        with self._lock:
            existing = {doc_id for doc_id, _ in self._stored_documents()}
            replaced = [doc_id for doc_id in ids if doc_id in existing]
            snapshot = self._snapshot(replaced)
            try:
                if replaced:
                    self._delete(replaced)
                self._add(documents, ids)
            except Exception as e:
                logger.exception(f"{__name__}:upsert - Failed to store {len(chunks)} chunks")
                self._rollback(snapshot, ids)
                raise VectorStoreError(
                    "Failed to store chunks in vector index",
                    operation="upsert",
                    cause=e,
                ) from e

        logger.info(f"{__name__}:upsert - Stored {len(ids)} chunks ({self.backend})")
        return ids

    def _rollback(self, snapshot: Any, added_ids: list[str]) -> None:
        try:
            self._restore(snapshot, added_ids)
        except Exception:
            logger.exception(f"{__name__}:_rollback - Could not restore replaced chunks")

    def similarity_search_with_score(
        self,
        query: str,
        k: int = 5,
        filter: MetadataFilter | None = None,
    ) -> list[ScoredCandidate]:
        """
        Top-k chunks by cosine similarity to query.

        With a filter, the k best matching chunks are returned however far
        down the unfiltered ranking they sit.

        Raises:
            VectorStoreError: When the query fails
        """
        with self._lock:
            store = self._store
            if store is None or self.count() == 0:
                return []

            try:
                results = store.similarity_search_with_score(
                    query, **self._search_kwargs(k, filter)
                )
            except Exception as e:
                logger.error(f"{__name__}:similarity_search_with_score - {type(e).__name__}: {e}")
                raise VectorStoreError(
                    "Similarity search failed",
                    operation="similarity_search",
                    cause=e,
                ) from e

        return [
            ScoredCandidate(chunk=DocumentChunk.from_document(doc), score=float(score))
            for doc, score in results
        ]

    def _mmr(
        self,
        query: str,
        k: int,
        fetch_k: int,
        lambda_mult: float,
        filter: MetadataFilter | None,
    ) -> list[Document]:
        return self._store.max_marginal_relevance_search(
            query,
            k=k,
            fetch_k=fetch_k,
            lambda_mult=lambda_mult,
            filter=self._predicate(filter),
        )

    def max_marginal_relevance_search(
        self,
        query: str,
        k: int = 5,
        fetch_k: int = 20,
        lambda_mult: float = 0.5,
        filter: MetadataFilter | None = None,
    ) -> list[DocumentChunk]:
        """
        Diversity-aware selection of k chunks from the fetch_k most similar.

        lambda_mult trades relevance (1.0) against diversity (0.0). With a
        filter, the pool is the fetch_k most similar matching chunks.
        Results carry no score.

        Raises:
            VectorStoreError: When the query fails
        """
        with self._lock:
            if self._store is None or self.count() == 0:
                return []

            try:
                documents = self._mmr(query, k, fetch_k, lambda_mult, filter)
            except Exception as e:
                logger.error(f"{__name__}:max_marginal_relevance_search - {type(e).__name__}: {e}")
                raise VectorStoreError(
                    "MMR search failed",
                    operation="mmr_search",
                    cause=e,
                ) from e

        return [DocumentChunk.from_document(doc) for doc in documents]

    def delete_by_ids(self, ids: list[str]) -> int:
        """
        Delete chunks by id, ignoring unknown ids.

        Returns:
            int: Number of chunks removed
        """
        with self._lock:
            known = {doc_id for doc_id, _ in self._stored_documents()}
            targets = [doc_id for doc_id in ids if doc_id in known]
            if targets:
                try:
                    self._delete(targets)
                except Exception as e:
                    logger.exception(f"{__name__}:delete_by_ids - Delete failed")
                    raise VectorStoreError(
                        "Failed to delete chunks",
                        operation="delete",
                        cause=e,
                    ) from e

        logger.info(f"{__name__}:delete_by_ids - Deleted {len(targets)} chunks")
        return len(targets)

    def delete_by_metadata(self, filter: MetadataFilter) -> int:
        """
        Delete every chunk whose metadata equals all filter values.

        Returns:
            int: Number of chunks removed
        """
        if not filter:
            raise ValueError("delete_by_metadata requires a non-empty filter")

        with self._lock:
            return self.delete_by_ids(self.ids_matching(filter))

    def ids_matching(self, filter: MetadataFilter) -> list[str]:
        """Ids of stored chunks whose metadata equals all filter values."""
        with self._lock:
            return [
                doc_id
                for doc_id, doc in self._stored_documents()
                if metadata_matches(doc.metadata, filter)
            ]

    def list_chunks(self) -> list[DocumentChunk]:
        """All stored chunks, in store order."""
        with self._lock:
            return [
                DocumentChunk.from_document(doc, chunk_id=doc_id)
                for doc_id, doc in self._stored_documents()
            ]

    def count(self) -> int:
        with self._lock:
            return sum(1 for _ in self._stored_documents())


class InMemoryVectorIndex(VectorIndex):
    """Non-persistent index backed by InMemoryVectorStore."""

    backend = "memory"

    def __init__(self, embeddings: Embeddings) -> None:
        super().__init__(embeddings)
        self._memory_store = InMemoryVectorStore(embedding=embeddings)

    @property
    def _store(self) -> InMemoryVectorStore:
        return self._memory_store

    def _stored_documents(self) -> Iterable[tuple[str, Document]]:
        for doc_id, record in list(self._memory_store.store.items()):
            yield doc_id, Document(
                id=doc_id,
                page_content=record["text"],
                metadata=record["metadata"],
            )

    def _predicate(self, filter: MetadataFilter | None) -> Callable[[Document], bool] | None:
        if not filter:
            return None
        return lambda doc: metadata_matches(doc.metadata, filter)

    def _add(self, documents: list[Document], ids: list[str]) -> None:
        self._memory_store.add_documents(documents, ids=ids)

    def _delete(self, ids: list[str]) -> None:
        self._memory_store.delete(ids)

    def _snapshot(self, ids: list[str]) -> dict[str, dict[str, Any]]:
        return {doc_id: dict(self._memory_store.store[doc_id]) for doc_id in ids}

    def _restore(self, snapshot: dict[str, dict[str, Any]], added_ids: list[str]) -> None:
        self._memory_store.delete([doc_id for doc_id in added_ids if doc_id in self._memory_store.store])
        self._memory_store.store.update(snapshot)


class FAISSVectorIndex(VectorIndex):
    """
    FAISS index persisted to a local directory.

    Vectors are L2-normalized and compared by inner product, so scores are
    cosine similarity like the in-memory backend. The index is created on
    the first upsert and saved after every mutation.
    """

    backend = "faiss"

    def __init__(
        self,
        embeddings: Embeddings,
        persist_directory: str = ".faiss_index",
        index_name: str = "knowledgebase-index",
    ) -> None:
        super().__init__(embeddings)
        self._persist_dir = Path(persist_directory)
        self._index_name = index_name
        self._faiss: FAISS | None = None
        self._load()

    @property
    def _store(self) -> FAISS | None:
        return self._faiss

    def _store_kwargs(self) -> dict[str, Any]:
        return {
            "normalize_L2": True,
            "distance_strategy": DistanceStrategy.MAX_INNER_PRODUCT,
        }

    def _load(self) -> None:
        index_file = self._persist_dir / f"{self._index_name}.faiss"
        if not index_file.exists():
            logger.info(f"{__name__}:_load - No index at {index_file}, starting empty")
            return

        self._faiss = FAISS.load_local(
            str(self._persist_dir),
            self._embeddings,
            index_name=self._index_name,
            allow_dangerous_deserialization=True,
            **self._store_kwargs(),
        )
        logger.info(f"{__name__}:_load - Loaded {self.count()} chunks from {index_file}")

    def _save(self) -> None:
        if self._faiss is None:
            return
        self._persist_dir.mkdir(parents=True, exist_ok=True)
        self._faiss.save_local(str(self._persist_dir), index_name=self._index_name)

    def _stored_documents(self) -> Iterable[tuple[str, Document]]:
        if self._faiss is None:
            return []
        return list(self._faiss.docstore._dict.items())

    def _predicate(self, filter: MetadataFilter | None) -> Callable[[dict], bool] | None:
        if not filter:
            return None
        # FAISS passes the metadata dict, not the Document
        return lambda metadata: metadata_matches(metadata, filter)

    def _add(self, documents: list[Document], ids: list[str]) -> None:
        if self._faiss is None:
            self._faiss = FAISS.from_documents(
                documents, self._embeddings, ids=ids, **self._store_kwargs()
            )
        else:
            self._faiss.add_documents(documents, ids=ids)
        self._save()

    def _delete(self, ids: list[str]) -> None:
        if self._faiss is None:
            return
        self._faiss.delete(ids)
        self._save()

    def _positions(self) -> dict[str, int]:
        return {doc_id: pos for pos, doc_id in self._faiss.index_to_docstore_id.items()}

    def _snapshot(self, ids: list[str]) -> list[tuple[str, Document, list[float]]]:
        if self._faiss is None or not ids:
            return []
        positions = self._positions()
        return [
            (
                doc_id,
                self._faiss.docstore._dict[doc_id],
                self._faiss.index.reconstruct(positions[doc_id]).tolist(),
            )
            for doc_id in ids
        ]

    def _restore(
        self,
        snapshot: list[tuple[str, Document, list[float]]],
        added_ids: list[str],
    ) -> None:
        if self._faiss is None:
            return
        present = [doc_id for doc_id in added_ids if doc_id in self._faiss.docstore._dict]
        if present:
            self._faiss.delete(present)
        if snapshot:
            self._faiss.add_embeddings(
                [(doc.page_content, vector) for _, doc, vector in snapshot],
                metadatas=[doc.metadata for _, doc, _ in snapshot],
                ids=[doc_id for doc_id, _, _ in snapshot],
            )
        self._save()

    def _search_kwargs(self, k: int, filter: MetadataFilter | None) -> dict[str, Any]:
        kwargs = super()._search_kwargs(k, filter)
        if filter:
            # FAISS applies the filter to the fetch_k nearest vectors only
            kwargs["fetch_k"] = max(self.count(), k)
        return kwargs

    def _mmr(
        self,
        query: str,
        k: int,
        fetch_k: int,
        lambda_mult: float,
        filter: MetadataFilter | None,
    ) -> list[Document]:
        if not filter:
            return super()._mmr(query, k, fetch_k, lambda_mult, filter)

        embedding = self._embeddings.embed_query(query)
        pool = self._faiss.similarity_search_with_score_by_vector(
            embedding,
            k=fetch_k,
            filter=self._predicate(filter),
            fetch_k=self.count(),
        )
        if not pool:
            return []

        positions = self._positions()
        ids_by_doc = {id(doc): doc_id for doc_id, doc in self._faiss.docstore._dict.items()}
        vectors = [
            self._faiss.index.reconstruct(positions[doc.id or ids_by_doc[id(doc)]])
            for doc, _ in pool
        ]
        selected = maximal_marginal_relevance(
            np.array(embedding, dtype=np.float32),
            vectors,
            lambda_mult=lambda_mult,
            k=k,
        )
        return [pool[i][0] for i in selected]
