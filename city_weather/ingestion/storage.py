from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Protocol, Tuple

from sqlalchemy import JSON, Column, DateTime, MetaData, String, Table, create_engine, func, select
from sqlalchemy.engine import Engine, URL, make_url
from sqlalchemy.exc import SQLAlchemyError

from ..exceptions import DocumentStoreError


class DocumentStore(Protocol):
    """Partitioned document store interface.

    Implementations persist a JSON-compatible document under
    `(partition_key, document["id"])`. Ids are generated by the caller and are
    never reused, so `create_item` is never expected to hit a conflict.
    """

    def create_item(self, document: Dict[str, Any], partition_key: str) -> Dict[str, Any]:
        ...


def build_store_url(endpoint: str, key: str, database: str) -> URL:
    """Combine endpoint, access key and database name into one engine URL.

    SQLite endpoints (e.g. ``sqlite://``) take the database name as the file
    path and ignore the key.
    """
    url = make_url(endpoint).set(database=database)
    if url.get_backend_name() != "sqlite":
        url = url.set(password=key)
    return url


def documents_table(metadata: MetaData, container_name: str) -> Table:
    """Table backing one container.

    Composite primary key: (city, id). `city` is the partition key.
    """
    return Table(
        container_name,
        metadata,
        Column("city", String(200), primary_key=True),
        Column("id", String(36), primary_key=True),
        Column("body", JSON, nullable=False),
        Column("created_at", DateTime(timezone=True), nullable=False),
    )


class SqlDocumentStore:
    """`DocumentStore` backed by a SQLAlchemy engine.

    The engine (and its connection pool) is shared by every caller; each
    `create_item` runs in its own short transaction, so concurrent writers do
    not coordinate.
    """

    def __init__(self, engine: Engine, container_name: str, create: bool = True) -> None:
        self.engine = engine
        self.metadata = MetaData()
        self.table = documents_table(self.metadata, container_name)
        if create:
            self.metadata.create_all(bind=engine)

    @classmethod
    def from_settings(cls, settings) -> "SqlDocumentStore":
        url = build_store_url(
            settings.document_store_endpoint,
            settings.document_store_key.get_secret_value(),
            settings.database_name,
        )
        engine = create_engine(url, future=True, pool_pre_ping=True)
        return cls(engine, settings.container_name)

    def create_item(self, document: Dict[str, Any], partition_key: str) -> Dict[str, Any]:
        doc_id = document.get("id")
        if not doc_id:
            raise DocumentStoreError("document is missing an id")
        if document.get("city") != partition_key:
            raise DocumentStoreError(
                f"partition key {partition_key!r} does not match document city {document.get('city')!r}"
            )
        row = {
            "city": partition_key,
            "id": str(doc_id),
            "body": document,
            "created_at": dt.datetime.now(dt.timezone.utc),
        }
        # Core insert: the table name comes from configuration, so there is no declarative model
        try:
            with self.engine.begin() as conn:
                conn.execute(self.table.insert().values(**row))
        except SQLAlchemyError as e:
            raise DocumentStoreError(f"failed to create item {doc_id} in {partition_key}: {e}") from e
        return document

    def read_items(self, partition_key: str) -> List[Dict[str, Any]]:
        """Return every document in one partition, oldest first."""
        stmt = (
            select(self.table.c.body)
            .where(self.table.c.city == partition_key)
            .order_by(self.table.c.created_at)
        )
        with self.engine.connect() as conn:
            return [r.body for r in conn.execute(stmt)]

    def count_by_partition(self) -> List[Tuple[str, int, dt.datetime, dt.datetime]]:
        """Per-partition document counts with first/last write times."""
        t = self.table
        stmt = (
            select(
                t.c.city,
                func.count().label("documents"),
                func.min(t.c.created_at).label("first_created"),
                func.max(t.c.created_at).label("last_created"),
            )
            .group_by(t.c.city)
            .order_by(t.c.city)
        )
        with self.engine.connect() as conn:
            return [tuple(r) for r in conn.execute(stmt)]

    def dispose(self) -> None:
        self.engine.dispose()
