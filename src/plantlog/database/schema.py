from sqlalchemy import Column, Index, String, Text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Document(Base):
    """A schemaless document stored as JSON text inside a named collection."""

    __tablename__ = "documents"

    doc_id = Column(String, primary_key=True)
    collection = Column(String, nullable=False)
    data_json = Column(Text, nullable=False)  # Field mapping as JSON object
    timestamp_fields_json = Column(Text, nullable=True)  # JSON array of server-assigned timestamp fields
    created_at_utc = Column(String, nullable=False)  # ISO 8601 string

    __table_args__ = (
        Index("idx_documents_collection_created", "collection", "created_at_utc"),
    )


def create_all(engine: Engine) -> None:
    Base.metadata.create_all(engine)
