"""SQLAlchemy models for ledgerimport database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Date,
    Boolean,
    JSON,
    Table,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


entry_tags = Table(
    "entry_tags",
    Base.metadata,
    Column("entry_id", Integer, ForeignKey("entries.id"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id"), primary_key=True),
)


class Account(Base):
    """Bank account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    bank_name = Column(String, nullable=False, default="")
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    entries = relationship("Entry", back_populates="account")


class Category(Base):
    """Category model with hierarchical structure."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    parent_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    parent = relationship("Category", remote_side=[id], backref="children")
    entries = relationship("Entry", back_populates="category")


class Tag(Base):
    """Tag model."""

    __tablename__ = "tags"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)


class ImportFormat(Base):
    """Import format definition model."""

    __tablename__ = "import_formats"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    preamble_lines = Column(Integer, default=0, nullable=False)
    delimiter = Column(String, default=",", nullable=False)
    number_format = Column(String, default="1,234.56", nullable=False)
    date_format = Column(String, default="%Y-%m-%d", nullable=False)
    signage_convention = Column(String, default="inflows_negative", nullable=False)
    default_currency = Column(String, default="USD", nullable=False)
    default_row_name = Column(String, default="Imported item", nullable=False)
    tags_separator = Column(String, default="|", nullable=False)
    create_missing_entities = Column(Boolean, default=True, nullable=False)
    skip_unmatched = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    columns = relationship(
        "FormatColumn", back_populates="format", cascade="all, delete-orphan"
    )


class FormatColumn(Base):
    """Source column feeding one semantic field of a format."""

    __tablename__ = "format_columns"

    id = Column(Integer, primary_key=True)
    format_id = Column(Integer, ForeignKey("import_formats.id"), nullable=False)
    field_name = Column(String, nullable=False)
    column_label = Column(String, nullable=False)

    __table_args__ = (UniqueConstraint("format_id", "field_name", name="uq_format_field"),)

    # Relationships
    format = relationship("ImportFormat", back_populates="columns")


class Import(Base):
    """Import model (aggregate root of one import run)."""

    __tablename__ = "imports"

    id = Column(Integer, primary_key=True)
    format_name = Column(String, nullable=False)
    status = Column(String, default="pending", nullable=False)
    config = Column(JSON, nullable=False)
    raw_source = Column(Text, nullable=False, default="")
    error = Column(Text, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    rows = relationship(
        "ImportRow",
        back_populates="import_",
        cascade="all, delete-orphan",
        order_by="ImportRow.position",
    )
    mappings = relationship("ImportMapping", back_populates="import_", cascade="all, delete-orphan")
    entries = relationship("Entry", back_populates="import_")


class ImportRow(Base):
    """Staged, normalized row of an import."""

    __tablename__ = "import_rows"

    id = Column(Integer, primary_key=True)
    import_id = Column(Integer, ForeignKey("imports.id"), nullable=False)
    position = Column(Integer, nullable=False)
    account_label = Column(String, nullable=False, default="")
    date = Column(String, nullable=False)
    amount = Column(String, nullable=False)
    currency = Column(String, nullable=False)
    name = Column(String, nullable=False)
    category_label = Column(String, nullable=False, default="")
    tags = Column(JSON, nullable=False, default=list)
    notes = Column(String, nullable=False, default="")

    # Relationships
    import_ = relationship("Import", back_populates="rows")


class ImportMapping(Base):
    """Raw label of an import and the entity it resolves to."""

    __tablename__ = "import_mappings"

    id = Column(Integer, primary_key=True)
    import_id = Column(Integer, ForeignKey("imports.id"), nullable=False)
    kind = Column(String, nullable=False)
    label = Column(String, nullable=False)
    entity_id = Column(Integer, nullable=True)

    __table_args__ = (UniqueConstraint("import_id", "kind", "label", name="uq_import_kind_label"),)

    # Relationships
    import_ = relationship("Import", back_populates="mappings")


class Entry(Base):
    """Committed ledger entry model."""

    __tablename__ = "entries"

    id = Column(Integer, primary_key=True)
    import_id = Column(Integer, ForeignKey("imports.id"), nullable=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    date = Column(Date, nullable=False)
    # Exact decimal text; converted back to Decimal by the mappers
    amount = Column(String, nullable=False)
    currency = Column(String, nullable=False)
    name = Column(String, nullable=False)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    import_ = relationship("Import", back_populates="entries")
    account = relationship("Account", back_populates="entries")
    category = relationship("Category", back_populates="entries")
    tags = relationship("Tag", secondary=entry_tags, order_by="Tag.id")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
