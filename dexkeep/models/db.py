"""
SQLAlchemy ORM models for persistent storage.

Models mirror the dataclass models but add database persistence.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class UserCollectionDB(Base):
    """
    A user's card collection stored in the database.

    Each user has one collection containing their owned cards.
    """

    __tablename__ = "user_collections"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Insertion order is the collection order
    entries: Mapped[list["CollectionEntryDB"]] = relationship(
        back_populates="collection",
        cascade="all, delete-orphan",
        order_by="CollectionEntryDB.id",
    )

    def __repr__(self) -> str:
        return f"<UserCollectionDB(id={self.id}, user_id={self.user_id})>"


class CollectionEntryDB(Base):
    """
    An owned card.

    Card fields are copied from the catalog record at the time it was added,
    so the stored price is the price when the card was scanned.
    """

    __tablename__ = "collection_entries"
    __table_args__ = (UniqueConstraint("collection_id", "card_id", name="uq_collection_card"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    collection_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("user_collections.id", ondelete="CASCADE"), index=True
    )
    card_id: Mapped[str] = mapped_column(String(64), index=True)
    name: Mapped[str] = mapped_column(String(255), index=True)
    set_name: Mapped[str] = mapped_column(String(255))
    rarity: Mapped[str] = mapped_column(String(32))
    element_type: Mapped[str] = mapped_column(String(32))
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    image_url: Mapped[str] = mapped_column(String(512), default="/placeholder.svg")
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    condition: Mapped[str] = mapped_column(String(32))
    date_added: Mapped[date] = mapped_column(Date)

    collection: Mapped["UserCollectionDB"] = relationship(back_populates="entries")

    def __repr__(self) -> str:
        return f"<CollectionEntryDB(card={self.card_id}, qty={self.quantity})>"
