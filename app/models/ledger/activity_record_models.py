from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from app.core.db import Base

# Marks an interval the owner was absent for
SENTINEL = -1


class ActivityRecord(Base):
    """
    One row per (owner, account_name). The history lives in ActivityEntry;
    the parallel sequences exposed over the API are projections of it, so
    they are always the same length.
    """

    __tablename__ = "activity_records"

    id = Column(Integer, primary_key=True)
    owner_id = Column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    account_name = Column(String(255), nullable=False)

    owner = relationship("Account", back_populates="activity_records", lazy="raise")
    entries = relationship(
        "ActivityEntry",
        back_populates="record",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ActivityEntry.id",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("owner_id", "account_name", name="uq_activity_record_owner_account"),
    )

    @property
    def sent_invitation(self) -> list[int]:
        return [e.sent_invitation for e in self.entries]

    @property
    def connections(self) -> list[int]:
        return [e.connections for e in self.entries]

    @property
    def bot_file_names(self) -> list[int]:
        return [e.bot_file_names for e in self.entries]

    @property
    def dates(self) -> list:
        return [e.recorded_at for e in self.entries]

    def __repr__(self):
        return f"<ActivityRecord id={self.id} owner_id={self.owner_id} account_name={self.account_name}>"


class ActivityEntry(Base):
    """APPEND-ONLY. One event across all four sequences."""

    __tablename__ = "activity_entries"

    id = Column(Integer, primary_key=True)
    record_id = Column(Integer, ForeignKey("activity_records.id", ondelete="CASCADE"), nullable=False)
    sent_invitation = Column(Integer, nullable=True)
    connections = Column(Integer, nullable=True)
    bot_file_names = Column(Integer, nullable=True)
    recorded_at = Column(DateTime(timezone=True), nullable=False)

    record = relationship("ActivityRecord", back_populates="entries", lazy="raise")

    __table_args__ = (Index("ix_activity_entries_record_id", "record_id", "id"),)

    def __repr__(self):
        return f"<ActivityEntry id={self.id} record_id={self.record_id} recorded_at={self.recorded_at}>"
