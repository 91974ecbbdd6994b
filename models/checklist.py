from sqlalchemy import Column, String, Integer, DateTime, Text, Boolean, ForeignKey, Index
from datetime import datetime
from models.base import Base, new_id


class Checklist(Base):
    """
    Root of an evaluation template.

    A checklist owns ordered categories, each of which owns ordered items
    (criteria). Companies point at the checklist their calls are scored with.
    """
    __tablename__ = "checklists"

    id = Column(String(36), primary_key=True, default=new_id)

    # Unbounded: clones append a suffix to the source name
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)


class ChecklistCategory(Base):
    """
    Named grouping of criteria within a checklist.

    position orders siblings sharing checklist_id. Values are a convention,
    not a constraint: gaps and ties are allowed and kept as-is.
    """
    __tablename__ = "checklist_categories"

    id = Column(String(36), primary_key=True, default=new_id)
    checklist_id = Column(
        String(36),
        ForeignKey("checklists.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(255), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("idx_category_checklist_position", "checklist_id", "position"),
    )


class ChecklistItem(Base):
    """A single pass/partial/fail evaluation criterion"""
    __tablename__ = "checklist_items"

    id = Column(String(36), primary_key=True, default=new_id)
    category_id = Column(
        String(36),
        ForeignKey("checklist_categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    position = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)  # Only active criteria are evaluated

    __table_args__ = (
        Index("idx_item_category_position", "category_id", "position"),
    )
