"""
SQLAlchemy ORM models.

Tables
------
* ``site_settings``     -- key/value settings; fee parameters per service
  line are stored here as text (``delivery_base_fee`` ...).
* ``custom_locations``  -- admin-managed address suggestions.

Indexes
-------
* **B-Tree** on ``custom_locations.active`` and ``sort_order`` for the
  suggestion look-up.
"""

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
    func,
)

from .database import Base


class SiteSettingModel(Base):
    __tablename__ = "site_settings"

    id = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    type = Column(String(20), default="text", nullable=False)
    description = Column(Text, nullable=True)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class CustomLocationModel(Base):
    __tablename__ = "custom_locations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(Text, nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_custom_locations_active", "active"),
        Index("idx_custom_locations_sort", "sort_order"),
    )
