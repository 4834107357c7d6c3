from sqlalchemy import JSON, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from pagecontent.db import Base


class GalleryGroup(Base):
    """Image set managed outside page content; gallery blocks point at it by ``key``."""

    __tablename__ = "gallery_group"

    id = Column(Integer, primary_key=True)
    key = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False, default="")
    images = Column(JSON, nullable=False, default=list)  # [{"url", "alt", "caption"?}]
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
