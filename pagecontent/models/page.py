from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from pagecontent.db import Base

STATUS_DRAFT = "DRAFT"
STATUS_PUBLISHED = "PUBLISHED"


class Page(Base):
    __tablename__ = "page"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    translations = relationship(
        "PageTranslation",
        back_populates="page",
        cascade="all, delete-orphan",
        order_by="PageTranslation.id",
    )

    def get_translation(self, locale_code: str | None):
        if not locale_code:
            return None
        return next((tr for tr in self.translations if tr.locale_code == locale_code), None)


class PageTranslation(Base):
    __tablename__ = "page_tr"
    __table_args__ = (UniqueConstraint("page_id", "locale_code", name="uq_page_tr"),)

    id = Column(Integer, primary_key=True, index=True)
    page_id = Column(Integer, ForeignKey("page.id", ondelete="CASCADE"), nullable=False, index=True)
    locale_code = Column(String(10), ForeignKey("locale.code"), nullable=False)
    title = Column(String(255), nullable=False, default="")
    seo_title = Column(String(255), nullable=True)
    seo_description = Column(Text, nullable=True)
    og_image = Column(String(500), nullable=True)
    # element order is the display order
    blocks = Column(JSON, nullable=False, default=list)
    status = Column(String(16), nullable=False, default=STATUS_DRAFT)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )
    updated_by = Column(String(50), nullable=True)

    page = relationship("Page", back_populates="translations")

    @property
    def is_published(self) -> bool:
        return self.status == STATUS_PUBLISHED
