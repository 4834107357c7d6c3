from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from pagecontent.db import Base


class Partner(Base):
    __tablename__ = "partner"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    logo_url = Column(String(500), nullable=True)
    website_url = Column(String(500), nullable=True)
    category = Column(String(50), nullable=False, default="general")
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    translations = relationship(
        "PartnerTranslation",
        back_populates="partner",
        cascade="all, delete-orphan",
        order_by="PartnerTranslation.id",
    )


class PartnerTranslation(Base):
    __tablename__ = "partner_tr"
    __table_args__ = (UniqueConstraint("partner_id", "locale_code", name="uq_partner_tr"),)

    id = Column(Integer, primary_key=True)
    partner_id = Column(
        Integer, ForeignKey("partner.id", ondelete="CASCADE"), nullable=False, index=True
    )
    locale_code = Column(String(10), nullable=False)
    description = Column(Text, nullable=True)

    partner = relationship("Partner", back_populates="translations")
