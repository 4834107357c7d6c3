from sqlalchemy import JSON, Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from pagecontent.db import Base


class SiteSettings(Base):
    __tablename__ = "site_settings"

    id = Column(Integer, primary_key=True)
    site_name = Column(String(255), nullable=True)
    logo_url = Column(String(500), nullable=True)
    favicon_url = Column(String(500), nullable=True)
    default_locale = Column(String(10), nullable=False, default="en")
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(50), nullable=True)
    contact_address = Column(Text, nullable=True)
    social_links = Column(JSON, nullable=False, default=dict)

    translations = relationship(
        "SiteSettingsTranslation",
        back_populates="settings",
        cascade="all, delete-orphan",
        order_by="SiteSettingsTranslation.id",
    )

    def get_translation(self, locale_code: str | None):
        if not locale_code:
            return None
        return next((tr for tr in self.translations if tr.locale_code == locale_code), None)


class SiteSettingsTranslation(Base):
    __tablename__ = "site_settings_tr"
    __table_args__ = (
        UniqueConstraint("settings_id", "locale_code", name="uq_site_settings_tr"),
    )

    id = Column(Integer, primary_key=True)
    settings_id = Column(
        Integer, ForeignKey("site_settings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    locale_code = Column(String(10), nullable=False)
    tagline = Column(String(255), nullable=True)
    footer_text = Column(Text, nullable=True)

    settings = relationship("SiteSettings", back_populates="translations")
