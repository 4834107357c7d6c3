from sqlalchemy import Boolean, Column, String

from pagecontent.db import Base


class Locale(Base):
    __tablename__ = "locale"

    code = Column(String(10), primary_key=True)
    name = Column(String(100), nullable=False)
    native_name = Column(String(100), nullable=False)
    flag = Column(String(16), nullable=True)
    is_default = Column(Boolean, nullable=False, default=False)
    is_enabled = Column(Boolean, nullable=False, default=True)
    is_rtl = Column(Boolean, nullable=False, default=False)
