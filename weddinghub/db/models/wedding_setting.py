from sqlalchemy import Column, Integer, String, Text, DateTime, func
from weddinghub.db.session import Base


class WeddingSetting(Base):
    __tablename__ = "wedding_settings"
    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String(100), unique=True, index=True, nullable=False)
    value = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
