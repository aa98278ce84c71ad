from sqlalchemy import Column, String, DateTime, func, Enum, Uuid
import uuid
from weddinghub.db.session import Base
import enum

class AppRoleEnum(str, enum.Enum):
    admin = "admin"

class AdminUser(Base):
    __tablename__ = "admin_users"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=True)
    role = Column(Enum(AppRoleEnum), default=AppRoleEnum.admin, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
