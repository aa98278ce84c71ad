from sqlalchemy import Column, String, Boolean, DateTime, func, Index, Uuid
import uuid
from sqlalchemy.orm import relationship
from weddinghub.db.session import Base


class Guest(Base):
    __tablename__ = "guests"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    # Stored normalised: trimmed and lower-cased
    invite_code = Column(String(64), unique=True, nullable=False)
    plus_one_allowed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    rsvp = relationship(
        "RSVP",
        back_populates="guest",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index('idx_guest_created_at', 'created_at'),
        Index('idx_guest_name', 'name'),
    )
