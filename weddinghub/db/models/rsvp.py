from sqlalchemy import Column, String, Text, DateTime, ForeignKey, func, Enum, Index, UniqueConstraint, Uuid
import uuid
from sqlalchemy.orm import relationship
from weddinghub.db.session import Base
import enum

class RSVPStatusEnum(str, enum.Enum):
    pending = "pending"
    attending = "attending"
    not_attending = "not_attending"
    # Reserved: no code path writes this value
    maybe = "maybe"

class MealPreferenceEnum(str, enum.Enum):
    """Reserved. The RSVP form never collects a meal preference."""
    standard = "standard"
    vegetarian = "vegetarian"
    vegan = "vegan"
    gluten_free = "gluten_free"
    other = "other"

class RSVP(Base):
    __tablename__ = "rsvps"
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    guest_id = Column(Uuid(as_uuid=True), ForeignKey("guests.id", ondelete="CASCADE"), nullable=False)
    status = Column(Enum(RSVPStatusEnum), default=RSVPStatusEnum.pending, nullable=False)
    dietary_notes = Column(Text, nullable=True)
    plus_one_name = Column(String(255), nullable=True)
    message = Column(Text, nullable=True)
    meal_preference = Column(Enum(MealPreferenceEnum), nullable=True)
    plus_one_meal_preference = Column(Enum(MealPreferenceEnum), nullable=True)
    responded_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    guest = relationship("Guest", back_populates="rsvp")
    
    # One response per guest; the upsert conflicts on this constraint
    __table_args__ = (
        UniqueConstraint('guest_id', name='uq_rsvp_guest'),
        Index('idx_rsvp_status', 'status'),
    )
