"""Database models package."""
from weddinghub.db.models.admin_user import AdminUser, AppRoleEnum
from weddinghub.db.models.guest import Guest
from weddinghub.db.models.rsvp import RSVP, RSVPStatusEnum, MealPreferenceEnum
from weddinghub.db.models.wedding_setting import WeddingSetting

__all__ = [
    "AdminUser",
    "AppRoleEnum",
    "Guest",
    "RSVP",
    "RSVPStatusEnum",
    "MealPreferenceEnum",
    "WeddingSetting",
]
