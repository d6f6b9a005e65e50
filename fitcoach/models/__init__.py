from .user import User
from .location import Location
from .availability_block import AvailabilityBlock
from .booking import Booking
from .calendar_day import CalendarDay
from .meal_preference import MealPreference
from .admin_note import AdminNote
from .meal_plan import TrainerMealPlan
from .notification import Notification

__all__ = [
    "User",
    "Location",
    "AvailabilityBlock",
    "Booking",
    "CalendarDay",
    "MealPreference",
    "AdminNote",
    "TrainerMealPlan",
    "Notification",
]
