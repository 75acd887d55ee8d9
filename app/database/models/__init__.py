from .user_model import User
from .hotel_model import Hotel
from .room_model import RoomType
from .booking_model import Booking, BookingRoom, BookingModification
from .payment_model import Payment
from .package_model import Package

__all__ = ["User", "Hotel", "RoomType", "Booking", "BookingRoom", "BookingModification", "Payment", "Package"]
