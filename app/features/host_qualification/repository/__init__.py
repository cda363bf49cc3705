from .booking_repository import BookingLookupError, SnapshotBookingRepository

__all__ = ["BookingLookupError", "SnapshotBookingRepository"]
