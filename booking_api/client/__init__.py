from .booking_form import BookingForm, FormState

__all__ = ["BookingForm", "FormState"]
