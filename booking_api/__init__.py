"""Event booking API: validates booking requests, inserts Google Calendar events and sends confirmation emails."""

__version__ = "1.0.0"
