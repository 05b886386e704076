"""Request dependencies exposing the gateways built once at startup"""

from fastapi import Request

from .config import Settings
from .email_service import MailGateway
from .services.google_calendar_service import CalendarGateway


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_calendar_gateway(request: Request) -> CalendarGateway:
    return request.app.state.calendar_gateway


def get_mail_gateway(request: Request) -> MailGateway:
    return request.app.state.mail_gateway
