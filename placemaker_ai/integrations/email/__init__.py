"""Transactional email integration."""

from .client import OutgoingEmail, ResendClient, send_quietly, sender_address
from .errors import EmailDeliveryError

__all__ = ["EmailDeliveryError", "OutgoingEmail", "ResendClient", "send_quietly", "sender_address"]
