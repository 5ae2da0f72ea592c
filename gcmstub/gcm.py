# gcm.py
from typing import Protocol

# Fixed acknowledgement returned for every accepted registration id
ACK_TOKEN = "id=0:1370674827295849"


class GcmError(Exception):
    """Business failure raised by a GcmService."""

    status_code = 400


class EmptyRegistrationId(GcmError):
    def __init__(self):
        super().__init__("empty registration id")


class GcmService(Protocol):
    def send(self, registration_id: str) -> str:
        ...


class BasicGcmService:
    """Accepts any non-empty registration id. Nothing is delivered anywhere."""

    def send(self, registration_id: str) -> str:
        if registration_id == "":
            raise EmptyRegistrationId()
        return ACK_TOKEN
