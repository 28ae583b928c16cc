"""Async API client used by the dashboard front end."""
from approval_app.client.dashboard import ContentForm, DashboardClient, PendingRejection
from approval_app.client.errors import FormValidationError, RemoteError
from approval_app.client.session import AuthEvent, Session, SessionProvider

__all__ = [
    "AuthEvent",
    "ContentForm",
    "DashboardClient",
    "FormValidationError",
    "PendingRejection",
    "RemoteError",
    "Session",
    "SessionProvider",
]
