"""Session module."""

from .controller import ISessionController, SessionController
from .request import ActiveRequest

__all__ = ["ISessionController", "SessionController", "ActiveRequest"]
