"""FastAPI integration — body validation dependency and error handlers."""

from jsonvalidator.api.dependencies import validated_body
from jsonvalidator.api.handlers import install_exception_handlers

__all__ = ["validated_body", "install_exception_handlers"]
