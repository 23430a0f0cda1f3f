"""Dialog service module."""

from .client import DialogServiceClient, IDialogServiceClient, parse_response

__all__ = ["DialogServiceClient", "IDialogServiceClient", "parse_response"]
