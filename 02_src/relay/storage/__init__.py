"""Storage module."""

from .dialog_store import DialogStore, IDialogStore
from .user_store import IUserStore, UserStore

__all__ = ["DialogStore", "IDialogStore", "IUserStore", "UserStore"]
