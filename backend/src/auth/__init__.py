"""Bearer token authentication for the document API."""

from .dependencies import CurrentOwner, get_current_owner_id
from .jwt import create_access_token, decode_token

__all__ = ["CurrentOwner", "get_current_owner_id", "create_access_token", "decode_token"]
