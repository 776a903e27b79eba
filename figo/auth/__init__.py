"""OAuth 2.0 login against the figo Connect API."""

from figo.auth.connection import Connection

__all__ = ["Connection"]
