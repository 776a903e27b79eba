"""figo Connect API Python Client

A Python client for the figo / finX Connect banking API that provides:
- OAuth 2.0 login flow with authorization codes and refresh tokens
- Authenticated sessions for accounts, transactions, notifications and payments
- TLS certificate fingerprint pinning on every connection
- Typed errors for every non-success HTTP status
"""

__version__ = "0.1.0"

from figo.config.logging import setup_logging, get_logger
from figo.client.exceptions import FigoError
from figo.auth.connection import Connection
from figo.session.session import Session

__all__ = ["Connection", "Session", "FigoError", "setup_logging", "get_logger", "__version__"]
