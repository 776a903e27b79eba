"""Authenticated access to the figo Connect API."""

from figo.session.session import Session

__all__ = ["Session"]
