"""HTTP surface for ledgerflow."""

from ledgerflow.api.app import create_app

__all__ = ["create_app"]
