"""Domain layer for ledgerflow application."""
