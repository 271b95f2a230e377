"""CLI interface for ledgerflow application."""
