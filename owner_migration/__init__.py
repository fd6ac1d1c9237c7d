"""Consolidate per-tenant data and WhatsApp session state onto the single owner account."""

__version__ = "2.0.0"
