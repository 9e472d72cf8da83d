"""Rolodex: admin API for contact cards stored as vCards."""
