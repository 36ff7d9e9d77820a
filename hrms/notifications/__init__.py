"""Expiry and leave alerts."""
