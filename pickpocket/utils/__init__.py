"""Shared helpers for Pickpocket."""
