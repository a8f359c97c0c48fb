"""Lending venue adapters."""
