"""Subspecifications for the Tachyon shielded protocol."""
