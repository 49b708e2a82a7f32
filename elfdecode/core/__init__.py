"""Decode engine, result models, error types and ELF constant names."""
