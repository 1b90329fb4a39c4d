"""Runnable examples for weighted CH3 hashing."""
