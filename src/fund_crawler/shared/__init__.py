"""Shared models used across layers."""
