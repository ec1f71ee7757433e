"""Helpers shared by the address processors and commands."""
