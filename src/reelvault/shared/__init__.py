"""Shared building blocks: constants, errors, logging helpers and protocols."""
