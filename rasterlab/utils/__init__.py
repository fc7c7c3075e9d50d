"""Shared utilities: configuration, logging and the processor framework."""
