"""Shared helpers: telemetry and id generation."""
