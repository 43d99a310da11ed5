"""Infrastructure: relational persistence, policy store, session cache, security."""
