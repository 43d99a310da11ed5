"""Application layer: DTOs, ports and services of the authorization core."""
