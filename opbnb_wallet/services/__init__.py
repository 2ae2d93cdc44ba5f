"""Chain metadata, address and unit helpers."""
