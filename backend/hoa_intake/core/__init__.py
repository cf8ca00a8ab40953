"""Core configuration, auth and infrastructure wiring."""
