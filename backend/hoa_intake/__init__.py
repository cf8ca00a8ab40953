"""HOA document archive intake service."""
