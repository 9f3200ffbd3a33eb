"""Configuration models of the handler layer."""
