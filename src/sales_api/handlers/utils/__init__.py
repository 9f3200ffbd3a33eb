"""Handler utilities: resolver, responses, errors, observability and service wiring."""
