"""Infrastructure layer: persistence, provider integrations, observability."""
