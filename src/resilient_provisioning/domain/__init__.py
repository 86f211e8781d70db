"""Domain layer: error taxonomy, resilience value objects and ports."""
