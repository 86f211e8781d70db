"""Provider-specific transports, classification tables and resource handlers."""
