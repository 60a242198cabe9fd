"""Core domain: configuration, logging, models, ports, and errors."""
