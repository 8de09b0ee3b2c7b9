"""Core configuration, logging, errors and access policy."""
