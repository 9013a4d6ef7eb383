"""Core: configuration, domain models, contracts and services."""
