"""Configuration: section models, file discovery, settings, logging."""
