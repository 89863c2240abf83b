"""Configuration: settings, feed registry, logging."""
