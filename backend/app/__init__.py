"""I/O layer: settings, YAML configuration and the Redis normalization cache."""
