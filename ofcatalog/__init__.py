"""Service catalogue tooling: fact tasks, YAML state, drift, owners, docs and a Compass client."""

__version__ = "0.1.0"