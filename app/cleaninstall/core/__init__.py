"""Core cleanup engine: configuration, discovery, removal and orchestration."""
