"""cleaninstall - workspace-aware cleanup of Node.js build artifacts."""

__version__ = "1.0.0"
