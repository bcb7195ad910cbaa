"""claudeviewer — Browse and read your Claude conversation exports."""

__version__ = "0.1.0"
