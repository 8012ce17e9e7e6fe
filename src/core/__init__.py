"""Core configuration, logging and file I/O."""
