"""Command-line interface: ``autofold serve|plan|refold|debug-symbols``."""
