"""Schedule manager with local JSON storage, overlap checks, backups and a command line."""

__version__ = "0.1.0"