"""zanata-sync - Synchronize gettext translation files with a Zanata server."""

__version__ = "0.1.0"
