"""Client module - REST client, project handle, sync engine and CLI."""
