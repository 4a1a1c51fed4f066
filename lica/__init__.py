"""Per-user shopping lists: domain model, services, SQL storage, migrations and web handlers."""

__version__ = "0.1.0"