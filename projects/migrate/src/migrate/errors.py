"""Exceptions raised while migrating tables."""


class MigrationError(Exception):
    """Base class for errors that abort the migration of a table."""


class ConfigurationError(MigrationError):
    """Table metadata or options cannot be migrated as given."""


class ProvisioningError(MigrationError):
    """The destination table could not be created or made ready."""


class TransportError(MigrationError):
    """A bulk write to the destination failed."""


class SourceError(MigrationError):
    """Reading metadata or rows from the source database failed."""
