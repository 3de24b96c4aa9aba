"""Custom exception hierarchy for ginkou."""


class GinkouError(Exception):
    """Base exception for all ginkou errors."""


class StoreIOError(GinkouError):
    """Backing store unreachable, unwritable, or failing on I/O."""


class SchemaError(GinkouError):
    """Existing store is not a database or has an incompatible schema."""


class IntegrityError(GinkouError):
    """Membership references a sentence that does not exist."""


class ExtractionError(GinkouError):
    """Morphological analyzer failed or produced malformed output."""


class ConfigError(GinkouError):
    """Malformed configuration file."""
