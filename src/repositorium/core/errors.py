class RepositoriumError(Exception):
    """Base error for all user-facing repositorium exceptions."""


class ConfigurationError(RepositoriumError):
    """Raised when configuration is invalid or incomplete."""


class InvalidUidError(RepositoriumError):
    """Raised when a base-62 identifier cannot be decoded."""


class InvalidUidDigitError(InvalidUidError):
    """Raised when an identifier contains a character outside A-Z, a-z, 0-9."""


class UidOverflowError(InvalidUidError):
    """Raised when an identifier does not fit into 64 bits."""


class ResourceLoadError(RepositoriumError):
    """Raised when a resource cannot be loaded."""


class MetadataMissingError(ResourceLoadError):
    """Raised when a resource has no name or metadata to describe it."""


class MetadataReadError(ResourceLoadError):
    """Raised when a metadata file exists but cannot be read."""


class InvalidMetadataError(ResourceLoadError):
    """Raised when a metadata file contains an unknown field."""


class InvalidResourceUIDError(ResourceLoadError):
    """Raised when a metadata uid field is zero or not decodable."""


class UidAllocationError(ResourceLoadError):
    """Raised when a fresh identifier cannot be allocated."""


class ResourceHasNoLocationError(ResourceLoadError):
    """Raised when a resource has neither a source path nor a bundle offset."""


class BundleError(RepositoriumError):
    """Raised when bundle operations fail."""


class InvalidBundleFileError(BundleError):
    """Raised when a bundle header or table of contents is malformed."""


class TruncatedBundleError(BundleError):
    """Raised when a bundle holds fewer payload bytes than its table declares."""


class BundleWriteError(BundleError):
    """Raised when a bundle cannot be written."""


class QueryError(RepositoriumError):
    """Raised when a lookup query is unusable."""


class QueryEmptyError(QueryError):
    """Raised when a query normalizes to nothing."""


class QueryTooLongError(QueryError):
    """Raised when a query exceeds the maximum indexable length."""


class QueryEncodingError(QueryError):
    """Raised when a query or scanned filename is not valid UTF-8."""


class ConversionError(RepositoriumError):
    """Raised when audio or image conversion fails."""
