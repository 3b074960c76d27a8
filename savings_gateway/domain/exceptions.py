"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidCalculationInputError(DomainException):
    """Principal or annual rate is not positive"""

    pass


class SourceUnavailableError(DomainException):
    """Rate source timed out, returned an error or an undecodable body"""

    pass


class UnknownBankError(DomainException):
    """No bank with the requested id exists in the current snapshot"""

    pass


class SnapshotFormatError(DomainException):
    """Rates snapshot file is missing or not in the expected shape"""

    pass


class SourceConfigError(DomainException):
    """Source configuration file is missing or not in the expected shape"""

    pass
