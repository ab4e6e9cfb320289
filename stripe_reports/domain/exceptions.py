"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class UpstreamAPIError(DomainException):
    """Payments API returned an error or is unavailable"""

    pass


class InvalidReportRequestError(DomainException):
    """Report parameters are missing, malformed or inconsistent"""

    pass
