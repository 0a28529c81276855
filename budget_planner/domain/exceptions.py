"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidIncomeSourceError(DomainException):
    """Income source has a negative amount, unknown frequency or bad pay day"""

    pass


class InvalidBillError(DomainException):
    """Bill definition is malformed (negative amount, unknown type, ...)"""

    pass


class AllocationNotFoundError(DomainException):
    """No paycheck in the schedule matches the requested pay date"""

    pass


class BillNotFoundError(DomainException):
    """Bill is not assigned to the requested paycheck"""

    pass


class DuplicateBillError(DomainException):
    """A bill with the same name and due date already exists"""

    pass


class ReportExportError(DomainException):
    """Report renderer rejected the payload or is unavailable"""

    pass
