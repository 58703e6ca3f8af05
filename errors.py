"""
errors.py

Precondition failures raised by the walkerstore containers.

Every one of these is a programming error in the caller (an index computed
outside the declared shape, or a slice of the wrong length).  Nothing in the
package catches them.
"""


class PreconditionViolation(Exception):
    """Base class for all store precondition failures."""


class IndexOutOfRange(PreconditionViolation, IndexError):
    """An index lies outside ``[0, dimension)``."""


class LengthMismatch(PreconditionViolation, ValueError):
    """A bulk write or bulk constructor got data of the wrong length/shape."""
