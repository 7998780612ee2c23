"""
Exception types for geneannot
"""

from typing import Optional


class GeneAnnotError(Exception):
    """Base class for all geneannot errors"""


class InputError(GeneAnnotError, ValueError):
    """Malformed location, TSS region or annotation parameter"""


class StoreError(GeneAnnotError):
    """A gene store query failed"""

    def __init__(
        self,
        message: str,
        query: Optional[str] = None,
        location: Optional[object] = None,
    ):
        self.query = query
        self.location = location

        context = []
        if query:
            context.append(f"query={query}")
        if location is not None:
            context.append(f"location={location}")

        if context:
            message = f"{message} ({', '.join(context)})"

        super().__init__(message)
