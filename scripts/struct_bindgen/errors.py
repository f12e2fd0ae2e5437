"""
Error and warning types

All validation happens while building the model; any BindgenError aborts the
whole declaration. Warnings are advisory and never stop generation.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Location:
    """Source position of a declaration node or marker"""
    file: str = ''
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        parts = [self.file or '<input>']
        if self.line:
            parts.append(str(self.line))
            if self.column:
                parts.append(str(self.column))
        return ':'.join(parts)


class BindgenError(Exception):
    """Fatal transformation error, reported at the most specific location"""

    def __init__(self, message: str, location: Optional[Location] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self) -> str:
        if self.location is None:
            return self.message
        return f'{self.location}: {self.message}'


class BindgenWarning(UserWarning):
    """Base class for non-fatal advisories"""


class RedundantAccessorWarning(BindgenWarning):
    """`getter` and `setter` both set where both are already implied"""


class DebugOutputWarning(BindgenWarning):
    """Carries generated output when `dbg` is requested"""
