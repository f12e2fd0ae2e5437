"""
Accessor mode module

Getter/setter visibility of a field, combined from the type-wide default and
the field-level override.
"""

from enum import Flag


class AccessorMode(Flag):
    """Which accessors a member exposes"""
    NONE = 0
    GET = 1
    SET = 2
    BOTH = GET | SET

    @classmethod
    def new(cls, getter: bool, setter: bool) -> 'AccessorMode':
        mode = cls.NONE
        if getter:
            mode |= cls.GET
        if setter:
            mode |= cls.SET
        return mode

    @property
    def is_getter(self) -> bool:
        return bool(self & AccessorMode.GET)

    @property
    def is_setter(self) -> bool:
        return bool(self & AccessorMode.SET)

    @property
    def is_none(self) -> bool:
        return self == AccessorMode.NONE


def resolve(global_mode: AccessorMode, local_mode: AccessorMode) -> AccessorMode:
    """Effective accessor mode of a member

    Unannotated members get both accessors. A local mode can only add to
    the type-wide mode, never remove from it.
    """
    if global_mode.is_none and local_mode.is_none:
        return AccessorMode.BOTH
    if global_mode.is_none:
        return local_mode
    return global_mode | local_mode
