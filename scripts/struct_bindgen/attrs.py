"""
Attribute option module

Extracts typed option records from the `opts(...)` markers attached to a
declaration node. Each record class declares its schema: the kind of every
option and the mutually-exclusive groups.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional, TypeVar

from .errors import BindgenError
from .ir import Attribute, AttrArg, Lit
from .types import TypeExpr, parse_type


class OptionKind(Enum):
    FLAG = 'flag'
    LIT = 'literal'
    TYPE = 'type'
    LIT_LIST = 'literal list'


FLAG = OptionKind.FLAG
LIT = OptionKind.LIT
TYPE = OptionKind.TYPE
LIT_LIST = OptionKind.LIT_LIST


@dataclass(frozen=True)
class Schema:
    """Option kinds plus a table of option name -> exclusive group id"""
    options: dict[str, OptionKind]
    exclusive: dict[str, str] = field(default_factory=dict)


def _coerce(arg: AttrArg, kind: OptionKind):
    if kind is FLAG:
        if arg.has_value:
            raise BindgenError(f'`{arg.key}` is a flag and does not take a value', arg.location)
        return True

    if not arg.has_value:
        raise BindgenError(f'`{arg.key}` requires a value', arg.location)

    value = arg.value
    if kind is LIT:
        if isinstance(value, (list, dict)):
            raise BindgenError(f'`{arg.key}` expects a literal', arg.location)
        return Lit(value)
    if kind is TYPE:
        if not isinstance(value, str):
            raise BindgenError(f'`{arg.key}` expects a type', arg.location)
        return parse_type(value, arg.location)
    if not isinstance(value, list) or any(isinstance(v, (list, dict)) for v in value):
        raise BindgenError(f'`{arg.key}` expects a list of literals', arg.location)
    return tuple(Lit(v) for v in value)


def _check_exclusive(schema: Schema, found: dict[str, AttrArg]):
    seen: dict[str, str] = {}
    for key, arg in found.items():
        group = schema.exclusive.get(key)
        if group is None:
            continue
        if group in seen:
            raise BindgenError(f'`{key}` conflicts with `{seen[group]}`', arg.location)
        seen[group] = key


def parse_options(attrs: list[Attribute], schema: Schema) -> tuple[dict, list[Attribute]]:
    """Resolve option values from `opts` attributes

    Returns the set options keyed by name and the remaining (passthrough)
    attributes in their original order.
    """
    found: dict[str, AttrArg] = {}
    values: dict = {}
    remaining = []

    for attr in attrs:
        if not attr.is_opts:
            remaining.append(attr)
            continue
        for arg in attr.args:
            kind = schema.options.get(arg.key)
            if kind is None:
                expected = ', '.join(f'`{name}`' for name in schema.options)
                raise BindgenError(f'unknown option `{arg.key}`, expected one of {expected}',
                                   arg.location or attr.location)
            if arg.key in found:
                raise BindgenError(f'`{arg.key}` is specified multiple times', arg.location)
            found[arg.key] = arg
            values[arg.key] = _coerce(arg, kind)

    _check_exclusive(schema, found)
    return values, remaining


T = TypeVar('T')


def remove_attributes(cls: type[T], attrs: list[Attribute]) -> tuple[T, list[Attribute]]:
    """Build an option record of `cls` and strip its `opts` attributes"""
    values, remaining = parse_options(attrs, cls.SCHEMA)
    return cls(**values), remaining


@dataclass(frozen=True)
class StructAttributes:
    SCHEMA: ClassVar[Schema] = Schema(
        options={
            'dbg': FLAG,
            'on': TYPE,
            'extends': TYPE,
            'getter': FLAG,
            'setter': FLAG,
            'final_': FLAG,
            'js_name': LIT,
            'js_namespace': LIT_LIST,
            'module': LIT,
            'raw_module': LIT,
        },
        exclusive={
            'on': 'target',
            'extends': 'target',
            'module': 'module',
            'raw_module': 'module',
        },
    )

    dbg: bool = False
    on: Optional[TypeExpr] = None
    extends: Optional[TypeExpr] = None
    getter: bool = False
    setter: bool = False
    final_: bool = False
    js_name: Optional[Lit] = None
    js_namespace: tuple = ()
    module: Optional[Lit] = None
    raw_module: Optional[Lit] = None


@dataclass(frozen=True)
class FieldAttributes:
    SCHEMA: ClassVar[Schema] = Schema(
        options={
            'getter': FLAG,
            'setter': FLAG,
            'final_': FLAG,
            'structural': FLAG,
            'js_name': LIT,
            # Reserved, accepted but not emitted
            'static': FLAG,
        },
    )

    getter: bool = False
    setter: bool = False
    final_: bool = False
    structural: bool = False
    js_name: Optional[Lit] = None
    static: bool = False


@dataclass(frozen=True)
class ImplAttributes:
    SCHEMA: ClassVar[Schema] = Schema(
        options={
            'dbg': FLAG,
            'final_': FLAG,
            'js_name': LIT,
            'js_namespace': LIT_LIST,
            'module': LIT,
            'raw_module': LIT,
        },
        exclusive={
            'module': 'module',
            'raw_module': 'module',
        },
    )

    dbg: bool = False
    final_: bool = False
    js_name: Optional[Lit] = None
    js_namespace: tuple = ()
    module: Optional[Lit] = None
    raw_module: Optional[Lit] = None


@dataclass(frozen=True)
class MethodAttributes:
    SCHEMA: ClassVar[Schema] = Schema(
        options={
            'pub_': FLAG,
            'constructor': FLAG,
            'final_': FLAG,
            'getter': FLAG,
            'setter': FLAG,
            'structural': FLAG,
            'indexing_getter': FLAG,
            'indexing_setter': FLAG,
            'indexing_deleter': FLAG,
            'js_name': LIT,
            'variadic': FLAG,
        },
    )

    pub_: bool = False
    constructor: bool = False
    final_: bool = False
    getter: bool = False
    setter: bool = False
    structural: bool = False
    indexing_getter: bool = False
    indexing_setter: bool = False
    indexing_deleter: bool = False
    js_name: Optional[Lit] = None
    variadic: bool = False
