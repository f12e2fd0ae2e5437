"""
struct_bindgen - wasm-bindgen extern generation from annotated declarations

Turns struct declarations into extern types with getter/setter declarations,
and impl blocks of method signatures into wrapper methods backed by nested
extern declarations. Options are read from `opts(...)` markers.
"""

from .accessor import AccessorMode, resolve
from .attrs import StructAttributes, FieldAttributes, ImplAttributes, MethodAttributes
from .codegen import CodeGen, to_camel_from_snake
from .emit import render
from .errors import (
    BindgenError, BindgenWarning, RedundantAccessorWarning, DebugOutputWarning, Location,
)
from .generator import Generator
from .impl import Impl, Method, LiteralBody, SynthesizedBody
from .ir import (
    Source, StructDecl, FieldDecl, ImplDecl, MethodDecl, OtherItem,
    Signature, Receiver, Param, Attribute, AttrArg, Lit,
)
from .model import Model, expand
from .struct import Struct, Field, resolve_finality
from .types import parse_type, substitute_self, map_value_types, is_result

__all__ = [
    'AccessorMode', 'resolve',
    'StructAttributes', 'FieldAttributes', 'ImplAttributes', 'MethodAttributes',
    'CodeGen', 'to_camel_from_snake',
    'render',
    'BindgenError', 'BindgenWarning', 'RedundantAccessorWarning', 'DebugOutputWarning', 'Location',
    'Generator',
    'Impl', 'Method', 'LiteralBody', 'SynthesizedBody',
    'Source', 'StructDecl', 'FieldDecl', 'ImplDecl', 'MethodDecl', 'OtherItem',
    'Signature', 'Receiver', 'Param', 'Attribute', 'AttrArg', 'Lit',
    'Model', 'expand',
    'Struct', 'Field', 'resolve_finality',
    'parse_type', 'substitute_self', 'map_value_types', 'is_result',
]
