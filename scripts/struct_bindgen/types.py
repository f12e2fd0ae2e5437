"""
Type expression module

Immutable type expressions, a parser for Rust type strings, and the rewrite
rules applied to declared types (Self substitution, MapValue splitting and
Result detection).
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

from .errors import BindgenError, Location

# Two-argument wrapper marking distinct boundary and native return types
MAP_VALUE_IDENT = 'MapValue'

# Two-variant result wrapper; its presence makes the boundary call catchable
RESULT_IDENT = 'Result'


@dataclass(frozen=True)
class Lifetime:
    """Lifetime argument, e.g. 'a"""
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class PathSegment:
    """One `::`-separated path segment with optional generic arguments"""
    name: str
    args: Optional[tuple] = None  # None when no angle brackets were written

    def __str__(self) -> str:
        if self.args is None:
            return self.name
        return f"{self.name}<{', '.join(str(arg) for arg in self.args)}>"


@dataclass(frozen=True)
class PathType:
    """Named type such as `String`, `Vec<u8>` or `js_sys::Object`"""
    segments: tuple
    leading_colon: bool = False

    def __str__(self) -> str:
        path = '::'.join(str(seg) for seg in self.segments)
        return f'::{path}' if self.leading_colon else path


@dataclass(frozen=True)
class RefType:
    """Reference type `&T`, `&mut T`, `&'a T`"""
    elem: 'TypeExpr'
    mutable: bool = False
    lifetime: Optional[Lifetime] = None

    def __str__(self) -> str:
        text = '&'
        if self.lifetime is not None:
            text += f'{self.lifetime} '
        if self.mutable:
            text += 'mut '
        return text + str(self.elem)


@dataclass(frozen=True)
class TupleType:
    """Tuple type, `()` being the unit type"""
    elems: tuple = ()

    def __str__(self) -> str:
        if len(self.elems) == 1:
            return f'({self.elems[0]},)'
        return f"({', '.join(str(elem) for elem in self.elems)})"


@dataclass(frozen=True)
class SliceType:
    """Slice type `[T]`"""
    elem: 'TypeExpr'

    def __str__(self) -> str:
        return f'[{self.elem}]'


@dataclass(frozen=True)
class ArrayType:
    """Array type `[T; N]`"""
    elem: 'TypeExpr'
    length: str

    def __str__(self) -> str:
        return f'[{self.elem}; {self.length}]'


TypeExpr = Union[PathType, RefType, TupleType, SliceType, ArrayType]

SELF_TYPE = PathType((PathSegment('Self'),))


def path_type(name: str) -> PathType:
    """Build a single-segment path type"""
    return PathType((PathSegment(name),))


# ==============================================================================
# Parsing
# ==============================================================================

_TOKEN_RE = re.compile(r"\s*(?:('[A-Za-z_]\w*)|(::)|([A-Za-z_]\w*|\d+)|([<>,&()\[\];]))")


def _tokenize(text: str, location: Optional[Location]) -> list[str]:
    tokens = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if not m:
            raise BindgenError(f'unexpected character in type `{text}`: {text[pos:].strip()[0]!r}',
                               location)
        tokens.append(next(group for group in m.groups() if group is not None))
        pos = m.end()
    return tokens


class _TypeParser:
    """Recursive descent parser over type tokens"""

    def __init__(self, text: str, location: Optional[Location]):
        self.text = text
        self.location = location
        self.tokens = _tokenize(text, location)
        self.pos = 0

    def peek(self) -> Optional[str]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def next(self) -> str:
        tok = self.peek()
        if tok is None:
            self.fail('unexpected end of type')
        self.pos += 1
        return tok

    def accept(self, tok: str) -> bool:
        if self.peek() == tok:
            self.pos += 1
            return True
        return False

    def expect(self, tok: str):
        if not self.accept(tok):
            found = self.peek()
            self.fail(f'expected `{tok}`, found `{found}`' if found else f'expected `{tok}`')

    def fail(self, message: str):
        raise BindgenError(f'invalid type `{self.text}`: {message}', self.location)

    def parse(self) -> TypeExpr:
        ty = self.parse_type()
        if self.peek() is not None:
            self.fail(f'unexpected token `{self.peek()}`')
        return ty

    def parse_type(self) -> TypeExpr:
        tok = self.peek()
        if tok == '&':
            self.next()
            lifetime = None
            if self.peek() and self.peek().startswith("'"):
                lifetime = Lifetime(self.next())
            mutable = self.accept('mut')
            return RefType(self.parse_type(), mutable, lifetime)
        if tok == '(':
            return self._parse_tuple()
        if tok == '[':
            return self._parse_slice_or_array()
        if tok == '::' or (tok and (tok[0].isalpha() or tok[0] == '_')):
            return self._parse_path()
        self.fail(f'unexpected token `{tok}`' if tok else 'empty type')

    def _parse_tuple(self) -> TypeExpr:
        self.expect('(')
        elems = []
        trailing_comma = False
        while not self.accept(')'):
            elems.append(self.parse_type())
            trailing_comma = self.accept(',')
            if not trailing_comma and self.peek() != ')':
                self.fail('expected `,` or `)` in tuple')
        # `(T)` is a parenthesized type, not a 1-tuple
        if len(elems) == 1 and not trailing_comma:
            return elems[0]
        return TupleType(tuple(elems))

    def _parse_slice_or_array(self) -> TypeExpr:
        self.expect('[')
        elem = self.parse_type()
        if self.accept(']'):
            return SliceType(elem)
        self.expect(';')
        length = []
        while self.peek() not in (']', None):
            length.append(self.next())
        self.expect(']')
        if not length:
            self.fail('missing array length')
        return ArrayType(elem, ' '.join(length))

    def _parse_path(self) -> PathType:
        leading_colon = self.accept('::')
        segments = [self._parse_segment()]
        while self.accept('::'):
            segments.append(self._parse_segment())
        return PathType(tuple(segments), leading_colon)

    def _parse_segment(self) -> PathSegment:
        name = self.next()
        if not (name[0].isalpha() or name[0] == '_'):
            self.fail(f'expected identifier, found `{name}`')
        if not self.accept('<'):
            return PathSegment(name)
        args = []
        while not self.accept('>'):
            if self.peek() and self.peek().startswith("'"):
                args.append(Lifetime(self.next()))
            else:
                args.append(self.parse_type())
            if not self.accept(',') and self.peek() != '>':
                self.fail('expected `,` or `>` in generic arguments')
        return PathSegment(name, tuple(args))


def parse_type(text: str, location: Optional[Location] = None) -> TypeExpr:
    """Parse a Rust type string into a type expression"""
    return _TypeParser(text, location).parse()


# ==============================================================================
# Rewrite rules
# ==============================================================================

def is_self_ty(ty: Optional[TypeExpr]) -> bool:
    """Check if type is exactly `Self`"""
    return ty == SELF_TYPE


def substitute_self(ty: Optional[TypeExpr], concrete: TypeExpr) -> Optional[TypeExpr]:
    """Replace a `Self` type with the concrete enclosing type"""
    if is_self_ty(ty):
        return concrete
    return ty


def map_value_types(ty: Optional[TypeExpr],
                    location: Optional[Location] = None) -> Optional[tuple[TypeExpr, TypeExpr]]:
    """Extract (boundary, native) types from `MapValue<Boundary, Native>`

    Returns None when the type is not a MapValue wrapper.
    """
    if not isinstance(ty, PathType):
        return None
    if len(ty.segments) != 1 or ty.segments[0].name != MAP_VALUE_IDENT:
        return None

    args = ty.segments[0].args
    if args is None:
        return None
    if len(args) != 2:
        raise BindgenError(f'`{MAP_VALUE_IDENT}` must have exactly 2 type arguments', location)
    for arg in args:
        if isinstance(arg, Lifetime):
            raise BindgenError(f'only types within `{MAP_VALUE_IDENT}` are supported', location)
    return args[0], args[1]


def is_result(ty: Optional[TypeExpr]) -> bool:
    """Check if type is a `Result` (possibly-failing boundary call)"""
    if not isinstance(ty, PathType):
        return False
    return ty.segments[0].name == RESULT_IDENT
