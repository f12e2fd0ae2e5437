"""
IR (Intermediate Representation) module

Neutral representation of the annotated declarations handed over by a front
end: struct declarations with fields, and impl blocks with method signatures.
Reads them from JSON documents.
"""

import dataclasses
import json
import re
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .codegen import quote_str
from .errors import BindgenError, Location
from .types import Lifetime, TypeExpr, parse_type

# Attribute path holding configuration markers
OPTS_PATH = 'opts'

_RECEIVER_RE = re.compile(r"^(&\s*(?:('\w+)\s+)?)?(mut\s+)?self$")
_PAT_IDENT_RE = re.compile(r'^(?:ref\s+)?(?:mut\s+)?([A-Za-z_]\w*)$')

# Keywords that cannot be bound as a parameter name
_PAT_KEYWORDS = {'mut', 'ref', 'self', '_'}


@dataclass(frozen=True)
class Lit:
    """Literal attribute value"""
    value: Union[str, int, float, bool]

    def __str__(self) -> str:
        if isinstance(self.value, bool):
            return 'true' if self.value else 'false'
        if isinstance(self.value, str):
            return quote_str(self.value)
        return str(self.value)


@dataclass
class AttrArg:
    """One `key` or `key = value` entry inside an attribute"""
    key: str
    value: Any = None  # None for a bare key
    location: Optional[Location] = None

    @property
    def has_value(self) -> bool:
        return self.value is not None


@dataclass
class Attribute:
    """Metadata marker attached to a declaration node

    `opts` attributes carry configuration args; any other attribute is
    passed through verbatim using `text`.
    """
    path: str
    args: list[AttrArg] = field(default_factory=list)
    text: str = ''
    location: Optional[Location] = None

    @property
    def is_opts(self) -> bool:
        return self.path == OPTS_PATH

    def __str__(self) -> str:
        return f'#[{self.text or self.path}]'


@dataclass
class FieldDecl:
    """Struct field; name is None for tuple struct fields"""
    name: Optional[str]
    type: TypeExpr
    vis: str = ''
    attrs: list[Attribute] = field(default_factory=list)
    location: Optional[Location] = None


@dataclass
class StructDecl:
    """Struct declaration"""
    name: str
    fields: list[FieldDecl] = field(default_factory=list)
    vis: str = ''
    attrs: list[Attribute] = field(default_factory=list)
    location: Optional[Location] = None


@dataclass(frozen=True)
class Receiver:
    """Method receiver: `&self`, `&'a mut self`, `self` or `mut self`"""
    reference: bool = True
    mutable: bool = False
    lifetime: Optional[Lifetime] = None

    def __str__(self) -> str:
        if self.reference:
            text = '&'
            if self.lifetime is not None:
                text += f'{self.lifetime} '
            return text + ('mut self' if self.mutable else 'self')
        return 'mut self' if self.mutable else 'self'


@dataclass(frozen=True)
class Param:
    """Typed method parameter bound by a pattern"""
    pattern: str
    type: TypeExpr

    @property
    def ident(self) -> Optional[str]:
        """Bound name, or None when the pattern is not a plain identifier"""
        m = _PAT_IDENT_RE.match(self.pattern.strip())
        if not m or m.group(1) in _PAT_KEYWORDS:
            return None
        return m.group(1)

    def __str__(self) -> str:
        return f'{self.pattern}: {self.type}'


@dataclass(frozen=True)
class Signature:
    """Method signature"""
    name: str
    inputs: tuple = ()  # Receiver first (if any), then Param
    output: Optional[TypeExpr] = None
    is_async: bool = False
    generics: str = ''
    is_const: bool = False
    abi: Optional[str] = None
    is_unsafe: bool = False

    def receiver(self) -> Optional[Receiver]:
        if self.inputs and isinstance(self.inputs[0], Receiver):
            return self.inputs[0]
        return None

    def params(self) -> tuple:
        """Inputs without the receiver"""
        if self.receiver() is not None:
            return self.inputs[1:]
        return self.inputs

    def replace(self, **changes) -> 'Signature':
        return dataclasses.replace(self, **changes)


@dataclass
class MethodDecl:
    """Method inside an impl block; body is None for a bare signature"""
    sig: Signature
    body: Optional[list[str]] = None
    vis: str = ''
    attrs: list[Attribute] = field(default_factory=list)
    location: Optional[Location] = None


@dataclass
class OtherItem:
    """Impl item that is not a method (const, type alias, macro, ...)"""
    kind: str
    text: str = ''
    location: Optional[Location] = None


@dataclass
class ImplDecl:
    """Impl block"""
    ty: TypeExpr
    items: list[Union[MethodDecl, OtherItem]] = field(default_factory=list)
    attrs: list[Attribute] = field(default_factory=list)
    location: Optional[Location] = None


Decl = Union[StructDecl, ImplDecl]


@dataclass
class Source:
    """Declarations read from one input document"""
    path: str
    decls: list[Decl]

    @classmethod
    def load(cls, json_path: str) -> 'Source':
        """Load declarations from a JSON file"""
        with open(json_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls.from_dict(data, json_path)

    @classmethod
    def from_dict(cls, data: dict, path: str = '') -> 'Source':
        """Create Source from a dictionary"""
        decls = [_parse_decl(decl, path) for decl in data.get('decls', [])]
        return cls(path=path, decls=decls)


# ==============================================================================
# JSON parsing
# ==============================================================================

def _parse_location(node: dict, path: str) -> Location:
    loc = node.get('loc') or {}
    return Location(file=path, line=loc.get('line', 0), column=loc.get('column', 0))


def _parse_decl(decl: dict, path: str) -> Decl:
    kind = decl.get('kind')
    if kind == 'struct':
        return _parse_struct(decl, path)
    if kind == 'impl':
        return _parse_impl(decl, path)
    raise BindgenError('macro can only be used on a struct or impl block',
                       _parse_location(decl, path))


def _parse_attrs(attrs: list, path: str) -> list[Attribute]:
    result = []
    for attr in attrs:
        result.append(Attribute(
            path=attr['path'],
            args=[AttrArg(key=arg['key'], value=arg.get('value'),
                          location=_parse_location(arg, path))
                  for arg in attr.get('args', [])],
            text=attr.get('text', ''),
            location=_parse_location(attr, path),
        ))
    return result


def _parse_struct(decl: dict, path: str) -> StructDecl:
    fields = []
    for f in decl.get('fields', []):
        location = _parse_location(f, path)
        fields.append(FieldDecl(
            name=f.get('name'),
            type=parse_type(f['type'], location),
            vis=f.get('vis', ''),
            attrs=_parse_attrs(f.get('attrs', []), path),
            location=location,
        ))
    return StructDecl(
        name=decl['name'],
        fields=fields,
        vis=decl.get('vis', ''),
        attrs=_parse_attrs(decl.get('attrs', []), path),
        location=_parse_location(decl, path),
    )


def _parse_impl(decl: dict, path: str) -> ImplDecl:
    location = _parse_location(decl, path)
    items: list[Union[MethodDecl, OtherItem]] = []
    for item in decl.get('items', []):
        if item.get('kind', 'fn') == 'fn':
            items.append(_parse_method(item, path))
        else:
            items.append(OtherItem(
                kind=item['kind'],
                text=item.get('text', ''),
                location=_parse_location(item, path),
            ))
    return ImplDecl(
        ty=parse_type(decl['type'], location),
        items=items,
        attrs=_parse_attrs(decl.get('attrs', []), path),
        location=location,
    )


def _parse_receiver(text: str, location: Location) -> Receiver:
    m = _RECEIVER_RE.match(text.strip())
    if not m:
        raise BindgenError(f'invalid receiver `{text}`', location)
    lifetime = Lifetime(m.group(2)) if m.group(2) else None
    return Receiver(reference=m.group(1) is not None, mutable=m.group(3) is not None,
                    lifetime=lifetime)


def _parse_method(item: dict, path: str) -> MethodDecl:
    location = _parse_location(item, path)

    inputs: list = []
    if item.get('receiver'):
        inputs.append(_parse_receiver(item['receiver'], location))
    for p in item.get('params', []):
        inputs.append(Param(
            pattern=p.get('pattern', p.get('name', '')),
            type=parse_type(p['type'], location),
        ))

    output = item.get('output')
    sig = Signature(
        name=item['name'],
        inputs=tuple(inputs),
        output=parse_type(output, location) if output else None,
        is_async=item.get('async', False),
        generics=item.get('generics', ''),
        is_const=item.get('const', False),
        abi=item.get('abi'),
        is_unsafe=item.get('unsafe', False),
    )

    body = item.get('body')
    if isinstance(body, str):
        body = body.splitlines()

    return MethodDecl(
        sig=sig,
        body=body,
        vis=item.get('vis', ''),
        attrs=_parse_attrs(item.get('attrs', []), path),
        location=location,
    )
