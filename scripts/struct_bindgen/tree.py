"""
Output declaration tree

Declarations produced by the struct and impl models, ready for emission.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from .ir import Attribute, Lit, Signature
from .types import TypeExpr

BINDGEN_PATH = '::wasm_bindgen::prelude::wasm_bindgen'


@dataclass(frozen=True)
class Marker:
    """Single `name` or `name = value` entry of a wasm_bindgen attribute"""
    name: str
    value: Any = None  # Lit, TypeExpr or tuple of Lit

    def __str__(self) -> str:
        if self.value is None:
            return self.name
        if isinstance(self.value, tuple):
            return f"{self.name} = [{', '.join(str(v) for v in self.value)}]"
        return f'{self.name} = {self.value}'


@dataclass(frozen=True)
class BindgenAttr:
    """`#[wasm_bindgen(...)]` attribute holding one or more markers"""
    markers: tuple

    def __str__(self) -> str:
        return f"#[wasm_bindgen({', '.join(str(m) for m in self.markers)})]"


def bindgen(*markers: Union[str, Marker]) -> BindgenAttr:
    """Build an attribute from marker names or markers"""
    return BindgenAttr(tuple(m if isinstance(m, Marker) else Marker(m) for m in markers))


class _Marked:
    """Lookup helpers over `markers`"""

    markers: list[BindgenAttr]

    def marker_names(self) -> list[str]:
        return [m.name for attr in self.markers for m in attr.markers]

    def has_marker(self, name: str) -> bool:
        return name in self.marker_names()

    def marker(self, name: str) -> Optional[Marker]:
        for attr in self.markers:
            for m in attr.markers:
                if m.name == name:
                    return m
        return None


@dataclass
class ExternType(_Marked):
    """`type Name;` inside an extern block"""
    name: str
    vis: str = ''
    markers: list[BindgenAttr] = field(default_factory=list)
    attrs: list[Attribute] = field(default_factory=list)


@dataclass
class ExternFn(_Marked):
    """Function declaration inside an extern block"""
    sig: Signature
    vis: str = ''
    markers: list[BindgenAttr] = field(default_factory=list)
    attrs: list[Attribute] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.sig.name


@dataclass
class ExternBlock:
    """`extern "C"` block tagged with the wasm_bindgen attribute"""
    items: list[Union[ExternType, ExternFn]] = field(default_factory=list)
    module: Optional[Lit] = None
    raw_module: Optional[Lit] = None

    def header(self) -> str:
        if self.module is not None:
            return f'#[{BINDGEN_PATH}(module = {self.module})]'
        if self.raw_module is not None:
            return f'#[{BINDGEN_PATH}(raw_module = {self.raw_module})]'
        return f'#[{BINDGEN_PATH}]'

    @property
    def types(self) -> list[ExternType]:
        return [item for item in self.items if isinstance(item, ExternType)]

    @property
    def fns(self) -> list[ExternFn]:
        return [item for item in self.items if isinstance(item, ExternFn)]


@dataclass
class WrapperMethod:
    """Caller-visible method bridging to its nested boundary declaration"""
    sig: Signature
    extern: ExternBlock
    body: list[str]
    vis: str = ''
    attrs: list[Attribute] = field(default_factory=list)

    @property
    def boundary(self) -> ExternFn:
        return self.extern.fns[0]


@dataclass
class ImplBlock:
    """`impl Type { ... }` holding the wrapper methods"""
    ty: TypeExpr
    methods: list[WrapperMethod] = field(default_factory=list)
    attrs: list[Attribute] = field(default_factory=list)


Output = Union[ExternBlock, ImplBlock]
