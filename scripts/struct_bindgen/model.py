"""
Model module

Entry point of the transformation: classifies a declaration as a struct or
an impl block and builds its output tree.
"""

import warnings
from dataclasses import dataclass
from typing import Union

from .emit import render
from .errors import BindgenError, DebugOutputWarning
from .impl import Impl
from .ir import Decl, ImplDecl, StructDecl
from .struct import Struct
from .tree import Output


@dataclass(frozen=True)
class Model:
    """One struct or impl declaration ready for expansion"""
    item: Union[Struct, Impl]

    @classmethod
    def from_decl(cls, decl: Decl) -> 'Model':
        if isinstance(decl, StructDecl):
            return cls(Struct.from_decl(decl))
        if isinstance(decl, ImplDecl):
            return cls(Impl.from_decl(decl))
        raise BindgenError('macro can only be used on a struct or impl block',
                           getattr(decl, 'location', None))

    @property
    def is_struct(self) -> bool:
        return isinstance(self.item, Struct)

    def build(self) -> Output:
        """Build the output declaration tree"""
        output = self.item.build()
        if self.item.dbg:
            warnings.warn(f'`struct_bindgen` debug output:\n{render(output)}',
                          DebugOutputWarning, stacklevel=2)
        return output

    def render(self) -> str:
        """Build and render as Rust source"""
        return render(self.build())


def expand(decl: Decl) -> str:
    """Expand a single declaration to Rust source"""
    return Model.from_decl(decl).render()
