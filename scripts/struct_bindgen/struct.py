"""
Struct binding generation module

Generates the extern type and the getter/setter declarations for each field
of a struct declaration.
"""

import warnings
from dataclasses import dataclass
from typing import Optional

from .accessor import AccessorMode, resolve
from .attrs import FieldAttributes, StructAttributes, remove_attributes
from .codegen import setter_name, to_camel_from_snake
from .errors import BindgenError, Location, RedundantAccessorWarning
from .ir import FieldDecl, Lit, Param, Signature, StructDecl
from .tree import BindgenAttr, ExternBlock, ExternFn, ExternType, Marker, bindgen
from .types import RefType, TypeExpr, path_type, substitute_self


def resolve_finality(global_final: bool, local_final: bool, structural: bool) -> bool:
    """Structural members are never final"""
    return not structural and (global_final or local_final)


@dataclass(frozen=True)
class Field:
    """Struct field with its resolved options"""
    attrs: tuple
    vis: str
    name: str
    final_: bool
    structural: bool
    js_name: Optional[Lit]
    getters: AccessorMode
    ty: TypeExpr
    static: bool = False

    @classmethod
    def from_decl(cls, decl: FieldDecl) -> 'Field':
        if decl.name is None:
            raise BindgenError('tuple structs are not allowed', decl.location)

        options, attrs = remove_attributes(FieldAttributes, decl.attrs)

        return cls(
            attrs=tuple(attrs),
            vis=decl.vis,
            name=decl.name,
            final_=options.final_,
            structural=options.structural,
            js_name=options.js_name,
            getters=AccessorMode.new(options.getter, options.setter),
            ty=decl.type,
            static=options.static,
        )

    def external_name(self) -> Lit:
        """Explicit js_name, else the camelCase field name"""
        if self.js_name is not None:
            return self.js_name
        return Lit(to_camel_from_snake(self.name))

    def to_decls(self, owner: 'Struct') -> list[ExternFn]:
        """Getter and/or setter declarations for this field"""
        ty_name = owner.ty_name
        ty = substitute_self(self.ty, ty_name)
        this = Param('this', RefType(ty_name))

        markers: list[BindgenAttr] = []
        if owner.js_name is not None:
            markers.append(bindgen(Marker('js_class', owner.js_name)))
        markers.append(bindgen(Marker('js_name', self.external_name())))
        if owner.js_namespace:
            markers.append(bindgen(Marker('js_namespace', owner.js_namespace)))
        if resolve_finality(owner.final_, self.final_, self.structural):
            markers.append(bindgen('final'))

        mode = resolve(owner.getters, self.getters)
        decls = []

        if mode.is_getter:
            decls.append(ExternFn(
                sig=Signature(name=self.name, inputs=(this,), output=ty),
                vis=self.vis,
                markers=[bindgen('method', 'getter')] + markers,
                attrs=list(self.attrs),
            ))

        if mode.is_setter:
            decls.append(ExternFn(
                sig=Signature(name=setter_name(self.name), inputs=(this, Param('value', ty))),
                vis=self.vis,
                markers=[bindgen('method', 'setter')] + markers,
                attrs=list(self.attrs),
            ))

        return decls


@dataclass(frozen=True)
class Struct:
    """Struct declaration with its resolved options"""
    attrs: tuple
    vis: str
    name: str
    on: Optional[TypeExpr]
    extends: Optional[TypeExpr]
    getters: AccessorMode
    final_: bool
    js_name: Optional[Lit]
    js_namespace: tuple
    module: Optional[Lit]
    raw_module: Optional[Lit]
    fields: tuple
    dbg: bool = False
    location: Optional[Location] = None

    @classmethod
    def from_decl(cls, decl: StructDecl) -> 'Struct':
        options, attrs = remove_attributes(StructAttributes, decl.attrs)

        if options.getter and options.setter:
            warnings.warn(
                f'{decl.location or decl.name}: `getter` and `setter` are implied by default, '
                'only set if you need one or the other',
                RedundantAccessorWarning,
                stacklevel=2,
            )

        return cls(
            attrs=tuple(attrs),
            vis=decl.vis,
            name=decl.name,
            on=options.on,
            extends=options.extends,
            getters=AccessorMode.new(options.getter, options.setter),
            final_=options.final_,
            js_name=options.js_name,
            js_namespace=options.js_namespace,
            module=options.module,
            raw_module=options.raw_module,
            fields=tuple(Field.from_decl(f) for f in decl.fields),
            dbg=options.dbg,
            location=decl.location,
        )

    @property
    def ty_name(self) -> TypeExpr:
        """Type the accessors are declared on"""
        if self.on is not None:
            return self.on
        return path_type(self.name)

    def extern_type(self) -> Optional[ExternType]:
        """`type Name;` declaration, None when redirected with `on`"""
        if self.on is not None:
            return None

        markers = []
        if self.js_name is not None:
            markers.append(bindgen(Marker('js_name', self.js_name)))
        if self.extends is not None:
            markers.append(bindgen(Marker('extends', self.extends)))

        return ExternType(name=self.name, vis=self.vis, markers=markers,
                          attrs=list(self.attrs))

    def build(self) -> ExternBlock:
        """Assemble the extern block for this struct"""
        items: list = []
        extern_type = self.extern_type()
        if extern_type is not None:
            items.append(extern_type)
        for f in self.fields:
            items.extend(f.to_decls(self))

        return ExternBlock(items=items, module=self.module,
                           raw_module=None if self.module is not None else self.raw_module)
