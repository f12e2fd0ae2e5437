"""
Impl binding generation module

Wraps each method of an impl block: the caller-visible method keeps the
native signature and forwards to a nested extern declaration that carries
the boundary signature.
"""

import textwrap
from dataclasses import dataclass
from typing import Optional, Union

from .attrs import ImplAttributes, MethodAttributes, remove_attributes
from .codegen import boundary_name, to_camel_from_snake
from .errors import BindgenError, Location
from .ir import ImplDecl, Lit, MethodDecl, OtherItem, Param, Signature
from .tree import ExternBlock, ExternFn, ImplBlock, Marker, WrapperMethod, bindgen
from .types import RefType, TypeExpr, is_result, is_self_ty, map_value_types


@dataclass(frozen=True)
class LiteralBody:
    """Body written in the input, emitted verbatim"""
    stmts: tuple

    def render(self, sig: Signature, location: Optional[Location] = None) -> list[str]:
        return list(self.stmts)


@dataclass(frozen=True)
class SynthesizedBody:
    """Forwarding call to the boundary declaration"""
    awaits: bool = False

    def render(self, sig: Signature, location: Optional[Location] = None) -> list[str]:
        args = ', '.join(_forward_ident(param, location) for param in sig.params())
        suffix = '.await' if self.awaits else ''
        fn_name = boundary_name(sig.name)
        if sig.receiver() is not None:
            return [f'self.{fn_name}({args}){suffix}']
        return [f'Self::{fn_name}({args}){suffix}']


Body = Union[LiteralBody, SynthesizedBody]


def _forward_ident(param: Param, location: Optional[Location]) -> str:
    ident = param.ident
    if ident is None:
        raise BindgenError(f'only idents can be used here, found `{param.pattern}`', location)
    return ident


def _check_supported(sig: Signature, location: Optional[Location]):
    if sig.generics:
        raise BindgenError(f'generic parameters are not supported on `{sig.name}`', location)
    if sig.is_const:
        raise BindgenError(f'`const fn` is not supported on `{sig.name}`', location)
    if sig.abi is not None:
        raise BindgenError(f'explicit calling conventions are not supported on `{sig.name}`',
                           location)
    if sig.is_unsafe:
        raise BindgenError(f'`unsafe fn` is not supported on `{sig.name}`', location)


@dataclass(frozen=True)
class Method:
    """Impl method with its resolved options"""
    attrs: tuple
    vis: str
    sig: Signature
    body: Body
    constructor: bool = False
    final_: bool = False
    structural: bool = False
    js_name: Optional[Lit] = None
    getter: bool = False
    setter: bool = False
    indexing_getter: bool = False
    indexing_setter: bool = False
    indexing_deleter: bool = False
    variadic: bool = False
    location: Optional[Location] = None

    @classmethod
    def from_decl(cls, decl: MethodDecl) -> 'Method':
        _check_supported(decl.sig, decl.location)
        options, attrs = remove_attributes(MethodAttributes, decl.attrs)

        if decl.body is None:
            body: Body = SynthesizedBody(awaits=decl.sig.is_async)
        else:
            body = LiteralBody(tuple(textwrap.dedent('\n'.join(decl.body)).splitlines()))

        return cls(
            attrs=tuple(attrs),
            vis='pub' if options.pub_ else decl.vis,
            sig=decl.sig,
            body=body,
            constructor=options.constructor,
            final_=options.final_,
            structural=options.structural,
            js_name=options.js_name,
            getter=options.getter,
            setter=options.setter,
            indexing_getter=options.indexing_getter,
            indexing_setter=options.indexing_setter,
            indexing_deleter=options.indexing_deleter,
            variadic=options.variadic,
            location=decl.location,
        )

    @property
    def is_static(self) -> bool:
        return self.sig.receiver() is None

    def is_final(self, global_final: bool) -> bool:
        """Structural opts out of the impl-wide default only"""
        return (global_final and not self.structural) or self.final_

    def external_name(self) -> Lit:
        if self.js_name is not None:
            return self.js_name
        return Lit(to_camel_from_snake(self.sig.name))

    def map_value_types(self) -> Optional[tuple[TypeExpr, TypeExpr]]:
        return map_value_types(self.sig.output, self.location)

    def boundary_return_ty(self) -> Optional[TypeExpr]:
        mapping = self.map_value_types()
        if mapping is not None:
            return mapping[0]
        return self.sig.output

    def native_return_ty(self) -> Optional[TypeExpr]:
        mapping = self.map_value_types()
        if mapping is not None:
            return mapping[1]
        return self.sig.output

    def is_catch(self) -> bool:
        return is_result(self.boundary_return_ty())

    def outer_sig(self) -> Signature:
        return self.sig.replace(output=self.native_return_ty())

    def inner_sig(self, ty: TypeExpr) -> Signature:
        """Boundary signature: `{name}_js`, receiver made an explicit `this`"""
        inputs = list(self.sig.inputs)
        receiver = self.sig.receiver()
        if receiver is not None:
            inputs[0] = Param('this', RefType(ty) if receiver.reference else ty)

        output = self.boundary_return_ty()
        if is_self_ty(output):
            output = ty

        return self.sig.replace(name=boundary_name(self.sig.name), inputs=tuple(inputs),
                                output=output)

    def build(self, ty: TypeExpr, options: ImplAttributes) -> WrapperMethod:
        """Wrapper method with its nested boundary declaration"""
        markers = []
        if self.is_static:
            markers.append(bindgen(Marker('static_method_of', ty)))
        else:
            markers.append(bindgen('method'))
        if options.js_name is not None:
            markers.append(bindgen(Marker('js_class', options.js_name)))
        markers.append(bindgen(Marker('js_name', self.external_name())))
        if options.js_namespace:
            markers.append(bindgen(Marker('js_namespace', options.js_namespace)))

        flags = [
            ('catch', self.is_catch()),
            ('constructor', self.constructor),
            ('final', self.is_final(options.final_)),
            ('getter', self.getter),
            ('setter', self.setter),
            ('indexing_getter', self.indexing_getter),
            ('indexing_setter', self.indexing_setter),
            ('indexing_deleter', self.indexing_deleter),
            ('variadic', self.variadic),
        ]
        markers.extend(bindgen(name) for name, enabled in flags if enabled)

        extern = ExternBlock(
            items=[ExternFn(sig=self.inner_sig(ty), markers=markers)],
            module=options.module,
            raw_module=None if options.module is not None else options.raw_module,
        )

        return WrapperMethod(
            sig=self.outer_sig(),
            extern=extern,
            body=self.body.render(self.sig, self.location),
            vis=self.vis,
            attrs=list(self.attrs),
        )


@dataclass(frozen=True)
class Impl:
    """Impl block with its resolved options"""
    attrs: tuple
    ty: TypeExpr
    options: ImplAttributes
    items: tuple
    location: Optional[Location] = None

    @classmethod
    def from_decl(cls, decl: ImplDecl) -> 'Impl':
        options, attrs = remove_attributes(ImplAttributes, decl.attrs)

        items = []
        for item in decl.items:
            if isinstance(item, OtherItem):
                raise BindgenError(f'only methods are allowed, found `{item.kind}`',
                                   item.location or decl.location)
            items.append(Method.from_decl(item))

        return cls(attrs=tuple(attrs), ty=decl.ty, options=options, items=tuple(items),
                   location=decl.location)

    @property
    def dbg(self) -> bool:
        return self.options.dbg

    def build(self) -> ImplBlock:
        return ImplBlock(
            ty=self.ty,
            methods=[method.build(self.ty, self.options) for method in self.items],
            attrs=list(self.attrs),
        )
