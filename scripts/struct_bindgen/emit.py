"""
Rust source emission

Serializes output declaration trees as Rust source text.
"""

from .codegen import CodeGen
from .ir import Signature
from .tree import ExternBlock, ExternFn, ExternType, ImplBlock, Output


def _vis(vis: str) -> str:
    return f'{vis} ' if vis else ''


def render_signature(sig: Signature) -> str:
    """Render `async fn name(inputs) -> output`"""
    prefix = 'async ' if sig.is_async else ''
    inputs = ', '.join(str(arg) for arg in sig.inputs)
    output = f' -> {sig.output}' if sig.output is not None else ''
    return f'{prefix}fn {sig.name}({inputs}){output}'


def _emit_extern_type(item: ExternType, gen: CodeGen):
    for attr in item.markers:
        gen.line(str(attr))
    for attr in item.attrs:
        gen.line(str(attr))
    gen.line(f'{_vis(item.vis)}type {item.name};')


def _emit_extern_fn(item: ExternFn, gen: CodeGen):
    for attr in item.attrs:
        gen.line(str(attr))
    for attr in item.markers:
        gen.line(str(attr))
    gen.line(f'{_vis(item.vis)}{render_signature(item.sig)};')


def emit_extern_block(block: ExternBlock, gen: CodeGen):
    """Emit an extern block at the current indentation"""
    gen.line(block.header())
    with gen.block('extern "C" {'):
        for i, item in enumerate(block.items):
            if i:
                gen.line()
            if isinstance(item, ExternType):
                _emit_extern_type(item, gen)
            else:
                _emit_extern_fn(item, gen)


def emit_impl_block(impl: ImplBlock, gen: CodeGen):
    """Emit an impl block with its wrapper methods"""
    for attr in impl.attrs:
        gen.line(str(attr))
    with gen.block(f'impl {impl.ty} {{'):
        for i, method in enumerate(impl.methods):
            if i:
                gen.line()
            for attr in method.attrs:
                gen.line(str(attr))
            with gen.block(f'{_vis(method.vis)}{render_signature(method.sig)} {{'):
                emit_extern_block(method.extern, gen)
                if method.body:
                    gen.line()
                gen.lines(*method.body)


def render(output: Output) -> str:
    """Render a struct or impl output tree as Rust source"""
    gen = CodeGen()
    if isinstance(output, ExternBlock):
        emit_extern_block(output, gen)
    elif isinstance(output, ImplBlock):
        emit_impl_block(output, gen)
    else:
        raise TypeError(f'cannot render {type(output).__name__}')
    return gen.output()
