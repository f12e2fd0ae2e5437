"""
Code generation utilities

Provides the indentation-aware line builder and identifier helpers shared by
the struct and impl models.
"""


# Marker prefixed to a field name to name its setter
SETTER_PREFIX = 'set_'

# Suffix appended to a method name to name its boundary declaration
BOUNDARY_SUFFIX = '_js'


class CodeGen:
    """Code generation helper with indentation support"""

    def __init__(self):
        self._lines: list[str] = []
        self._indent: int = 0
        self._indent_str: str = '    '  # 4 spaces

    def line(self, text: str = ''):
        """Add a line with current indentation"""
        if text:
            self._lines.append(self._indent_str * self._indent + text)
        else:
            self._lines.append('')

    def lines(self, *texts: str):
        """Add multiple lines"""
        for text in texts:
            self.line(text)

    def indent(self):
        """Increase indentation"""
        self._indent += 1

    def dedent(self):
        """Decrease indentation"""
        if self._indent > 0:
            self._indent -= 1

    def block(self, header: str, footer: str = '}'):
        """Context manager for code blocks"""
        return _BlockContext(self, header, footer)

    def output(self) -> str:
        """Get generated code as string"""
        return '\n'.join(self._lines)

    def clear(self):
        """Clear all generated code"""
        self._lines.clear()
        self._indent = 0


class _BlockContext:
    """Context manager for indented code blocks"""

    def __init__(self, gen: CodeGen, header: str, footer: str):
        self._gen = gen
        self._header = header
        self._footer = footer

    def __enter__(self):
        self._gen.line(self._header)
        self._gen.indent()
        return self

    def __exit__(self, *args):
        self._gen.dedent()
        self._gen.line(self._footer)


def to_camel_from_snake(name: str) -> str:
    """Convert snake_case identifier to camelCase

    Examples:
        a_little_test -> aLittleTest
        a__little_test -> aLittleTest
        a_2_little_test -> a2LittleTest
        a_2little_test -> a2littleTest
    """
    result = []
    prev_is_underscore = False
    for c in name:
        if c == '_':
            prev_is_underscore = True
            continue
        if prev_is_underscore and c.isalpha():
            result.append(c.upper())
        else:
            result.append(c)
        prev_is_underscore = False
    return ''.join(result)


def setter_name(name: str) -> str:
    """Name of the setter declaration for a field"""
    return f'{SETTER_PREFIX}{name}'


def boundary_name(name: str) -> str:
    """Name of the extern declaration backing a wrapper method"""
    return f'{name}{BOUNDARY_SUFFIX}'


_ESCAPES = {'\\': '\\\\', '"': '\\"', '\n': '\\n', '\r': '\\r', '\t': '\\t', '\0': '\\0'}


def quote_str(value: str) -> str:
    """Render a Rust string literal; other control characters become `\\u{..}`"""
    out = []
    for ch in value:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or ch == '\x7f':
            out.append(f'\\u{{{ord(ch):x}}}')
        else:
            out.append(ch)
    return '"' + ''.join(out) + '"'
