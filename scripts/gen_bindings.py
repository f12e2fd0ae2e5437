#!/usr/bin/env python3
"""
gen_bindings.py - wasm-bindgen extern generator entry point

Expands annotated struct/impl declarations (JSON) into Rust sources.

Usage:
    python scripts/gen_bindings.py INPUT.json [INPUT.json ...] [--output DIR] [--stdout]
"""

import argparse
import os
import sys

# Add scripts directory to path
script_dir = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, script_dir)

from struct_bindgen import BindgenError, Generator, Source


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Generate wasm-bindgen extern declarations')
    parser.add_argument('inputs', nargs='+', help='JSON declaration files')
    parser.add_argument('--output', default=os.path.join('gen', 'bindings'),
                        help='Output directory for generated .rs files')
    parser.add_argument('--stdout', action='store_true',
                        help='Print generated code instead of writing files')
    args = parser.parse_args(argv)

    gen = Generator(output_root=args.output)

    try:
        if args.stdout:
            for path in args.inputs:
                sys.stdout.write(gen.generate_source(Source.load(path)))
        else:
            gen.generate_all(args.inputs)
    except BindgenError as e:
        print(f'error: {e}', file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
