"""
Main generator module

Orchestrates loading declarations, building the models and writing the
generated Rust sources.
"""

import os
import warnings
from typing import Optional

from .ir import Source
from .model import Model

# Header written at the top of every generated file
GENERATED_HEADER = '// machine generated, do not edit'


class Generator:
    """Main binding generator"""

    def __init__(self, output_root: str):
        self.output_root = output_root

    def prepare(self):
        """Prepare output directory"""
        print('=== Generating wasm-bindgen externs:')
        os.makedirs(self.output_root, exist_ok=True)

    def generate_all(self, json_paths: list[str]) -> list[str]:
        """Generate bindings for every input file"""
        self.prepare()
        return [self.generate_file(path) for path in json_paths]

    def generate_file(self, json_path: str, output_path: Optional[str] = None) -> str:
        """Generate bindings for a single input file"""
        if output_path is None:
            stem = os.path.splitext(os.path.basename(json_path))[0]
            output_path = os.path.join(self.output_root, f'{stem}.rs')

        print(f'  {json_path} => {output_path}')

        code = self.generate_source(Source.load(json_path))
        with open(output_path, 'w', newline='\n') as f:
            f.write(code)
        return output_path

    def generate_source(self, source: Source) -> str:
        """Generate Rust source for all declarations of a source"""
        # Build every model before rendering, any error aborts the whole file
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter('always')
            models = [Model.from_decl(decl) for decl in source.decls]
            parts = [model.render() for model in models]

        for warning in caught:
            print(f'  >> warning: {warning.message}')

        return '\n\n'.join([GENERATED_HEADER] + parts) + '\n'
