import json

import pytest

import gen_bindings
from struct_bindgen.errors import BindgenError, DebugOutputWarning
from struct_bindgen.generator import GENERATED_HEADER, Generator
from struct_bindgen.ir import ImplDecl, MethodDecl, OtherItem, Receiver, Source, StructDecl
from struct_bindgen.model import Model
from struct_bindgen.types import Lifetime, parse_type

DECLS = {
    "decls": [
        {
            "kind": "struct",
            "name": "JsType",
            "vis": "pub",
            "attrs": [{"path": "opts", "args": [{"key": "js_name", "value": "Thing"}]}],
            "fields": [
                {"name": "my_prop_1", "type": "String",
                 "attrs": [{"path": "opts", "args": [{"key": "getter"}]}]},
            ],
        },
        {
            "kind": "impl",
            "type": "JsType",
            "items": [
                {"name": "example", "receiver": "&self",
                 "params": [{"name": "a", "type": "String"}], "output": "MapValue<T, U>",
                 "async": True},
                {"name": "create", "params": [{"name": "n", "type": "u32"}], "output": "Self",
                 "body": "let value = Self::create_js(n);\nvalue",
                 "attrs": [{"path": "opts", "args": [{"key": "constructor"}]}]},
            ],
        },
    ],
}


def write_json(tmp_path, data, name="decls.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_source_from_dict():
    source = Source.from_dict(DECLS, "decls.json")
    struct, impl = source.decls
    assert isinstance(struct, StructDecl)
    assert struct.vis == "pub"
    assert struct.fields[0].type == parse_type("String")
    assert struct.fields[0].attrs[0].args[0].key == "getter"
    assert not struct.fields[0].attrs[0].args[0].has_value

    assert isinstance(impl, ImplDecl)
    example, create = impl.items
    assert isinstance(example, MethodDecl)
    assert example.sig.receiver() == Receiver(reference=True, mutable=False)
    assert example.sig.is_async
    assert [str(p) for p in example.sig.params()] == ["a: String"]
    assert example.body is None
    assert create.sig.receiver() is None
    assert create.body == ["let value = Self::create_js(n);", "value"]


def test_source_locations():
    data = {"decls": [{"kind": "struct", "name": "A", "loc": {"line": 4, "column": 2},
                       "fields": [{"type": "u8", "loc": {"line": 5, "column": 4}}]}]}
    source = Source.from_dict(data, "in.json")
    with pytest.raises(BindgenError) as exc:
        Model.from_decl(source.decls[0])
    assert str(exc.value) == "in.json:5:4: tuple structs are not allowed"


@pytest.mark.parametrize("receiver, expected", [
    ("&self", Receiver(True, False)),
    ("&mut self", Receiver(True, True)),
    ("&'a self", Receiver(True, False, Lifetime("'a"))),
    ("&'a mut self", Receiver(True, True, Lifetime("'a"))),
    ("self", Receiver(False, False)),
    ("mut self", Receiver(False, True)),
])
def test_receivers(receiver, expected):
    data = {"decls": [{"kind": "impl", "type": "A",
                       "items": [{"name": "m", "receiver": receiver}]}]}
    assert Source.from_dict(data).decls[0].items[0].sig.receiver() == expected


def test_invalid_receiver():
    data = {"decls": [{"kind": "impl", "type": "A", "items": [{"name": "m", "receiver": "this"}]}]}
    with pytest.raises(BindgenError, match="invalid receiver"):
        Source.from_dict(data)


def test_unknown_decl_kind():
    with pytest.raises(BindgenError, match="struct or impl block"):
        Source.from_dict({"decls": [{"kind": "enum", "name": "E"}]})


def test_model_rejects_other_nodes():
    with pytest.raises(BindgenError, match="struct or impl block"):
        Model.from_decl(OtherItem(kind="enum"))


def test_non_method_impl_items_are_kept_for_validation():
    data = {"decls": [{"kind": "impl", "type": "A", "items": [{"kind": "const", "text": "const X: u8 = 1;"}]}]}
    impl = Source.from_dict(data).decls[0]
    assert impl.items == [OtherItem(kind="const", text="const X: u8 = 1;", location=impl.items[0].location)]
    with pytest.raises(BindgenError, match="only methods are allowed"):
        Model.from_decl(impl)


def test_generate_source():
    code = Generator("unused").generate_source(Source.from_dict(DECLS))
    assert code.startswith(GENERATED_HEADER + "\n\n#[::wasm_bindgen::prelude::wasm_bindgen]\n")
    assert code.endswith("}\n")
    assert '#[wasm_bindgen(js_name = "Thing")]\n    pub type JsType;' in code
    assert "fn my_prop_1(this: &JsType) -> String;" in code
    assert "set_my_prop_1" not in code
    assert "async fn example(&self, a: String) -> U {" in code
    assert "self.example_js(a).await" in code
    assert "fn create_js(n: u32) -> JsType;" in code
    assert "        let value = Self::create_js(n);\n        value\n" in code


def test_generate_file(tmp_path, capsys):
    json_path = write_json(tmp_path, DECLS)
    out_dir = tmp_path / "gen"
    gen = Generator(str(out_dir))
    (output,) = gen.generate_all([json_path])

    assert output == str(out_dir / "decls.rs")
    text = (out_dir / "decls.rs").read_text()
    assert text == gen.generate_source(Source.load(json_path))

    out = capsys.readouterr().out
    assert "=== Generating wasm-bindgen externs:" in out
    assert f"  {json_path} => {output}" in out


def test_generator_relays_warnings(tmp_path, capsys):
    data = {"decls": [{"kind": "struct", "name": "A",
                       "attrs": [{"path": "opts", "args": [{"key": "getter"}, {"key": "setter"}]}]}]}
    Generator(str(tmp_path)).generate_source(Source.from_dict(data))
    assert ">> warning:" in capsys.readouterr().out


def test_dbg_emits_output_warning():
    data = {"decls": [{"kind": "impl", "type": "A",
                       "attrs": [{"path": "opts", "args": [{"key": "dbg"}]}],
                       "items": [{"name": "m", "receiver": "&self"}]}]}
    model = Model.from_decl(Source.from_dict(data).decls[0])
    with pytest.warns(DebugOutputWarning, match="fn m_js"):
        model.build()


def test_cli_writes_files(tmp_path, capsys):
    json_path = write_json(tmp_path, DECLS)
    out_dir = tmp_path / "out"
    assert gen_bindings.main([json_path, "--output", str(out_dir)]) == 0
    assert (out_dir / "decls.rs").exists()


def test_cli_stdout(tmp_path, capsys):
    json_path = write_json(tmp_path, DECLS)
    assert gen_bindings.main([json_path, "--stdout", "--output", str(tmp_path / "none")]) == 0
    assert "impl JsType {" in capsys.readouterr().out
    assert not (tmp_path / "none").exists()


def test_cli_reports_errors(tmp_path, capsys):
    data = {"decls": [{"kind": "struct", "name": "A",
                       "attrs": [{"path": "opts", "args": [{"key": "on", "value": "B"},
                                                             {"key": "extends", "value": "C"}]}]}]}
    json_path = write_json(tmp_path, data)
    assert gen_bindings.main([json_path, "--output", str(tmp_path / "out")]) == 1
    assert "error:" in capsys.readouterr().err
