import sys
import zipfile

import pytest
from rdflib import URIRef

from rml_runner.engine import MapperConfig, generate_statements, load_engine
from rml_runner.errors import EngineError, FunctionLoadError
from rml_runner.functions import load_functions
from rml_runner.loader import MappingGraph

ENGINE_MODULE = '''
from rdflib import URIRef

def engine(mapping, config):
    for s, p, o, g in mapping.statements():
        yield (s, p, o)

class Wrapper:
    run = staticmethod(engine)

not_callable = 42
'''


def test_load_engine_from_module_reference(tmp_path, monkeypatch):
    (tmp_path / "fake_engine_mod.py").write_text(ENGINE_MODULE)
    monkeypatch.syspath_prepend(str(tmp_path))

    engine = load_engine("fake_engine_mod:engine")
    nested = load_engine("fake_engine_mod:Wrapper.run")

    mapping = MappingGraph()
    mapping.add((URIRef("http://example.org/s"), URIRef("http://example.org/p"), URIRef("http://example.org/o"), None))
    assert len(list(generate_statements(engine, mapping))) == 1
    assert len(list(generate_statements(nested, mapping, MapperConfig()))) == 1


def test_load_engine_errors(tmp_path, monkeypatch):
    (tmp_path / "fake_engine_errors.py").write_text(ENGINE_MODULE)
    monkeypatch.syspath_prepend(str(tmp_path))

    with pytest.raises(EngineError, match="no attribute"):
        load_engine("fake_engine_errors:missing")
    with pytest.raises(EngineError, match="not callable"):
        load_engine("fake_engine_errors:not_callable")
    with pytest.raises(EngineError, match="Could not import"):
        load_engine("no_such_module_for_engine:engine")
    with pytest.raises(EngineError, match="Unknown mapping engine"):
        load_engine("unregistered-engine")


def test_generate_statements_requires_iterable():
    with pytest.raises(EngineError, match="expected an iterable"):
        generate_statements(lambda mapping, config: 3, MappingGraph())


def test_generate_statements_is_lazy():
    calls = []

    def engine(mapping, config):
        calls.append("started")
        yield (URIRef("http://example.org/s"), URIRef("http://example.org/p"), URIRef("http://example.org/o"))

    statements = generate_statements(engine, MappingGraph())

    assert calls == []
    assert len(list(statements)) == 1
    assert calls == ["started"]


FUNCTION_MODULE = '''
class Upper:
    def apply(self, value):
        return value.upper()
'''


def test_load_functions_from_zip_archive(tmp_path):
    archive = tmp_path / "functions.zip"
    with zipfile.ZipFile(archive, "w") as zf:
        zf.writestr("zip_fn_mod.py", FUNCTION_MODULE)

    functions = load_functions(["zip_fn_mod:Upper", "zip_fn_mod.Upper"], [archive])

    assert len(functions) == 2
    assert functions[0].apply("abc") == "ABC"
    assert str(archive) not in sys.path


def test_load_functions_from_directory(tmp_path):
    (tmp_path / "dir_fn_mod.py").write_text(FUNCTION_MODULE)

    functions = load_functions(["dir_fn_mod:Upper"], [tmp_path])

    assert functions[0].apply("x") == "X"


def test_load_functions_missing_archive(tmp_path):
    with pytest.raises(FunctionLoadError, match="missing.zip"):
        load_functions(["mod:Cls"], [tmp_path / "missing.zip"])


def test_load_functions_unknown_class(tmp_path):
    (tmp_path / "dir_fn_mod_unknown.py").write_text(FUNCTION_MODULE)

    with pytest.raises(FunctionLoadError, match="Lower"):
        load_functions(["dir_fn_mod_unknown:Lower"], [tmp_path])
    with pytest.raises(FunctionLoadError, match="module:Class"):
        load_functions(["Lower"], [tmp_path])
