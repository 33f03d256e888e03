from __future__ import annotations

import logging

import pytest
from rdflib import URIRef

from rml_runner import runner
from rml_runner.config import RunnerConfig
from rml_runner.errors import EngineError, MappingFormatError

A_TTL = """
@prefix ex: <http://example.org/> .
ex:a ex:p ex:b .
"""


class DummyEngine:
    def __init__(self):
        self.calls = []

    def __call__(self, mapping, config):
        self.calls.append((mapping, config))
        return iter([(s, p, o) for s, p, o, _ in mapping.statements()])


def test_run_passes_mapping_and_config_to_engine(tmp_path, monkeypatch):
    (tmp_path / "a.ttl").write_text(A_TTL)
    output = tmp_path / "out.nq"
    engine = DummyEngine()

    config = RunnerConfig(mapping_paths=[str(tmp_path / "a.ttl")], output_path=str(output), relative_source_location="src")
    count = runner.run(config, engine=engine)

    assert count == 1
    assert len(engine.calls) == 1
    mapping, mapper_config = engine.calls[0]
    assert len(mapping) == 1
    assert str(mapper_config.relative_source_location) == "src"
    assert mapper_config.functions == []


def test_run_validates_output_format_before_loading(tmp_path, monkeypatch):
    monkeypatch.setattr(runner, "load_mapping", lambda *a, **k: pytest.fail("mapping loaded"))

    with pytest.raises(MappingFormatError):
        runner.run(RunnerConfig(mapping_paths=["x.ttl"], output_format="yaml"), engine=DummyEngine())
    with pytest.raises(MappingFormatError, match="No writer"):
        runner.run(RunnerConfig(mapping_paths=["x.ttl"], output_format="rj"), engine=DummyEngine())
    with pytest.raises(MappingFormatError):
        runner.run(RunnerConfig(mapping_paths=["x.ttl"], mapping_format="csv"), engine=DummyEngine())


def test_run_resolves_engine_before_loading(monkeypatch):
    monkeypatch.setattr(runner, "load_mapping", lambda *a, **k: pytest.fail("mapping loaded"))

    with pytest.raises(EngineError):
        runner.run(RunnerConfig(mapping_paths=["x.ttl"]))


def test_run_loads_functions_only_with_archives(tmp_path, monkeypatch):
    (tmp_path / "a.ttl").write_text(A_TTL)
    calls = {}

    def fake_load_functions(class_names, archives):
        calls["args"] = (class_names, archives)
        return ["fn"]

    monkeypatch.setattr(runner, "load_functions", fake_load_functions)
    engine = DummyEngine()

    config = RunnerConfig(
        mapping_paths=[str(tmp_path / "a.ttl")],
        output_path=str(tmp_path / "out.nq"),
        functions=["mod:Fn"],
        function_archives=["fns.zip"],
    )
    runner.run(config, engine=engine)

    assert calls["args"] == (["mod:Fn"], ["fns.zip"])
    assert engine.calls[0][1].functions == ["fn"]


def test_run_logs_mapping_when_debugging(tmp_path, caplog):
    (tmp_path / "a.ttl").write_text(A_TTL)
    config = RunnerConfig(mapping_paths=[str(tmp_path)], output_path=str(tmp_path / "out.nq"), prefixes=["rdf"])

    with caplog.at_level(logging.DEBUG, logger="rml_runner"):
        runner.run(config, engine=DummyEngine())

    assert "The following mapping constructs were detected" in caplog.text
    assert "ex:a ex:p ex:b" in caplog.text


def test_run_defaults_to_nquads(tmp_path, caplog):
    (tmp_path / "a.ttl").write_text(A_TTL)
    output = tmp_path / "out.nq"

    with caplog.at_level(logging.INFO, logger="rml_runner"):
        runner.run(RunnerConfig(mapping_paths=[str(tmp_path / "a.ttl")], output_path=str(output)), engine=DummyEngine())

    assert "Defaulting to N-Quads format" in caplog.text
    assert output.read_text(encoding="utf-8").strip().endswith(".")
    assert str(URIRef("http://example.org/a")) in output.read_text(encoding="utf-8")
