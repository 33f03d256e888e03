import io

import pytest
from rdflib import BNode, Literal, URIRef
from rdflib.namespace import RDF, XSD

from rml_runner.errors import SerializationError
from rml_runner.utils.terms import compact_iri, render_nt
from rml_runner.writers import NQuadsWriter, NTriplesWriter, TriGWriter, TurtleWriter

EX = "http://example.org/"


def ex(name):
    return URIRef(EX + name)


def _run(writer_cls, statements, namespaces=()):
    stream = io.BytesIO()
    writer = writer_cls(stream)
    writer.start_document()
    for prefix, name in namespaces:
        writer.handle_namespace(prefix, name)
    for statement in statements:
        writer.handle_statement(statement)
    writer.end_document()
    return stream.getvalue().decode("utf-8")


def test_render_nt_escapes_literals_and_iris():
    assert render_nt(Literal('say "hi"\nnow')) == '"say \\"hi\\"\\nnow"'
    assert render_nt(Literal("chat", lang="fr")) == '"chat"@fr'
    assert render_nt(Literal("1", datatype=XSD.integer)) == f'"1"^^<{XSD}integer>'
    assert render_nt(Literal("plain", datatype=XSD.string)) == '"plain"'
    assert render_nt(URIRef("http://example.org/a b")) == "<http://example.org/a\\u0020b>"
    assert render_nt(BNode("b0")) == "_:b0"


def test_compact_iri_uses_longest_namespace():
    prefixes = {EX: "ex", EX + "sub/": "sub"}
    assert compact_iri(EX + "sub/x", prefixes) == "sub:x"
    assert compact_iri(EX + "y", prefixes) == "ex:y"
    assert compact_iri(EX + "has space", prefixes) is None
    assert compact_iri("http://other.org/z", prefixes) is None


def test_ntriples_writer_drops_graph_names():
    out = _run(NTriplesWriter, [(ex("s"), ex("p"), ex("o"), ex("g"))])
    assert out == f"<{EX}s> <{EX}p> <{EX}o> .\n"


def test_nquads_writer_keeps_graph_names():
    out = _run(NQuadsWriter, [(ex("s"), ex("p"), ex("o"), ex("g")), (ex("s"), ex("p"), Literal("x"))])
    assert out.splitlines() == [
        f"<{EX}s> <{EX}p> <{EX}o> <{EX}g> .",
        f'<{EX}s> <{EX}p> "x" .',
    ]


def test_malformed_statement_is_rejected():
    with pytest.raises(SerializationError):
        _run(NTriplesWriter, [(Literal("s"), ex("p"), ex("o"))])
    with pytest.raises(SerializationError):
        _run(NTriplesWriter, [(ex("s"), ex("p"))])
    with pytest.raises(SerializationError):
        _run(NQuadsWriter, [(ex("s"), ex("p"), ex("o"), Literal("g"))])
    with pytest.raises(SerializationError):
        _run(TriGWriter, [(ex("s"), ex("p"), "o")])


def test_turtle_writer_groups_consecutive_subjects():
    out = _run(
        TurtleWriter,
        [
            (ex("a"), RDF.type, ex("Thing")),
            (ex("a"), ex("name"), Literal("A")),
            (ex("a"), ex("name"), Literal("Alpha")),
            (ex("b"), ex("name"), Literal("B")),
        ],
        namespaces=[("ex", EX)],
    )
    assert out == (
        f"@prefix ex: <{EX}> .\n"
        "\n"
        "ex:a a ex:Thing ;\n"
        '    ex:name "A" ,\n'
        '        "Alpha" .\n'
        'ex:b ex:name "B" .\n'
    )


def test_turtle_writer_skips_invalid_prefix():
    out = _run(TurtleWriter, [(ex("a"), ex("p"), ex("b"))], namespaces=[("1bad", EX)])
    assert "@prefix" not in out
    assert out == f"<{EX}a> <{EX}p> <{EX}b> .\n"


def test_trig_writer_opens_and_closes_graph_blocks():
    out = _run(
        TriGWriter,
        [
            (ex("a"), ex("p"), ex("b")),
            (ex("a"), ex("p"), ex("c"), ex("g1")),
            (ex("a"), ex("q"), ex("d"), ex("g1")),
            (ex("e"), ex("p"), ex("f"), ex("g2")),
        ],
        namespaces=[("ex", EX)],
    )
    assert out == (
        f"@prefix ex: <{EX}> .\n"
        "\n"
        "ex:a ex:p ex:b .\n"
        "ex:g1 {\n"
        "    ex:a ex:p ex:c ;\n"
        "        ex:q ex:d .\n"
        "}\n"
        "ex:g2 {\n"
        "    ex:e ex:p ex:f .\n"
        "}\n"
    )


def test_writers_count_statements():
    stream = io.BytesIO()
    writer = NQuadsWriter(stream)
    for _ in range(3):
        writer.handle_statement((ex("s"), ex("p"), ex("o")))
    assert writer.statement_count == 3
