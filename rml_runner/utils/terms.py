"""Term rendering helpers shared by the line- and block-oriented writers."""

from __future__ import annotations

import re
from typing import Mapping, Optional, Tuple

from rdflib import BNode, Graph, Literal, URIRef
from rdflib.graph import DATASET_DEFAULT_GRAPH_ID
from rdflib.namespace import RDF, XSD

from ..errors import SerializationError

Statement = Tuple
Quad = Tuple[object, object, object, Optional[object]]

_BNODE_LABEL = re.compile(r"^[A-Za-z0-9_]([A-Za-z0-9_.-]*[A-Za-z0-9_-])?$")
_PREFIX_LABEL = re.compile(r"^([A-Za-z]([A-Za-z0-9_.-]*[A-Za-z0-9_-])?)?$")
_LOCAL_NAME = re.compile(r"^([A-Za-z0-9_]([A-Za-z0-9_.-]*[A-Za-z0-9_-])?)?$")


def split_statement(statement: Statement) -> Quad:
    """Return ``(s, p, o, g)`` for a triple or quad; ``g`` is None for the default graph."""

    if not isinstance(statement, (tuple, list)):
        raise SerializationError(f"Malformed statement: {statement!r}")
    if len(statement) == 3:
        subject, predicate, obj = statement
        graph = None
    elif len(statement) == 4:
        subject, predicate, obj, graph = statement
        graph = graph_name(graph)
    else:
        raise SerializationError(f"Malformed statement of length {len(statement)}: {statement!r}")
    if (
        not isinstance(subject, (URIRef, BNode))
        or not isinstance(predicate, URIRef)
        or not isinstance(obj, (URIRef, BNode, Literal))
        or not (graph is None or isinstance(graph, (URIRef, BNode)))
    ):
        raise SerializationError(f"Malformed statement: {statement!r}")
    return subject, predicate, obj, graph


def graph_name(graph) -> Optional[object]:
    if isinstance(graph, Graph):
        graph = graph.identifier
    if graph is None or graph == DATASET_DEFAULT_GRAPH_ID:
        return None
    return graph


def escape_string(value: str) -> str:
    out = []
    for ch in value:
        cp = ord(ch)
        if ch == "\\":
            out.append("\\\\")
        elif ch == '"':
            out.append('\\"')
        elif ch == "\t":
            out.append("\\t")
        elif ch == "\b":
            out.append("\\b")
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\r":
            out.append("\\r")
        elif ch == "\f":
            out.append("\\f")
        elif cp < 0x20 or cp == 0x7F:
            out.append(f"\\u{cp:04X}")
        else:
            out.append(ch)
    return "".join(out)


def encode_iri(value: str) -> str:
    out = ["<"]
    for ch in value:
        cp = ord(ch)
        if ch in '<>"{}|^`\\' or cp <= 0x20:
            out.append(f"\\u{cp:04X}" if cp <= 0xFFFF else f"\\U{cp:08X}")
        else:
            out.append(ch)
    out.append(">")
    return "".join(out)


def bnode_label(node: BNode) -> str:
    label = str(node)
    if not _BNODE_LABEL.match(label):
        label = "b" + label.encode("utf-8").hex()
    return f"_:{label}"


def render_nt(node) -> str:
    """Render an rdflib term in N-Triples syntax."""

    if isinstance(node, URIRef):
        return encode_iri(str(node))
    if isinstance(node, BNode):
        return bnode_label(node)
    if isinstance(node, Literal):
        base = f'"{escape_string(str(node))}"'
        if node.language:
            return f"{base}@{node.language}"
        if node.datatype is not None and node.datatype != XSD.string:
            return f"{base}^^{encode_iri(str(node.datatype))}"
        return base
    raise SerializationError(f"Cannot render term {node!r} of type {type(node).__name__}")


def is_valid_prefix(prefix: str) -> bool:
    return bool(_PREFIX_LABEL.match(prefix))


def compact_iri(iri: str, prefixes: Mapping[str, str]) -> Optional[str]:
    """Return ``prefix:local`` for ``iri`` using the longest matching namespace.

    ``prefixes`` maps namespace IRIs to prefix labels. None is returned when no
    namespace matches or the remainder is not a plain local name.
    """

    best = None
    for namespace, prefix in prefixes.items():
        if iri.startswith(namespace) and (best is None or len(namespace) > len(best[0])):
            best = (namespace, prefix)
    if best is None:
        return None
    local = iri[len(best[0]):]
    if not _LOCAL_NAME.match(local):
        return None
    return f"{best[1]}:{local}"


def render_turtle(node, prefixes: Mapping[str, str], predicate: bool = False) -> str:
    """Render a term in Turtle syntax, compacting IRIs against ``prefixes``."""

    if isinstance(node, URIRef):
        if predicate and node == RDF.type:
            return "a"
        return compact_iri(str(node), prefixes) or encode_iri(str(node))
    if isinstance(node, Literal) and not node.language and node.datatype not in (None, XSD.string):
        base = f'"{escape_string(str(node))}"'
        datatype = compact_iri(str(node.datatype), prefixes) or encode_iri(str(node.datatype))
        return f"{base}^^{datatype}"
    return render_nt(node)
