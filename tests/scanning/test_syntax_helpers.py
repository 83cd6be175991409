"""Tests for tree-sitter node helpers."""

from codeplug.scanning import TreeSitterParser, grammar_for
from codeplug.scanning.syntax import (
    collect_exports,
    decorator_names,
    primary_export,
    returns_jsx,
    top_level_symbols,
    walk,
)

from conftest import parse_source


class TestGrammar:
    def test_by_extension(self):
        assert grammar_for("a.ts") == "typescript"
        assert grammar_for("a.tsx") == "tsx"
        assert grammar_for("a.JSX") == "tsx"
        assert grammar_for("a.py") is None

    def test_error_tolerant(self):
        tree = TreeSitterParser().parse(b"export function (", "a.ts")
        assert tree is not None
        assert tree.root_node.has_error


class TestExports:
    def test_default_export_is_primary(self):
        f = parse_source(
            "src/Card.tsx",
            "export const helper = 1;\nexport default function Card() { return <div />; }\n",
        )
        primary = primary_export(f)
        assert (primary.name, primary.kind, primary.is_default) == ("Card", "component", True)

    def test_class_over_const(self):
        f = parse_source("src/a.ts", "export const VERSION = '1';\nexport class Store {}\n")
        assert primary_export(f).name == "Store"

    def test_no_exports(self):
        assert primary_export(parse_source("src/a.ts", "const a = 1;")) is None

    def test_collects_each_kind(self):
        code = "export interface User {}\nexport type Id = string;\nexport enum Role { A }\n"
        kinds = {e.name: e.kind for e in collect_exports(parse_source("src/a.ts", code))}
        assert kinds == {"User": "interface", "Id": "type", "Role": "enum"}


class TestSymbols:
    def test_exports_then_locals(self):
        code = "function local() {}\nexport function shared() {}\nconst value = 1;\n"
        assert top_level_symbols(parse_source("src/a.ts", code)) == ["shared", "local", "value"]


def test_returns_jsx():
    f = parse_source("src/A.tsx", "function A() { return <div />; }\nfunction b() { return 1; }\n")
    fns = [n for n in walk(f.root) if n.type == "function_declaration"]
    assert [returns_jsx(fn) for fn in fns] == [True, False]


def test_decorator_names():
    f = parse_source("src/e.ts", "@Entity()\n@Index('x')\nclass User {}\n")
    [cls] = [n for n in walk(f.root) if n.type == "class_declaration"]
    assert decorator_names(cls, f.source_bytes) == ["Entity", "Index"]
