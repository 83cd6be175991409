"""Traversal helpers over tree-sitter TypeScript/TSX trees.

Everything here is a pure function of a node (and the file's source bytes);
visitors compose these instead of talking to tree-sitter directly.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Optional

from ..models import ParsedFile

FUNCTION_TYPES = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "function_expression",
        "function",
        "generator_function",
        "arrow_function",
        "method_definition",
    }
)
CLASS_TYPES = frozenset({"class_declaration", "abstract_class_declaration", "class"})
JSX_TYPES = frozenset({"jsx_element", "jsx_self_closing_element", "jsx_fragment"})
REACT_COMPONENT_BASES = frozenset({"Component", "PureComponent"})


@dataclass(frozen=True)
class ExportInfo:
    """A symbol exported from a module."""

    name: Optional[str]
    kind: str  # component | class | function | const | interface | type | enum | value
    is_default: bool = False


def walk(node: Any) -> Iterator[Any]:
    """Pre-order traversal with an explicit stack."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def text(node: Any, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def has_token(node: Any, token: str) -> bool:
    """True if ``node`` has a direct child of type ``token`` (e.g. ``async``)."""
    return any(child.type == token for child in node.children)


def unwrap(node: Any) -> Any:
    while node is not None and node.type == "parenthesized_expression":
        inner = node.named_children
        if not inner:
            break
        node = inner[0]
    return node


def returns_jsx(fn_node: Any) -> bool:
    """True if the function body returns JSX at its top level."""
    body = fn_node.child_by_field_name("body")
    if body is None:
        return False
    if body.type != "statement_block":
        inner = unwrap(body)
        return inner is not None and inner.type in JSX_TYPES
    for stmt in body.named_children:
        if stmt.type != "return_statement":
            continue
        for value in stmt.named_children:
            inner = unwrap(value)
            if inner is not None and inner.type in JSX_TYPES:
                return True
    return False


def is_react_class(class_node: Any, source: bytes) -> bool:
    """True if the class extends ``Component``/``PureComponent`` (optionally ``React.``)."""
    for child in class_node.children:
        if child.type != "class_heritage":
            continue
        for clause in child.named_children:
            if clause.type != "extends_clause":
                continue
            for value in clause.children_by_field_name("value"):
                if value.type == "identifier" and text(value, source) in REACT_COMPONENT_BASES:
                    return True
                if value.type == "member_expression":
                    prop = value.child_by_field_name("property")
                    if prop is not None and text(prop, source) in REACT_COMPONENT_BASES:
                        return True
    return False


def decorator_names(node: Any, source: bytes) -> list[str]:
    """Names of decorators attached directly to ``node`` (``@Entity()`` -> ``Entity``)."""
    names = []
    for child in node.children:
        if child.type != "decorator":
            continue
        for expr in child.named_children:
            if expr.type == "call_expression":
                expr = expr.child_by_field_name("function")
            if expr is None:
                continue
            if expr.type == "member_expression":
                expr = expr.child_by_field_name("property")
            if expr is not None:
                names.append(text(expr, source))
    return names


def import_source(import_node: Any, source: bytes) -> str:
    src = import_node.child_by_field_name("source")
    if src is None:
        return ""
    return text(src, source).strip("'\"`")


def _value_kind(value: Optional[Any]) -> str:
    if value is None:
        return "const"
    value = unwrap(value)
    if value.type in FUNCTION_TYPES:
        return "component" if returns_jsx(value) else "function"
    if value.type in CLASS_TYPES:
        return "class"
    return "const"


def _declaration_exports(decl: Any, source: bytes, is_default: bool) -> list[ExportInfo]:
    name_node = decl.child_by_field_name("name")
    name = text(name_node, source) if name_node is not None else None
    kind_by_type = {
        "interface_declaration": "interface",
        "type_alias_declaration": "type",
        "enum_declaration": "enum",
    }

    if decl.type in ("function_declaration", "generator_function_declaration"):
        return [ExportInfo(name, "component" if returns_jsx(decl) else "function", is_default)]
    if decl.type in CLASS_TYPES:
        return [ExportInfo(name, "component" if is_react_class(decl, source) else "class", is_default)]
    if decl.type in kind_by_type:
        return [ExportInfo(name, kind_by_type[decl.type], is_default)]
    if decl.type in ("lexical_declaration", "variable_declaration"):
        exports = []
        for declarator in decl.named_children:
            if declarator.type != "variable_declarator":
                continue
            id_node = declarator.child_by_field_name("name")
            if id_node is None or id_node.type != "identifier":
                continue
            value = declarator.child_by_field_name("value")
            exports.append(ExportInfo(text(id_node, source), _value_kind(value), is_default))
        return exports
    if decl.type in FUNCTION_TYPES:
        return [ExportInfo(name, _value_kind(decl), is_default)]
    return []


def top_level_declarations(file: ParsedFile) -> dict[str, str]:
    """Map of top-level declared name -> kind, exported or not."""
    source = file.source_bytes
    declared: dict[str, str] = {}
    for stmt in file.root.named_children:
        node = stmt
        if stmt.type == "export_statement":
            node = stmt.child_by_field_name("declaration")
            if node is None:
                continue
        for info in _declaration_exports(node, source, is_default=False):
            if info.name and info.name not in declared:
                declared[info.name] = info.kind
    return declared


def collect_exports(file: ParsedFile) -> list[ExportInfo]:
    """All exports of a module, in source order."""
    source = file.source_bytes
    declared = top_level_declarations(file)
    exports: list[ExportInfo] = []

    for stmt in file.root.named_children:
        if stmt.type != "export_statement":
            continue
        is_default = has_token(stmt, "default")

        decl = stmt.child_by_field_name("declaration")
        if decl is not None:
            exports.extend(_declaration_exports(decl, source, is_default))
            continue

        value = stmt.child_by_field_name("value")
        if value is not None:
            value = unwrap(value)
            if value.type == "identifier":
                name = text(value, source)
                exports.append(ExportInfo(name, declared.get(name, "value"), is_default))
            else:
                exports.extend(_declaration_exports(value, source, is_default))
            continue

        for clause in stmt.named_children:
            if clause.type != "export_clause":
                continue
            for spec in clause.named_children:
                if spec.type != "export_specifier":
                    continue
                local = spec.child_by_field_name("name")
                alias = spec.child_by_field_name("alias")
                if local is None:
                    continue
                local_name = text(local, source)
                exported = text(alias, source) if alias is not None else local_name
                exports.append(
                    ExportInfo(
                        exported,
                        declared.get(local_name, "value"),
                        is_default=exported == "default",
                    )
                )
    return exports


def primary_export(file: ParsedFile) -> Optional[ExportInfo]:
    """The export that best represents the module.

    The default export wins; otherwise the first exported component, class
    or function; otherwise the first export of any kind.
    """
    exports = [e for e in collect_exports(file) if e.name and e.name != "default"]
    if not exports:
        return None
    for e in exports:
        if e.is_default:
            return e
    for e in exports:
        if e.kind in ("component", "class", "function"):
            return e
    return exports[0]


def top_level_symbols(file: ParsedFile) -> list[str]:
    """Exported names followed by non-exported top-level functions and variables."""
    source = file.source_bytes
    names: list[str] = [e.name for e in collect_exports(file) if e.name and e.name != "default"]
    for stmt in file.root.named_children:
        if stmt.type in ("function_declaration", "generator_function_declaration"):
            name_node = stmt.child_by_field_name("name")
            if name_node is not None:
                names.append(text(name_node, source))
        elif stmt.type in ("lexical_declaration", "variable_declaration"):
            declarators = [c for c in stmt.named_children if c.type == "variable_declarator"]
            if declarators:
                id_node = declarators[0].child_by_field_name("name")
                if id_node is not None and id_node.type == "identifier":
                    names.append(text(id_node, source))
    return list(dict.fromkeys(names))
