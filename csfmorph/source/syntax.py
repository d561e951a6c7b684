"""
Helpers over tree-sitter TypeScript nodes.

Node type names follow the tree-sitter-typescript grammar. Function
expressions are named ``function_expression`` in current grammar releases
and ``function`` in older ones; both are accepted.
"""

import re
from typing import Any, List, Optional

FUNCTION_EXPRESSION_TYPES = frozenset(
    {"arrow_function", "function_expression", "function", "generator_function"}
)

# Anonymous ``export default function () {}`` / ``export default class {}``
# are declarations, not default-export assignments.
DEFAULT_DECLARATION_VALUE_TYPES = frozenset(
    {"function_expression", "function", "generator_function", "class"}
)

VARIABLE_DECLARATION_TYPES = frozenset({"lexical_declaration", "variable_declaration"})

DECLARATION_TYPES = VARIABLE_DECLARATION_TYPES | frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "class_declaration",
        "abstract_class_declaration",
        "interface_declaration",
        "type_alias_declaration",
        "enum_declaration",
        "ambient_declaration",
        "module",
        "internal_module",
    }
)

TRIVIA_TYPES = frozenset({"comment", "hash_bang_line"})

# Wrappers that only add compile-time information around a value
TYPE_WRAPPER_TYPES = frozenset(
    {"parenthesized_expression", "as_expression", "satisfies_expression"}
)

_ESCAPE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|.)", re.DOTALL)

_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}


def node_text(node: Any) -> str:
    return node.text.decode("utf-8")


def has_token(node: Any, token: str) -> bool:
    """True if ``node`` has a direct anonymous child ``token``."""
    return any(child.type == token for child in node.children)


def first_child_of_type(node: Any, *types: str) -> Optional[Any]:
    for child in node.children:
        if child.type in types:
            return child
    return None


def default_export_value(node: Any) -> Optional[Any]:
    """Expression of an ``export default <expr>`` statement, else None."""
    if node.type != "export_statement" or not has_token(node, "default"):
        return None
    if node.child_by_field_name("declaration") is not None:
        return None
    value = node.child_by_field_name("value")
    if value is None or value.type in DEFAULT_DECLARATION_VALUE_TYPES:
        return None
    return value


def exported_declaration(node: Any) -> Optional[Any]:
    """Declaration wrapped by an ``export`` statement, if any."""
    if node.type != "export_statement":
        return None
    declaration = node.child_by_field_name("declaration")
    if declaration is not None:
        return declaration
    value = node.child_by_field_name("value")
    if value is not None and has_token(node, "default") and value.type in DEFAULT_DECLARATION_VALUE_TYPES:
        return value
    return None


def variable_declarators(declaration: Any) -> List[Any]:
    if declaration is None or declaration.type not in VARIABLE_DECLARATION_TYPES:
        return []
    return [c for c in declaration.named_children if c.type == "variable_declarator"]


def declarator_type_annotation(declarator: Any) -> Optional[Any]:
    annotation = declarator.child_by_field_name("type")
    if annotation is not None:
        return annotation
    return first_child_of_type(declarator, "type_annotation")


def unwrap_type_wrappers(node: Any) -> Any:
    """Look through parentheses and ``as`` / ``satisfies`` assertions."""
    while node is not None and node.type in TYPE_WRAPPER_TYPES:
        inner = [c for c in node.named_children if c.type != "comment"]
        if not inner:
            break
        node = inner[0]
    return node


def property_key_name(key: Any) -> Optional[str]:
    if key is None:
        return None
    if key.type in {"property_identifier", "number"}:
        return node_text(key)
    if key.type == "string":
        return node_text(key)[1:-1]
    return None


def find_object_property(obj: Any, name: str) -> Optional[Any]:
    """
    Find the member of an object literal whose key is ``name``.

    Returns the member node (``pair``, ``shorthand_property_identifier``,
    ``method_definition`` ...) so callers can tell plain key-value
    properties apart from the other forms.
    """
    for member in obj.named_children:
        if member.type == "pair":
            if property_key_name(member.child_by_field_name("key")) == name:
                return member
        elif member.type == "shorthand_property_identifier":
            if node_text(member) == name:
                return member
        elif member.type == "method_definition":
            if property_key_name(member.child_by_field_name("name")) == name:
                return member
    return None


def _unescape(match: "re.Match") -> str:
    escape = match.group(1)
    if escape in ("\n", "\r\n", "\r", "\u2028", "\u2029"):
        return ""
    if escape[0] in "ux" and len(escape) > 1:
        return chr(int(escape[1:].strip("{}"), 16))
    return _SIMPLE_ESCAPES.get(escape, escape)


def decode_string_escapes(text: str) -> str:
    """Resolve JavaScript escape sequences in the body of a string literal."""
    return _ESCAPE.sub(_unescape, text)


def literal_text(node: Any) -> str:
    """
    Literal source text of an initializer.

    String literals and substitution-free template literals lose their
    quotes and have their escape sequences resolved; anything else is
    returned as written.
    """
    text = node_text(node)
    if node.type == "string":
        return decode_string_escapes(text[1:-1])
    if node.type == "template_string" and first_child_of_type(node, "template_substitution") is None:
        return decode_string_escapes(text[1:-1])
    return text


def is_directive(node: Any) -> bool:
    """True for a prologue directive such as ``"use client";``."""
    if node is None or node.type != "expression_statement":
        return False
    named = [c for c in node.named_children if c.type not in TRIVIA_TYPES]
    return len(named) == 1 and named[0].type == "string"


def import_module_specifier(node: Any) -> Optional[str]:
    source = node.child_by_field_name("source")
    if source is None:
        source = first_child_of_type(node, "string")
    if source is None:
        return None
    return node_text(source)[1:-1]
