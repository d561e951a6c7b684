"""
In-place CSF2 to CSF3 rewrite for modules with one default export.

Steps, each skipped when already satisfied:

1. import ``Meta`` and ``StoryObj`` from the Storybook renderer module;
2. hoist the default export into ``const meta = <expr> satisfies Meta``
   and export ``meta``;
3. annotate exported variables with ``StoryObj<typeof meta>`` and wrap
   function-shaped stories as ``{ render: <fn> }``.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..errors import MultipleDefaultExportsError
from ..source import syntax
from ..source.model import Edit, SourceUnit, Statement, StatementKind
from .partitioner import Partition, partition_unit

logger = logging.getLogger(__name__)

TYPE_IMPORTS = ("Meta", "StoryObj")

# Expressions a trailing `satisfies` clause applies to as a whole
SATISFIES_OPERAND_TYPES = frozenset(
    {
        "object",
        "identifier",
        "member_expression",
        "call_expression",
        "parenthesized_expression",
        "as_expression",
        "satisfies_expression",
    }
)


def _named_import_names(named_imports) -> List[str]:
    names = []
    for specifier in named_imports.named_children:
        if specifier.type != "import_specifier":
            continue
        name = specifier.child_by_field_name("name")
        if name is not None:
            names.append(syntax.node_text(name))
    return names


def accepts_named_imports(statement: Statement) -> bool:
    """False for namespace imports and ``import x = require(...)``."""
    node = statement.node
    if syntax.first_child_of_type(node, "import_require_clause") is not None:
        return False
    clause = syntax.first_child_of_type(node, "import_clause")
    if clause is None:
        return node.child_by_field_name("source") is not None
    if syntax.first_child_of_type(clause, "namespace_import") is not None:
        return False
    return (
        syntax.first_child_of_type(clause, "named_imports", "identifier") is not None
    )


def extend_import(statement: Statement, names: Sequence[str]) -> Optional[str]:
    """
    Text of ``statement`` with ``names`` added to its named imports.

    Returns None when every name is already imported. The statement must
    satisfy ``accepts_named_imports``.
    """
    node = statement.node
    clause = syntax.first_child_of_type(node, "import_clause")

    if clause is None:
        # side-effect import: import "module";
        source = node.child_by_field_name("source")
        insertion = f"{{ {', '.join(names)} }} from "
        return statement.apply_edits([(source.start_byte, source.start_byte, insertion)])

    named = syntax.first_child_of_type(clause, "named_imports")
    if named is None:
        default = syntax.first_child_of_type(clause, "identifier")
        insertion = f", {{ {', '.join(names)} }}"
        return statement.apply_edits([(default.end_byte, default.end_byte, insertion)])

    existing = _named_import_names(named)
    missing = [n for n in names if n not in existing]
    if not missing:
        return None
    specifiers = [c for c in named.named_children if c.type == "import_specifier"]
    if specifiers:
        anchor = specifiers[-1].end_byte
        return statement.apply_edits([(anchor, anchor, "".join(f", {n}" for n in missing))])
    return statement.apply_edits(
        [(named.start_byte, named.end_byte, f"{{ {', '.join(missing)} }}")]
    )


class SingleExportRewriter:
    """
    Rewrite a single-default-export story module in place.

    Args:
        storybook_module: Module specifier ``Meta`` and ``StoryObj`` come from.
        meta_identifier: Name of the hoisted meta constant.
    """

    def __init__(self, storybook_module: str = "@storybook/react", meta_identifier: str = "meta"):
        self.storybook_module = storybook_module
        self.meta_identifier = meta_identifier

    def rewrite(self, unit: SourceUnit, partition: Optional[Partition] = None) -> bool:
        """
        Rewrite ``unit``; returns True if any statement changed.

        Raises:
            MultipleDefaultExportsError: More than one default export; nothing is touched.
            StructuralError: No default export.
        """
        partition = partition or partition_unit(unit)
        if partition.default_export_count > 1:
            raise MultipleDefaultExportsError(partition.default_export_count, str(unit.path))
        partition.require_default_exports(str(unit.path))

        changed = self.ensure_imports(unit)
        changed = self.normalize_default_export(unit) or changed
        changed = self.annotate_exports(unit) or changed
        return changed

    def ensure_imports(self, unit: SourceUnit) -> bool:
        for index, statement in enumerate(unit.statements):
            if statement.kind is not StatementKind.IMPORT:
                continue
            if syntax.import_module_specifier(statement.node) != self.storybook_module:
                continue
            if not accepts_named_imports(statement):
                continue
            text = extend_import(statement, TYPE_IMPORTS)
            if text is None:
                logger.debug("%s: %s imports already present", unit.path, "/".join(TYPE_IMPORTS))
                return False
            unit.replace(index, text)
            logger.debug("%s: extended import from %s", unit.path, self.storybook_module)
            return True

        # directives such as "use client" must stay first
        position = 0
        while position < len(unit) and syntax.is_directive(unit[position].node):
            position += 1
        unit.insert(position, f'import {{ {", ".join(TYPE_IMPORTS)} }} from "{self.storybook_module}";')
        logger.debug("%s: added import from %s", unit.path, self.storybook_module)
        return True

    def normalize_default_export(self, unit: SourceUnit) -> bool:
        index = unit.find(StatementKind.DEFAULT_EXPORT_ASSIGNMENT)
        statement = unit[index]
        expression = syntax.default_export_value(statement.node)
        if expression.type == "identifier" and syntax.node_text(expression) == self.meta_identifier:
            return False

        value = syntax.node_text(expression)
        if expression.type not in SATISFIES_OPERAND_TYPES:
            value = f"({value})"
        unit.insert(index, f"const {self.meta_identifier} = {value} satisfies Meta;")
        statement = unit[index + 1]
        expression = syntax.default_export_value(statement.node)
        unit.replace(
            index + 1,
            statement.apply_edits([(expression.start_byte, expression.end_byte, self.meta_identifier)]),
        )
        logger.debug("%s: default export hoisted into %s", unit.path, self.meta_identifier)
        return True

    def annotate_exports(self, unit: SourceUnit) -> bool:
        changed = False
        annotation = f": StoryObj<typeof {self.meta_identifier}>"
        for index, statement in enumerate(unit.statements):
            if statement.kind is not StatementKind.EXPORTED_DECLARATION:
                continue
            declaration = syntax.exported_declaration(statement.node)
            edits: List[Edit] = []
            for declarator in syntax.variable_declarators(declaration):
                name = declarator.child_by_field_name("name")
                if syntax.declarator_type_annotation(declarator) is None and name is not None:
                    edits.append((name.end_byte, name.end_byte, annotation))
                value = declarator.child_by_field_name("value")
                if value is not None and value.type in syntax.FUNCTION_EXPRESSION_TYPES:
                    edits.append(
                        (value.start_byte, value.end_byte, f"{{ render: {syntax.node_text(value)} }}")
                    )
            if edits:
                unit.replace(index, statement.apply_edits(edits))
                changed = True
        return changed
