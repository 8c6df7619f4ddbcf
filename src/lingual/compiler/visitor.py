"""
AST Traversal
=============

Generic traversal shared by the macro expander, the middleware passes and
the debug printer. Every pass subclasses one of two classes here instead of
re-deriving a switch over node kinds.

ASTVisitor
----------
Read-only traversal. visit() dispatches to visit_<ClassName> when the
subclass defines it, otherwise to generic_visit(), which visits every
child in field order.

ASTTransformer
--------------
Rebuilding traversal in the manner of ast.NodeTransformer. A visit method
returns the node to put in place of the one visited:

- the same node (or an equal new node) to keep it
- a different node to replace it
- None to remove it (an optional field becomes None)
- a list of nodes to splice several statements into a tuple field

generic_visit() transforms the children and, only when one of them
changed, builds a new node with dataclasses.replace(). Untouched subtrees
are shared, never copied, which is safe because nodes are immutable.
"""

from collections import deque
from dataclasses import replace
from typing import Any, Iterator

from lingual.compiler.ast import Node


def iter_child_nodes(node: Node) -> Iterator[Node]:
    """Yield the direct children of node in field order."""
    return node.children()


def walk(node: Node) -> Iterator[Node]:
    """Yield node and all its descendants, breadth first."""
    todo = deque([node])
    while todo:
        current = todo.popleft()
        todo.extend(iter_child_nodes(current))
        yield current


class ASTVisitor:
    """
    Base class for read-only AST visitors.

    Usage:
        class CallCounter(ASTVisitor):
            def __init__(self):
                self.calls = 0

            def visit_CallExpression(self, node):
                self.calls += 1
                self.generic_visit(node)
    """

    def visit(self, node: Node) -> Any:
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: Node) -> None:
        for child in iter_child_nodes(node):
            self.visit(child)


class ASTTransformer(ASTVisitor):
    """
    Base class for passes that rewrite the tree.

    Usage:
        class Negate(ASTTransformer):
            def visit_Literal(self, node):
                if isinstance(node.value, bool):
                    return replace(node, value=not node.value)
                return node

        program = Negate().visit(program)
    """

    def generic_visit(self, node: Node) -> Node:
        changes = {}
        for name, value in node.iter_fields():
            if isinstance(value, Node):
                new_value = self.visit_child(name, value)
                if isinstance(new_value, list):
                    new_value = self._collapse(value, new_value)
                if new_value is not value:
                    changes[name] = new_value
            elif isinstance(value, tuple) and any(isinstance(v, Node) for v in value):
                new_items = self._transform_sequence(name, value)
                if new_items is not None:
                    changes[name] = new_items

        if not changes:
            return node
        return replace(node, **changes)

    def visit_child(self, field_name: str, node: Node) -> Any:
        """
        Visit one child found in field_name of its parent.

        Passes that care which slot a node sits in (a statement list versus
        an expression operand) override this.
        """
        return self.visit(node)

    def _transform_sequence(self, field_name: str, items: tuple) -> tuple | None:
        """Transform a tuple field; None means nothing changed."""
        result = []
        changed = False
        for item in items:
            if not isinstance(item, Node):
                result.append(item)
                continue
            new_item = self.visit_child(field_name, item)
            if new_item is None:
                changed = True
            elif isinstance(new_item, list):
                changed = True
                result.extend(new_item)
            else:
                changed = changed or new_item is not item
                result.append(new_item)
        return tuple(result) if changed else None

    def _collapse(self, original: Node, nodes: list[Node]) -> Node | None:
        """
        Fit a spliced list into a single-node slot.

        Subclasses that can splice into single-statement positions (such as
        an if branch) override this to wrap the list in a block.
        """
        if not nodes:
            return None
        if len(nodes) == 1:
            return nodes[0]
        raise TypeError(
            f"cannot place {len(nodes)} nodes in the slot of {original.__class__.__name__}"
        )
