"""AST transformer that annotates every node it visits."""

from __future__ import annotations

import ast
from typing import Any

from .annotate import current_source_form


class AnnotatingTransformer(ast.NodeTransformer):
    """
    NodeTransformer whose visits run under a source-form annotation.

    Each visit pushes one frame holding the visited node. Visits nest, so
    while a ``visit_*`` method runs the candidate forms are the visited node
    followed by its ancestors, nearest first. An error raised
    for a node without a position (an ast.Load, an ast.arguments) is then
    reported at the closest enclosing node that has one.

    Example:
        class NoExec(AnnotatingTransformer):
            def visit_Call(self, node):
                if isinstance(node.func, ast.Name) and node.func.id == "exec":
                    raise located_error("exec is not allowed", file=self.filename)
                return self.generic_visit(node)
    """

    def __init__(self, filename: str = "<unknown>"):
        self.filename = filename
        self._ancestors: list[ast.AST] = []

    @property
    def ancestors(self) -> tuple[ast.AST, ...]:
        """Enclosing nodes of the node being visited, nearest first."""
        return tuple(reversed(self._ancestors[:-1]))

    def visit(self, node: ast.AST) -> Any:
        with current_source_form(node):
            self._ancestors.append(node)
            try:
                return super().visit(node)
            finally:
                self._ancestors.pop()
