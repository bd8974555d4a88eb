"""Test utilities for the astvisit test suite.

Helpers for building small ESTree trees by hand, in place of the external
parser the library normally receives trees from.
"""

from typing import Any, Optional

from astvisit.ast import Node, SourceLocation


def ident(name: str, line: Optional[int] = None, column: Optional[int] = None) -> Node:
    location = SourceLocation(line=line, column=column) if line is not None else None
    return Node("Identifier", source_location=location, name=name)


def lit(value: Any) -> Node:
    return Node("Literal", value=value)


def ternary(test: Node, consequent: Node, alternate: Node, line: Optional[int] = None) -> Node:
    location = SourceLocation(line=line, column=0) if line is not None else None
    return Node(
        "ConditionalExpression",
        source_location=location,
        test=test,
        consequent=consequent,
        alternate=alternate,
    )


def expr_stmt(expression: Node) -> Node:
    return Node("ExpressionStatement", expression=expression)


def var_decl(name: str, init: Optional[Node], kind: str = "var") -> Node:
    return Node(
        "VariableDeclaration",
        kind=kind,
        declarations=[Node("VariableDeclarator", id=ident(name), init=init)],
    )


def obj_prop(key: Node, value: Optional[Node] = None, shorthand: bool = False) -> Node:
    return Node("ObjectProperty", key=key, value=value, computed=False, shorthand=shorthand)


def obj_expr(*properties: Node) -> Node:
    return Node("ObjectExpression", properties=list(properties))


def program(*body: Node) -> Node:
    return Node("Program", sourceType="script", body=list(body))


def answer_program() -> Node:
    """``var answer = 6 * 7;``"""
    return program(
        var_decl("answer", Node("BinaryExpression", operator="*", left=lit(6), right=lit(7))),
    )


def nested_ternary_program() -> Node:
    """``condition ? truthyCondition ? a : b : falsyCondition;``"""
    inner = ternary(ident("truthyCondition"), ident("a"), ident("b"), line=1)
    outer = ternary(ident("condition"), inner, ident("falsyCondition"), line=1)
    return program(expr_stmt(outer))


def shorthand_program() -> Node:
    """``var coords = { x };``"""
    return program(var_decl("coords", obj_expr(obj_prop(ident("x"), shorthand=True))))


def recorder(log: list, label: Any = None):
    """Build a callback appending ``(label, node.type)`` or the node itself to ``log``."""

    def callback(path, context):
        log.append(path.node if label is None else (label, path.node.type))

    return callback
