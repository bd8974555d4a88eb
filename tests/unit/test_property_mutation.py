#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for property mutation code-mods."""

import pytest
from utils import expr_stmt, ident, lit, obj_expr, obj_prop, program, ternary, var_decl

from astvisit import (
    CallbackFailure,
    ExpandShorthandPropertiesRule,
    Node,
    PropertyMutationRule,
    ValidationError,
    merge,
    traverse,
    traverse_with_result,
)
from astvisit.rules import NoNestedTernaryRule, expand_shorthand_properties, synthesize_value_from_key


def _first_property(tree):
    return tree.body[0].declarations[0].init.properties[0]


@pytest.mark.unit
class TestExpandShorthandProperties:
    """Test expanding ``{ x }`` into ``{ x: x }``."""

    def test_expands_shorthand(self, shorthand_tree) -> None:
        findings = traverse(shorthand_tree, expand_shorthand_properties())

        prop = _first_property(shorthand_tree)
        assert findings == []
        assert prop.shorthand is False
        assert prop.value == prop.key
        assert prop.value is not prop.key
        assert prop.value.name == "x"

    def test_explicit_property_untouched(self) -> None:
        value = ident("y")
        tree = program(var_decl("coords", obj_expr(obj_prop(ident("x"), value))))
        rule = ExpandShorthandPropertiesRule()

        traverse(tree, rule.build())

        prop = _first_property(tree)
        assert prop.shorthand is False
        assert prop.value is value
        assert rule.applied == 0

    def test_existing_value_kept(self) -> None:
        value = ident("x")
        tree = program(var_decl("coords", obj_expr(obj_prop(ident("x"), value, shorthand=True))))

        traverse(tree, expand_shorthand_properties())

        prop = _first_property(tree)
        assert prop.shorthand is False
        assert prop.value is value

    def test_estree_property_type(self) -> None:
        prop = Node("Property", key=ident("x"), value=ident("x"), kind="init", shorthand=True, computed=False)
        tree = program(var_decl("coords", Node("ObjectExpression", properties=[prop])))

        traverse(tree, expand_shorthand_properties())

        assert prop.shorthand is False

    def test_counts_rewrites(self) -> None:
        tree = program(
            var_decl(
                "coords",
                obj_expr(obj_prop(ident("x"), shorthand=True), obj_prop(ident("y"), shorthand=True)),
            )
        )
        rule = ExpandShorthandPropertiesRule()

        traverse(tree, rule.build())

        assert rule.applied == 2

    def test_expanded_property_not_revisited(self, shorthand_tree) -> None:
        result = traverse_with_result(shorthand_tree, expand_shorthand_properties())

        # Program, declaration, declarator, id, object, property, key, synthesized value
        assert result.visited == 8

    def test_runs_alongside_analysis_rules(self) -> None:
        tree = program(
            var_decl("coords", obj_expr(obj_prop(ident("x"), shorthand=True))),
            expr_stmt(ternary(ident("a"), ternary(ident("b"), ident("c"), ident("d")), ident("e"))),
        )

        findings = traverse(tree, merge(expand_shorthand_properties(), NoNestedTernaryRule().build()))

        assert len(findings) == 1
        assert _first_property(tree).shorthand is False


@pytest.mark.unit
class TestPropertyMutationRule:
    """Test the generic property mutation rule."""

    def test_mutates_matching_nodes(self) -> None:
        declaration = var_decl("x", lit(1), kind="var")
        rule = PropertyMutationRule("VariableDeclaration", "kind", mutate=lambda _: "let")

        traverse(program(declaration), rule.build())

        assert declaration.kind == "let"
        assert rule.applied == 1

    def test_predicate_filters_nodes(self) -> None:
        first = var_decl("x", lit(1), kind="var")
        second = var_decl("y", lit(2), kind="const")
        rule = PropertyMutationRule(
            "VariableDeclaration",
            "kind",
            mutate=lambda _: "let",
            when=lambda kind: kind == "var",
        )

        traverse(program(first, second), rule.build())

        assert (first.kind, second.kind) == ("let", "const")

    def test_mutation_receives_old_value(self) -> None:
        literal = lit(20)
        rule = PropertyMutationRule("Literal", "value", mutate=lambda value: value + 1)

        traverse(program(expr_stmt(literal)), rule.build())

        assert literal.value == 21

    def test_node_without_property_skipped(self) -> None:
        rule = PropertyMutationRule("Identifier", "optional", mutate=lambda _: True)
        node = ident("x")

        traverse(program(expr_stmt(node)), rule.build())

        assert not node.has("optional")
        assert rule.applied == 0

    def test_synthesized_children_are_walked(self) -> None:
        visited = []
        rule = PropertyMutationRule(
            "ObjectProperty",
            "shorthand",
            mutate=lambda _: False,
            synthesize=lambda node: node.set("value", ident("synthesized")),
        )
        registry = merge(rule.build())
        registry.register("Identifier", lambda path, context: visited.append(path.node.name))

        traverse(program(expr_stmt(obj_expr(obj_prop(ident("x"), shorthand=True)))), registry)

        assert visited == ["x", "synthesized"]

    def test_multiple_node_types(self) -> None:
        rule = PropertyMutationRule(["Identifier", "Literal"], "flag", mutate=lambda _: "seen")

        assert rule.visited_node_types() == ["Identifier", "Literal"]
        assert rule.build().node_types() == ["Identifier", "Literal"]

    def test_requires_node_types(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            PropertyMutationRule([], "kind", mutate=lambda value: value)

        assert exc_info.value.parameter_name == "node_types"

    def test_requires_property_name(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            PropertyMutationRule("Identifier", "", mutate=lambda value: value)

        assert exc_info.value.parameter_name == "prop"

    def test_mutation_failure_is_wrapped(self) -> None:
        def fail(value):
            raise KeyError(value)

        rule = PropertyMutationRule("Literal", "value", mutate=fail)

        with pytest.raises(CallbackFailure) as exc_info:
            traverse(program(expr_stmt(lit(1))), rule.build())

        assert isinstance(exc_info.value.original_error, KeyError)


@pytest.mark.unit
class TestSynthesizeValueFromKey:
    """Test the helper that fills in an explicit value."""

    def test_missing_value(self) -> None:
        prop = obj_prop(ident("x"))

        synthesize_value_from_key(prop)

        assert prop.value == ident("x")
        assert prop.value is not prop.key

    def test_value_shared_with_key_is_copied(self) -> None:
        key = ident("x")
        prop = Node("ObjectProperty", key=key, value=key, shorthand=True)

        synthesize_value_from_key(prop)

        assert prop.value is not key
        assert prop.value == key

    def test_computed_key_without_node_left_alone(self) -> None:
        prop = Node("ObjectProperty", key="x", value=None)

        synthesize_value_from_key(prop)

        assert prop.value is None
