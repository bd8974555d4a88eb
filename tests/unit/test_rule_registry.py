#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the rule registry."""

import importlib.metadata

import pytest
from utils import nested_ternary_program, shorthand_program

from astvisit import Rule, RuleError, VisitorRegistry, build_registry, traverse
from astvisit.rules import (
    EXPAND_SHORTHAND_METADATA,
    NO_NESTED_TERNARY_METADATA,
    ExpandShorthandPropertiesRule,
    NoNestedTernaryRule,
    RuleMetadata,
    RuleRegistry,
)


class NoVarRule(Rule):
    """Rule used for registry testing."""

    name = "no-var"

    def visit_VariableDeclaration(self, path, context):
        if path.node.kind == "var":
            self.report(context, path.node, "Unexpected var.")


NO_VAR_METADATA = RuleMetadata(
    name="no-var",
    description="Disallow var declarations",
    rule_class=NoVarRule,
    tags=["analysis"],
    author="Test Author",
)


class _FakeEntryPoint:
    def __init__(self, name, target=None, error=None):
        self.name = name
        self._target = target
        self._error = error

    def load(self):
        if self._error is not None:
            raise self._error
        return self._target


class _FakeEntryPoints:
    def __init__(self, entries):
        self._entries = entries

    def select(self, group):
        return [entry for entry in self._entries if group == "astvisit.rules"]


@pytest.fixture
def fake_entry_points(monkeypatch):
    """Replace entry point discovery with a controllable list."""
    entries = []
    monkeypatch.setattr(importlib.metadata, "entry_points", lambda: _FakeEntryPoints(entries))
    return entries


@pytest.mark.unit
class TestRuleMetadata:
    """Tests for RuleMetadata."""

    def test_create_instance(self) -> None:
        rule = NO_NESTED_TERNARY_METADATA.create_instance()

        assert isinstance(rule, NoNestedTernaryRule)

    def test_create_instance_with_arguments(self) -> None:
        rule = NO_NESTED_TERNARY_METADATA.create_instance(severity="warning")

        assert rule.severity == "warning"

    def test_create_instance_bad_arguments(self) -> None:
        with pytest.raises(RuleError) as exc_info:
            NO_NESTED_TERNARY_METADATA.create_instance(unknown=True)

        assert exc_info.value.rule_name == "no-nested-ternary"
        assert isinstance(exc_info.value.original_error, TypeError)

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError):
            RuleMetadata(name="", description="", rule_class=NoVarRule)

    def test_non_rule_class_rejected(self) -> None:
        with pytest.raises(ValueError, match="Rule subclass"):
            RuleMetadata(name="bad", description="", rule_class=dict)  # type: ignore[arg-type]


@pytest.mark.unit
class TestRuleRegistry:
    """Tests for RuleRegistry."""

    def test_singleton(self, clean_rule_registry) -> None:
        assert RuleRegistry() is clean_rule_registry

    def test_builtins_registered(self, clean_rule_registry, fake_entry_points) -> None:
        assert clean_rule_registry.list_rules() == ["expand-shorthand-properties", "no-nested-ternary"]
        assert clean_rule_registry.has_rule("no-nested-ternary")

    def test_get_rule(self, clean_rule_registry, fake_entry_points) -> None:
        assert isinstance(clean_rule_registry.get_rule("expand-shorthand-properties"), ExpandShorthandPropertiesRule)

    def test_get_metadata(self, clean_rule_registry, fake_entry_points) -> None:
        assert clean_rule_registry.get_metadata("no-nested-ternary") is NO_NESTED_TERNARY_METADATA

    def test_unknown_rule(self, clean_rule_registry, fake_entry_points) -> None:
        with pytest.raises(RuleError, match="not registered") as exc_info:
            clean_rule_registry.get_rule("no-such-rule")

        assert exc_info.value.rule_name == "no-such-rule"

    def test_register_custom_rule(self, clean_rule_registry, fake_entry_points) -> None:
        clean_rule_registry.register(NO_VAR_METADATA)

        assert "no-var" in clean_rule_registry.list_rules()
        assert isinstance(clean_rule_registry.get_rule("no-var"), NoVarRule)

    def test_register_overwrites_with_warning(self, clean_rule_registry, fake_entry_points, caplog) -> None:
        clean_rule_registry.register(NO_VAR_METADATA)
        replacement = RuleMetadata(name="no-var", description="Replacement", rule_class=NoVarRule)

        clean_rule_registry.register(replacement)

        assert "already registered" in caplog.text
        assert clean_rule_registry.get_metadata("no-var") is replacement

    def test_reregistering_same_metadata_is_silent(self, clean_rule_registry, fake_entry_points, caplog) -> None:
        clean_rule_registry.register(NO_VAR_METADATA)
        clean_rule_registry.register(NO_VAR_METADATA)

        assert "already registered" not in caplog.text

    def test_unregister(self, clean_rule_registry, fake_entry_points) -> None:
        clean_rule_registry.register(NO_VAR_METADATA)

        assert clean_rule_registry.unregister("no-var") is True
        assert clean_rule_registry.unregister("no-var") is False

    def test_list_rules_by_tag(self, clean_rule_registry, fake_entry_points) -> None:
        clean_rule_registry.register(NO_VAR_METADATA)

        assert clean_rule_registry.list_rules(tags=["codemod"]) == ["expand-shorthand-properties"]
        assert clean_rule_registry.list_rules(tags=["analysis"]) == ["no-nested-ternary", "no-var"]
        assert clean_rule_registry.list_rules(tags=["missing"]) == []

    def test_clear_restores_builtins_on_next_access(self, clean_rule_registry, fake_entry_points) -> None:
        clean_rule_registry.register(NO_VAR_METADATA)
        clean_rule_registry.clear()

        assert clean_rule_registry.list_rules() == ["expand-shorthand-properties", "no-nested-ternary"]


@pytest.mark.unit
class TestPluginDiscovery:
    """Tests for entry point discovery."""

    def test_discovers_rule_metadata(self, clean_rule_registry, fake_entry_points) -> None:
        fake_entry_points.append(_FakeEntryPoint("no-var", NO_VAR_METADATA))

        assert clean_rule_registry.has_rule("no-var")

    def test_discover_plugins_counts(self, clean_rule_registry, fake_entry_points) -> None:
        fake_entry_points.append(_FakeEntryPoint("no-var", NO_VAR_METADATA))

        assert clean_rule_registry.discover_plugins() == 1

    def test_builtin_entry_points_do_not_warn(self, clean_rule_registry, fake_entry_points, caplog) -> None:
        fake_entry_points.append(_FakeEntryPoint("no-nested-ternary", NO_NESTED_TERNARY_METADATA))
        fake_entry_points.append(_FakeEntryPoint("expand-shorthand-properties", EXPAND_SHORTHAND_METADATA))

        clean_rule_registry.list_rules()

        assert "already registered" not in caplog.text

    def test_broken_entry_point_is_skipped(self, clean_rule_registry, fake_entry_points, caplog) -> None:
        fake_entry_points.append(_FakeEntryPoint("broken", error=ImportError("missing module")))
        fake_entry_points.append(_FakeEntryPoint("no-var", NO_VAR_METADATA))

        assert clean_rule_registry.has_rule("no-var")
        assert "Failed to load rule entry point 'broken'" in caplog.text

    def test_wrong_object_is_skipped(self, clean_rule_registry, fake_entry_points, caplog) -> None:
        fake_entry_points.append(_FakeEntryPoint("wrong", {"name": "wrong"}))

        assert not clean_rule_registry.has_rule("wrong")
        assert "did not return RuleMetadata" in caplog.text


@pytest.mark.unit
class TestBuildRegistry:
    """Tests for combining rules into one registry."""

    def test_build_from_names(self, clean_rule_registry, fake_entry_points) -> None:
        registry = build_registry(["no-nested-ternary", "expand-shorthand-properties"])

        assert registry.node_types() == ["ConditionalExpression", "ObjectProperty", "Property"]

    def test_build_from_mixed_specs(self, clean_rule_registry, fake_entry_points) -> None:
        extra = VisitorRegistry()
        extra.register("Identifier", lambda path, context: None)

        registry = build_registry([NoVarRule(), "no-nested-ternary", extra])

        assert registry.node_types() == ["VariableDeclaration", "ConditionalExpression", "Identifier"]

    def test_built_registry_runs(self, clean_rule_registry, fake_entry_points) -> None:
        tree = nested_ternary_program()
        tree.body.extend(shorthand_program().body)

        findings = traverse(tree, build_registry(["no-nested-ternary", NoVarRule()]))

        assert [finding.rule for finding in findings] == ["no-nested-ternary", "no-var"]

    def test_unknown_name(self, clean_rule_registry, fake_entry_points) -> None:
        with pytest.raises(RuleError):
            build_registry(["no-such-rule"])

    def test_unsupported_spec(self) -> None:
        with pytest.raises(RuleError, match="Cannot build"):
            build_registry([42])  # type: ignore[list-item]
