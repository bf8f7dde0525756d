#!/usr/bin/env python3
"""
Unit tests for the Resolver, driven by hand-built plans.
"""

import unittest
from unittest import mock

from warriors import (
    KATANA,
    KATANA_BLADE,
    KATANA_HANDLER,
    NINJA,
    SHURIKEN,
    Katana,
    KatanaBlade,
    KatanaHandler,
    Ninja,
    Shuriken,
    bind_warriors,
)

from chibi.kernel import (
    Binding,
    BindingScope,
    BindingType,
    Constraints,
    InvalidBindingTypeError,
    Kernel,
    MissingPlanError,
    Plan,
    Planner,
    Resolver,
    Target,
)
from chibi.kernel import error_messages as messages


def build_ninja_plan(kernel: Kernel, bindings: dict[str, Binding]) -> Plan:
    """
    Build the Ninja request tree without the planner:

        Ninja
         -- Katana (target "katana")
             -- KatanaHandler (target "handler")
             -- KatanaBlade (target "blade")
         -- Shuriken (target "shuriken")
    """
    context = Planner().create_context(kernel)
    plan = Plan(context, NINJA, [bindings[NINJA]])
    katana_request = plan.add_child_request(
        plan.root_request, KATANA, [bindings[KATANA]], Target("katana", KATANA)
    )
    plan.add_child_request(
        katana_request, KATANA_HANDLER, [bindings[KATANA_HANDLER]], Target("handler", KATANA_HANDLER)
    )
    plan.add_child_request(
        katana_request, KATANA_BLADE, [bindings[KATANA_BLADE]], Target("blade", KATANA_BLADE)
    )
    plan.add_child_request(
        plan.root_request, SHURIKEN, [bindings[SHURIKEN]], Target("shuriken", SHURIKEN)
    )
    context.add_plan(plan)
    return plan


class TestInstanceBindings(unittest.TestCase):
    """Test resolution of INSTANCE bindings."""

    def test_resolve_instance_bindings(self):
        """Test that the whole tree is constructed bottom-up."""
        kernel = Kernel()
        plan = build_ninja_plan(kernel, bind_warriors(kernel))

        ninja = Resolver().resolve(plan.context)

        self.assertIsInstance(ninja, Ninja)
        self.assertIsInstance(ninja.katana, Katana)
        self.assertIsInstance(ninja.katana.handler, KatanaHandler)
        self.assertIsInstance(ninja.katana.blade, KatanaBlade)
        self.assertIsInstance(ninja.shuriken, Shuriken)

    def test_singleton_bindings_are_cached(self):
        """Test that singleton bindings store their instance and skip their children later.

        Every INSTANCE construction goes through `_create_instance`, leaves included.
        """
        kernel = Kernel()
        bindings = bind_warriors(
            kernel, katana_scope=BindingScope.SINGLETON, handler_scope=BindingScope.SINGLETON
        )
        plan = build_ninja_plan(kernel, bindings)
        resolver = Resolver()

        self.assertIsNone(bindings[KATANA].cache)

        with mock.patch.object(
            resolver, "_create_instance", wraps=resolver._create_instance
        ) as create_instance:
            ninja = resolver.resolve(plan.context)
            constructed = [call.args[0] for call in create_instance.call_args_list]
            self.assertEqual(constructed, [KatanaHandler, KatanaBlade, Katana, Shuriken, Ninja])

            ninja2 = resolver.resolve(plan.context)
            constructed = [call.args[0] for call in create_instance.call_args_list[5:]]
            self.assertEqual(constructed, [Shuriken, Ninja])

        self.assertIsInstance(bindings[KATANA].cache, Katana)
        self.assertIsInstance(bindings[KATANA_HANDLER].cache, KatanaHandler)
        self.assertIs(ninja.katana, ninja2.katana)
        self.assertIsNot(ninja, ninja2)
        self.assertIsNot(ninja.shuriken, ninja2.shuriken)

    def test_transient_bindings_are_not_cached(self):
        """Test that transient bindings build a new instance every time."""
        kernel = Kernel()
        bindings = bind_warriors(kernel)
        plan = build_ninja_plan(kernel, bindings)
        resolver = Resolver()

        ninja = resolver.resolve(plan.context)
        ninja2 = resolver.resolve(plan.context)

        self.assertIsNot(ninja.katana, ninja2.katana)
        self.assertIsNone(bindings[KATANA].cache)

    def test_children_are_passed_in_declared_order(self):
        """Test that constructor arguments follow the order of the child requests."""

        class Pair:
            def __init__(self, first, second):
                self.first = first
                self.second = second

        kernel = Kernel()
        pair = Binding("Pair", BindingType.INSTANCE, Pair)
        context = Planner().create_context(kernel)
        plan = Plan(context, "Pair", [pair])
        plan.add_child_request(
            plan.root_request, "A", [Binding("A", BindingType.CONSTANT_VALUE, "a")], Target("first", "A")
        )
        plan.add_child_request(
            plan.root_request, "B", [Binding("B", BindingType.CONSTANT_VALUE, "b")], Target("second", "B")
        )
        context.add_plan(plan)

        result = Resolver().resolve(context)

        self.assertEqual((result.first, result.second), ("a", "b"))


class TestInvalidBindings(unittest.TestCase):
    """Test handling of bindings without an implementation."""

    def test_invalid_binding_type(self):
        """Test that an INVALID binding fails with a message naming the identifier."""
        kernel = Kernel()
        ninja_binding = kernel.bind(Binding(NINJA))
        context = Planner().create_context(kernel)
        plan = Plan(context, NINJA, [ninja_binding])
        context.add_plan(plan)

        self.assertIs(ninja_binding.binding_type, BindingType.INVALID)

        with self.assertRaises(InvalidBindingTypeError) as raised:
            Resolver()._resolve_request(plan, plan.root_request)

        self.assertEqual(str(raised.exception), f"{messages.INVALID_BINDING_TYPE} {NINJA}")
        self.assertEqual(raised.exception.service_id, NINJA)

    def test_invalid_binding_prevents_sibling_construction(self):
        """Test that nothing is constructed when any request of the plan is invalid."""
        kernel = Kernel()
        bindings = bind_warriors(kernel)
        bindings[SHURIKEN] = Binding(SHURIKEN)
        plan = build_ninja_plan(kernel, bindings)
        resolver = Resolver()

        with mock.patch.object(
            resolver, "_create_instance", wraps=resolver._create_instance
        ) as create_instance:
            with self.assertRaises(InvalidBindingTypeError) as raised:
                resolver.resolve(plan.context)

        self.assertEqual(raised.exception.service_id, SHURIKEN)
        create_instance.assert_not_called()

    def test_context_without_plan(self):
        """Test that resolving a context with no plan fails."""
        context = Planner().create_context(Kernel())

        with self.assertRaises(MissingPlanError):
            Resolver().resolve(context)


class TestValueBindings(unittest.TestCase):
    """Test bindings that never call a constructor."""

    def resolve_single(self, binding: Binding, resolver: Resolver | None = None):
        kernel = Kernel()
        kernel.bind(binding)
        context = kernel.planner.create_context(kernel)
        kernel.planner.create_plan(context, binding.service_id)
        return (resolver or Resolver()).resolve(context)

    def test_constant_value(self):
        """Test that a constant value is returned unchanged."""
        value = {"name": "katana"}
        resolver = Resolver()
        binding = Binding("IConfig", BindingType.CONSTANT_VALUE, value)

        with mock.patch.object(resolver, "_create_instance") as create_instance:
            first = self.resolve_single(binding, resolver)
            second = self.resolve_single(binding, resolver)

        self.assertIs(first, value)
        self.assertIs(second, value)
        create_instance.assert_not_called()

    def test_dynamic_value(self):
        """Test that a dynamic value is produced from the context on every call."""
        calls = []

        def produce(context):
            calls.append(context)
            return len(calls)

        resolver = Resolver()
        binding = Binding("ICounter", BindingType.DYNAMIC_VALUE, produce)

        with mock.patch.object(resolver, "_create_instance") as create_instance:
            self.assertEqual(self.resolve_single(binding, resolver), 1)
            self.assertEqual(self.resolve_single(binding, resolver), 2)

        self.assertIsNot(calls[0], calls[1])
        self.assertEqual(calls[0].plan.root_request.service_id, "ICounter")
        create_instance.assert_not_called()

    def test_constructor(self):
        """Test that a constructor binding returns the type itself."""
        result = self.resolve_single(Binding("Katana", BindingType.CONSTRUCTOR, Katana))

        self.assertIs(result, Katana)

    def test_factory(self):
        """Test that a factory binding returns the callable built by its creator."""

        def katana_factory(context):
            def create(blade):
                return Katana(KatanaHandler(), blade)
            return create

        create = self.resolve_single(Binding("Factory<Katana>", BindingType.FACTORY, katana_factory))
        blade = KatanaBlade()

        katana = create(blade)

        self.assertIsInstance(katana, Katana)
        self.assertIs(katana.blade, blade)

    def test_factory_is_not_cached(self):
        """Test that the factory creator runs on every resolution."""
        creators_called = []

        def factory(context):
            creators_called.append(context)
            return lambda: None

        binding = Binding("Factory<None>", BindingType.FACTORY, factory)
        first = self.resolve_single(binding)
        second = self.resolve_single(binding)

        self.assertIsNot(first, second)
        self.assertEqual(len(creators_called), 2)

    def test_provider(self):
        """Test that a provider binding returns the async function built by its creator."""

        async def provide():
            return Katana(KatanaHandler(), KatanaBlade())

        result = self.resolve_single(
            Binding("Provider<Katana>", BindingType.PROVIDER, lambda context: provide)
        )

        self.assertIs(result, provide)


class TestMultiRequests(unittest.TestCase):
    """Test requests carrying several bindings."""

    def test_multi_request_returns_values_in_registration_order(self):
        """Test that every branch is resolved independently and in order."""
        kernel = Kernel()
        kernel.bind(Binding("IWeapon", BindingType.INSTANCE, Shuriken))
        kernel.bind(Binding("IWeapon", BindingType.CONSTANT_VALUE, "bo staff"))
        kernel.bind(Binding("IWeapon", BindingType.CONSTRUCTOR, Katana))
        context = kernel.planner.create_context(kernel)
        kernel.planner.create_plan(
            context, "IWeapon", Target.root("IWeapon", Constraints(multi=True))
        )

        weapons = Resolver().resolve(context)

        self.assertEqual(len(weapons), 3)
        self.assertIsInstance(weapons[0], Shuriken)
        self.assertEqual(weapons[1], "bo staff")
        self.assertIs(weapons[2], Katana)


if __name__ == "__main__":
    unittest.main()
