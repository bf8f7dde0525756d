#!/usr/bin/env python3
"""
Demo of the chibi kernel resolving the classic Ninja graph.

Shows string identifiers with @injectable, singleton versus transient scopes,
named and tagged bindings, multi-injection, factories and cycle reporting.
"""

import logging

from chibi.kernel import (
    Binding,
    BindingScope,
    BindingType,
    CircularDependencyError,
    Kernel,
    injectable,
)

# Configure logging to see what the kernel registers and constructs
logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")


class KatanaHandler:
    pass


class KatanaBlade:
    pass


@injectable("IKatanaHandler", "IKatanaBlade")
class Katana:
    def __init__(self, handler: KatanaHandler, blade: KatanaBlade):
        self.handler = handler
        self.blade = blade

    def hit(self) -> str:
        return "cut!"


class Shuriken:
    def throw(self) -> str:
        return "hit!"


@injectable("IKatana", "IShuriken")
class Ninja:
    def __init__(self, katana: Katana, shuriken: Shuriken):
        self.katana = katana
        self.shuriken = shuriken

    def fight(self) -> str:
        return self.katana.hit()

    def sneak(self) -> str:
        return self.shuriken.throw()


def main():
    """Demonstrate resolution with the kernel."""
    print("=== Ninja Kernel Demo ===\n")

    kernel = Kernel()
    kernel.bind(Binding("IKatanaHandler", BindingType.INSTANCE, KatanaHandler))
    kernel.bind(Binding("IKatanaBlade", BindingType.INSTANCE, KatanaBlade))
    kernel.bind(Binding("IKatana", BindingType.INSTANCE, Katana, BindingScope.SINGLETON))
    kernel.bind(Binding("IShuriken", BindingType.INSTANCE, Shuriken))
    kernel.bind(Binding("INinja", BindingType.INSTANCE, Ninja))

    print("1. Singleton and transient scopes:")
    print("-" * 40)

    first = kernel.resolve("INinja")
    second = kernel.resolve("INinja")
    print(f"Ninja fights: {first.fight()}, sneaks: {first.sneak()}")
    print(f"Same ninja: {first is second}")
    print(f"Same katana (singleton): {first.katana is second.katana}")
    print(f"Same shuriken (transient): {first.shuriken is second.shuriken}")

    print("\n2. Named, tagged and multi-injected bindings:")
    print("-" * 40)

    kernel.bind(
        Binding(
            "IWeapon",
            BindingType.CONSTANT_VALUE,
            "katana",
            name="strong",
            tags={"canThrow": False},
        )
    )
    kernel.bind(
        Binding(
            "IWeapon",
            BindingType.CONSTANT_VALUE,
            "shuriken",
            name="weak",
            tags={"canThrow": True},
        )
    )
    print(f"Strong weapon: {kernel.resolve_named('IWeapon', 'strong')}")
    print(f"Throwable weapon: {kernel.resolve_tagged('IWeapon', 'canThrow', True)}")
    print(f"All weapons: {kernel.resolve_all('IWeapon')}")

    print("\n3. Factories:")
    print("-" * 40)

    kernel.bind(
        Binding(
            "Factory<INinja>",
            BindingType.FACTORY,
            lambda context: lambda: context.kernel.resolve("INinja"),
        )
    )
    make_ninja = kernel.resolve("Factory<INinja>")
    recruits = [make_ninja() for _ in range(3)]
    print(f"Recruited {len(recruits)} ninjas")
    print(f"All share one katana: {all(r.katana is first.katana for r in recruits)}")

    print("\n4. Circular dependencies:")
    print("-" * 40)

    kernel.bind(
        Binding("IMirror", BindingType.DYNAMIC_VALUE, lambda c: c.kernel.resolve("IMirror"))
    )
    try:
        kernel.resolve("IMirror")
    except CircularDependencyError as e:
        print(f"Caught: {e}")

    print("\n5. Unbinding drops the cached singleton:")
    print("-" * 40)

    kernel.unbind("IKatana")
    kernel.bind(Binding("IKatana", BindingType.INSTANCE, Katana, BindingScope.SINGLETON))
    print(f"New katana after rebinding: {kernel.resolve('INinja').katana is not first.katana}")

    print("\n=== Demo Complete ===")


if __name__ == "__main__":
    main()
