#!/usr/bin/env python3
"""
Demo of type-keyed bindings with dependencies read from constructor annotations.

Classes are used as service identifiers; Annotated markers select named,
tagged or multi-injected bindings.
"""

import logging
from dataclasses import dataclass
from typing import Annotated

from chibi.kernel import (
    Binding,
    BindingScope,
    BindingType,
    Id,
    Inject,
    Kernel,
    KernelOptions,
    NotRegisteredError,
    Tagged,
)

logging.basicConfig(level=logging.INFO, format="%(name)s - %(levelname)s - %(message)s")


@dataclass
class Config:
    database_url: str


class Database:
    def __init__(self, config: Config, url: Annotated[str, Id("db-url")]):
        self.config = config
        self.url = url

    def connect(self) -> str:
        return f"Connected to {self.url}"


class Plugin:
    def __init__(self, name: str):
        self.name = name


class Application:
    def __init__(
        self,
        database: Database,
        primary: Annotated[Plugin, Tagged("primary", True)],
        plugins: Annotated[list[Plugin], Inject(Plugin, multi=True)],
    ):
        self.database = database
        self.primary = primary
        self.plugins = plugins


def main():
    """Demonstrate resolution driven by type annotations."""
    print("=== Typed Services Demo ===\n")

    kernel = Kernel(KernelOptions(default_scope=BindingScope.SINGLETON))
    kernel.bind(Binding(Config, BindingType.CONSTANT_VALUE, Config("postgresql://localhost/app")))
    kernel.bind(
        Binding(
            str,
            BindingType.DYNAMIC_VALUE,
            lambda context: context.kernel.resolve(Config).database_url,
            name="db-url",
        )
    )
    kernel.bind(Binding(Database, BindingType.INSTANCE, Database))
    kernel.bind(
        Binding(Plugin, BindingType.CONSTANT_VALUE, Plugin("auth"), tags={"primary": True})
    )
    kernel.bind(
        Binding(Plugin, BindingType.CONSTANT_VALUE, Plugin("metrics"), tags={"primary": False})
    )
    kernel.bind(Binding(Application, BindingType.INSTANCE, Application))

    plan = kernel.planner.create_plan(kernel.planner.create_context(kernel), Application)
    print("Plan:")
    print(plan)

    app = kernel.resolve(Application)
    print(f"\n{app.database.connect()}")
    print(f"Primary plugin: {app.primary.name}")
    print(f"All plugins: {[plugin.name for plugin in app.plugins]}")
    print(f"Application is a singleton: {app is kernel.resolve(Application)}")

    print("\nMissing dependency:")
    kernel.unbind(Config)
    try:
        kernel.resolve(Database)
    except NotRegisteredError as e:
        print(f"Caught: {e}")

    print("\n=== Demo Complete ===")


if __name__ == "__main__":
    main()
