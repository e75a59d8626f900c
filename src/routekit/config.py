"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, no
string-key dict lookups.
"""

from __future__ import annotations

from dataclasses import dataclass

from routekit.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(controller_package="shop.controllers")
    """

    # Where "UserController.index" looks for UserController
    controller_package: str = "app.http.controllers"
    # Where a named middleware such as "Auth" is looked up
    middleware_package: str = "app.http.middleware"

    # "Controller.member" split character
    reference_separator: str = "."
    # Entry point every named middleware must expose
    middleware_entry: str = "handle"

    # Resource id parameter when the resource prefix is empty
    default_id_param: str = "id"

    # Log each registration at INFO instead of DEBUG
    log_registrations: bool = False

    def __post_init__(self) -> None:
        if not self.reference_separator:
            msg = "reference_separator must be a non-empty string."
            raise ConfigurationError(msg)
        if not self.middleware_entry:
            msg = "middleware_entry must be a non-empty string."
            raise ConfigurationError(msg)
        if not self.default_id_param:
            msg = "default_id_param must be a non-empty string."
            raise ConfigurationError(msg)

    def controller_namespace(self, name: str) -> str:
        """Namespace handed to the resolver for a controller name."""
        return _join(self.controller_package, name)

    def middleware_namespace(self, name: str) -> str:
        """Namespace handed to the resolver for a middleware name."""
        return _join(self.middleware_package, name)


def _join(package: str, name: str) -> str:
    if not package:
        return name
    return f"{package}.{name}"
