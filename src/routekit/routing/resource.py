"""Conventional CRUD routes for resource controllers.

``resource("/photo", "PhotoController")`` expands into up to seven
routes, one per action the controller actually implements.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from routekit.routing.route import Verb

_SEPARATOR_RUN = re.compile(r"//+")


@dataclass(frozen=True, slots=True)
class ResourceAction:
    """One conventional resource action.

    ``path`` is a template relative to the resource prefix; ``{id}`` is
    replaced by the derived id parameter placeholder.
    """

    member: str
    verb: Verb
    path: str


RESOURCE_ACTIONS: tuple[ResourceAction, ...] = (
    ResourceAction("index", Verb.GET, ""),
    ResourceAction("create", Verb.POST, "/create"),
    ResourceAction("store", Verb.POST, ""),
    ResourceAction("show", Verb.GET, "/{id}"),
    ResourceAction("edit", Verb.GET, "/{id}/edit"),
    ResourceAction("update", Verb.PATCH, "/{id}"),
    ResourceAction("destroy", Verb.DELETE, "/{id}"),
)

RESOURCE_MEMBERS: tuple[str, ...] = tuple(action.member for action in RESOURCE_ACTIONS)


def collapse_separators(path: str) -> str:
    """Collapse every run of ``/`` into a single ``/``."""
    return _SEPARATOR_RUN.sub("/", path)


def normalize_prefix(prefix: str) -> str:
    """Collapse separators and trim them from both ends.

    ``"//album//:id/photo/"`` -> ``"album/:id/photo"``
    """
    return collapse_separators(prefix).strip("/")


def resource_id_param(prefix: str, default: str = "id") -> str:
    """Name of the id path parameter for a resource mounted at *prefix*.

    The normalized prefix becomes the parameter name, with ``/`` turned
    into ``_`` and ``_id`` appended. Placeholder colons are dropped, so the
    result is a valid parameter name::

        resource_id_param("/album/:id/photo")  # "album_id_photo_id"
        resource_id_param("/")                 # "id"
    """
    normalized = normalize_prefix(prefix)
    if not normalized:
        return default
    name = normalized.replace(":", "").replace("/", "_")
    return f"{name}_id"


def action_path(prefix: str, action: ResourceAction, id_param: str) -> str:
    """Full, separator-collapsed path for *action* under *prefix*."""
    return collapse_separators(prefix + action.path.replace("{id}", f":{id_param}"))


def action_alias(prefix: str, action: ResourceAction) -> str:
    """Base alias for *action*: ``"{normalized prefix}.{member}"``."""
    return f"{normalize_prefix(prefix)}.{action.member}"
