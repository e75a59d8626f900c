"""Routing — declarative route composition and the compiled route table.

Routes are declared on a ``RouteBuilder`` during setup and handed to
``bind()``, which compiles them into an immutable lookup structure.
"""
