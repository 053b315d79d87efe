from __future__ import annotations

import re
from typing import Any, Iterator, Mapping
from urllib.parse import quote, urlencode

from flask import Flask

from .errors import RouteNotFoundError

# {id} or {mobile:regex(...)}; only the name matters for expansion.
_PLACEHOLDER_RE = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)(?::[^{}]*)?\}")

# Werkzeug rule syntax: <id>, <int:id>, <regex("\d+"):mobile>
_RULE_VAR_RE = re.compile(r"<(?:[^<>:]+(?:\([^)]*\))?:)?([A-Za-z_][A-Za-z0-9_]*)>")


def _template_names(template: str) -> list[str]:
    return _PLACEHOLDER_RE.findall(template)


def rule_to_template(rule: str) -> str:
    """Convert a werkzeug rule string into a ``{name}`` template."""
    return _RULE_VAR_RE.sub(lambda m: "{" + m.group(1) + "}", rule)


class RouteTable:
    """
    Named URL templates used to resolve route redirects.

    The table is plain configuration: build it from a mapping, from a Flask
    app's url_map, or merge the two.
    """

    def __init__(self, routes: Mapping[str, str] | None = None) -> None:
        self._routes: dict[str, str] = dict(routes or {})

    @classmethod
    def from_flask(cls, app: Flask) -> "RouteTable":
        routes: dict[str, str] = {}
        for rule in app.url_map.iter_rules():
            if rule.endpoint == "static":
                continue
            routes.setdefault(rule.endpoint, rule_to_template(rule.rule))
        return cls(routes)

    def merged(self, other: Mapping[str, str] | "RouteTable") -> "RouteTable":
        extra = other._routes if isinstance(other, RouteTable) else dict(other)
        return RouteTable({**self._routes, **extra})

    def names(self) -> list[str]:
        return sorted(self._routes)

    def template(self, name: str) -> str:
        try:
            return self._routes[name]
        except KeyError:
            raise RouteNotFoundError(
                f"No route named {name!r}", details={"route": name}
            ) from None

    def expand(self, name: str, params: Mapping[str, Any] | None = None) -> str:
        """
        Fill the template for *name* with *params*.

        Unused parameters become the query string; a placeholder without a
        value means no route matches, same as an unknown name.
        """
        template = self.template(name)
        values = dict(params or {})
        used = set(_template_names(template))

        missing = [n for n in used if values.get(n) is None]
        if missing:
            raise RouteNotFoundError(
                f"No route matches the supplied values for {name!r}",
                details={"route": name, "missing": sorted(missing)},
            )

        path = _PLACEHOLDER_RE.sub(
            lambda m: quote(str(values[m.group(1)]), safe=""), template
        )
        if not path.startswith("/"):
            path = "/" + path

        extras = [
            (k, str(v)) for k, v in values.items() if k not in used and v is not None
        ]
        if extras:
            path = f"{path}?{urlencode(extras)}"
        return path

    def __contains__(self, name: object) -> bool:
        return name in self._routes

    def __len__(self) -> int:
        return len(self._routes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._routes)
