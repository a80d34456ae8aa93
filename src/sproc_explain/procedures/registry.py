"""Known procedure arguments and the fixture values that replace them."""
from __future__ import annotations

from typing import Iterator, Mapping, Union

FixtureValue = Union[str, bytes, int, float]

# Arguments whose values don't depend on seeded records
DEFAULT_KNOWN_ARGS: dict[str, FixtureValue] = {
    "commandname": "foo",
    "name": "schema-patch-level",
    "reminderlimit": 3,
    "uabrowser": "foo",
    "uabrowserversion": "bar",
    "uaos": "baz",
    "uaosversion": "qux",
    "uadevicetype": "mobile",
}


class PlaceholderRegistry:
    """Mapping from lowercase argument name to a literal fixture value.

    Keys are write-once: the seeder calls set_default for every generated
    row, and only the first value recorded for a name is kept.
    """

    def __init__(self, initial: Mapping[str, FixtureValue] | None = None) -> None:
        self._values: dict[str, FixtureValue] = {}
        for name, value in (initial or {}).items():
            self.set_default(name, value)

    @classmethod
    def with_defaults(
        cls,
        extra: Mapping[str, FixtureValue] | None = None
    ) -> PlaceholderRegistry:
        """Create a registry holding DEFAULT_KNOWN_ARGS plus any extra args.

        Args:
            extra: Additional fixed arguments; these take precedence over
                   the defaults with the same name.
        """
        registry = cls(extra)
        for name, value in DEFAULT_KNOWN_ARGS.items():
            registry.set_default(name, value)
        return registry

    def set_default(self, name: str, value: FixtureValue) -> FixtureValue:
        """Record value for name unless one is already recorded.

        Returns:
            The value stored for name after the call
        """
        key = name.lower()
        if key not in self._values:
            self._values[key] = value
        return self._values[key]

    def get(self, name: str, default: FixtureValue | None = None) -> FixtureValue | None:
        return self._values.get(name.lower(), default)

    def __getitem__(self, name: str) -> FixtureValue:
        return self._values[name.lower()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def as_dict(self) -> dict[str, FixtureValue]:
        return dict(self._values)
