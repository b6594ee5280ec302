"""Environment store: the variables every spawned process receives.

In Unix, every process has an environment: a set of ``KEY=VALUE``
string pairs inherited from its parent.  The shell keeps its own copy,
seeded once at startup from the environment the shell process was
launched with.  ``export`` and ``unset`` edit that copy, and every
external program the shell starts gets a *snapshot* of it as its
entire environment.

Key design properties:
    - **Seeded once** from the process environment, plus a default
      ``LS_COLORS`` so listings are colorized out of the box.
    - **Snapshot, not reference.**  A child gets a full copy taken at
      dispatch time; later edits never reach a running process.
    - **Strings only.**  Keys and values are plain strings.
    - **Missing means empty.**  ``get`` on an unknown key returns ``""``
      and ``unset`` of an unknown key is a no-op, like a POSIX shell.
"""

import os
from collections.abc import Mapping

from py_shell.config import DEFAULT_LS_COLORS

LS_COLORS = "LS_COLORS"


class EnvironmentStore:
    """A key-value store for the shell's exported variables."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        """Create a store, optionally pre-populated.

        Args:
            initial: Starting variables (copied, not referenced).

        """
        self._vars: dict[str, str] = dict(initial) if initial else {}

    @classmethod
    def from_process(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        ls_colors: str = DEFAULT_LS_COLORS,
    ) -> "EnvironmentStore":
        """Seed a store from a process environment.

        Args:
            environ: The environment to copy (defaults to ``os.environ``).
            ls_colors: Value for ``LS_COLORS`` when the source has none.

        Returns:
            A new store independent of *environ*.

        """
        store = cls(os.environ if environ is None else environ)
        if LS_COLORS not in store:
            store.set(LS_COLORS, ls_colors)
        return store

    def get(self, key: str) -> str:
        """Return the value for *key*, or ``""`` if not set."""
        return self._vars.get(key, "")

    def set(self, key: str, value: str) -> None:
        """Set *key* to *value* (creates or overwrites)."""
        self._vars[key] = value

    def unset(self, key: str) -> None:
        """Remove *key*; removing a key that isn't set does nothing."""
        self._vars.pop(key, None)

    def keys(self) -> list[str]:
        """Return the names of all live variables, sorted."""
        return sorted(self._vars)

    def snapshot(self) -> list[str]:
        """Return a full copy as ``KEY=VALUE`` strings.

        Entries come out sorted by key for stable display; callers must
        not rely on the order for anything else.
        """
        return [f"{key}={value}" for key, value in sorted(self._vars.items())]

    def as_dict(self) -> dict[str, str]:
        """Return a full copy as a dict, the shape ``subprocess`` expects."""
        return dict(self._vars)

    def __contains__(self, key: object) -> bool:
        """Return True if *key* is set."""
        return key in self._vars

    def __len__(self) -> int:
        """Return the number of variables."""
        return len(self._vars)
