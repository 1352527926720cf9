"""Layout registry for Folio.

A Layout is the ordered set of filters and helpers a Parser applies to a
page. It is built during setup and then shared, read-only, by every render
that uses it.

Key classes:
- Layout: Append-only registry of filters and helpers.
- LayoutFrozenError: Raised when a frozen layout is modified.
"""

from __future__ import annotations

from collections.abc import Iterable

from .protocols import Filter, Helper


class LayoutFrozenError(RuntimeError):
    """Error raised when registering on a layout that is already in use."""

    def __init__(self, layout: Layout):
        self.layout = layout
        super().__init__(
            "Layout is frozen: register filters and helpers before the first render"
        )


class Layout:
    """Ordered registry of filters and helpers.

    Filters run in registration order. Helpers are consulted in
    registration order and the first one to supply a value wins.
    Duplicates are allowed and nothing can be removed.

    The Parser freezes a layout the first time it renders with it. From
    then on ``add_filter`` and ``add_helper`` raise ``LayoutFrozenError``,
    and the layout can be read from any number of threads without locking.
    """

    def __init__(self):
        self._filters: list[Filter] = []
        self._helpers: list[Helper] = []
        self._frozen = False

    @classmethod
    def of(
        cls,
        filters: Iterable[Filter] = (),
        helpers: Iterable[Helper] = (),
    ) -> Layout:
        """Build a layout from existing sequences of filters and helpers."""
        layout = cls()
        for item in filters:
            layout.add_filter(item)
        for helper in helpers:
            layout.add_helper(helper)
        return layout

    @property
    def filters(self) -> tuple[Filter, ...]:
        return tuple(self._filters)

    @property
    def helpers(self) -> tuple[Helper, ...]:
        return tuple(self._helpers)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def add_filter(self, filter: Filter) -> Layout:
        """Append a filter to the chain.

        Args:
            filter: A Filter implementation.

        Returns:
            This layout, so registrations can be chained.

        Raises:
            LayoutFrozenError: If the layout has already been used.
        """
        self._check_mutable()
        self._filters.append(filter)
        return self

    def add_helper(self, helper: Helper) -> Layout:
        """Append a helper to the lookup order.

        Args:
            helper: A Helper implementation.

        Returns:
            This layout, so registrations can be chained.

        Raises:
            LayoutFrozenError: If the layout has already been used.
        """
        self._check_mutable()
        self._helpers.append(helper)
        return self

    def freeze(self) -> Layout:
        """Make the layout read-only. Safe to call more than once."""
        self._frozen = True
        return self

    def _check_mutable(self) -> None:
        if self._frozen:
            raise LayoutFrozenError(self)

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return (
            f"Layout(filters={len(self._filters)}, "
            f"helpers={len(self._helpers)}, {state})"
        )
