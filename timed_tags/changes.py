from __future__ import annotations

from typing import Callable, Hashable, List, Optional, Sequence, TypeVar

from .containers import FieldContainer, FrameContainer

T = TypeVar("T")


def items_changed(
    existing: Sequence[T],
    desired: Sequence[T],
    *,
    key: Callable[[T], Hashable],
    render: Callable[[T], object],
) -> bool:
    """Compare two item collections ignoring order.

    Items are ordered by identity key and compared by their rendered form,
    so reordering alone is never a change while any byte difference is.
    """
    if len(existing) != len(desired):
        return True

    def ordering(item: T):
        return (key(item), render(item))

    current = sorted(existing, key=ordering)
    wanted = sorted(desired, key=ordering)
    return any(render(a) != render(b) for a, b in zip(current, wanted))


def field_changed(existing: Sequence[str], desired: Optional[str]) -> bool:
    # a missing field and an empty string are different states
    if desired is None:
        return len(existing) > 0
    return len(existing) != 1 or existing[0] != desired


def replace_field(fields: FieldContainer, key: str, desired: Optional[str]) -> bool:
    changed = field_changed(fields.get_field(key), desired)
    fields.set_field(key, None if desired is None else [desired])
    return changed


def replace_items(
    container: FrameContainer,
    kind: str,
    desired: List[T],
    *,
    key: Callable[[T], Hashable],
    render: Callable[[T], object],
) -> bool:
    existing = container.get_items(kind)
    changed = items_changed(existing, desired, key=key, render=render)
    for item in existing:
        container.remove_item(kind, item)
    for item in desired:
        container.add_item(kind, item)
    return changed
