from typing import Any, Generic, Iterable, List, Optional, Sequence, TypeVar
from pydantic import BaseModel

T = TypeVar("T")

DEFAULT_VISIBLE = 4
DEFAULT_INCREMENT = 4

class ShowMorePage(BaseModel, Generic[T]):
    """A "show more" window over a list: the first ``visible_count`` items."""
    items: List[T]
    visible_count: int
    total_count: int
    has_more: bool
    can_show_less: bool

def paginate(items: Sequence[T], visible: Optional[int] = None, initial: int = DEFAULT_VISIBLE) -> ShowMorePage[T]:
    """
    Cut a list down to its visible window.

    ``visible`` is what the client asks for after pressing "show more" some
    number of times (initial, initial + increment, ...). It never drops below
    ``initial``.
    """
    visible_count = max(visible if visible is not None else initial, initial)
    total = len(items)
    return ShowMorePage(
        items=list(items[:visible_count]),
        visible_count=visible_count,
        total_count=total,
        has_more=total > visible_count,
        can_show_less=visible_count > initial and total > initial,
    )

def _field_value(item: Any, field: str) -> Any:
    # Dotted names reach into nested results, e.g. "client.full_name"
    value = item
    for part in field.split("."):
        if value is None:
            return None
        value = value.get(part) if isinstance(value, dict) else getattr(value, part, None)
    return value

def search_filter(items: Iterable[T], term: Optional[str], fields: Sequence[str]) -> List[T]:
    """Case-insensitive substring match of ``term`` against any of ``fields``."""
    items = list(items)
    if not term or not term.strip():
        return items
    needle = term.strip().lower()
    return [
        item for item in items
        if any(needle in str(_field_value(item, field) or "").lower() for field in fields)
    ]
