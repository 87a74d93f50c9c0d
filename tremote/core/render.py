"""Annotated text rendering of an item listing.

The listing is a single string (the surface) plus an ordered tuple of spans
that partition it. Each item contributes a link span over its display text
followed by a separator span that belongs to no item:

    surface:  "ubuntu.iso\\ndebian.iso\\n"
    spans:    [0,10) link id=1 | [10,11) sep | [11,21) link id=2 | [21,22) sep

Offsets are character offsets into the surface string. The cursor is never
stored here; callers pass it in and get the new position back.
"""

from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from typing import Callable, Iterable, List, NamedTuple, Optional, Tuple

from tremote.core.items import Item


@dataclass(frozen=True)
class AnnotatedSpan:
    """Half-open region [start, end) of the surface."""
    start: int
    end: int
    item_id: Optional[int] = None
    is_link: bool = False

    def __contains__(self, position: int) -> bool:
        return self.start <= position < self.end

    def __len__(self) -> int:
        return self.end - self.start


class _Rendered(NamedTuple):
    surface: str
    spans: Tuple[AnnotatedSpan, ...]
    span_starts: Tuple[int, ...]
    links: Tuple[AnnotatedSpan, ...]
    link_starts: Tuple[int, ...]


_EMPTY = _Rendered("", (), (), (), ())


def default_label(item: Item) -> str:
    return item.name or f"#{item.id}"


class RenderModel:
    """
    Flat listing of items with span-based navigation.

    refresh() rebuilds everything off to the side and swaps it in with one
    assignment, so navigation never sees a half-built listing.
    """

    def __init__(
        self,
        label: Optional[Callable[[Item], str]] = None,
        separator: str = "\n",
    ):
        """
        Args:
            label: Display text for an item (defaults to its name)
            separator: Text placed after every item, outside any link
        """
        self._label = label or default_label
        self._separator = separator
        self._rendered = _EMPTY

    @classmethod
    def from_spans(cls, surface: str, spans: Iterable[AnnotatedSpan]) -> "RenderModel":
        """Build a model over an already laid-out surface."""
        model = cls()
        model._install(surface, sorted(spans, key=lambda span: span.start))
        return model

    def _install(self, surface: str, spans: List[AnnotatedSpan]) -> None:
        links = tuple(span for span in spans if span.is_link)
        self._rendered = _Rendered(
            surface=surface,
            spans=tuple(spans),
            span_starts=tuple(span.start for span in spans),
            links=links,
            link_starts=tuple(span.start for span in links),
        )

    @property
    def surface(self) -> str:
        return self._rendered.surface

    @property
    def spans(self) -> Tuple[AnnotatedSpan, ...]:
        return self._rendered.spans

    @property
    def links(self) -> Tuple[AnnotatedSpan, ...]:
        return self._rendered.links

    def refresh(self, items: Iterable[Item], cursor: int = 0) -> int:
        """
        Replace the listing with items, in the order given.

        Args:
            items: Items to lay out
            cursor: Cursor position before the refresh

        Returns:
            cursor if it still falls within the new surface, else 0
        """
        parts: List[str] = []
        spans: List[AnnotatedSpan] = []
        offset = 0

        for item in items:
            text = self._label(item)
            if text:
                spans.append(AnnotatedSpan(offset, offset + len(text), item.id, True))
                parts.append(text)
                offset += len(text)
            if self._separator:
                spans.append(AnnotatedSpan(offset, offset + len(self._separator)))
                parts.append(self._separator)
                offset += len(self._separator)

        self._install("".join(parts), spans)

        if 0 <= cursor <= offset:
            return cursor
        return 0

    def span_at(self, position: int) -> Optional[AnnotatedSpan]:
        """The span covering position, or None outside the surface."""
        rendered = self._rendered
        index = bisect_right(rendered.span_starts, position) - 1
        if index < 0:
            return None
        span = rendered.spans[index]
        return span if position in span else None

    def link_at(self, position: int) -> Optional[AnnotatedSpan]:
        span = self.span_at(position)
        if span is not None and span.is_link:
            return span
        return None

    def item_at(self, position: int) -> Optional[int]:
        """Id of the item whose text covers position, if any."""
        span = self.span_at(position)
        return span.item_id if span is not None else None

    def forward(self, cursor: int) -> Optional[int]:
        """
        Start of the next item after cursor.

        Leaves the item under the cursor first, so repeated calls step
        through items one at a time.

        Returns:
            New cursor position, or None when there is no next item
        """
        position = cursor
        current = self.link_at(cursor)
        if current is not None:
            position = current.end

        link_starts = self._rendered.link_starts
        index = bisect_left(link_starts, position)
        if index < len(link_starts):
            return link_starts[index]
        return None

    def backward(self, cursor: int) -> Optional[int]:
        """
        Start of the item before cursor.

        Inside an item (past its first character) this is the start of
        that item; otherwise it is the start of the previous one.

        Returns:
            New cursor position, or None when there is no previous item
        """
        current = self.link_at(cursor)
        if current is not None and cursor > current.start:
            return current.start

        link_starts = self._rendered.link_starts
        index = bisect_left(link_starts, cursor) - 1
        if index >= 0:
            return link_starts[index]
        return None
