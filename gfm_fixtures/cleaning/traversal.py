"""Depth-first traversal that tolerates splicing the visited element.

Cleaning rules either edit an element in place or replace it with other
nodes, typically its own children. :func:`walk` makes the second case
explicit: when a visitor returns replacement nodes, the element is swapped
for them and traversal resumes at the first inserted node, so the inserted
nodes are themselves visited and nothing after them is skipped.
"""

from __future__ import annotations

import typing as typ

from bs4.element import Tag

if typ.TYPE_CHECKING:
    from bs4.element import PageElement

Visitor = typ.Callable[[Tag], "list[PageElement] | None"]


def walk(root: Tag, visit: Visitor) -> None:
    """Visit every element below ``root`` in document order.

    Parameters
    ----------
    root : Tag
        Fragment root or element whose descendants are visited. ``root``
        itself is not passed to ``visit``.
    visit : Visitor
        Called with each element. Returning ``None`` keeps the element and
        descends into its children. Returning a list replaces the element
        with those nodes (an empty list removes it) and continues from the
        first of them, or from the element's former next sibling when the
        list is empty.

    Raises
    ------
    ValueError
        If a visitor returns the visited element among its replacements,
        which would revisit it forever.

    Notes
    -----
    Traversal keeps its own stack rather than recursing, so arbitrarily deep
    nesting (hundreds of blockquotes, say) does not hit the recursion limit.
    """
    # Each frame is a parent and the index of its next child to visit.
    stack: list[tuple[Tag, int]] = [(root, 0)]
    while stack:
        parent, index = stack.pop()
        if index >= len(parent.contents):
            continue
        node = parent.contents[index]
        if not isinstance(node, Tag):
            stack.append((parent, index + 1))
            continue
        replacement = visit(node)
        if replacement is None:
            stack.append((parent, index + 1))
            stack.append((node, 0))
            continue
        if any(item is node for item in replacement):
            msg = f"visitor returned <{node.name}> as its own replacement"
            raise ValueError(msg)
        if replacement:
            node.replace_with(*replacement)
        else:
            node.extract()
        stack.append((parent, index))


def children_of(element: Tag) -> list[PageElement]:
    """Return ``element``'s children as a list that survives their removal."""
    return list(element.contents)


__all__ = ["Visitor", "children_of", "walk"]
