"""
Collects the fragment names an operation spreads, at any depth of its
selection tree.
"""

from typing import Iterable, List

from graphql.language.ast import (
    FieldNode,
    FragmentSpreadNode,
    InlineFragmentNode,
    SelectionNode,
)


def collect_fragment_names(selections: Iterable[SelectionNode]) -> List[str]:
    """
    Return the names of every fragment spread found in selections.

    The walk is depth-first and follows source order, so a spread is listed
    before any spread nested inside a later sibling. Names are not
    deduplicated, and fragment definitions themselves are not followed.

    Raises TypeError for a node that is not a field, fragment spread or
    inline fragment.
    """
    names: List[str] = []
    for node in selections:
        if isinstance(node, FragmentSpreadNode):
            names.append(node.name.value)
        elif isinstance(node, (FieldNode, InlineFragmentNode)):
            if node.selection_set and node.selection_set.selections:
                names.extend(collect_fragment_names(node.selection_set.selections))
        else:
            raise TypeError(f"Unsupported selection node: {type(node).__name__}")
    return names
