"""
Category tree aggregation.

Categories are stored flat, each row pointing at its parent by id. The helpers in
this module turn one bulk fetch of those rows plus one map of *direct* product
counts into the shapes the storefront needs:

- a forest of :class:`CategoryTreeNode` (roots with nested ``children``), where
  each root's ``product_count`` covers its whole subtree;
- per-category subtree totals for the flat and by-parent listings.

Nodes are linked through an id-keyed map rather than through ORM relationships,
so the same rows can be reshaped for several listings without aliasing.
"""
import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Optional

from ..models import Category
from ..schemas.category import CategoryTreeNode, CategoryWithCount


logger = logging.getLogger(__name__)

ChildrenIndex = Dict[Optional[str], List[Category]]


def sort_key(category: Category):
    """Display order: ``order`` ascending, then name ascending."""
    return (category.order or 0, category.name or "")


def sort_categories(categories: Iterable[Category]) -> List[Category]:
    return sorted(categories, key=sort_key)


def index_children(categories: Iterable[Category]) -> ChildrenIndex:
    """
    Group categories by parent id, each group in display order.

    The ``None`` key holds the roots.
    """
    index: ChildrenIndex = defaultdict(list)
    for category in sort_categories(categories):
        index[category.parent_id].append(category)
    return index


def total_product_count(
    category_id: str,
    children_index: ChildrenIndex,
    direct_counts: Mapping[str, int],
) -> int:
    """
    Products in ``category_id`` plus those of every descendant, at any depth.
    """
    total = direct_counts.get(category_id, 0)
    for child in children_index.get(category_id, []):
        total += total_product_count(child.id, children_index, direct_counts)
    return total


def _subtree_total(node: CategoryTreeNode) -> int:
    total = node.product_count
    for child in node.children:
        total += _subtree_total(child)
    return total


def build_category_forest(
    categories: Iterable[Category],
    direct_counts: Mapping[str, int],
) -> List[CategoryTreeNode]:
    """
    Build the category forest with aggregated counts on the roots.

    Every node starts with its direct product count. Children are attached to
    their parent's node in display order. A category whose parent id matches no
    fetched category is left out of the forest. Finally each root's count is
    replaced by the sum over its subtree; deeper nodes keep their direct count.
    """
    ordered = sort_categories(categories)

    nodes: Dict[str, CategoryTreeNode] = {}
    for category in ordered:
        node = CategoryTreeNode.model_validate(category)
        node.product_count = direct_counts.get(category.id, 0)
        nodes[category.id] = node

    roots: List[CategoryTreeNode] = []
    for category in ordered:
        node = nodes[category.id]

        if category.parent_id is None:
            roots.append(node)
            continue

        parent = nodes.get(category.parent_id)
        if parent is None:
            logger.debug("Category %s references missing parent %s, leaving it out of the tree",
                         category.id, category.parent_id)
            continue

        parent.children.append(node)

    for root in roots:
        root.product_count = _subtree_total(root)

    return roots


def annotate_counts(
    categories: Iterable[Category],
    children_index: ChildrenIndex,
    direct_counts: Mapping[str, int],
    aggregate_roots: bool = True,
) -> List[CategoryWithCount]:
    """
    Attach a ``product_count`` to each category of a flat listing.

    Roots get their full subtree total when ``aggregate_roots`` is set, every
    other category its direct count.
    """
    annotated = []
    for category in categories:
        if aggregate_roots and category.parent_id is None:
            count = total_product_count(category.id, children_index, direct_counts)
        else:
            count = direct_counts.get(category.id, 0)

        item = CategoryWithCount.model_validate(category)
        item.product_count = count
        annotated.append(item)
    return annotated
