from fastapi import APIRouter, Depends, Path, Query
from typing import List, Union

from ..core.dependencies import get_category_service
from ..schemas.category import CategoryResponse, CategoryTreeNode, CategoryWithCount
from ..services import CategoryService


router = APIRouter()


def parse_parent_id(parent_id: str):
    """The literal ``null`` path segment selects the root level."""
    return None if parent_id == "null" else parent_id


@router.get("", response_model=None)
async def list_categories(
    hierarchical: bool = Query(False, description="Return the nested category forest"),
    service: CategoryService = Depends(get_category_service),
) -> Union[List[CategoryTreeNode], List[CategoryWithCount]]:
    """
    **List Categories**

    - Flat (default): every category ordered by `order` then `name`. Root
      categories carry the product count of their whole subtree, the others
      their direct count.
    - `?hierarchical=true`: the category forest with nested `children`.
    """
    if hierarchical:
        return await service.get_categories_hierarchical()

    return await service.get_categories_flat()


@router.get("/hierarchical", response_model=List[CategoryTreeNode])
async def list_categories_hierarchical(
    service: CategoryService = Depends(get_category_service),
):
    """
    Return the category forest. Each root's `productCount` includes all of its
    descendants.
    """
    return await service.get_categories_hierarchical()


@router.get("/parent/{parent_id}", response_model=List[CategoryWithCount])
async def list_categories_by_parent(
    parent_id: str = Path(..., description="Parent category ID, or `null` for root categories"),
    service: CategoryService = Depends(get_category_service),
):
    """
    Return the direct children of a category. Root categories (`null`) are
    annotated with their full subtree product count.
    """
    return await service.get_categories_by_parent(parse_parent_id(parent_id))


@router.get("/{slug}", response_model=CategoryResponse)
async def get_category_by_slug(
    slug: str = Path(..., description="Category slug"),
    service: CategoryService = Depends(get_category_service),
):
    return await service.get_category_by_slug(slug)
