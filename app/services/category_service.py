import logging
import re
import unicodedata
from typing import List, Optional
from uuid import uuid4

from ..exceptions import BadRequestException, ConflictException, NotFoundException
from ..models import Category
from ..repositories import Storage
from ..schemas.category import (
    CategoryCreate,
    CategoryTreeNode,
    CategoryUpdate,
    CategoryWithCount,
)
from . import category_tree


logger = logging.getLogger(__name__)

# characters NFKD does not decompose to ASCII
_SLUG_TRANSLATIONS = str.maketrans({"ı": "i", "İ": "i", "ß": "ss"})


def slugify(name: str) -> str:
    slug = name.translate(_SLUG_TRANSLATIONS)
    slug = unicodedata.normalize("NFKD", slug).encode("ascii", "ignore").decode("ascii")
    slug = slug.lower().replace(" ", "-").replace("_", "-")

    # Remove special characters and multiple dashes
    slug = re.sub(r'[^a-z0-9\-]', '', slug)
    return re.sub(r'-+', '-', slug).strip('-')


class CategoryService:
    """
    Service class for the category catalog.

    Read operations rebuild the category tree from storage on every call (one
    bulk category fetch plus one aggregate product count query) and hold no
    state between calls. Write operations enforce the administrative rules: unique
    slugs, no self-parenting, and no deletion of a category that still has
    children or products.

    Attributes:
        storage (Storage): persistence boundary used for every lookup and write.
    """

    def __init__(self, storage: Storage):
        self.storage = storage


    async def _load_tree_inputs(self):
        categories = await self.storage.get_categories()
        direct_counts = await self.storage.get_category_product_counts()
        return categories, direct_counts


    async def get_categories_hierarchical(self) -> List[CategoryTreeNode]:
        """
        Return the category forest.

        Each root carries the product count of its whole subtree; nested nodes
        carry their direct count. Categories whose parent is missing are left out.
        """
        categories, direct_counts = await self._load_tree_inputs()
        return category_tree.build_category_forest(categories, direct_counts)


    async def get_categories_by_parent(self, parent_id: Optional[str]) -> List[CategoryWithCount]:
        """
        Return the direct children of ``parent_id`` (roots when it is None).

        At the root level each category is annotated with its full subtree total,
        below it with its direct count.
        """
        level = await self.storage.get_categories_by_parent(parent_id)
        direct_counts = await self.storage.get_category_product_counts()

        children_index = {}
        if parent_id is None:
            children_index = category_tree.index_children(await self.storage.get_categories())

        return category_tree.annotate_counts(
            category_tree.sort_categories(level),
            children_index,
            direct_counts,
            aggregate_roots=parent_id is None,
        )


    async def get_categories_flat(self) -> List[CategoryWithCount]:
        """
        Return every category in display order.

        Roots carry their subtree total, every other category its direct count.
        """
        categories, direct_counts = await self._load_tree_inputs()
        children_index = category_tree.index_children(categories)
        return category_tree.annotate_counts(
            category_tree.sort_categories(categories), children_index, direct_counts
        )


    async def list_categories(self) -> List[Category]:
        return await self.storage.get_categories()


    async def list_child_categories(self, parent_id: Optional[str]) -> List[Category]:
        return category_tree.sort_categories(await self.storage.get_categories_by_parent(parent_id))


    async def get_category_total_product_count(self, category_id: str) -> int:
        categories, direct_counts = await self._load_tree_inputs()
        return category_tree.total_product_count(
            category_id, category_tree.index_children(categories), direct_counts
        )


    async def get_category(self, category_id: str) -> Category:
        category = await self.storage.get_category(category_id)

        if not category:
            raise NotFoundException(f"Category with ID {category_id} not found")

        return category


    async def get_category_by_slug(self, slug: str) -> Category:
        category = await self.storage.get_category_by_slug(slug)

        if not category:
            raise NotFoundException("Category not found")

        return category


    async def generate_category_slug(self, name: str, category_id: Optional[str] = None) -> str:
        """
        Generate a unique slug from a category name
        """
        slug = slugify(name) or "category"

        if await self.storage.category_slug_exists(slug, category_id):
            # Add random suffix to make slug unique
            slug = f"{slug}-{uuid4().hex[:6]}"

        return slug


    async def create_category(self, data: CategoryCreate) -> Category:
        category_data = data.model_dump()

        if category_data["parent_id"] is not None:
            await self.get_category(category_data["parent_id"])

        if category_data.get("slug"):
            if await self.storage.category_slug_exists(category_data["slug"]):
                raise ConflictException(f"Category slug '{category_data['slug']}' is already in use")
        else:
            category_data["slug"] = await self.generate_category_slug(category_data["name"])

        category = await self.storage.create_category(category_data)
        logger.info("Created category %s (%s)", category.id, category.slug)
        return category


    async def update_category(self, category_id: str, data: CategoryUpdate) -> Category:
        await self.get_category(category_id)

        update_data = data.model_dump(exclude_unset=True)

        if update_data.get("parent_id") is not None:
            # Prevent setting category as its own parent
            if update_data["parent_id"] == category_id:
                raise ConflictException("Category cannot be its own parent")

            await self.get_category(update_data["parent_id"])

        if update_data.get("slug"):
            if await self.storage.category_slug_exists(update_data["slug"], category_id):
                raise ConflictException(f"Category slug '{update_data['slug']}' is already in use")
        elif "name" in update_data and update_data["name"]:
            # If name is updated without an explicit slug, update slug too
            update_data["slug"] = await self.generate_category_slug(update_data["name"], category_id)
        else:
            update_data.pop("slug", None)

        return await self.storage.update_category(category_id, update_data)


    async def delete_category(self, category_id: str) -> None:
        """
        Delete a category that has neither child categories nor products.
        """
        await self.get_category(category_id)

        if await self.storage.count_child_categories(category_id) > 0:
            raise BadRequestException(
                "Cannot delete category: it has child categories. Please delete child categories first."
            )

        if await self.storage.count_products_in_category(category_id) > 0:
            raise BadRequestException(
                "Cannot delete category: it has products. Please delete or move products first."
            )

        await self.storage.delete_category(category_id)
        logger.info("Deleted category %s", category_id)
