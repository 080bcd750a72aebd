# restaurant_pos/services/menu_catalog.py
import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from restaurant_pos.schemas.menu import MenuItem

logger = logging.getLogger(__name__)


class MenuCatalog:
    """
    Read-only menu reference data.

    Built once per process from a JSON list of
    {"id", "name", "price", "category", "description"?} objects.
    """

    def __init__(self, items: Iterable[MenuItem]):
        self._items: Dict[int, MenuItem] = {}
        for item in items:
            if item.id in self._items:
                raise ValueError(f"Duplicate menu item id {item.id}")
            self._items[item.id] = item

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "MenuCatalog":
        with open(path, encoding="utf-8") as fh:
            raw = json.load(fh)
        catalog = cls(MenuItem.model_validate(entry) for entry in raw)
        logger.info(f"Menu catalog loaded from {path}: {len(catalog)} items")
        return catalog

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: int) -> bool:
        return item_id in self._items

    def get(self, item_id: int) -> Optional[MenuItem]:
        return self._items.get(item_id)

    def categories(self) -> List[str]:
        seen: List[str] = []
        for item in self._items.values():
            if item.category not in seen:
                seen.append(item.category)
        return seen

    def list_items(self, *, category: Optional[str] = None, search: Optional[str] = None) -> List[MenuItem]:
        items = list(self._items.values())
        if category:
            items = [item for item in items if item.category == category]
        if search:
            needle = search.strip().lower()
            items = [item for item in items if needle in item.name.lower()]
        return items
