# restaurant_pos/api/v1/endpoints/menu.py
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from restaurant_pos import schemas
from restaurant_pos.api import deps
from restaurant_pos.db.models.user import User
from restaurant_pos.services.menu_catalog import MenuCatalog

router = APIRouter()


@router.get("/items", response_model=List[schemas.MenuItem])
def read_menu_items(
    category: Optional[str] = None,
    search: Optional[str] = None,
    catalog: MenuCatalog = Depends(deps.get_menu_catalog),
    current_user: User = Depends(deps.get_current_active_user),
) -> Any:
    """
    Menu items, optionally narrowed to a category and/or a name search.
    """
    return catalog.list_items(category=category, search=search)


@router.get("/items/{item_id}", response_model=schemas.MenuItem)
def read_menu_item(
    item_id: int,
    catalog: MenuCatalog = Depends(deps.get_menu_catalog),
    current_user: User = Depends(deps.get_current_active_user),
) -> Any:
    item = catalog.get(item_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu item not found")
    return item


@router.get("/categories", response_model=List[str])
def read_menu_categories(
    catalog: MenuCatalog = Depends(deps.get_menu_catalog),
    current_user: User = Depends(deps.get_current_active_user),
) -> Any:
    return catalog.categories()
