from __future__ import annotations

from fastapi import APIRouter, Depends

from restaurant_api.deps import get_menu_assembler
from restaurant_api.services.menu_assembler import MenuAssembler

router = APIRouter(prefix="/menus", tags=["menus"])


@router.get("")
def full_menu(assembler: MenuAssembler = Depends(get_menu_assembler)):
    return assembler.assemble_full_menu()


@router.get("/categories/{category_id}")
def category_menu(category_id: int, assembler: MenuAssembler = Depends(get_menu_assembler)):
    return assembler.assemble_category_menu(category_id)
