"""
/**
 * @file backend/controllers/languages_controller.py
 * @description 语言列表控制器。
 */
"""

from fastapi import APIRouter

from backend.services.language_catalog_service import list_languages


router = APIRouter()


@router.get("/api/languages")
def languages():
    return list_languages()
