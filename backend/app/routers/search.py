from fastapi import APIRouter, Depends, Response

from app.config import Settings, get_settings

router = APIRouter(prefix="/search", tags=["Search"])


@router.get("/config", summary="Public search settings")
def get_search_config(response: Response, settings: Settings = Depends(get_settings)):
    """
    Algolia uygulama kimliği, yalnızca arama yetkili anahtar ve index adı.
    Admin anahtarı hiçbir zaman dönmez.
    """
    response.headers["Cache-Control"] = "public, max-age=300"
    return {
        "appId": settings.algolia_app_id,
        "searchKey": settings.algolia_search_key,
        "indexName": settings.algolia_index_name,
    }
