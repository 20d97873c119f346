"""Device-wide preference routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_store
from app.schemas.insights import LanguageSetting
from app.services.user_service import UserService
from app.storage import RecordStore

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/language", response_model=LanguageSetting)
async def read_language(store: RecordStore = Depends(get_store)) -> LanguageSetting:
	return LanguageSetting(language=await UserService(store).get_language())


@router.put("/language", response_model=LanguageSetting)
async def update_language(
	payload: LanguageSetting,
	store: RecordStore = Depends(get_store),
) -> LanguageSetting:
	return LanguageSetting(language=await UserService(store).set_language(payload.language))
