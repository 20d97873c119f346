"""Crop record CRUD routes."""

from __future__ import annotations

import uuid

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.auth.dependencies import get_current_user, get_store
from app.auth.models import User
from app.schemas.crop import CropCreate, CropListRead, CropRead
from app.services.crop_service import CropService
from app.storage import RecordStore

router = APIRouter(prefix="/crops", tags=["crops"])

_logger = structlog.get_logger("mavuno.crops")


def _map_error(exc: Exception) -> HTTPException:
	if isinstance(exc, LookupError):
		return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
	if isinstance(exc, ValueError):
		return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
	_logger.error("crop_service_failed", error=str(exc), error_type=type(exc).__name__)
	return HTTPException(
		status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
		detail="Unexpected crop service failure",
	)


@router.post("", response_model=CropRead, status_code=status.HTTP_201_CREATED)
async def create_crop(
	payload: CropCreate,
	store: RecordStore = Depends(get_store),
	current_user: User = Depends(get_current_user),
) -> CropRead:
	try:
		crop = await CropService(store).create_crop(current_user.id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return CropRead.model_validate(crop)


@router.get("", response_model=CropListRead)
async def list_crops(
	store: RecordStore = Depends(get_store),
	current_user: User = Depends(get_current_user),
) -> CropListRead:
	try:
		crops = await CropService(store).list_crops(current_user.id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return CropListRead(items=[CropRead.model_validate(crop) for crop in crops])


@router.get("/{crop_id}", response_model=CropRead)
async def get_crop(
	crop_id: uuid.UUID,
	store: RecordStore = Depends(get_store),
	current_user: User = Depends(get_current_user),
) -> CropRead:
	try:
		crop = await CropService(store).get_crop(current_user.id, crop_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return CropRead.model_validate(crop)


@router.put("/{crop_id}", response_model=CropRead)
async def update_crop(
	crop_id: uuid.UUID,
	payload: CropCreate,
	store: RecordStore = Depends(get_store),
	current_user: User = Depends(get_current_user),
) -> CropRead:
	try:
		crop = await CropService(store).update_crop(current_user.id, crop_id, payload)
	except Exception as exc:
		raise _map_error(exc) from exc
	return CropRead.model_validate(crop)


@router.delete("/{crop_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_crop(
	crop_id: uuid.UUID,
	confirm: bool = Query(default=False),
	store: RecordStore = Depends(get_store),
	current_user: User = Depends(get_current_user),
) -> Response:
	if not confirm:
		raise HTTPException(
			status_code=status.HTTP_400_BAD_REQUEST,
			detail="Deleting a crop record requires confirm=true",
		)
	try:
		await CropService(store).delete_crop(current_user.id, crop_id)
	except Exception as exc:
		raise _map_error(exc) from exc
	return Response(status_code=status.HTTP_204_NO_CONTENT)
