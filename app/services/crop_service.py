"""Crop record CRUD service."""

from __future__ import annotations

import uuid

from app.errors import NotFoundError
from app.models.records import CropRecord
from app.schemas.crop import CropCreate
from app.storage import RecordStore, crop_data_key


class CropService:
	def __init__(self, store: RecordStore):
		self.store = store

	async def list_crops(self, user_id: uuid.UUID) -> list[CropRecord]:
		return await self.store.read_list(crop_data_key(user_id), CropRecord)

	async def get_crop(self, user_id: uuid.UUID, crop_id: uuid.UUID) -> CropRecord:
		for crop in await self.list_crops(user_id):
			if crop.id == crop_id:
				return crop
		raise NotFoundError(f"Crop record {crop_id} not found")

	async def create_crop(self, user_id: uuid.UUID, payload: CropCreate) -> CropRecord:
		crop = CropRecord(user_id=user_id, **payload.model_dump())
		await self.store.append(crop_data_key(user_id), CropRecord, [crop])
		return crop

	async def update_crop(self, user_id: uuid.UUID, crop_id: uuid.UUID, payload: CropCreate) -> CropRecord:
		crops = await self.list_crops(user_id)
		for index, crop in enumerate(crops):
			if crop.id == crop_id:
				updated = crop.model_copy(update=payload.model_dump())
				crops[index] = updated
				await self.store.write_list(crop_data_key(user_id), crops)
				return updated
		raise NotFoundError(f"Crop record {crop_id} not found")

	async def delete_crop(self, user_id: uuid.UUID, crop_id: uuid.UUID) -> None:
		crops = await self.list_crops(user_id)
		remaining = [crop for crop in crops if crop.id != crop_id]
		if len(remaining) == len(crops):
			raise NotFoundError(f"Crop record {crop_id} not found")
		await self.store.write_list(crop_data_key(user_id), remaining)
