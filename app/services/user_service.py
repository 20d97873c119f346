"""User registration, username login, session record and profile service."""

from __future__ import annotations

import uuid

from app.auth.models import User
from app.errors import DuplicateError, NotFoundError
from app.models.enums import LanguageEnum
from app.models.records import ClimateObservation, CropRecord, PredictionRecord
from app.schemas.auth import ProfileUpdate, RegisterRequest, UserStats
from app.storage import (
	CURRENT_USER_KEY,
	LANGUAGE_KEY,
	USERS_KEY,
	RecordStore,
	climate_data_key,
	crop_data_key,
	predictions_key,
)


class UserService:
	def __init__(self, store: RecordStore):
		self.store = store

	async def list_users(self) -> list[User]:
		return await self.store.read_list(USERS_KEY, User)

	async def register(self, payload: RegisterRequest) -> User:
		users = await self.list_users()
		if any(existing.username == payload.username for existing in users):
			raise DuplicateError(f"Username {payload.username!r} is already registered")

		user = User(
			username=payload.username,
			email=payload.email,
			full_name=payload.full_name,
			location=payload.location,
		)
		await self.store.write_list(USERS_KEY, [*users, user])
		await self.store.write_record(CURRENT_USER_KEY, user)
		return user

	async def login(self, username: str) -> User:
		users = await self.list_users()
		for user in users:
			if user.username == username:
				await self.store.write_record(CURRENT_USER_KEY, user)
				return user
		raise NotFoundError(f"User {username!r} not found")

	async def logout(self) -> None:
		await self.store.delete(CURRENT_USER_KEY)

	async def current_session(self) -> User | None:
		return await self.store.read_record(CURRENT_USER_KEY, User)

	async def get_user(self, user_id: uuid.UUID) -> User:
		for user in await self.list_users():
			if user.id == user_id:
				return user
		raise NotFoundError(f"User {user_id} not found")

	async def update_profile(self, user_id: uuid.UUID, payload: ProfileUpdate) -> User:
		users = await self.list_users()
		changes = payload.model_dump(exclude_none=True)
		updated: User | None = None
		for index, user in enumerate(users):
			if user.id == user_id:
				updated = user.model_copy(update=changes)
				users[index] = updated
				break
		if updated is None:
			raise NotFoundError(f"User {user_id} not found")

		await self.store.write_list(USERS_KEY, users)
		session = await self.current_session()
		if session is not None and session.id == user_id:
			await self.store.write_record(CURRENT_USER_KEY, updated)
		return updated

	async def stats(self, user_id: uuid.UUID) -> UserStats:
		crops = await self.store.read_list(crop_data_key(user_id), CropRecord)
		observations = await self.store.read_list(climate_data_key(user_id), ClimateObservation)
		predictions = await self.store.read_list(predictions_key(user_id), PredictionRecord)
		return UserStats(
			crop_records=len(crops),
			climate_observations=len(observations),
			predictions=len(predictions),
		)

	async def get_language(self) -> LanguageEnum:
		stored = await self.store.read_json(LANGUAGE_KEY)
		try:
			return LanguageEnum(stored)
		except ValueError:
			return LanguageEnum.en

	async def set_language(self, language: LanguageEnum) -> LanguageEnum:
		await self.store.write_json(LANGUAGE_KEY, language.value)
		return language
