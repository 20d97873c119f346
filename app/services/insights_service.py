"""Text-generation insights: prompt assembly, the completion call and strict response parsing.

Every failure path degrades to a documented static fallback: a missing API
key, a transport/HTTP error, or an empty completion yields
``FALLBACK_RECOMMENDATIONS`` / ``FALLBACK_RISK_FACTORS``; a completion that
is not the expected JSON shape is kept as free text
(``UnstructuredInsight``) and paired with ``UNSTRUCTURED_RECOMMENDATIONS`` /
``UNSTRUCTURED_RISK_FACTORS``.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

import httpx
import structlog

from app.config import Settings, get_settings
from app.engine.climate import ClimateAggregate
from app.models.enums import CropTypeEnum
from app.schemas.insights import WeatherInsight

_logger = structlog.get_logger("mavuno.insights")

SUMMARY_PREVIEW_CHARS = 200
MAX_ADVICE_ITEMS = 5
MIN_ADVICE_CHARS = 10

UNSTRUCTURED_RECOMMENDATIONS = (
	"Monitor weather conditions regularly",
	"Adjust irrigation based on rainfall patterns",
	"Consider climate-adapted varieties",
)
UNSTRUCTURED_RISK_FACTORS = (
	"Temperature fluctuations",
	"Irregular rainfall patterns",
	"Humidity-related diseases",
)
FALLBACK_RECOMMENDATIONS = (
	"Implement water conservation techniques",
	"Use appropriate fertilizer timing",
	"Monitor for pest and disease pressure",
	"Consider intercropping for risk mitigation",
)
FALLBACK_RISK_FACTORS = (
	"Climate variability",
	"Seasonal weather changes",
	"Potential drought stress",
	"Disease pressure from humidity",
)
FALLBACK_ADVICE = (
	"Optimize planting density for maximum yield",
	"Implement precision fertilizer application",
	"Use integrated pest management strategies",
	"Improve soil health through organic matter",
	"Monitor crop growth stages carefully",
)

_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")
_NUMBERING = re.compile(r"^\d+\.?\s*")


@dataclass(frozen=True, slots=True)
class StructuredInsight:
	insight: WeatherInsight


@dataclass(frozen=True, slots=True)
class UnstructuredInsight:
	raw_text: str


InsightResult = StructuredInsight | UnstructuredInsight


def _string_list(value: Any) -> list[str] | None:
	if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
		return None
	return list(value)


def parse_insight_text(text: str) -> InsightResult:
	"""Accept only ``{summary: str, recommendations: [str], riskFactors: [str]}``."""
	try:
		payload = json.loads(_FENCE.sub("", text.strip()))
	except json.JSONDecodeError:
		return UnstructuredInsight(raw_text=text)
	if not isinstance(payload, dict):
		return UnstructuredInsight(raw_text=text)

	summary = payload.get("summary")
	recommendations = _string_list(payload.get("recommendations"))
	risk_factors = _string_list(payload.get("riskFactors", payload.get("risk_factors")))
	if not isinstance(summary, str) or recommendations is None or risk_factors is None:
		return UnstructuredInsight(raw_text=text)

	return StructuredInsight(
		insight=WeatherInsight(summary=summary, recommendations=recommendations, risk_factors=risk_factors)
	)


def resolve_insight(result: InsightResult) -> WeatherInsight:
	match result:
		case StructuredInsight(insight=insight):
			return insight
		case UnstructuredInsight(raw_text=raw_text):
			return WeatherInsight(
				summary=raw_text[:SUMMARY_PREVIEW_CHARS] + "...",
				recommendations=list(UNSTRUCTURED_RECOMMENDATIONS),
				risk_factors=list(UNSTRUCTURED_RISK_FACTORS),
			)
	raise TypeError(f"unsupported insight result: {result!r}")


def fallback_insight(crop_type: CropTypeEnum, location: str) -> WeatherInsight:
	return WeatherInsight(
		summary=(
			f"Climate analysis for {crop_type.value} in {location} shows mixed conditions "
			"that require careful management."
		),
		recommendations=list(FALLBACK_RECOMMENDATIONS),
		risk_factors=list(FALLBACK_RISK_FACTORS),
	)


def parse_advice(text: str) -> list[str]:
	lines = (_NUMBERING.sub("", line.strip()).strip() for line in text.splitlines())
	advice = [line for line in lines if len(line) > MIN_ADVICE_CHARS]
	return advice[:MAX_ADVICE_ITEMS] or list(FALLBACK_ADVICE)


class InsightsService:
	def __init__(
		self,
		settings: Settings | None = None,
		transport: httpx.AsyncBaseTransport | None = None,
	):
		self.settings = settings or get_settings()
		self.transport = transport

	@staticmethod
	def build_weather_prompt(crop_type: CropTypeEnum, location: str, climate: ClimateAggregate) -> str:
		return (
			"As an agricultural expert specializing in East African farming, analyze the following "
			f"climate data for {crop_type.value} cultivation in {location}:\n\n"
			"Climate Data:\n"
			f"- Average Temperature: {climate.temperature:.1f}°C\n"
			f"- Average Rainfall: {climate.rainfall:.0f}mm\n"
			f"- Average Humidity: {climate.humidity:.1f}%\n"
			f"- Location: {location}\n\n"
			"Please provide:\n"
			f"1. A brief summary of how these conditions affect {crop_type.value} growth\n"
			"2. Specific recommendations for optimizing yield under these conditions\n"
			"3. Key risk factors to monitor\n\n"
			"Format your response as JSON with keys: summary, recommendations (array), riskFactors (array)"
		)

	@staticmethod
	def build_advice_prompt(crop_type: CropTypeEnum, predicted_yield: float, field_size: float) -> str:
		return (
			f"As an agricultural advisor, provide {MAX_ADVICE_ITEMS} specific optimization strategies for "
			f"{crop_type.value} cultivation with a predicted yield of {predicted_yield:.2f} tons on "
			f"{field_size:g} acres. Focus on practical, actionable advice for farmers in Tanzania."
		)

	async def weather_insight(
		self,
		crop_type: CropTypeEnum,
		location: str,
		climate: ClimateAggregate,
	) -> WeatherInsight:
		prompt = self.build_weather_prompt(crop_type, location, climate)
		text = await self._complete_or_none(prompt, max_tokens=500, temperature=0.7)
		if text is None:
			return fallback_insight(crop_type, location)
		return resolve_insight(parse_insight_text(text))

	async def optimization_advice(
		self,
		crop_type: CropTypeEnum,
		predicted_yield: float,
		field_size: float,
	) -> list[str]:
		prompt = self.build_advice_prompt(crop_type, predicted_yield, field_size)
		text = await self._complete_or_none(prompt, max_tokens=300, temperature=0.6)
		if text is None:
			return list(FALLBACK_ADVICE)
		return parse_advice(text)

	async def _complete_or_none(self, prompt: str, *, max_tokens: int, temperature: float) -> str | None:
		if not self.settings.text_generation_api_key:
			return None
		try:
			text = await self.call_completion(prompt, max_tokens=max_tokens, temperature=temperature)
		except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError) as exc:
			_logger.warning("text_generation_failed", error=str(exc))
			return None
		return text or None

	async def call_completion(self, prompt: str, *, max_tokens: int, temperature: float) -> str:
		headers = {
			"authorization": f"Bearer {self.settings.text_generation_api_key}",
			"content-type": "application/json",
		}
		body = {
			"model": self.settings.text_generation_model,
			"messages": [{"role": "user", "content": prompt}],
			"max_tokens": max_tokens,
			"temperature": temperature,
		}
		url = f"{self.settings.text_generation_base_url.rstrip('/')}/chat/completions"

		async with httpx.AsyncClient(
			timeout=self.settings.text_generation_timeout_seconds,
			transport=self.transport,
		) as client:
			response = await client.post(url, headers=headers, json=body)
			response.raise_for_status()
			payload = response.json()

		content = payload["choices"][0]["message"]["content"]
		return str(content or "").strip()
