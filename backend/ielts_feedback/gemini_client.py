from __future__ import annotations
import logging
import httpx
from typing import Any, Dict, Optional
from .errors import UpstreamFormatError, UpstreamUnavailable
from .settings import Settings, settings

logger = logging.getLogger(__name__)


class GeminiClient:
	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		config: Optional[Settings] = None,
	) -> None:
		cfg = config or settings
		self.api_key = api_key or cfg.gemini_api_key
		self._openrouter_api_key = cfg.openrouter_api_key
		if not self.api_key and not self._openrouter_api_key:
			raise UpstreamUnavailable("GEMINI_API_KEY is not configured")
		self.model = model or cfg.gemini_model
		self.provider = cfg.gemini_provider
		if self.provider == "vertex":
			region = cfg.vertex_region
			project = cfg.vertex_project or "placeholder-project"
			# Vertex AI Generative REST endpoint (API key via header)
			self.base_url = base_url or (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}/publishers/google/models/{self.model}:generateContent"
			)
			self._auth_in_query = False
		else:
			# Google AI Studio (Generative Language API)
			self.base_url = base_url or f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
			self._auth_in_query = True
		self._client = httpx.AsyncClient(timeout=cfg.llm_timeout_seconds)
		self._fallback_client: Optional[httpx.AsyncClient] = None
		self._fallback_enabled = bool(self._openrouter_api_key)
		self._openrouter_model = cfg.openrouter_model
		self._openrouter_base_url = cfg.openrouter_base_url
		self._openrouter_headers = {
			"Authorization": f"Bearer {self._openrouter_api_key}" if self._openrouter_api_key else "",
			"Content-Type": "application/json",
			"HTTP-Referer": cfg.openrouter_referer,
			"X-Title": cfg.openrouter_title,
		}
		if self._fallback_enabled:
			self._fallback_client = httpx.AsyncClient(timeout=cfg.llm_timeout_seconds)

	async def generate(
		self,
		prompt: str,
		*,
		temperature: Optional[float] = None,
		thinking_budget: Optional[int] = None,
	) -> str:
		payload: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
		generation_config: Dict[str, Any] = {}
		if temperature is not None:
			generation_config["temperature"] = temperature
		if thinking_budget is not None:
			try:
				budget_tokens = int(thinking_budget)
			except (TypeError, ValueError):
				budget_tokens = 0
			generation_config["thinkingConfig"] = {"thinkingBudget": budget_tokens}
		if generation_config:
			payload["generationConfig"] = generation_config
		if not self.api_key:
			# Only the relay is configured
			return await self._fallback_generate(prompt, None, temperature=temperature)
		return await self._post_payload(payload, fallback_prompt=prompt, temperature=temperature)

	async def _post_payload(
		self,
		payload: Dict[str, Any],
		*,
		fallback_prompt: str,
		temperature: Optional[float] = None,
	) -> str:
		params: Dict[str, Any] = {}
		headers: Dict[str, str] = {}
		if self._auth_in_query:
			params["key"] = self.api_key
		else:
			headers["x-goog-api-key"] = self.api_key
		last_error: Optional[Exception] = None
		try:
			r = await self._client.post(self.base_url, params=params, headers=headers, json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			# Older models reject thinkingConfig; retry once without it
			thinking = payload.get("generationConfig", {}).get("thinkingConfig")
			if thinking is not None:
				retry_config = {k: v for k, v in payload["generationConfig"].items() if k != "thinkingConfig"}
				retry_payload = {**payload, "generationConfig": retry_config}
				try:
					r = await self._client.post(self.base_url, params=params, headers=headers, json=retry_payload)
					r.raise_for_status()
				except httpx.HTTPError as err:
					last_error = err
			else:
				last_error = http_err
		except httpx.RequestError as net_err:
			last_error = net_err
		if last_error is None:
			try:
				data = r.json()
				return data["candidates"][0]["content"]["parts"][0]["text"]
			except (ValueError, KeyError, IndexError, TypeError):
				last_error = UpstreamFormatError(f"Unexpected Gemini response: {r.text[:200]}", raw=r.text)
		if not self._fallback_enabled:
			if isinstance(last_error, UpstreamFormatError):
				raise last_error
			raise UpstreamUnavailable(f"Gemini call failed: {last_error}") from last_error
		logger.warning("Gemini call failed (%s); retrying via OpenRouter", last_error)
		return await self._fallback_generate(fallback_prompt, last_error, temperature=temperature)

	async def aclose(self) -> None:
		await self._client.aclose()
		if self._fallback_client is not None:
			await self._fallback_client.aclose()

	async def _fallback_generate(
		self,
		prompt: str,
		primary_error: Optional[Exception],
		*,
		temperature: Optional[float] = None,
	) -> str:
		if not self._fallback_client or not self._openrouter_api_key:
			raise UpstreamUnavailable("Fallback requested but OpenRouter is not configured") from primary_error
		headers = {k: v for k, v in self._openrouter_headers.items() if v}
		payload: Dict[str, Any] = {
			"model": self._openrouter_model,
			"messages": [{"role": "user", "content": prompt}],
		}
		if temperature is not None:
			payload["temperature"] = temperature
		try:
			r = await self._fallback_client.post(
				self._openrouter_base_url,
				headers=headers,
				json=payload,
			)
			r.raise_for_status()
		except httpx.HTTPError as fallback_err:
			if primary_error is not None:
				raise UpstreamUnavailable(
					f"Gemini primary call failed ({primary_error}); fallback via OpenRouter also failed"
				) from fallback_err
			raise UpstreamUnavailable(f"OpenRouter call failed: {fallback_err}") from fallback_err
		try:
			data = r.json()
			return data["choices"][0]["message"]["content"]
		except (ValueError, KeyError, IndexError, TypeError) as err:
			raise UpstreamFormatError(f"Unexpected OpenRouter response: {r.text[:200]}", raw=r.text) from err
