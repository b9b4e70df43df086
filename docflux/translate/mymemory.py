"""MyMemory translation adapter for docflux."""

from __future__ import annotations

import logging

import httpx

from docflux.config.models import TranslationSettings
from docflux.errors import RemoteServiceError, ServiceUnavailable
from docflux.translate.base import Translator

logger = logging.getLogger(__name__)

_VENDOR = "mymemory"


class MyMemoryTranslator(Translator):
    """Translator backed by the public MyMemory ``/get`` endpoint via httpx."""

    name = _VENDOR

    def __init__(
        self,
        settings: TranslationSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or TranslationSettings()
        self._base_url = self.settings.base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=float(self.settings.timeout))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def translate(self, text: str, target_language: str) -> str:
        params = {"q": text, "langpair": f"auto|{target_language}"}
        if self.settings.contact_email:
            params["de"] = self.settings.contact_email
        headers = {"User-Agent": self.settings.user_agent, "Accept": "application/json"}

        logger.info("Requesting translation to %s (%d chars)", target_language, len(text))
        try:
            resp = await self._client.get(
                f"{self._base_url}/get", params=params, headers=headers
            )
        except httpx.TransportError as e:
            raise ServiceUnavailable(
                _VENDOR, "translate", "Translation service temporarily unavailable"
            ) from e

        if not resp.is_success:
            logger.warning("MyMemory returned HTTP %d", resp.status_code)
            if resp.status_code >= 500 or resp.status_code == 429:
                raise ServiceUnavailable(
                    _VENDOR,
                    "translate",
                    "Translation service temporarily unavailable",
                    status_code=resp.status_code,
                )
            raise RemoteServiceError(
                _VENDOR,
                "translate",
                f"Translation request rejected (HTTP {resp.status_code})",
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise RemoteServiceError(_VENDOR, "translate", "Malformed translation response") from e
        if not isinstance(data, dict):
            raise RemoteServiceError(_VENDOR, "translate", "Malformed translation response")

        status = data.get("responseStatus")
        if str(status) != "200":
            detail = data.get("responseDetails") or "Translation service unavailable"
            raise RemoteServiceError(_VENDOR, "translate", str(detail))

        translated = (data.get("responseData") or {}).get("translatedText")
        if not translated:
            raise RemoteServiceError(
                _VENDOR, "translate", "No translation received from the service"
            )
        return translated
