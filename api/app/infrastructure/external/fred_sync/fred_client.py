"""
Cliente mínimo de FRED REST API (sin SDKs externos).

Requisitos cubiertos:
- requests
- timeout acotado por request
- rate-limit/backoff (429, 5xx, errores de conexión)
- fetch incremental usando observation_start
"""

from __future__ import annotations

import random
import time
from datetime import date
from typing import Any, Optional

import requests

from .types import Observation, parse_observation_date, parse_observation_value


class FredApiError(RuntimeError):
    """Error de integración con FRED."""


class FredClient:
    """
    Cliente HTTP de FRED.

    Importante:
    - El valor "." de FRED se mapea a None, nunca a 0.
    - Si la respuesta no trae 'observations' se interpreta como cero resultados.
    """

    def __init__(
        self,
        api_key: str,
        *,
        session: Optional[requests.Session] = None,
        base_url: str = "https://api.stlouisfed.org/fred",
        timeout_s: float = 30,
        max_retries: int = 4,
        min_backoff_s: float = 1.0,
        max_backoff_s: float = 30.0,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._max_retries = max_retries
        self._min_backoff_s = min_backoff_s
        self._max_backoff_s = max_backoff_s
        self._session = session or requests.Session()

    def fetch_observations(self, series_id: str, observation_start: date) -> list[Observation]:
        """
        Trae todas las observaciones de la serie con date >= observation_start.
        """
        url = f"{self._base_url}/series/observations"
        params = {
            "series_id": series_id,
            "observation_start": observation_start.isoformat(),
            "api_key": self._api_key,
            "file_type": "json",
        }
        payload = self._request_json(url, params=params)

        raw_observations = payload.get("observations")
        if not raw_observations:
            return []

        observations: list[Observation] = []
        for obs in raw_observations:
            try:
                obs_date = parse_observation_date(obs.get("date"))
            except (ValueError, AttributeError) as e:
                raise FredApiError(
                    f"Observación con fecha inválida para {series_id}: {obs!r}"
                ) from e
            observations.append(
                Observation(
                    series_id=series_id,
                    date=obs_date,
                    value=parse_observation_value(obs.get("value")),
                )
            )
        return observations

    def _request_json(self, url: str, *, params: dict[str, Any]) -> dict[str, Any]:
        """
        GET con backoff.

        Estrategia:
        - 429: respeta Retry-After (acotado a max_backoff_s), si no exponencial con jitter.
        - 5xx / timeout / error de conexión: exponencial con jitter.
        - 4xx (no 429): error inmediato (series_id o api_key mal).
        """
        for attempt in range(self._max_retries + 1):
            try:
                resp = self._session.get(url, params=params, timeout=self._timeout_s)
            except (requests.ConnectionError, requests.Timeout) as e:
                if attempt >= self._max_retries:
                    raise FredApiError(
                        f"FRED no respondió tras {attempt} reintentos: {e}"
                    ) from e
                time.sleep(self._backoff_s(attempt))
                continue

            if 200 <= resp.status_code < 300:
                try:
                    payload = resp.json()
                except ValueError as e:
                    raise FredApiError(f"Respuesta de FRED no es JSON: {resp.text[:200]}") from e
                if not isinstance(payload, dict):
                    raise FredApiError(f"Respuesta de FRED inesperada: {payload!r}")
                return payload

            # Errores recuperables
            if resp.status_code == 429 or 500 <= resp.status_code < 600:
                if attempt >= self._max_retries:
                    raise FredApiError(
                        f"FRED error {resp.status_code} tras {attempt} reintentos: {resp.text[:200]}"
                    )

                retry_after = resp.headers.get("Retry-After")
                if retry_after:
                    try:
                        sleep_s = max(0.0, min(float(retry_after), self._max_backoff_s))
                    except ValueError:
                        sleep_s = self._min_backoff_s
                else:
                    sleep_s = self._backoff_s(attempt)

                time.sleep(sleep_s)
                continue

            # Errores no recuperables
            raise FredApiError(
                f"FRED request falló {resp.status_code}: {self._error_message(resp)}"
            )

        raise FredApiError("FRED request agotó los reintentos")

    def _backoff_s(self, attempt: int) -> float:
        # Exponencial + jitter aleatorio de hasta 15%, sin pasar max_backoff_s
        base = min(self._max_backoff_s, self._min_backoff_s * (2**attempt))
        return min(self._max_backoff_s, base + random.uniform(0, 0.15 * base))

    @staticmethod
    def _error_message(resp: requests.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            return resp.text[:200]
        if isinstance(body, dict) and body.get("error_message"):
            return str(body["error_message"])
        return resp.text[:200]
