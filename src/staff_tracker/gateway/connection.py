from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

TokenProvider = Callable[[], Optional[str]]


@dataclass(frozen=True)
class ApiConfig:
    base_url: str
    timeout: float = 10.0
    retries: int = 2


class ApiConnection:
    """Singleton-like HTTP session factory for the REST API.

    Note: one pooled session per process; the bearer token is resolved per call
    so each signed-in browser session uses its own token.
    """

    _instance: Optional["ApiConnection"] = None

    def __init__(self, config: ApiConfig, token_provider: Optional[TokenProvider] = None):
        self._config = config
        self._token_provider = token_provider
        self.session = self._build_session(config)

    @classmethod
    def get_instance(cls, config: ApiConfig, token_provider: Optional[TokenProvider] = None) -> "ApiConnection":
        if cls._instance is None or cls._instance._config != config:
            cls._instance = ApiConnection(config, token_provider)
        else:
            cls._instance._token_provider = token_provider
        return cls._instance

    @staticmethod
    def _build_session(config: ApiConfig) -> requests.Session:
        session = requests.Session()
        # Retry only idempotent verbs (urllib3 default allowed_methods); POST is never replayed.
        retry = Retry(
            total=int(config.retries),
            backoff_factor=0.3,
            status_forcelist=(502, 503, 504),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        session.headers.update({"Accept": "application/json"})
        return session

    @property
    def timeout(self) -> float:
        return float(self._config.timeout)

    def url(self, path: str) -> str:
        return f"{self._config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def headers(self) -> Dict[str, str]:
        token = self._token_provider() if self._token_provider else None
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}
