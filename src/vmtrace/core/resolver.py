"""
Best-effort resolution of function selectors and event topics to names.

Selectors are looked up in OpenChain (Sourcify) first, then 4byte.directory.
Any failure (network error, timeout, bad response, unknown selector) yields
None; callers fall back to the raw hex value.
"""

import threading
from typing import Dict, Optional, Tuple

import requests

from ..config import Config
from ..utils.logging import get_logger

logger = get_logger('resolver')


class SelectorResolver:
    """
    Resolves 4-byte function selectors and 32-byte event topics.

    Lookups (hits and misses) are cached per selector for the lifetime of
    the resolver, so repeated selectors in a trace cost one round-trip.
    """

    _default: Optional["SelectorResolver"] = None
    _default_lock = threading.Lock()

    def __init__(self, config: Optional[Config] = None, session: Optional[requests.Session] = None):
        self.config = config or Config.from_env()
        self.session = session or requests.Session()
        self._cache: Dict[Tuple[str, str], Optional[str]] = {}
        self._lock = threading.Lock()

    @classmethod
    def default(cls) -> "SelectorResolver":
        """Return the process-wide resolver, created from the environment on first use."""
        if cls._default is None:
            with cls._default_lock:
                if cls._default is None:
                    cls._default = cls()
        return cls._default

    def resolve_function_selector(self, selector) -> Optional[str]:
        """Resolve a 4-byte function selector (bytes or hex string)."""
        return self._resolve("function", _selector_hex(selector))

    def resolve_event_selector(self, topic) -> Optional[str]:
        """Resolve a 32-byte event topic (bytes or hex string)."""
        return self._resolve("event", _selector_hex(topic))

    def _resolve(self, kind: str, selector: str) -> Optional[str]:
        key = (kind, selector)
        with self._lock:
            if key in self._cache:
                return self._cache[key]

        name = None
        for lookup in (self._lookup_openchain, self._lookup_4byte):
            try:
                name = lookup(kind, selector)
            except (AttributeError, KeyError, TypeError) as e:
                # unexpected response shape
                logger.debug(f"Malformed {kind} lookup response for {selector}: {e}")
                name = None
            if name:
                break
        name = name or None

        with self._lock:
            self._cache[key] = name
        return name

    def _get_json(self, url: str, params: Dict[str, str]) -> Optional[dict]:
        try:
            response = self.session.get(url, params=params, timeout=self.config.resolver_timeout)
            if response.status_code != 200:
                logger.debug(f"Lookup {url} returned HTTP {response.status_code}")
                return None
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.debug(f"Lookup {url} failed: {e}")
            return None
        return data if isinstance(data, dict) else None

    def _lookup_openchain(self, kind: str, selector: str) -> Optional[str]:
        """Look up a signature from OpenChain (Sourcify)."""
        data = self._get_json(self.config.openchain_url, {kind: selector})
        if not data or not data.get('result'):
            return None
        signatures = (data['result'].get(kind) or {}).get(selector) or []
        for signature in signatures:
            if not signature.get('filtered'):
                return signature.get('name')
        return signatures[0].get('name') if signatures else None

    def _lookup_4byte(self, kind: str, selector: str) -> Optional[str]:
        """Look up a signature from 4byte.directory."""
        endpoint = "signatures" if kind == "function" else "event-signatures"
        url = f"{self.config.fourbyte_url.rstrip('/')}/{endpoint}/"
        data = self._get_json(url, {"hex_signature": selector})
        if not data or not data.get('results'):
            return None
        # Lower id = older entry
        results = sorted(data['results'], key=lambda x: x.get('id', 0))
        return results[0].get('text_signature')


def _selector_hex(value) -> str:
    if isinstance(value, (bytes, bytearray)):
        return '0x' + bytes(value).hex()
    value = str(value).lower()
    return value if value.startswith('0x') else '0x' + value
