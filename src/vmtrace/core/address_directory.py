"""
Directory of well-known addresses.

Maps addresses of system contracts, precompiles and popular deployments to a
display name and a classification. The table is loaded from the packaged
``data/address_map.json`` once per process and never mutated afterwards, so
it can be shared between concurrent renders without locking.
"""

import json
import threading
from importlib import resources
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

from ..models import ContractType, KnownAddress, normalize_address
from ..utils.colors import dim, green
from ..utils.exceptions import AddressMapError
from ..utils.logging import get_logger

logger = get_logger('address_directory')

ADDRESS_MAP_RESOURCE = "address_map.json"


class AddressDirectory:
    """Read-only lookup of address -> ``KnownAddress``."""

    _default: Optional["AddressDirectory"] = None
    _default_lock = threading.Lock()

    def __init__(self, entries: Mapping[str, KnownAddress]):
        self._entries: Mapping[str, KnownAddress] = MappingProxyType(dict(entries))

    @classmethod
    def from_json(cls, raw: bytes) -> "AddressDirectory":
        """
        Parse an address map.

        The dataset is a JSON array of objects with ``address``, ``name`` and
        ``contract_type`` keys.

        Raises:
            AddressMapError: on any malformed or duplicate entry
        """
        try:
            items = json.loads(raw)
        except ValueError as e:
            raise AddressMapError(f"Address map is not valid JSON: {e}")
        if not isinstance(items, list):
            raise AddressMapError("Address map must be a JSON array")

        entries: Dict[str, KnownAddress] = {}
        for index, item in enumerate(items):
            try:
                address = normalize_address(item["address"])
                entry = KnownAddress(
                    address=address,
                    name=str(item["name"]),
                    contract_type=ContractType(item["contract_type"]),
                )
            except (KeyError, TypeError, ValueError) as e:
                raise AddressMapError(f"Invalid address map entry #{index}: {e}", entry=index)
            if address in entries:
                raise AddressMapError(f"Duplicate address map entry for {address}", entry=index)
            entries[address] = entry

        logger.debug(f"Loaded {len(entries)} known addresses")
        return cls(entries)

    @classmethod
    def load(cls) -> "AddressDirectory":
        """Build a directory from the packaged dataset."""
        raw = resources.files("vmtrace.data").joinpath(ADDRESS_MAP_RESOURCE).read_bytes()
        return cls.from_json(raw)

    @classmethod
    def default(cls) -> "AddressDirectory":
        """Return the process-wide directory, loading it on first use."""
        if cls._default is None:
            with cls._default_lock:
                if cls._default is None:
                    cls._default = cls.load()
        return cls._default

    def lookup(self, address) -> Optional[KnownAddress]:
        try:
            key = normalize_address(address)
        except (TypeError, ValueError):
            return None
        return self._entries.get(key)

    def classify(self, address) -> ContractType:
        entry = self.lookup(address)
        return entry.contract_type if entry else ContractType.UNKNOWN

    def human_readable(self, address) -> Optional[str]:
        """Styled name of a known address, or None when it has no name to show."""
        entry = self.lookup(address)
        if entry is None:
            return None
        if entry.contract_type == ContractType.SYSTEM:
            return entry.name
        if entry.contract_type == ContractType.PRECOMPILE:
            return dim(entry.name)
        if entry.contract_type == ContractType.POPULAR:
            return green(entry.name)
        return None

    def display_name(self, address) -> str:
        """Styled name when known, else the raw lowercase hex address."""
        label = self.human_readable(address)
        if label is not None:
            return label
        return raw_address(address)

    def __contains__(self, address) -> bool:
        return self.lookup(address) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[KnownAddress]:
        return iter(self._entries.values())


def raw_address(address) -> str:
    """Full lowercase hex form of an address, passing through unparsable input."""
    try:
        return normalize_address(address)
    except (TypeError, ValueError):
        return str(address)
