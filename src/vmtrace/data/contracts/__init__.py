"""Packaged system contract bytecode (refresh with scripts/refresh_contracts.sh)."""
