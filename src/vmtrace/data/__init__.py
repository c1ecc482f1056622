"""Packaged datasets: the address map and system contract artifacts."""
