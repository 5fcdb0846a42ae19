"""Replay reconstruction engine: normalize, group, resolve, decode, assemble, cache."""
