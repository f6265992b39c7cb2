"""Sampling and plotting helpers for comparing scaling strategies."""
