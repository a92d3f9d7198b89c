"""Core domain package for gifblock.

Core contains URL normalization, GIF classification, blocklist matching and
per-message override state without any host- or storage-specific code,
keeping the business logic portable.
"""
