"""Domain layer for Hearthline.

Pure models, errors and services with no I/O. Everything here is
deterministic and safe to call from any layer.
"""
