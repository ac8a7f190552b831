"""Front-end helpers for running LC-3 images."""

from .app import AppConfig, LC3App

__all__ = [
    "AppConfig",
    "LC3App",
]
