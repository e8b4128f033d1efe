"""Configuration module for the loader."""

from .dataset import Dataset
from .loader_config import LoaderConfig

__all__ = ["Dataset", "LoaderConfig"]
