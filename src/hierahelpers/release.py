# Copyright (c) 2024 Hierahelpers Contributors
# MIT License

"""Hierahelpers release metadata."""

from __future__ import annotations

__version__ = "0.1.0"
__author__ = "Hierahelpers Contributors"
