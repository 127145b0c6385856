# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Boardplay: language-model players for turn-based board games."""

__version__ = "0.1.0"
