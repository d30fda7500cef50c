# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for formeval documentation."""

project = "formeval"
author = "formeval Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc"]

html_theme = "alabaster"
