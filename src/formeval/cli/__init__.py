# Copyright 2026 formeval Contributors
# SPDX-License-Identifier: Apache-2.0

"""Command-line interface for formeval."""
