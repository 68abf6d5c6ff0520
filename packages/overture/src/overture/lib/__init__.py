"""Pure matching, normalization and feature helpers."""
