"""
Top‑level package for the Survey Data API.

This file makes ``survey_data_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``survey_data_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
