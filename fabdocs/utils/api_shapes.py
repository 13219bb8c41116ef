"""Shared API shape helpers.

  - success(): standard success envelope (errors go through utils.errors.error_payload)
"""
from __future__ import annotations
from typing import Any
import time


def success(data: Any, **meta) -> dict:
    return {"status": "success", "data": data, "meta": meta or None, "timestamp": time.time()}
