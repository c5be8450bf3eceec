"""Shared numeric helpers."""

from surd.core.metrics import mse, residual_mse, residuals

__all__ = ["mse", "residual_mse", "residuals"]
