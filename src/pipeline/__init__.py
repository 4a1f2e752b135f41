"""
Open311 Sync - Pipeline

Sequential runner and the invocation handler that wraps it.
"""

from src.pipeline.handler import lambda_handler
from src.pipeline.runner import PipelineResult, run_pipeline

__all__ = ["lambda_handler", "run_pipeline", "PipelineResult"]
