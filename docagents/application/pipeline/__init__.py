"""Queue handlers of the ingestion pipeline."""

from docagents.application.pipeline.analyze_stage import AnalyzeStage
from docagents.application.pipeline.parse_stage import ParseStage

__all__ = ["AnalyzeStage", "ParseStage"]
