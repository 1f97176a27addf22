from .collector import ReferenceCollector, is_same_site
from .orchestrator import EnhancementPipeline, PipelineRun, PipelineStage

__all__ = [
    "EnhancementPipeline",
    "PipelineRun",
    "PipelineStage",
    "ReferenceCollector",
    "is_same_site",
]
