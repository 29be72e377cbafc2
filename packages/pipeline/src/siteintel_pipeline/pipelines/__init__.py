from siteintel_pipeline.pipelines.documents import DocumentPipeline
from siteintel_pipeline.pipelines.enrichment import (
    DuplicateFragmentError,
    EnrichmentPipeline,
    PipelineAccumulator,
    RunContext,
    RunState,
)

__all__ = [
    "DocumentPipeline",
    "DuplicateFragmentError",
    "EnrichmentPipeline",
    "PipelineAccumulator",
    "RunContext",
    "RunState",
]
