from siteintel_pipeline.extractors.document import DocumentExtractor
from siteintel_pipeline.extractors.pdf import extract_text

__all__ = ["DocumentExtractor", "extract_text"]
