from .curation_pipeline import CurationPipeline, CurationResult

__all__ = ["CurationPipeline", "CurationResult"]
