from aeda.normalization.models import ExtractionFailure, ExtractionResult
from aeda.normalization.normalizer import ResultNormalizer

__all__ = ["ExtractionFailure", "ExtractionResult", "ResultNormalizer"]
