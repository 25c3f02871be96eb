# File: scribe/features/transcription/domain/catalog.py
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Union

from .models import WhisperModel


@dataclass(frozen=True)
class ModelInfo:
    name: str
    size: str
    speed: str
    accuracy: str
    recommended: str


# Built once at import, read-only afterwards.
MODEL_CATALOG: Mapping[WhisperModel, ModelInfo] = MappingProxyType({
    WhisperModel.TINY: ModelInfo(
        name="tiny", size="75 MB", speed="very fast", accuracy="low",
        recommended="Short clips, quick previews",
    ),
    WhisperModel.BASE: ModelInfo(
        name="base", size="142 MB", speed="fast", accuracy="fair",
        recommended="Everyday use, quick transcripts",
    ),
    WhisperModel.SMALL: ModelInfo(
        name="small", size="466 MB", speed="medium", accuracy="good",
        recommended="Balance between speed and accuracy",
    ),
    WhisperModel.MEDIUM: ModelInfo(
        name="medium", size="1.5 GB", speed="slow", accuracy="high",
        recommended="Long recordings and meeting notes (recommended)",
    ),
    WhisperModel.LARGE: ModelInfo(
        name="large", size="3 GB", speed="very slow", accuracy="highest",
        recommended="Professional transcription, demanding material",
    ),
})


def get_model_info(model: Union[WhisperModel, str]) -> Optional[ModelInfo]:
    """Returns the catalog entry for a tier, or None for an unknown tier."""
    try:
        return MODEL_CATALOG.get(WhisperModel(model))
    except ValueError:
        return None
