from .loader import load_config
from .models import (
    CloudConvertSettings,
    DocfluxConfig,
    LimitsConfig,
    SummarizerSettings,
    TranslationSettings,
)

__all__ = [
    "CloudConvertSettings",
    "DocfluxConfig",
    "LimitsConfig",
    "SummarizerSettings",
    "TranslationSettings",
    "load_config",
]
