from pydantic import BaseModel, Field, model_validator
from typing import Literal


class CloudConvertSettings(BaseModel):
    api_key_env: str = "CLOUDCONVERT_API_KEY"
    base_url: str = "https://api.cloudconvert.com/v2"
    timeout: int = Field(default=60, gt=0)
    poll_interval: float = Field(default=2.0, ge=0)
    pdf_poll_interval: float = Field(default=10.0, ge=0)
    max_attempts: int = Field(default=30, gt=0)


class TranslationSettings(BaseModel):
    provider: Literal["mymemory"] = "mymemory"
    base_url: str = "https://api.mymemory.translated.net"
    contact_email: str | None = None
    user_agent: str = "DocumentTranslator/1.0"
    max_chars: int = Field(default=3000, gt=0)
    timeout: int = Field(default=30, gt=0)
    languages: list[str] = Field(
        default_factory=lambda: ["en", "es", "fr", "de", "pt", "ru", "zh", "ja", "it"]
    )


class SummarizerSettings(BaseModel):
    min_input_chars: int = Field(default=100, ge=0)
    max_input_chars: int = Field(default=5000, gt=0)
    min_sentence_chars: int = Field(default=20, ge=0)
    max_sentence_chars: int = Field(default=300, gt=0)
    max_candidates: int = Field(default=20, gt=0)
    max_sentences: int = Field(default=4, gt=0)

    @model_validator(mode="after")
    def check_sentence_bounds(self) -> "SummarizerSettings":
        if self.min_sentence_chars > self.max_sentence_chars:
            raise ValueError("min_sentence_chars must not exceed max_sentence_chars")
        return self


class LimitsConfig(BaseModel):
    max_file_size_mb: int = Field(default=10, gt=0)
    min_merge_files: int = Field(default=2, ge=2)
    max_merge_files: int = Field(default=10, gt=0)


class DocfluxConfig(BaseModel):
    cloudconvert: CloudConvertSettings = Field(default_factory=CloudConvertSettings)
    translation: TranslationSettings = Field(default_factory=TranslationSettings)
    summarizer: SummarizerSettings = Field(default_factory=SummarizerSettings)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
