"""pmtconv - PMT scanner image to BMP converter."""

from pmtconv.codec import PMTDecoder, PMTError, PMTImage, PMTInfo
from pmtconv.logger import (
    ConversionLogger,
    LogConfig,
    ProgressDisplay,
    VerboseLevel,
)
from pmtconv.pipeline import (
    ConversionPipeline,
    PipelineConfig,
    PipelinePhase,
    PipelineProgress,
    PipelineResult,
    ProgressCallback,
)

__version__ = "0.1.0"

__all__ = [
    "ConversionLogger",
    "ConversionPipeline",
    "LogConfig",
    "PMTDecoder",
    "PMTError",
    "PMTImage",
    "PMTInfo",
    "PipelineConfig",
    "PipelinePhase",
    "PipelineProgress",
    "PipelineResult",
    "ProgressCallback",
    "ProgressDisplay",
    "VerboseLevel",
]
