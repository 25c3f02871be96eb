# File: scribe/features/transcription/data/argument_builder.py
from typing import List

from ..domain.models import WhisperConfig


def build_whisper_args(config: WhisperConfig, audio_path: str) -> List[str]:
    """
    Maps a config onto whisper CLI arguments. Pure: same input, same list.

    The audio path always comes first; every option value directly follows its flag.
    The output directory is not included, the process runner appends it per call.
    """
    args = [str(audio_path)]

    args += ["--model", config.model.value]

    # Empty language lets whisper auto-detect
    if config.language:
        args += ["--language", config.language]

    args += ["--output_format", config.output_format.value]

    if config.device:
        args += ["--device", config.device]

    if config.threads > 0:
        args += ["--threads", str(config.threads)]

    if config.beam_size > 0:
        args += ["--beam_size", str(config.beam_size)]

    if config.best_of > 0:
        args += ["--best_of", str(config.best_of)]

    # 0 means "unset": whisper's own default (greedy decoding) applies
    if config.temperature > 0:
        args += ["--temperature", f"{config.temperature:.2f}"]

    if config.verbose:
        args += ["--verbose", "True"]

    return args
