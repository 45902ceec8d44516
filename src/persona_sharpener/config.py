"""Configuration for the persona sharpener.

Settings are read from YAML by the command line and handed to the engine as
an immutable ``EngineConfig``. The scoring functions never look settings up
on their own; each takes its thresholds as arguments with the defaults below.
"""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from .alignment import DEFAULT_MATCH_THRESHOLD, DEFAULT_MAX_QUESTION_WEIGHT

CONFIG_ENV_VAR = "PERSONA_SHARPENER_CONFIG"
LOCAL_CONFIG_NAMES = ("persona-config.yaml", "persona-config.yml")
USER_CONFIG_PATH = Path(".config") / "persona-sharpener" / "config.yaml"


class AlignmentConfig(BaseModel):
    """Aggregation settings for founder/validator alignment."""
    match_threshold: int = Field(
        DEFAULT_MATCH_THRESHOLD, ge=0, le=100,
        description="Minimum alignment score for a validator answer to count as a match"
    )
    max_question_weight: int = Field(
        DEFAULT_MAX_QUESTION_WEIGHT, ge=1,
        description="Cap on the response count used to weight a question in the overall score"
    )

    class Config:
        frozen = True


class ValidationSummaryConfig(BaseModel):
    """Settings for the validation summary."""
    misalignment_min_responses: int = Field(
        2, ge=1,
        description="Minimum responses before a question can be flagged as a misalignment"
    )
    max_misalignments: int = Field(
        3, ge=0,
        description="Maximum number of misalignments to report"
    )

    class Config:
        frozen = True


class EngineConfig(BaseModel):
    """Complete configuration for the persona sharpener engine."""
    alignment: AlignmentConfig = Field(default_factory=AlignmentConfig)
    validation_summary: ValidationSummaryConfig = Field(default_factory=ValidationSummaryConfig)

    class Config:
        frozen = True


def find_config_file() -> Optional[Path]:
    """Locate a configuration file.

    Search order: the PERSONA_SHARPENER_CONFIG environment variable (when it
    names an existing file), ./persona-config.yaml, ./persona-config.yml,
    then ~/.config/persona-sharpener/config.yaml.
    """
    candidates = []
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidates.append(Path(env_path))
    candidates.extend(Path(name) for name in LOCAL_CONFIG_NAMES)
    candidates.append(Path.home() / USER_CONFIG_PATH)

    return next((path for path in candidates if path.is_file()), None)


def load_config(path: Optional[Path] = None) -> EngineConfig:
    """Read an EngineConfig from YAML.

    Args:
        path: File to read. When omitted, ``find_config_file`` picks one and
            the defaults apply if nothing is found.

    Raises:
        OSError: If the file cannot be read.
        yaml.YAMLError: If the file is not valid YAML.
        pydantic.ValidationError: If a setting has the wrong type or range.
    """
    path = path or find_config_file()
    if path is None:
        return EngineConfig()

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return EngineConfig.model_validate(data or {})


CONFIG_HEADER = """\
# Persona Sharpener configuration
#
# alignment.match_threshold           score at which a validator answer is a match
# alignment.max_question_weight       most responses one question can weigh in the overall score
# validation_summary.*                which questions are reported as misalignments
#
# Searched for in $PERSONA_SHARPENER_CONFIG, ./persona-config.yaml and
# ~/.config/persona-sharpener/config.yaml.

"""


def save_default_config(path: Path) -> None:
    """Write the default configuration, with a comment header, to ``path``."""
    body = yaml.safe_dump(EngineConfig().model_dump(), default_flow_style=False, sort_keys=False)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(CONFIG_HEADER + body, encoding="utf-8")
