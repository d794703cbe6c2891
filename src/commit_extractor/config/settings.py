"""설정 관리 모듈

YAML 설정 파일과 CLI 인자를 병합하여 추출 설정을 구성합니다.
Pydantic을 사용하여 타입 안전성과 검증을 보장합니다.
검증 실패는 모두 ConfigError로 변환되며 순회 시작 전에 보고됩니다.
"""

import logging
import os
from typing import Any, Dict, List, Literal, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from commit_extractor.errors import ConfigError

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV_VAR = "COMMIT_EXTRACTOR_LOG_LEVEL"


def parse_extensions(value: Union[str, List[str]]) -> List[str]:
    """확장자 목록 정규화

    쉼표로 구분된 문자열 또는 목록을 받아 앞의 점을 제거하고 소문자로 변환합니다.
    중복은 처음 등장한 순서를 유지하며 제거합니다.

    Args:
        value: "rs, .PY" 또는 ["rs", ".py"]

    Returns:
        정규화된 확장자 목록 (예: ["rs", "py"])

    Raises:
        ValueError: 문자열이나 목록이 아닌 경우
    """
    if isinstance(value, str):
        items = value.split(',')
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        raise ValueError(f"extensions must be a string or a list, got {type(value).__name__}")

    extensions: List[str] = []
    for item in items:
        ext = str(item).strip().lstrip('.').lower()
        if ext and ext not in extensions:
            extensions.append(ext)
    return extensions


class FilterConfig(BaseModel):
    """커밋 필터링 설정"""
    extensions: List[str] = Field(min_length=1)
    size: int = Field(gt=0)
    message_length_min: Optional[int] = Field(default=None, ge=0)
    message_length_max: Optional[int] = Field(default=None, ge=0)
    changes_length_min: Optional[int] = Field(default=None, ge=0)
    changes_length_max: Optional[int] = Field(default=None, ge=0)
    message_mode: Literal["full", "summary"] = "full"
    only_target_extensions: bool = False
    exclude_bots: bool = False
    exclude_merge_messages: bool = False

    @field_validator('extensions', mode='before')
    @classmethod
    def normalize_extensions(cls, v):
        if v is None:
            return []
        return parse_extensions(v)

    @model_validator(mode='after')
    def validate_bounds(self):
        """범위 역전 검증 (min > max 는 만족 불가능한 설정)"""
        pairs = [
            ("message_length", self.message_length_min, self.message_length_max),
            ("changes_length", self.changes_length_min, self.changes_length_max),
        ]
        for name, lower, upper in pairs:
            if lower is not None and upper is not None and lower > upper:
                raise ValueError(f"{name}_min ({lower}) must not exceed {name}_max ({upper})")
        return self

    @property
    def extension_set(self) -> frozenset:
        return frozenset(self.extensions)


class OutputConfig(BaseModel):
    """출력 설정"""
    path: str
    format: Literal["csv", "json"] = "csv"
    include_changes: bool = False

    @field_validator('path')
    @classmethod
    def validate_path(cls, v):
        if not v or not v.strip():
            raise ValueError("output path must not be empty")
        return v


class LoggingConfig(BaseModel):
    """로깅 설정"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @field_validator('level')
    @classmethod
    def validate_level(cls, v):
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level


class ExtractorConfig(BaseModel):
    """전체 추출 설정"""
    repository: str
    filters: FilterConfig
    output: OutputConfig
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    show_progress: bool = False


def _format_validation_error(error: ValidationError) -> str:
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        message = item.get("msg", "invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages)


def build_config(data: Dict[str, Any]) -> ExtractorConfig:
    """딕셔너리에서 ExtractorConfig 생성

    Raises:
        ConfigError: 설정 검증에 실패한 경우
    """
    try:
        return ExtractorConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {_format_validation_error(e)}") from e


def build_filter_config(**kwargs: Any) -> FilterConfig:
    """키워드 인자로 FilterConfig 생성

    Raises:
        ConfigError: 설정 검증에 실패한 경우
    """
    try:
        return FilterConfig(**kwargs)
    except ValidationError as e:
        raise ConfigError(f"Invalid filter configuration: {_format_validation_error(e)}") from e


def load_config_file(config_path: str) -> Dict[str, Any]:
    """YAML 설정 파일 로드

    Args:
        config_path: 설정 파일 경로

    Returns:
        `repository`, `filters`, `output`, `logging` 섹션을 담은 딕셔너리

    Raises:
        ConfigError: 파일이 없거나 YAML 형식이 잘못된 경우
    """
    if not os.path.exists(config_path):
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML format: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {e}") from e

    if config_data is None:
        config_data = {}
    if not isinstance(config_data, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")

    logger.info(f"Loaded configuration from: {config_path}")
    return config_data


def merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """설정 딕셔너리 병합 (overrides 의 None 이 아닌 값이 우선)"""
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict):
            current = merged.get(key)
            merged[key] = merge_config(current if isinstance(current, dict) else {}, value)
        elif value is not None:
            merged[key] = value
    return merged


def resolve_log_level(cli_level: Optional[str] = None,
                      config_level: Optional[str] = None) -> str:
    """로그 레벨 결정: CLI 인자 > 환경 변수 > 설정 파일 > INFO"""
    for candidate in (cli_level, os.getenv(LOG_LEVEL_ENV_VAR), config_level):
        if candidate and candidate.strip():
            return candidate.strip().upper()
    return "INFO"
