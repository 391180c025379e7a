# === FILE: site_harvest/config.py ===
"""
Модуль для загрузки и валидации конфигурации краулера SiteHarvest.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union
from urllib.parse import urlparse

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from site_harvest.errors import ConfigError, InvalidInput

__all__ = ["HarvestConfig", "CrawlRequest", "load_config", "DEFAULT_CONFIG_PATH"]


class HarvestConfig(BaseModel):
    """Конфигурация краулера: сеть, хранилище, параллелизм."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    max_redirects: int = Field(5, ge=0, description="Максимум редиректов на один запрос.")
    user_agent: str = Field("SiteHarvestBot/1.0", min_length=1, description="Заголовок User-Agent.")
    storage_dir: Path = Field(Path("storage/scraped_files"), description="Каталог для контента.")
    records_path: Optional[Path] = Field(
        None, description="JSONL-файл записей о страницах; None: хранить в памяти."
    )
    concurrency: int = Field(1, ge=1, description="Число параллельных загрузок страниц.")
    image_concurrency: int = Field(4, ge=1, description="Параллельные загрузки картинок одной страницы.")
    retry_times: int = Field(0, ge=0, description="Повторы при временных ошибках (0: без повторов).")
    retry_backoff: float = Field(1.0, ge=0, description="База экспоненциальной задержки (секунд).")
    crawl_timeout: Optional[float] = Field(
        None, gt=0, description="Общий лимит времени обхода; по истечении возвращается частичный результат."
    )
    default_max_pages: int = Field(10, ge=1, description="Лимит страниц, если он не указан.")
    max_pages_limit: int = Field(100, ge=1, description="Верхняя граница лимита страниц.")

    @model_validator(mode="after")
    def _check_page_limits(self) -> HarvestConfig:
        if self.default_max_pages > self.max_pages_limit:
            raise ValueError("default_max_pages must not exceed max_pages_limit")
        return self


class CrawlRequest(BaseModel):
    """Неизменяемый запрос на один обход: стартовый URL и лимит страниц."""
    model_config = ConfigDict(extra="forbid", frozen=True, strict=True)

    seed_url: str
    max_pages: int = Field(..., ge=1)

    @field_validator("seed_url")
    @classmethod
    def _absolute_http_url(cls, v: str) -> str:
        v = v.strip()
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ValueError("seed URL must be an absolute http(s) URL")
        return v

    @classmethod
    def build(
        cls,
        seed_url: Any,
        max_pages: Any = None,
        config: Optional[HarvestConfig] = None,
    ) -> CrawlRequest:
        """Validate raw invocation input, raising :class:`InvalidInput` on any problem."""
        cfg = config or HarvestConfig()
        if max_pages is None:
            max_pages = cfg.default_max_pages
        if isinstance(max_pages, int) and not isinstance(max_pages, bool) and max_pages > cfg.max_pages_limit:
            raise InvalidInput(f"max_pages must be between 1 and {cfg.max_pages_limit}, got {max_pages}")
        try:
            return cls(seed_url=seed_url, max_pages=max_pages)
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'request'}: {err['msg']}" for err in exc.errors()
            )
            raise InvalidInput(f"Invalid crawl request: {problems}") from exc


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None] = None) -> HarvestConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект HarvestConfig.
    Без пути использует configs/default.yaml, а при его отсутствии значения по умолчанию.
    Явно указанный, но отсутствующий файл приводит к FileNotFoundError.
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.is_file():
            return HarvestConfig()
        path_obj = DEFAULT_CONFIG_PATH
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ConfigError(f"Неподдерживаемый формат конфига: {suffix}")

    return HarvestConfig(**data)
