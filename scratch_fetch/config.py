# === FILE: scratch_fetch/config.py ===
"""
Модуль для загрузки и валидации конфигурации сборки scratch-образа.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

TargetArch = Literal["amd64", "arm64"]

#: имена, которые сборка сама кладёт в контекст образа
BUNDLE_NAME = "ca-certificates.crt"
SCRATCH_DIR = "tmp"


class BuildConfig(BaseModel):
    """Настройки сборки статического бинарника и минимального образа."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    image: str = Field("example-scratch", min_length=1, description="Тег собираемого образа.")
    dockerfile: str = Field("Dockerfile.scratch", min_length=1, description="Имя файла описания образа.")
    binary_name: str = Field("main", min_length=1, description="Имя исполняемого файла.")
    entry_script: Optional[Path] = Field(
        None, description="Скрипт для заморозки (по умолчанию scratch_fetch/__main__.py)."
    )
    build_dir: Path = Field(Path("build"), description="Каталог для промежуточных файлов сборки.")
    target_os: Literal["linux"] = Field("linux", description="Целевая ОС.")
    target_arch: TargetArch = Field("amd64", description="Целевая архитектура.")
    ca_bundle: Optional[Path] = Field(
        None, description="Исходный файл корневых сертификатов (по умолчанию из OpenSSL хоста)."
    )
    ca_bundle_dest: str = Field(
        "/etc/ssl/certs/ca-certificates.crt", description="Путь к файлу сертификатов внутри образа."
    )
    include_ca_bundle: bool = Field(True, description="Добавлять ли сертификаты в образ.")

    @field_validator("dockerfile", "binary_name")
    def _bare_file_name(cls, v: str) -> str:
        if "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError(f"ожидалось имя файла без каталогов, получено {v!r}")
        return v

    @field_validator("ca_bundle_dest")
    def _absolute_dest(cls, v: str) -> str:
        if not v.startswith("/") or v.endswith("/"):
            raise ValueError(f"путь в образе должен быть абсолютным путём к файлу, получено {v!r}")
        return v

    @model_validator(mode="after")
    def _distinct_context_names(self) -> BuildConfig:
        # binary, bundle, Dockerfile and tmp/ share one build context directory
        if self.binary_name == self.dockerfile:
            raise ValueError(f"binary_name и dockerfile совпадают: {self.binary_name!r}")
        for field in ("binary_name", "dockerfile"):
            value = getattr(self, field)
            if value in (BUNDLE_NAME, SCRATCH_DIR):
                raise ValueError(f"{field} не может называться {value!r}: имя занято контекстом сборки")
        return self

    def with_overrides(self, **overrides: Any) -> BuildConfig:
        """Копия конфигурации с заменёнными полями, проверенная заново."""
        return BuildConfig.model_validate({**self.model_dump(), **overrides})

    @property
    def platform(self) -> str:
        """Платформа в формате docker: ``linux/amd64``."""
        return f"{self.target_os}/{self.target_arch}"

    @property
    def work_dir(self) -> Path:
        return self.build_dir / "pyinstaller"

    @property
    def dist_dir(self) -> Path:
        return self.build_dir / "dist"

    @property
    def context_dir(self) -> Path:
        return self.build_dir / "context"


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> BuildConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект BuildConfig.
    Без явного пути берёт configs/default.yaml, а если его нет — значения по умолчанию.
    Явно указанный, но отсутствующий файл приводит к FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return BuildConfig()
        path_obj = _DEFAULT_CFG
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
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return BuildConfig(**data)


__all__ = ["BUNDLE_NAME", "BuildConfig", "SCRATCH_DIR", "TargetArch", "ValidationError", "load_config"]
