from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.models import Location

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class WeatherSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    provider: Literal["weatherapi", "nws"] = "weatherapi"
    days: int = Field(default=3, ge=1, le=10)
    timeout_seconds: float = Field(default=10.0, gt=0, le=120)
    user_agent: str = "skycast/0.1"

    @field_validator("user_agent")
    @classmethod
    def validate_user_agent(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("weather.user_agent must not be empty")
        return text


class LocationsSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    default: str = "33598"
    cities: list[Location] = Field(
        default_factory=lambda: [
            Location(name="Dexter", postal_code="04930", latitude=45.0237, longitude=-69.2898),
            Location(name="Moorestown", postal_code="08057", latitude=39.9688, longitude=-74.9488),
            Location(name="Weston", postal_code="06883", latitude=41.2009, longitude=-73.3807),
            Location(name="Wimauma", postal_code="33598", latitude=27.7125, longitude=-82.2990),
        ]
    )

    @field_validator("default")
    @classmethod
    def validate_default(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("locations.default must not be empty")
        return text


class SkycastYamlSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    weather: WeatherSettings = Field(default_factory=WeatherSettings)
    locations: LocationsSettings = Field(default_factory=LocationsSettings)


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    skycast_env: Literal["dev", "test", "prod"] = "dev"
    skycast_config_path: Path = Path("config/skycast.yaml")
    weatherapi_key: SecretStr = SecretStr("")


class AppSettings(BaseModel):
    env: EnvSettings
    yaml: SkycastYamlSettings
    project_root: Path
    config_path: Path


def _resolve_project_path(path: Path) -> Path:
    if path.is_absolute():
        return path
    return (PROJECT_ROOT / path).resolve()


def _load_yaml_settings(path: Path) -> SkycastYamlSettings:
    if not path.exists():
        raise FileNotFoundError(f"SkyCast config file not found: {path}")

    raw_config = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ValueError("SkyCast config must be a YAML mapping/object at the top level")
    return SkycastYamlSettings.model_validate(raw_config)


@lru_cache(maxsize=1)
def load_settings() -> AppSettings:
    env = EnvSettings()
    config_path = _resolve_project_path(env.skycast_config_path)
    return AppSettings(
        env=env,
        yaml=_load_yaml_settings(config_path),
        project_root=PROJECT_ROOT,
        config_path=config_path,
    )
