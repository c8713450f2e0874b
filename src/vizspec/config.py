from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time
from pathlib import Path
from typing import Mapping, Sequence, TypeAlias
import os
import re
import tomllib

from vizspec.exceptions import ConfigError

DEFAULT_CONFIG_NAME = "vizspec.toml"
DEFAULT_SWITCH_BUTTON_LABEL = "Click to make this graph interactive"

ENV_IMG_SERVICE_URL = "VIZSPEC_IMG_SERVICE_URL"
ENV_IMG_SERVICE_ALWAYS = "VIZSPEC_IMG_SERVICE_ALWAYS"
ENV_DEFAULT_GENERATION = "VIZSPEC_DEFAULT_GENERATION"

_TRUTHY_VALUES = {"1", "true", "yes", "on"}

IMAGE_TEMPLATE_ARITY = 4

# `%%`, `%N$s` or `%s`; a bare `%` matches with every group empty.
_TEMPLATE_DIRECTIVE_RE = re.compile(r"%(?:(%)|(\d+)\$s|(s))?", re.ASCII)

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


@dataclass(frozen=True)
class HostConfig:
    """Read-only host settings consumed by a render pass.

    `img_service_url` is a sprintf-style template over four arguments: host
    identifier, document identifier, revision identifier and content hash.
    It either has exactly four `%s` slots taken in order, or addresses the
    arguments by position with `%1$s` .. `%4$s`. The domain lists and trust
    flag are handed to the client untouched.
    """

    default_generation: int = 1
    img_service_url: str | None = None
    img_service_always: bool = False
    http_domains: tuple[str, ...] = ()
    https_domains: tuple[str, ...] = ()
    is_trusted: bool = False
    switch_button_label: str = DEFAULT_SWITCH_BUTTON_LABEL

    def __post_init__(self) -> None:
        if self.img_service_url is None:
            return
        try:
            image_template_slots(self.img_service_url)
        except ValueError as exc:
            raise ConfigError("img_service_url", str(exc)) from exc


def image_template_slots(template: str) -> tuple[int, ...]:
    """Zero-based argument index read by each slot of `template`, in order.

    Raises ValueError for any other `%` directive, for a template mixing
    `%s` with `%N$s`, for a position outside the four arguments and for a
    `%s` count other than four.
    """
    slots: list[int] = []
    sequential = 0
    positional = False
    for match in _TEMPLATE_DIRECTIVE_RE.finditer(template):
        escape, position, plain = match.groups()
        if escape is not None:
            continue
        if position is not None:
            index = int(position) - 1
            if not 0 <= index < IMAGE_TEMPLATE_ARITY:
                raise ValueError(
                    f"slot {match.group(0)!r} is outside arguments 1 to "
                    f"{IMAGE_TEMPLATE_ARITY}"
                )
            positional = True
        elif plain is not None:
            index = sequential
            sequential += 1
        else:
            raise ValueError(
                f"unsupported directive at offset {match.start()}; "
                "use %s, %N$s or %%"
            )
        slots.append(index)
    if positional and sequential:
        raise ValueError("cannot mix %s and %N$s slots")
    if not positional and sequential != IMAGE_TEMPLATE_ARITY:
        raise ValueError(
            f"expected {IMAGE_TEMPLATE_ARITY} %s slots, found {sequential}"
        )
    return tuple(slots)


def expand_image_template(template: str, values: Sequence[str]) -> str:
    slots = iter(image_template_slots(template))

    def _substitute(match: re.Match[str]) -> str:
        if match.group(1) is not None:
            return "%"
        return values[next(slots)]

    return _TEMPLATE_DIRECTIVE_RE.sub(_substitute, template)


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def render_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("render", {})
    return section if isinstance(section, dict) else {}


def _as_bool(value: TomlValue) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY_VALUES
    return False


def _normalize_name_list(key: str, value: TomlValue) -> tuple[str, ...]:
    items: list[str] = []
    if value is None:
        return ()
    if isinstance(value, str):
        items = [part.strip() for part in value.split(",")]
    elif isinstance(value, list):
        for item in value:
            if not isinstance(item, str):
                raise ConfigError(key, "expected a list of strings")
            items.append(item.strip())
    else:
        raise ConfigError(key, "expected a string or a list of strings")
    return tuple(item for item in items if item)


def _as_generation(key: str, value: TomlValue) -> int:
    if isinstance(value, bool):
        raise ConfigError(key, "expected an integer generation")
    if isinstance(value, int):
        generation = value
    elif isinstance(value, str) and value.strip().isdigit():
        generation = int(value.strip())
    else:
        raise ConfigError(key, "expected an integer generation")
    if generation < 1:
        raise ConfigError(key, "generation must be at least 1")
    return generation


def _as_optional_text(key: str, value: TomlValue) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(key, "expected a string")
    return value.strip() or None


def host_config_from_mapping(section: Mapping[str, TomlValue] | None) -> HostConfig:
    if not section:
        return HostConfig()
    label = section.get("switch_button_label", DEFAULT_SWITCH_BUTTON_LABEL)
    if not isinstance(label, str):
        raise ConfigError("switch_button_label", "expected a string")
    return HostConfig(
        default_generation=_as_generation(
            "default_generation", section.get("default_generation", 1)
        ),
        img_service_url=_as_optional_text(
            "img_service_url", section.get("img_service_url")
        ),
        img_service_always=_as_bool(section.get("img_service_always", False)),
        http_domains=_normalize_name_list("http_domains", section.get("http_domains")),
        https_domains=_normalize_name_list(
            "https_domains", section.get("https_domains")
        ),
        is_trusted=_as_bool(section.get("is_trusted", False)),
        switch_button_label=label,
    )


def apply_env_overrides(
    config: HostConfig, environ: Mapping[str, str] | None = None
) -> HostConfig:
    env = os.environ if environ is None else environ
    overrides: dict[str, object] = {}
    url = env.get(ENV_IMG_SERVICE_URL, "").strip()
    if url:
        overrides["img_service_url"] = url
    always = env.get(ENV_IMG_SERVICE_ALWAYS, "").strip()
    if always:
        overrides["img_service_always"] = _as_bool(always)
    generation = env.get(ENV_DEFAULT_GENERATION, "").strip()
    if generation:
        overrides["default_generation"] = _as_generation(
            ENV_DEFAULT_GENERATION, generation
        )
    if not overrides:
        return config
    return replace(config, **overrides)


def load_host_config(
    root: Path | None = None,
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> HostConfig:
    section = render_defaults(root=root, config_path=config_path)
    return apply_env_overrides(host_config_from_mapping(section), environ)
