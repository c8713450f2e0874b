from __future__ import annotations

from pathlib import Path

import pytest

from tests.env_helpers import vizspec_env
from vizspec.config import (
    DEFAULT_SWITCH_BUTTON_LABEL,
    HostConfig,
    apply_env_overrides,
    expand_image_template,
    host_config_from_mapping,
    image_template_slots,
    load_host_config,
    render_defaults,
)
from vizspec.exceptions import ConfigError


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_missing_or_malformed_config_yields_defaults(tmp_path: Path) -> None:
    assert load_host_config(root=tmp_path, environ={}) == HostConfig()
    broken = _write(tmp_path / "broken.toml", "[render\nnope")
    assert render_defaults(config_path=broken) == {}


def test_render_section_is_read(tmp_path: Path) -> None:
    config_path = _write(
        tmp_path / "vizspec.toml",
        "\n".join(
            [
                "[render]",
                "default_generation = 2",
                'img_service_url = "https://img.test/%s/%s/%s/%s.png"',
                "img_service_always = true",
                'http_domains = ["a.test"]',
                'https_domains = "b.test, c.test"',
                "is_trusted = 1",
                'switch_button_label = "Interact"',
                'unrelated = "ignored"',
            ]
        ),
    )

    config = load_host_config(config_path=config_path, environ={})

    assert config == HostConfig(
        default_generation=2,
        img_service_url="https://img.test/%s/%s/%s/%s.png",
        img_service_always=True,
        http_domains=("a.test",),
        https_domains=("b.test", "c.test"),
        is_trusted=True,
        switch_button_label="Interact",
    )


def test_default_config_file_is_found_under_root(tmp_path: Path) -> None:
    _write(tmp_path / "vizspec.toml", "[render]\nimg_service_always = true\n")
    assert load_host_config(root=tmp_path, environ={}).img_service_always is True


@pytest.mark.parametrize(
    "section",
    [
        {"default_generation": 0},
        {"default_generation": "two"},
        {"default_generation": True},
        {"img_service_url": 5},
        {"http_domains": [1, 2]},
        {"https_domains": 3},
        {"switch_button_label": ["x"]},
    ],
)
def test_malformed_values_raise_config_error(section: dict[str, object]) -> None:
    with pytest.raises(ConfigError):
        host_config_from_mapping(section)


def test_blank_image_service_url_means_unset() -> None:
    assert host_config_from_mapping({"img_service_url": "  "}).img_service_url is None


def test_env_overrides_take_precedence() -> None:
    base = HostConfig(img_service_url="https://a/%s/%s/%s/%s")
    config = apply_env_overrides(
        base,
        {
            "VIZSPEC_IMG_SERVICE_URL": "https://b/%s/%s/%s/%s",
            "VIZSPEC_IMG_SERVICE_ALWAYS": "yes",
            "VIZSPEC_DEFAULT_GENERATION": "2",
        },
    )

    assert config.img_service_url == "https://b/%s/%s/%s/%s"
    assert config.img_service_always is True
    assert config.default_generation == 2
    assert apply_env_overrides(base, {}) is base


def test_process_environment_is_used_by_default(tmp_path: Path) -> None:
    with vizspec_env({"VIZSPEC_IMG_SERVICE_ALWAYS": "on"}):
        config = load_host_config(root=tmp_path)
    assert config.img_service_always is True
    assert config.switch_button_label == DEFAULT_SWITCH_BUTTON_LABEL


def test_bad_env_generation_raises() -> None:
    with pytest.raises(ConfigError):
        apply_env_overrides(HostConfig(), {"VIZSPEC_DEFAULT_GENERATION": "x"})


@pytest.mark.parametrize(
    "template",
    [
        "https://img.test/%s/%s/%s.png",
        "https://img.test/%s/%s/%s/%s/%s.png",
        "https://img.test/%d/%s/%s/%s.png",
        "https://img.test/%1$s/%s/%s/%s.png",
        "https://img.test/%5$s.png",
        "https://img.test/%0$s.png",
        "https://img.test/%s/%s/%s/%s.png?p=50%",
        "https://img.test/static.png",
    ],
)
def test_malformed_image_template_raises_config_error(template: str) -> None:
    with pytest.raises(ConfigError) as excinfo:
        host_config_from_mapping({"img_service_url": template})
    assert excinfo.value.key == "img_service_url"


def test_malformed_image_template_from_env_raises_config_error() -> None:
    with pytest.raises(ConfigError):
        apply_env_overrides(
            HostConfig(), {"VIZSPEC_IMG_SERVICE_URL": "https://img.test/%s.png"}
        )


def test_positional_image_template_is_accepted() -> None:
    template = "https://img.test/%1$s/v1/png/%2$s/%3$s/%4$s.png"
    config = host_config_from_mapping({"img_service_url": template})
    assert config.img_service_url == template


@pytest.mark.parametrize(
    ("template", "slots"),
    [
        ("%s/%s/%s/%s", (0, 1, 2, 3)),
        ("%%/%s/%s/%s/%s", (0, 1, 2, 3)),
        ("%1$s/v1/%2$s/%3$s/%4$s", (0, 1, 2, 3)),
        ("%4$s-%4$s-%1$s", (3, 3, 0)),
    ],
)
def test_image_template_slots(template: str, slots: tuple[int, ...]) -> None:
    assert image_template_slots(template) == slots


def test_expand_image_template_keeps_substituted_percent_signs() -> None:
    assert (
        expand_image_template("%2$s|%1$s|%%", ("a%20b", "%s", "", ""))
        == "%s|a%20b|%"
    )
