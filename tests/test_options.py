import pytest

from assetpack.errors import ConfigError
from assetpack.options import BuildOptions, ensure_options, parse_asset_hosts, parse_selection


def test_asset_host_pattern_expands_numeric_range() -> None:
    assert parse_asset_hosts("assets[0,3].example.com") == (
        "assets0.example.com",
        "assets1.example.com",
        "assets2.example.com",
        "assets3.example.com",
    )


def test_asset_host_pattern_without_range_is_single_host() -> None:
    assert parse_asset_hosts("cdn.example.com") == ("cdn.example.com",)
    assert parse_asset_hosts(None) == ()
    assert parse_asset_hosts("") == ()


def test_asset_host_pattern_rejects_descending_range() -> None:
    with pytest.raises(ConfigError) as excinfo:
        parse_asset_hosts("assets[3,0].example.com")

    assert excinfo.value.context["option"] == "asset_hosts"


def test_selection_parsing_drops_blank_entries() -> None:
    assert parse_selection("all.css, subset.css,,") == ("all.css", "subset.css")
    assert parse_selection("*.js") == ("*.js",)
    assert parse_selection(None) == ()


@pytest.mark.parametrize(
    "options",
    [
        BuildOptions(indent_width=-1),
        BuildOptions(embed_limit=-5),
        BuildOptions(max_workers=0),
    ],
)
def test_invalid_options_are_config_errors(options: BuildOptions) -> None:
    with pytest.raises(ConfigError):
        ensure_options(options)


def test_default_options_are_valid() -> None:
    ensure_options(BuildOptions())
