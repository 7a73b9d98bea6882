"""
Unit tests for multitarget.core.resolver.
"""

import pytest

from multitarget.core.errors import InvalidLocator, SourceUnavailable
from multitarget.core.resolver import (
    SOURCE_NOT_FOUND,
    RemoteSourceResolver,
    parse_locator,
    parse_manifest,
)


class TestParseLocator:
    """Tests for GitHub URL parsing."""

    @pytest.mark.parametrize(
        "locator",
        [
            "https://github.com/acme/widget-hal",
            "https://github.com/acme/widget-hal/",
            "https://github.com/acme/widget-hal.git",
            "http://www.github.com/acme/widget-hal",
        ],
    )
    def test_valid_locators(self, locator):
        ref = parse_locator(locator)

        assert ref.owner == "acme"
        assert ref.repo == "widget-hal"
        assert ref.locator == locator

    @pytest.mark.parametrize(
        "locator",
        [
            "not-a-url",
            "https://gitlab.com/acme/widget-hal",
            "https://github.com/acme",
            "https://github.com/acme/widget-hal/tree/main",
            "",
        ],
    )
    def test_invalid_locators(self, locator):
        with pytest.raises(InvalidLocator) as exc_info:
            parse_locator(locator)

        assert exc_info.value.remedy

    def test_raw_url(self):
        ref = parse_locator("https://github.com/acme/widget-hal")

        url = ref.raw_url("https://raw.githubusercontent.com/", "main", "/src/lib.rs")

        assert url == "https://raw.githubusercontent.com/acme/widget-hal/main/src/lib.rs"


class TestParseManifest:
    """Tests for Cargo.toml reading."""

    def test_package_and_dependencies(self, widget_manifest):
        info = parse_manifest(widget_manifest)

        assert info.name == "widget-hal"
        assert info.version == "1.2.0"
        assert info.dependencies == ("embedded-hal",)
        assert info.warnings == ()

    def test_target_specific_dependencies(self):
        text = """
[package]
name = "board"

[dependencies]
embedded-hal = "1.0"

[target.'cfg(target_arch = "arm")'.dependencies]
cortex-m = "0.7"
embedded-hal = "1.0"
"""
        info = parse_manifest(text)

        assert info.dependencies == ("embedded-hal", "cortex-m")
        assert info.version is None

    def test_workspace_inherited_version_is_absent(self):
        info = parse_manifest('[package]\nname = "x"\nversion.workspace = true\n')

        assert info.version is None

    def test_invalid_manifest_becomes_warning(self):
        info = parse_manifest("[package\nname = ")

        assert info.name is None
        assert info.dependencies == ()
        assert len(info.warnings) == 1
        assert "Cargo.toml could not be parsed" in info.warnings[0]


class TestFetch:
    """Tests for branch fallback."""

    def test_main_branch_is_used_first(self, widget_client):
        resolver = RemoteSourceResolver(client=widget_client)

        fetched = resolver.fetch("https://github.com/acme/widget-hal")

        assert fetched.manifest_branch == "main"
        assert fetched.source_branch == "main"
        assert not any("/master/" in url for url in widget_client.requests)
        assert len(widget_client.requests) == 2

    def test_falls_back_to_master(self, make_client, url_for, widget_manifest, widget_source):
        client = make_client(
            {
                url_for("acme", "widget-hal", "master", "Cargo.toml"): widget_manifest,
                url_for("acme", "widget-hal", "master", "src/lib.rs"): widget_source,
            }
        )
        resolver = RemoteSourceResolver(client=client)

        fetched = resolver.fetch("https://github.com/acme/widget-hal")

        assert fetched.manifest_branch == "master"
        assert client.requests == [
            url_for("acme", "widget-hal", "main", "Cargo.toml"),
            url_for("acme", "widget-hal", "master", "Cargo.toml"),
            url_for("acme", "widget-hal", "main", "src/lib.rs"),
            url_for("acme", "widget-hal", "master", "src/lib.rs"),
        ]

    def test_each_file_falls_back_independently(
        self, make_client, url_for, widget_manifest, widget_source
    ):
        client = make_client(
            {
                url_for("acme", "widget-hal", "main", "Cargo.toml"): widget_manifest,
                url_for("acme", "widget-hal", "master", "src/lib.rs"): widget_source,
            }
        )
        resolver = RemoteSourceResolver(client=client)

        fetched = resolver.fetch("https://github.com/acme/widget-hal")

        assert fetched.manifest_branch == "main"
        assert fetched.source_branch == "master"

    def test_missing_manifest_raises(self, make_client):
        client = make_client()
        resolver = RemoteSourceResolver(client=client)

        with pytest.raises(SourceUnavailable) as exc_info:
            resolver.fetch("https://github.com/acme/missing")

        assert exc_info.value.branches == ["main", "master"]
        assert "main, master" in exc_info.value.message
        # one attempt per branch, and no source request after a missing manifest
        assert len(client.requests) == 2

    def test_invalid_locator_makes_no_requests(self, make_client):
        client = make_client()
        resolver = RemoteSourceResolver(client=client)

        with pytest.raises(InvalidLocator):
            resolver.fetch("ftp://example.com/x")

        assert client.requests == []

    def test_custom_branches_and_paths(self, make_client, url_for, widget_manifest):
        client = make_client({url_for("acme", "hal", "develop", "crate/Cargo.toml"): widget_manifest})
        resolver = RemoteSourceResolver(
            client=client,
            branches=("develop",),
            manifest_path="crate/Cargo.toml",
            source_path="crate/src/hal.rs",
        )

        fetched = resolver.fetch("https://github.com/acme/hal")

        assert fetched.manifest_branch == "develop"
        assert fetched.source_text is None
        assert resolver.module_name == "hal"


class TestAnalyze:
    """Tests for the full fetch-extract-classify pipeline."""

    def test_widget_report(self, widget_client):
        resolver = RemoteSourceResolver(client=widget_client)

        report = resolver.analyze("https://github.com/acme/widget-hal")

        assert report.source == "https://github.com/acme/widget-hal"
        assert report.version == "1.2.0"
        assert report.package == "widget-hal"
        assert [t.name for t in report.traits] == ["Gpio"]
        assert report.trait("Gpio").implementors == ["Pin"]
        assert report.mocked_traits == ()
        assert report.warnings == (
            "Trait 'Gpio' is not known to be available for host testing",
        )

    def test_required_traits_use_manifest_dependencies(
        self, make_client, url_for, widget_manifest, hal_source
    ):
        client = make_client(
            {
                url_for("acme", "hal", "main", "Cargo.toml"): widget_manifest,
                url_for("acme", "hal", "main", "src/lib.rs"): hal_source,
            }
        )
        resolver = RemoteSourceResolver(client=client)

        report = resolver.analyze("https://github.com/acme/hal")

        assert report.required_traits == ("ErrorType", "OutputPin", "InputPin")
        assert "OutputPin" in report.mocked_traits
        assert "Watchdog" not in report.mocked_traits

    def test_missing_source_is_a_warning(self, make_client, url_for, widget_manifest):
        client = make_client({url_for("acme", "hal", "main", "Cargo.toml"): widget_manifest})
        resolver = RemoteSourceResolver(client=client)

        report = resolver.analyze("https://github.com/acme/hal")

        assert report.traits == ()
        assert report.version == "1.2.0"
        assert report.warnings == (f"Could not analyze source: {SOURCE_NOT_FOUND}",)

    def test_unparseable_source_is_a_warning(self, make_client, url_for, widget_manifest):
        client = make_client(
            {
                url_for("acme", "hal", "main", "Cargo.toml"): widget_manifest,
                url_for("acme", "hal", "main", "src/lib.rs"): "pub trait {{{",
            }
        )
        resolver = RemoteSourceResolver(client=client)

        report = resolver.analyze("https://github.com/acme/hal")

        assert report.traits == ()
        assert len(report.warnings) == 1
        assert report.warnings[0].startswith("Could not analyze source")


class TestFromConfig:
    """Tests for building a resolver from the [fetch] section."""

    def test_uses_config_values(self, default_config, make_client):
        client = make_client()
        fetch = dict(default_config.fetch, branches=["trunk"], source_path="src/main.rs")

        resolver = RemoteSourceResolver.from_config(fetch, client=client)

        assert resolver.client is client
        assert resolver.branches == ("trunk",)
        assert resolver.module_name == "main"
        assert resolver._owns_client is False

    def test_close_leaves_injected_client_alone(self, mocker):
        client = mocker.Mock()

        with RemoteSourceResolver.from_config({}, client=client):
            pass

        client.close.assert_not_called()

    def test_close_closes_owned_client(self, mocker):
        created = mocker.patch("multitarget.core.resolver.RawContentClient")

        resolver = RemoteSourceResolver.from_config({"timeout": 5})
        resolver.close()

        created.assert_called_once_with(timeout=5)
        created.return_value.close.assert_called_once()
