"""Tests for locale detection sources."""

from __future__ import annotations

import pytest

from dotlex.localization.detection import EnvironmentLocaleSource, PreferenceLocaleSource

AVAILABLE = ["zh-CN", "en-US"]


class TestEnvironmentLocaleSource:
    """LC_ALL / LANG / LANGUAGE detection."""

    def test_lang_exact(self) -> None:
        """LANG with encoding resolves to the registry locale."""
        assert EnvironmentLocaleSource({"LANG": "zh_CN.UTF-8"}).detect(AVAILABLE) == "zh-CN"

    def test_primary_language_fallback(self) -> None:
        """en_GB maps to the registered en-US."""
        assert EnvironmentLocaleSource({"LANG": "en_GB.UTF-8"}).detect(AVAILABLE) == "en-US"

    def test_lc_all_takes_precedence(self) -> None:
        """LC_ALL overrides LANG."""
        environ = {"LC_ALL": "en_US.UTF-8", "LANG": "zh_CN.UTF-8"}
        assert EnvironmentLocaleSource(environ).detect(AVAILABLE) == "en-US"

    def test_language_list_first_entry(self) -> None:
        """LANGUAGE uses its first colon-separated entry."""
        assert EnvironmentLocaleSource({"LANGUAGE": "zh_TW:en"}).detect(AVAILABLE) == "zh-CN"

    def test_pseudo_locale_skipped(self) -> None:
        """C/POSIX values are ignored in favour of later variables."""
        environ = {"LC_ALL": "C", "LANG": "en_US.UTF-8"}
        assert EnvironmentLocaleSource(environ).detect(AVAILABLE) == "en-US"

    def test_unsupported_language(self) -> None:
        """A parsed but unregistered language yields None."""
        assert EnvironmentLocaleSource({"LANG": "fr_FR.UTF-8"}).detect(AVAILABLE) is None

    def test_empty_environment(self) -> None:
        """No variables set yields None."""
        assert EnvironmentLocaleSource({}).detect(AVAILABLE) is None

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without an explicit mapping, os.environ is read at detect time."""
        monkeypatch.delenv("LC_ALL", raising=False)
        monkeypatch.setenv("LANG", "en_US.UTF-8")
        assert EnvironmentLocaleSource().detect(AVAILABLE) == "en-US"


class TestPreferenceLocaleSource:
    """Ordered preference lists."""

    def test_exact_match_anywhere_wins(self) -> None:
        """An exact match later in the list beats a language match earlier."""
        source = PreferenceLocaleSource(["zh-TW", "en-US"])
        assert source.detect(AVAILABLE) == "en-US"

    def test_language_match_in_preference_order(self) -> None:
        """Without exact matches, the first preference's language decides."""
        source = PreferenceLocaleSource(["fr-FR", "en-GB", "zh-TW"])
        assert source.detect(AVAILABLE) == "en-US"

    def test_no_match(self) -> None:
        """Unrelated preferences yield None."""
        assert PreferenceLocaleSource(["fr", "de"]).detect(AVAILABLE) is None

    def test_accept_language_ordering(self) -> None:
        """Accept-Language entries are ordered by q-value, then position."""
        source = PreferenceLocaleSource.from_accept_language(
            "fr;q=0.5, en-US;q=0.9, zh-CN, *;q=0.1, de;q=0"
        )
        assert source.preferred == ("zh-CN", "en-US", "fr")

    def test_accept_language_bad_quality_dropped(self) -> None:
        """Unparseable q-values count as zero."""
        source = PreferenceLocaleSource.from_accept_language("en;q=abc, zh")
        assert source.preferred == ("zh",)
