# tests/unit/cache/test_unit_fingerprint.py — v1
"""Tests for cache/fingerprint.py."""

from __future__ import annotations

import pytest

from sentencekit.cache.fingerprint import compute_fingerprint
from sentencekit.core.models import KitSettings


class TestComputeFingerprint:
    def test_layout(self):
        s = KitSettings(keyword_field="Entry")
        assert compute_fingerprint("食べる", s) == "食べる|false|true|true|false|false|Entry"

    def test_deterministic(self):
        s1 = KitSettings(keyword_field="Entry", include_games=True)
        s2 = KitSettings(keyword_field="Entry", include_games=True)
        assert compute_fingerprint("猫", s1) == compute_fingerprint("猫", s2)

    @pytest.mark.parametrize(
        "flag",
        ["exact_search", "highlighting", "include_drama", "include_anime", "include_games"],
    )
    def test_every_filter_changes_key(self, flag):
        base = KitSettings(keyword_field="Entry")
        flipped = base.model_copy(update={flag: not getattr(base, flag)})
        assert compute_fingerprint("猫", base) != compute_fingerprint("猫", flipped)

    def test_keyword_field_changes_key(self):
        a = KitSettings(keyword_field="Entry")
        b = KitSettings(keyword_field="Word")
        assert compute_fingerprint("猫", a) != compute_fingerprint("猫", b)

    def test_unrelated_slots_do_not_change_key(self):
        a = KitSettings(keyword_field="Entry", audio_field="Audio")
        b = KitSettings(keyword_field="Entry", audio_field="Ignore")
        assert compute_fingerprint("猫", a) == compute_fingerprint("猫", b)

    def test_none_keyword(self):
        assert compute_fingerprint(None, KitSettings()).startswith("null|")
