import pytest

from sketch_map.advisory import (
    FilterSuggestion,
    StrengthSuggestion,
    advise_config,
)
from sketch_map.core_types import FilterConfig


class FakeAdvisor:
    def __init__(self, label="charcoal", strength=0.8, fail_filter=False, fail_strength=False):
        self.label = label
        self.strength = strength
        self.fail_filter = fail_filter
        self.fail_strength = fail_strength
        self.strength_calls = []

    def suggest_filter(self, image_bytes):
        if self.fail_filter:
            raise ConnectionError("advisor offline")
        return FilterSuggestion(self.label, "Try charcoal for moody portraits.")

    def suggest_strength(self, image_bytes, filter_type):
        self.strength_calls.append(filter_type)
        if self.fail_strength:
            raise TimeoutError("too slow")
        return StrengthSuggestion(self.strength, "Keep it subtle.")


BASE = FilterConfig("pencil", 0.5, noise=False, seed=7)


def test_uses_both_suggestions():
    advisor = FakeAdvisor()
    config, guidance = advise_config(advisor, b"png", BASE)
    assert config.filter_type == "charcoal"
    assert config.intensity == pytest.approx(0.8)
    assert config.noise is False and config.seed == 7
    assert guidance == ["Try charcoal for moody portraits.", "Keep it subtle."]
    # strength is asked for the filter that was just chosen
    assert advisor.strength_calls == ["charcoal"]


def test_strength_clamped():
    config, _ = advise_config(FakeAdvisor(strength=3.5), b"", BASE)
    assert config.intensity == 1.0


def test_unknown_label_keeps_base_filter(capsys):
    config, guidance = advise_config(FakeAdvisor(label="watercolor"), b"", BASE)
    assert config.filter_type == "pencil"
    assert config.intensity == pytest.approx(0.8)
    assert guidance == ["Keep it subtle."]
    assert "[warn]" in capsys.readouterr().out


def test_advisor_failures_never_raise(capsys):
    advisor = FakeAdvisor(fail_filter=True, fail_strength=True)
    config, guidance = advise_config(advisor, b"", BASE)
    assert config == BASE
    assert guidance == []
    out = capsys.readouterr().out
    assert "advisor offline" in out and "too slow" in out


def test_non_numeric_strength_ignored():
    config, _ = advise_config(FakeAdvisor(strength="lots"), b"", BASE, pick_filter=False)
    assert config.intensity == 0.5


def test_nan_strength_ignored():
    config, _ = advise_config(FakeAdvisor(strength=float("nan")), b"", BASE)
    assert config.intensity == 0.5


def test_pick_flags():
    advisor = FakeAdvisor()
    config, _ = advise_config(advisor, b"", BASE, pick_strength=False)
    assert config.filter_type == "charcoal" and config.intensity == 0.5
    assert advisor.strength_calls == []
