"""Unit tests for durations, constants and configuration."""

import pytest

from tabparse.config import ParserConfig
from tabparse.constants import flag_duration, letter_pitch
from tabparse.exceptions import ConfigError
from tabparse.models import Duration, Pitch
from tabparse.rules import RuleFields, Ruleset


@pytest.mark.parametrize(
    ("flag", "crotchets"),
    [("Z", 1 / 32), ("S", 0.25), ("E", 0.5), ("Q", 1.0), ("Q.", 1.5), ("H", 2.0), ("W", 4.0), ("B", 8.0)],
)
def test_flag_duration(flag: str, crotchets: float) -> None:
    assert flag_duration(flag) == crotchets


def test_fermata_has_no_duration() -> None:
    duration = Duration("F")
    assert duration.fermata
    assert duration.crotchets is None
    assert duration.ticks is None


def test_duration_ticks() -> None:
    assert Duration("Q").ticks == 128
    assert Duration("E.").ticks == 96
    assert Duration("E.").dotted
    assert not Duration("E").dotted


def test_letter_pitch_skips_reserved_letters() -> None:
    assert [letter_pitch(c) for c in "abchijk"] == [0, 1, 2, 7, 8, 8, 9]


def test_pitch_without_ruleset_keeps_fret() -> None:
    assert Pitch("c2", "c", 2).fret_position() == "c"


def test_pitch_equality_ignores_ruleset() -> None:
    italian = Ruleset("", RuleFields(notation="italian"))
    assert Pitch("c2", "c", 2, italian) == Pitch("c2", "c", 2)
    assert Pitch("c2", "c", 2, italian).fret_position() == 2


def test_config_defaults() -> None:
    config = ParserConfig()
    assert config.main_course_count == 6
    assert config.comments
    assert (config.page_num, config.sys_num, config.bar_num) == (1, 1, 1)
    assert not config.strict


@pytest.mark.parametrize("count", [0, 10])
def test_config_rejects_course_count(count: int) -> None:
    with pytest.raises(ConfigError):
        ParserConfig(main_course_count=count)


def test_config_rejects_zero_counter() -> None:
    with pytest.raises(ConfigError, match="page_num"):
        ParserConfig(page_num=0)
