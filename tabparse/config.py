"""Parser configuration."""

from dataclasses import dataclass

from tabparse.constants import DEFAULT_MAIN_COURSE_COUNT, MAX_MAIN_COURSE_COUNT
from tabparse.exceptions import ConfigError


@dataclass(frozen=True)
class ParserConfig:
    """
    Options for one scan/parse run.

    Attributes:
        main_course_count: Number of fretted main courses (1-9). Sets the
                           course digits accepted by pitch and reference
                           tokens.
        comments:          Emit Comment events.
        page_num:          First page number.
        sys_num:           First system number.
        bar_num:           First bar number.
        strict:            Fail on undecodable input instead of replacing it.
        debug:             Log every token at DEBUG level.
        silent:            Suppress command output (front end only).
    """

    main_course_count: int = DEFAULT_MAIN_COURSE_COUNT
    comments: bool = True
    page_num: int = 1
    sys_num: int = 1
    bar_num: int = 1
    strict: bool = False
    debug: bool = False
    silent: bool = False

    def __post_init__(self) -> None:
        if not 1 <= self.main_course_count <= MAX_MAIN_COURSE_COUNT:
            raise ConfigError(
                f"main_course_count must be between 1 and {MAX_MAIN_COURSE_COUNT}, "
                f"got {self.main_course_count}."
            )
        for name in ("page_num", "sys_num", "bar_num"):
            if getattr(self, name) < 1:
                raise ConfigError(f"{name} must be 1 or greater.")
