"""Player levels. The level decides the army budget (see deck.budget_for_level)."""

from dataclasses import dataclass

# experience needed to go from level N-1 to level N. Anything above level 5 costs the last value.
EXPERIENCE_PER_LEVEL: dict[int, int] = {2: 250, 3: 250, 4: 500, 5: 750}
EXPERIENCE_LATE_LEVELS = 1000

LEVEL_TITLES: tuple[tuple[int, str], ...] = (
    (100, "Grandmaster"),
    (80, "Master"),
    (60, "Expert"),
    (40, "Advanced"),
    (20, "Intermediate"),
    (10, "Novice"),
)


@dataclass(frozen=True)
class LevelInfo:
    level: int
    experience_in_level: int
    experience_for_next_level: int

    @property
    def experience_to_next_level(self) -> int:
        return self.experience_for_next_level - self.experience_in_level

    @property
    def progress_percentage(self) -> float:
        return min(100.0, 100.0 * self.experience_in_level / self.experience_for_next_level)


def experience_for_level(level: int) -> int:
    """Experience needed for the step up INTO `level`"""
    if level <= 1:
        return 0
    return EXPERIENCE_PER_LEVEL.get(level, EXPERIENCE_LATE_LEVELS)


def total_experience_for_level(level: int) -> int:
    return sum(experience_for_level(lvl) for lvl in range(2, level + 1))


def level_info(total_experience: int) -> LevelInfo:
    level = 1
    used = 0
    while used + experience_for_level(level + 1) <= total_experience:
        used += experience_for_level(level + 1)
        level += 1
    return LevelInfo(
        level=level,
        experience_in_level=total_experience - used,
        experience_for_next_level=experience_for_level(level + 1),
    )


def level_for_experience(total_experience: int) -> int:
    return level_info(total_experience).level


def level_title(level: int) -> str:
    return next(
        (title for threshold, title in LEVEL_TITLES if level >= threshold), "Beginner"
    )
