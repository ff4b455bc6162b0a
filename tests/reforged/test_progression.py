"""Unit tests for src/reforged/progression.py"""

import pytest

from src.reforged.progression import (
    experience_for_level,
    level_for_experience,
    level_info,
    level_title,
    total_experience_for_level,
)


@pytest.mark.parametrize(
    "level, experience",
    [(1, 0), (2, 250), (3, 250), (4, 500), (5, 750), (6, 1000), (30, 1000)],
)
def test_experience_per_level(level: int, experience: int) -> None:
    assert experience_for_level(level) == experience


def test_total_experience() -> None:
    assert total_experience_for_level(1) == 0
    assert total_experience_for_level(5) == 1750
    assert total_experience_for_level(7) == 3750


@pytest.mark.parametrize(
    "experience, level",
    [(0, 1), (249, 1), (250, 2), (499, 2), (500, 3), (1749, 4), (1750, 5), (2750, 6)],
)
def test_level_for_experience(experience: int, level: int) -> None:
    assert level_for_experience(experience) == level


def test_level_info_progress() -> None:
    info = level_info(375)
    assert info.level == 2
    assert info.experience_in_level == 125
    assert info.experience_for_next_level == 250
    assert info.experience_to_next_level == 125
    assert info.progress_percentage == 50.0


@pytest.mark.parametrize(
    "level, title",
    [(1, "Beginner"), (10, "Novice"), (25, "Intermediate"), (59, "Advanced"), (80, "Master"), (120, "Grandmaster")],
)
def test_level_titles(level: int, title: str) -> None:
    assert level_title(level) == title
