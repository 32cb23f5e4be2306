"""Technology branches, level progression and the research catalog."""

import logging

from civsim.models import MAX_BRANCH_LEVEL, BranchStatus, Era, TechBranch, Technology
from civsim.utils.tech_loader import load_technologies

logger = logging.getLogger(__name__)

# Minimum overall tech level for each era, highest first
ERA_THRESHOLDS: list[tuple[int, Era]] = [
    (90, Era.SPACE),
    (75, Era.INFORMATION),
    (60, Era.MODERN),
    (45, Era.INDUSTRIAL),
    (32, Era.RENAISSANCE),
    (20, Era.MEDIEVAL),
    (10, Era.IRON_AGE),
    (4, Era.BRONZE_AGE),
]


def level_up_threshold(level: int) -> float:
    """Progress needed to advance a branch from the given level."""
    return 50.0 + level * 30.0 + level**1.5 * 10.0


def era_for_tech_level(tech_level: int) -> Era:
    """Derive the era from overall tech level."""
    for minimum, era in ERA_THRESHOLDS:
        if tech_level >= minimum:
            return era
    return Era.STONE_AGE


class TechnologyTree:
    """
    Five technology branches plus a fixed catalog of researchable technologies.

    Investment accumulates progress in a branch; each level consumes a
    growing threshold. Technologies unlock when their branch is high enough,
    and the caller pays for research and investment before calling in.
    """

    def __init__(self, technologies: list[Technology] | None = None):
        """Initialize with all branches at level 0."""
        self._levels: dict[TechBranch, int] = {branch: 0 for branch in TechBranch}
        self._progress: dict[TechBranch, float] = {branch: 0.0 for branch in TechBranch}
        self._technologies = (
            technologies if technologies is not None else load_technologies()
        )

    # Investment

    def invest_in_branch(self, branch: TechBranch, amount: float) -> None:
        """Add progress to a branch; maxed branches ignore investment."""
        if self._levels[branch] >= MAX_BRANCH_LEVEL:
            return

        self._progress[branch] += amount
        self._check_level_up(branch)

    def _check_level_up(self, branch: TechBranch) -> None:
        """Resolve as many level-ups as accumulated progress allows."""
        while self._levels[branch] < MAX_BRANCH_LEVEL:
            threshold = level_up_threshold(self._levels[branch])
            if self._progress[branch] < threshold:
                break
            self._progress[branch] -= threshold
            self._levels[branch] += 1
            logger.debug(
                "%s reached level %d", branch.display_name, self._levels[branch]
            )

    # Levels

    def get_branch_level(self, branch: TechBranch) -> int:
        return self._levels[branch]

    def get_branch_progress(self, branch: TechBranch) -> float:
        return self._progress[branch]

    def get_branch_threshold(self, branch: TechBranch) -> float:
        """Progress needed for the branch's next level."""
        return level_up_threshold(self._levels[branch])

    def get_overall_tech_level(self) -> int:
        return sum(self._levels.values())

    def get_current_era(self) -> Era:
        return era_for_tech_level(self.get_overall_tech_level())

    def branch_status(self) -> list[BranchStatus]:
        """Snapshot of every branch in branch order."""
        return [
            BranchStatus(
                branch=branch,
                level=self._levels[branch],
                progress=self._progress[branch],
                threshold=level_up_threshold(self._levels[branch]),
            )
            for branch in TechBranch
        ]

    def set_branch_state(self, branch: TechBranch, level: int, progress: float) -> None:
        """Restore a branch from a saved snapshot."""
        self._levels[branch] = level
        self._progress[branch] = progress

    # Research

    @property
    def technologies(self) -> list[Technology]:
        """The full catalog in catalog order."""
        return list(self._technologies)

    def get_technology(self, name: str) -> Technology | None:
        return next((tech for tech in self._technologies if tech.name == name), None)

    def get_available_techs(self) -> list[Technology]:
        """Unresearched technologies whose branch requirement is met."""
        return [
            tech
            for tech in self._technologies
            if not tech.researched
            and self._levels[tech.branch] >= tech.required_level
        ]

    def get_researched_techs(self) -> list[Technology]:
        return [tech for tech in self._technologies if tech.researched]

    def research_tech(self, name: str) -> bool:
        """
        Mark an available technology as researched.

        Cost is not checked or deducted here; the caller pays first.

        Returns: True if the technology was researched
        """
        for tech in self._technologies:
            if tech.name != name or tech.researched:
                continue
            if self._levels[tech.branch] >= tech.required_level:
                tech.researched = True
                logger.info("Researched technology: %s", tech.name)
                return True

        logger.debug("Technology %r is not available for research", name)
        return False

    # Bonuses

    def get_production_bonus(self) -> float:
        return 1.0 + self._levels[TechBranch.INDUSTRY] * 0.05

    def get_military_bonus(self) -> float:
        return 1.0 + self._levels[TechBranch.MILITARY] * 0.08

    def get_medicine_bonus(self) -> float:
        """Multiplier on population growth rate."""
        return 1.0 + self._levels[TechBranch.MEDICINE] * 0.04

    def get_space_progress(self) -> float:
        """Space branch completion as a percentage."""
        return self._levels[TechBranch.SPACE] / MAX_BRANCH_LEVEL * 100.0
