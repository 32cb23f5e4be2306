"""Technology catalog loader."""

from pathlib import Path

from civsim.models import MAX_BRANCH_LEVEL, TechBranch, Technology
from civsim.utils.data_loader import DATA_DIR, CatalogError, read_catalog

REQUIRED_FIELDS = ("name", "branch", "required_level", "cost", "description")


def parse_technology(entry: dict) -> Technology:
    """
    Parse one catalog entry.

    Expected format:
        {"name": "Writing", "branch": "science", "required_level": 1,
         "cost": 50, "description": "Allows keeping records"}
    """
    missing = [key for key in REQUIRED_FIELDS if key not in entry]
    if missing:
        raise CatalogError(f"Technology entry missing fields: {', '.join(missing)}")

    try:
        branch = TechBranch(entry["branch"])
    except ValueError:
        raise CatalogError(
            f"Unknown branch '{entry['branch']}' for technology '{entry['name']}'"
        ) from None

    required_level = int(entry["required_level"])
    if not 0 <= required_level <= MAX_BRANCH_LEVEL:
        raise CatalogError(
            f"Technology '{entry['name']}' requires level {required_level}, "
            f"outside 0..{MAX_BRANCH_LEVEL}"
        )

    cost = int(entry["cost"])
    if cost <= 0:
        raise CatalogError(f"Technology '{entry['name']}' has non-positive cost")

    return Technology(
        name=entry["name"],
        branch=branch,
        required_level=required_level,
        cost=cost,
        description=entry["description"],
    )


def load_technologies(json_path: Path | None = None) -> list[Technology]:
    """Load the technology catalog in file order, which is the catalog order."""
    if json_path is None:
        json_path = DATA_DIR / "technologies.json"

    technologies = [parse_technology(entry) for entry in read_catalog(json_path)]

    names = [tech.name for tech in technologies]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise CatalogError(f"Duplicate technology names: {', '.join(duplicates)}")

    return technologies
