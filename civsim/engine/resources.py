"""Resource stocks, per-turn production and consumption."""

from civsim.models import INITIAL_RESOURCES, RESOURCE_FLOOR, ResourceType

# Per-kind coefficients per 100 inhabitants: (production, consumption).
# Production exceeds consumption for every kind so stocks trend upward.
RESOURCE_COEFFICIENTS: dict[ResourceType, tuple[float, float]] = {
    ResourceType.FOOD: (1.5, 1.2),
    ResourceType.MONEY: (1.1, 0.8),
    ResourceType.ENERGY: (0.8, 0.5),
    ResourceType.MATERIALS: (0.6, 0.3),
}


class ResourceLedger:
    """Tracks stocks, base rates and transient multipliers for every resource."""

    def __init__(self, stocks: dict[ResourceType, float] | None = None):
        """Initialize with starting stocks (defaults to the new-game amounts)."""
        initial = INITIAL_RESOURCES if stocks is None else stocks
        self._stock: dict[ResourceType, float] = {
            rt: float(initial.get(rt, 0.0)) for rt in ResourceType
        }
        self._production: dict[ResourceType, float] = {rt: 0.0 for rt in ResourceType}
        self._consumption: dict[ResourceType, float] = {rt: 0.0 for rt in ResourceType}
        self._prod_multiplier: dict[ResourceType, float] = {
            rt: 1.0 for rt in ResourceType
        }
        self._cons_multiplier: dict[ResourceType, float] = {
            rt: 1.0 for rt in ResourceType
        }

    # Stocks

    def get_resource(self, resource_type: ResourceType) -> float:
        return self._stock[resource_type]

    def add_resource(self, resource_type: ResourceType, amount: float) -> None:
        self._stock[resource_type] += amount

    def remove_resource(self, resource_type: ResourceType, amount: float) -> None:
        self._stock[resource_type] -= amount

    def stocks(self) -> dict[ResourceType, float]:
        """Copy of all stocks keyed by resource type."""
        return dict(self._stock)

    # Rates

    def get_production(self, resource_type: ResourceType) -> float:
        """Effective production: base rate times the current multiplier."""
        return self._production[resource_type] * self._prod_multiplier[resource_type]

    def get_consumption(self, resource_type: ResourceType) -> float:
        """Effective consumption: base rate times the current multiplier."""
        return self._consumption[resource_type] * self._cons_multiplier[resource_type]

    def get_net_income(self, resource_type: ResourceType) -> float:
        return self.get_production(resource_type) - self.get_consumption(resource_type)

    def set_production(self, resource_type: ResourceType, amount: float) -> None:
        self._production[resource_type] = amount

    def set_consumption(self, resource_type: ResourceType, amount: float) -> None:
        self._consumption[resource_type] = amount

    def get_base_production(self, resource_type: ResourceType) -> float:
        return self._production[resource_type]

    def get_base_consumption(self, resource_type: ResourceType) -> float:
        return self._consumption[resource_type]

    # Multipliers

    def apply_production_multiplier(
        self, resource_type: ResourceType, factor: float
    ) -> None:
        """Compound a production multiplier for this turn."""
        self._prod_multiplier[resource_type] *= factor

    def apply_consumption_multiplier(
        self, resource_type: ResourceType, factor: float
    ) -> None:
        """Compound a consumption multiplier for this turn."""
        self._cons_multiplier[resource_type] *= factor

    def reset_multipliers(self) -> None:
        """Set every multiplier back to 1.0; call before this turn's adjustments."""
        for resource_type in ResourceType:
            self._prod_multiplier[resource_type] = 1.0
            self._cons_multiplier[resource_type] = 1.0

    # Turn processing

    def process_turn(self, population: int, tech_level: int) -> None:
        """Recompute base rates and add one turn of net income to every stock."""
        self._update_rates(population, tech_level)

        for resource_type in ResourceType:
            stock = self._stock[resource_type] + self.get_net_income(resource_type)
            # Debt is allowed but bounded
            self._stock[resource_type] = max(stock, RESOURCE_FLOOR)

    def get_total_surplus(self) -> float:
        """Sum of positive net incomes across all kinds."""
        return sum(
            net
            for net in (self.get_net_income(rt) for rt in ResourceType)
            if net > 0
        )

    def _update_rates(self, population: int, tech_level: int) -> None:
        """Linear-in-population model; only production benefits from technology."""
        pop_factor = population * 0.01
        tech_factor = 1.0 + tech_level * 0.02

        for resource_type, (prod_coef, cons_coef) in RESOURCE_COEFFICIENTS.items():
            self._production[resource_type] = pop_factor * prod_coef * tech_factor
            self._consumption[resource_type] = pop_factor * cons_coef
