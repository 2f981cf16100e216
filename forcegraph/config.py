from typing import NamedTuple


class LayoutConfig(NamedTuple):
    """
    Parameters for initial placement and force-directed relaxation.

    Lengths and force strengths marked "scaled" are multiplied by the graph's
    draw scale, so the same config works for small and large drawings.
    """
    force: float = 0.02                # global force constant applied each pass
    position_range: float = 500.0      # half-extent of the random start square
    disconnected_spacing: float = 15.0 # row spacing for disconnected nodes (scaled)
    mass_factor: float = 0.6           # mass = mass_factor * scale * degree
    spring_length: float = 25.0        # edge rest length (scaled)
    spring_stiffness: float = 15.0     # spring constant (scaled)
    repulsion: float = 0.3             # pairwise repulsion strength (scaled)
    min_distance: float = 1.0          # distance floor for force magnitudes (scaled)
    iteration_factor: int = 5          # passes = connected_nodes ** 2 * iteration_factor

    def with_overrides(self, **overrides) -> "LayoutConfig":
        """Returns a copy with the given fields replaced, skipping None values."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        config = self._replace(**changes)
        config.validate()
        return config

    def validate(self):
        positive = ('force', 'position_range', 'disconnected_spacing', 'mass_factor',
                    'spring_length', 'min_distance')
        for field in positive:
            if getattr(self, field) <= 0:
                raise ValueError(f"{field} must be positive, got {getattr(self, field)}")
        for field in ('spring_stiffness', 'repulsion', 'iteration_factor'):
            if getattr(self, field) < 0:
                raise ValueError(f"{field} must not be negative, got {getattr(self, field)}")


DEFAULT_CONFIG = LayoutConfig()
