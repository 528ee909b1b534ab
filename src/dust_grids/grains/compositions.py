"""
Grain compositions for the Draine graphite, silicate and PAH materials.

A composition is the handle a grain population is attached to. Only the
bulk mass density is needed to turn a size distribution into a dust mass;
optical properties are not handled here.
"""

from unyt import cm, g


class GrainComposition:
    """
    A grain material.

    Attributes:
        name (str)
            short identifier, also used as the output group name
        grain_type (str)
            human readable description
        bulk_density (unyt_quantity)
            mass density of the bulk material
    """

    def __init__(self, name: str, grain_type: str, bulk_density):
        self.name = name
        self.grain_type = grain_type
        self.bulk_density = bulk_density

    @property
    def bulk_density_si(self) -> float:
        """Bulk mass density in kg m^-3."""
        return float(self.bulk_density.to("kg/m**3").value)

    def __repr__(self):
        return (
            f"GrainComposition(name={self.name!r}, "
            f"bulk_density={self.bulk_density})"
        )


def draine_graphite() -> GrainComposition:
    return GrainComposition(
        "Draine_Graphite", "Draine graphite", 2.24 * g / cm**3
    )


def draine_silicate() -> GrainComposition:
    return GrainComposition(
        "Draine_Silicate", "Draine astronomical silicate", 3.5 * g / cm**3
    )


def draine_neutral_pah() -> GrainComposition:
    return GrainComposition(
        "Draine_Neutral_PAH", "Draine neutral PAH", 2.24 * g / cm**3
    )


def draine_ionized_pah() -> GrainComposition:
    return GrainComposition(
        "Draine_Ionized_PAH", "Draine ionized PAH", 2.24 * g / cm**3
    )
