"""Vibe constraint filtering."""

from overture.models.domain import AudioFeatures, IntentObject, VibeConstraint


def check_constraint(value: float, constraint: VibeConstraint | None) -> bool:
    """Check one feature value against a constraint.

    Absent and unset (min == max == 0) constraints are vacuously satisfied.
    Otherwise the range check is inclusive on both ends.
    """
    if constraint is None or constraint.is_unset:
        return True
    return constraint.min <= value <= constraint.max


def matches_constraints(features: AudioFeatures, intent: IntentObject) -> bool:
    """Whether features satisfy every set constraint of the intent."""
    vc = intent.vibe_constraints
    return (
        check_constraint(features.energy, vc.energy)
        and check_constraint(features.valence, vc.valence)
        and check_constraint(features.acousticness, vc.acousticness)
        and check_constraint(features.instrumentalness, vc.instrumentalness)
    )
