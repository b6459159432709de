"""Unit tests for recipe_extract.sequencing module."""

from recipe_extract.sequencing import (
    Phase,
    cap_instructions,
    instruction_phases,
    order_sub_preparations,
    phase_of,
    sequence_instructions,
)


class TestPhases:
    """Tests for phase detection."""

    def test_first_phase_verb_decides(self) -> None:
        """The first phase verb in a step names its phase."""
        assert phase_of("Chop the onion") is Phase.PREP
        assert phase_of("Bring to a boil, then simmer") is Phase.COOK
        assert phase_of("Serve with rice") is Phase.FINISH
        assert phase_of("Wait a moment") is None

    def test_steps_inherit_phase(self) -> None:
        """Steps without a phase verb inherit the previous phase."""
        phases = instruction_phases(
            ["Wait a moment.", "Bake for 20 minutes.", "Check it is golden.", "Let it rest."]
        )
        assert phases == [Phase.PREP, Phase.COOK, Phase.COOK, Phase.FINISH]


class TestOrderSubPreparations:
    """Tests for order_sub_preparations."""

    def test_moves_late_preparation_before_consumer(self) -> None:
        """A sauce made after it is used moves up."""
        steps = [
            "Cook the noodles.",
            "Toss the noodles with the sauce.",
            "Serve hot.",
            "To make the sauce, whisk soy sauce, honey and vinegar.",
        ]

        ordered = order_sub_preparations(steps)

        assert ordered == [
            "Cook the noodles.",
            "To make the sauce, whisk soy sauce, honey and vinegar.",
            "Toss the noodles with the sauce.",
            "Serve hot.",
        ]

    def test_cross_reference_counts_as_use(self) -> None:
        """A "see page" reference marks the first use."""
        steps = [
            "Brush the chicken with marinade (see page 112).",
            "Grill for 10 minutes.",
            "For the marinade, combine garlic and oil.",
        ]

        ordered = order_sub_preparations(steps)

        assert ordered[0] == "For the marinade, combine garlic and oil."

    def test_already_ordered_unchanged(self) -> None:
        """Steps in a valid order are kept."""
        steps = ["Make the dough.", "Rest the dough.", "Bake."]
        assert order_sub_preparations(steps) == steps


class TestCapInstructions:
    """Tests for cap_instructions."""

    def test_under_limit_unchanged(self) -> None:
        """Short lists are returned as is."""
        assert cap_instructions(["Chop.", "Fry."], 10) == ["Chop.", "Fry."]

    def test_joins_same_phase_shortest_pair(self) -> None:
        """The shortest adjacent pair of one phase is joined."""
        steps = ["Chop the onion.", "Mince the garlic.", "Heat the oil.", "Fry the onion.", "Serve."]

        capped = cap_instructions(steps, 4)

        assert capped == [
            "Chop the onion.",
            "Mince the garlic.",
            "Heat the oil. Fry the onion.",
            "Serve.",
        ]

    def test_joins_across_phases_when_needed(self) -> None:
        """Different phases are joined only when no same-phase pair is left."""
        assert cap_instructions(["Chop.", "Fry.", "Serve."], 1) == ["Chop. Fry. Serve."]

    def test_join_adds_full_stop(self) -> None:
        """A step without terminal punctuation gets a full stop when joined."""
        assert cap_instructions(["Chop onion", "Dice carrot"], 1) == ["Chop onion. Dice carrot"]

    def test_sequence_orders_then_caps(self) -> None:
        """sequence_instructions reorders before capping."""
        steps = ["Pour over the glaze.", "To make the glaze, mix sugar and water."]

        assert sequence_instructions(steps, 10) == [
            "To make the glaze, mix sugar and water.",
            "Pour over the glaze.",
        ]
