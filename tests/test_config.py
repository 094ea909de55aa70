from __future__ import annotations

import pytest

from searchkit.config import (
    BEAM_WIDTH,
    SA_COOLING_RATE,
    ConstructiveConfig,
    CSPSearchConfig,
    GeneticAlgorithmConfig,
    HillClimbingConfig,
    LocalBeamSearchConfig,
    SimulatedAnnealingConfig,
    StochasticHillClimbingConfig,
    load_config,
)
from searchkit.errors import ConfigurationError
from searchkit.problems import NQueensProblem
from searchkit.registry import ALGORITHMS, create_search


def test_defaults_come_from_module_constants() -> None:
    assert load_config(SimulatedAnnealingConfig).cooling_rate == SA_COOLING_RATE
    assert load_config(LocalBeamSearchConfig).beam_width == BEAM_WIDTH
    assert load_config(CSPSearchConfig).variable_heuristic == "in_order"


def test_camel_case_keys_are_accepted() -> None:
    config = load_config(
        HillClimbingConfig, {"maxSidewaysMoves": 7, "maxRestarts": 2, "sidewaysTolerance": 0.1}
    )
    assert config.max_sideways_moves == 7
    assert config.max_restarts == 2
    assert config.sideways_tolerance == 0.1

    sa = load_config(SimulatedAnnealingConfig, {"initialTemperature": 5, "coolingRate": 0.5})
    assert sa.initial_temperature == 5
    assert sa.cooling_rate == 0.5


def test_first_choice_spellings() -> None:
    assert load_config(StochasticHillClimbingConfig, {"variant": "firstChoice"}).variant == "first_choice"
    assert load_config(StochasticHillClimbingConfig, {"variant": "first_choice"}).variant == "first_choice"


@pytest.mark.parametrize(
    "model, config",
    [
        (SimulatedAnnealingConfig, {"cooling_rate": 1.0}),
        (SimulatedAnnealingConfig, {"initial_temperature": 0}),
        (HillClimbingConfig, {"sideways_tolerance": 1.0}),
        (HillClimbingConfig, {"max_restarts": -1}),
        (LocalBeamSearchConfig, {"beam_width": 0}),
        (LocalBeamSearchConfig, {"variant": "greedy"}),
        (GeneticAlgorithmConfig, {"cull_rate": 1.0}),
        (GeneticAlgorithmConfig, {"mutation_rate": 1.5}),
        (CSPSearchConfig, {"variable_heuristic": "smallest"}),
        (ConstructiveConfig, {"variable_heuristic": "mrv"}),
        (HillClimbingConfig, {"max_sideways": 3}),
    ],
)
def test_invalid_configs_raise_configuration_error(model, config) -> None:
    with pytest.raises(ConfigurationError):
        load_config(model, config)


def test_config_error_is_also_value_error() -> None:
    with pytest.raises(ValueError):
        load_config(SimulatedAnnealingConfig, {"cooling_rate": 2})


def test_model_instance_passes_through() -> None:
    config = SimulatedAnnealingConfig(cooling_rate=0.9)
    assert load_config(SimulatedAnnealingConfig, config) is config


def test_create_search_validates_config_at_construction() -> None:
    with pytest.raises(ConfigurationError):
        create_search("simulated_annealing", NQueensProblem(), config={"coolingRate": 3})


def test_create_search_unknown_algorithm() -> None:
    with pytest.raises(ConfigurationError, match="unknown algorithm"):
        create_search("tabu_search", NQueensProblem())


def test_registry_names_match_classes() -> None:
    assert set(ALGORITHMS) == {
        "hill_climbing",
        "stochastic_hill_climbing",
        "simulated_annealing",
        "local_beam_search",
        "genetic_algorithm",
        "bfs",
        "dfs",
        "backtracking",
        "forward_checking",
        "arc_consistency",
    }
    for name, cls in ALGORITHMS.items():
        assert cls.name == name
