from adapters.scenarios.loader import default_scenarios_path, load_scenarios
from adapters.scenarios.models import Scenario, ScenarioResult, ScenariosFile
from adapters.scenarios.runner import run_scenario, run_scenarios

__all__ = [
    "Scenario",
    "ScenarioResult",
    "ScenariosFile",
    "default_scenarios_path",
    "load_scenarios",
    "run_scenario",
    "run_scenarios",
]
