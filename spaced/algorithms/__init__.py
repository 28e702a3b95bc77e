"""Algorithm loading with built-in algorithm registry.

An algorithm module exposes an ``Algorithm`` class with a
``compute(prior, score, method) -> Schedule`` method.
"""

import importlib
import importlib.util
import pathlib

from spaced.models import CUSTOM, ConfigError, SpacingMethod

_BUILTIN_ALGORITHMS = {
    "SuperMemo2.0": "spaced.algorithms.sm2",
}


class AlgorithmNotFound(ConfigError):
    """No strategy is registered for a spacing method's algorithm."""


def _load_script(method: SpacingMethod, algo_path: pathlib.Path):
    spec = importlib.util.spec_from_file_location(
        f"spaced_algorithm_{algo_path.stem}", str(algo_path))
    mod = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(mod)
    except Exception as e:
        raise AlgorithmNotFound(
            f"Custom algorithm for '{method.name}' failed to load from {algo_path}: {e}") from e
    algorithm_cls = getattr(mod, "Algorithm", None)
    if algorithm_cls is None:
        raise AlgorithmNotFound(
            f"Custom algorithm not implemented for '{method.name}': "
            f"{algo_path.name} defines no Algorithm class")
    try:
        return algorithm_cls()
    except Exception as e:
        raise AlgorithmNotFound(
            f"Custom algorithm for '{method.name}' could not be created: {e}") from e


def load_algorithm(method: SpacingMethod, spaced_dir: pathlib.Path | None = None):
    if method.algorithm == CUSTOM:
        if not method.custom_script:
            raise AlgorithmNotFound(
                f"Custom algorithm not implemented for '{method.name}': no script set")
        if spaced_dir is not None:
            script = method.custom_script
            if not script.endswith(".py"):
                script += ".py"
            algo_path = spaced_dir / "algorithms" / script
            if algo_path.exists():
                return _load_script(method, algo_path)
        raise AlgorithmNotFound(
            f"Custom algorithm not implemented for '{method.name}': "
            f"script not found: {method.custom_script}")

    if method.algorithm in _BUILTIN_ALGORITHMS:
        mod = importlib.import_module(_BUILTIN_ALGORITHMS[method.algorithm])
        return mod.Algorithm()

    raise AlgorithmNotFound(f"Unknown spacing algorithm: {method.algorithm}")
