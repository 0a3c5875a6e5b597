"""
Configuración del algoritmo genético.

Incluye un cargador desde YAML para dejar los parámetros reproducibles y
configurables. Los valores por defecto son los de la corrida de referencia
(población 100, mutación 0.05, cruce 0.95, élite 5, torneo 10).
"""
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigurationError


DEFAULT_FIRST_PERIOD_SUBJECTS: List[str] = ["语文", "英语"]


@dataclass
class GAConfig:
    # Algoritmo genético
    population_size: int = 100
    mutation_rate: float = 0.05
    crossover_rate: float = 0.95
    elitism_count: int = 5
    tournament_size: int = 10
    max_generations: int = 5000
    seed: Optional[int] = 42

    # Corte adicional
    max_stagnation: Optional[int] = None
    time_limit_sec: Optional[float] = None

    # Ejecución
    n_workers: int = 1
    log_every: int = 1

    # Tiempo
    periods_per_day: int = 6

    # Reglas de choque
    first_period_subjects: List[str] = field(
        default_factory=lambda: list(DEFAULT_FIRST_PERIOD_SUBJECTS)
    )
    teacher_class_clash_weight: int = 1

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GAConfig":
        merged = asdict(cls())
        for k, v in data.items():
            if k in merged:
                merged[k] = v
        return cls(**merged)

    def validate(self) -> "GAConfig":
        """Lanza ConfigurationError ante parámetros incoherentes; no corrige nada."""
        if self.population_size < 1:
            raise ConfigurationError(f"population_size debe ser >= 1 (recibido {self.population_size})")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ConfigurationError(f"mutation_rate fuera de [0, 1]: {self.mutation_rate}")
        if not 0.0 <= self.crossover_rate <= 1.0:
            raise ConfigurationError(f"crossover_rate fuera de [0, 1]: {self.crossover_rate}")
        if self.elitism_count < 0:
            raise ConfigurationError(f"elitism_count no puede ser negativo: {self.elitism_count}")
        if self.elitism_count > self.population_size:
            raise ConfigurationError(
                f"elitism_count ({self.elitism_count}) mayor que population_size ({self.population_size})"
            )
        if self.tournament_size < 1:
            raise ConfigurationError(f"tournament_size debe ser >= 1 (recibido {self.tournament_size})")
        if self.tournament_size > self.population_size:
            raise ConfigurationError(
                f"tournament_size ({self.tournament_size}) mayor que population_size ({self.population_size})"
            )
        if self.max_generations < 0:
            raise ConfigurationError(f"max_generations no puede ser negativo: {self.max_generations}")
        if self.n_workers < 1:
            raise ConfigurationError(f"n_workers debe ser >= 1 (recibido {self.n_workers})")
        if self.periods_per_day < 1:
            raise ConfigurationError(f"periods_per_day debe ser >= 1 (recibido {self.periods_per_day})")
        if self.teacher_class_clash_weight < 0:
            raise ConfigurationError("teacher_class_clash_weight no puede ser negativo")
        return self


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8")
    return yaml.safe_load(text) or {}


def load_config(path: str = "config.yaml") -> GAConfig:
    cfg_path = Path(path)
    data = _load_yaml(cfg_path)
    if not isinstance(data, dict):
        raise ConfigurationError("config.yaml debe contener un objeto mapeo")
    return GAConfig.from_dict(data)
