# timetable_ga/data_loader.py
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from .errors import CatalogError
from .model import Catalog, CatalogBuilder

ASSIGNMENT_COLUMNS = ["assignment_id", "teacher_id", "teacher_name", "class_group_id", "subject"]
TIMESLOT_COLUMNS = ["slot_id", "day_idx", "rango_hora"]


@dataclass(frozen=True)
class DataBundle:
    asignaciones: pd.DataFrame
    horas: pd.DataFrame


def _require_columns(df: pd.DataFrame, columns, name: str) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise CatalogError(f"{name}: faltan columnas {missing}")


def load_data(data_dir: str) -> DataBundle:
    asignaciones = pd.read_csv(f"{data_dir}/asignaciones.csv")
    horas = pd.read_csv(f"{data_dir}/horas.csv")
    _require_columns(asignaciones, ASSIGNMENT_COLUMNS, "asignaciones.csv")
    _require_columns(horas, TIMESLOT_COLUMNS, "horas.csv")

    # Periodo = orden del slot dentro de su día (0 = primera hora)
    horas = horas.sort_values("slot_id").reset_index(drop=True)
    horas["period"] = horas.groupby("day_idx").cumcount()

    return DataBundle(asignaciones=asignaciones, horas=horas)


def build_catalog(bundle: DataBundle, periods_per_day: int = 6) -> Catalog:
    builder = CatalogBuilder(periods_per_day=periods_per_day)
    for r in bundle.horas.itertuples(index=False):
        builder.add_timeslot(int(r.slot_id), str(r.rango_hora), day=int(r.day_idx), period=int(r.period))
    # El orden de las filas define el orden de los genes
    for r in bundle.asignaciones.itertuples(index=False):
        builder.add_assignment(
            int(r.assignment_id),
            int(r.teacher_id),
            str(r.teacher_name),
            int(r.class_group_id),
            str(r.subject),
        )
    return builder.build()


def load_catalog(data_dir: str, periods_per_day: int = 6) -> Catalog:
    if not Path(data_dir).is_dir():
        raise CatalogError(f"No existe el directorio de datos: {data_dir}")
    return build_catalog(load_data(data_dir), periods_per_day)
