import argparse
from pathlib import Path

import pandas as pd

from timetable_ga.config import GAConfig, load_config
from timetable_ga.data_loader import load_catalog
from timetable_ga.encoding import decode, to_flat
from timetable_ga.evaluation import EvaluationResult, count_clashes
from timetable_ga.ga import GeneticSolver, SearchResult
from timetable_ga.model import Catalog, Individual


def schedule_to_dataframe(best: Individual, catalog: Catalog) -> pd.DataFrame:
    data = []
    for c in decode(best.genes, catalog):
        a = catalog.assignment(c.assignment_id)
        ts = catalog.timeslot(c.timeslot_id)
        data.append(
            {
                "Grupo": c.class_group_id,
                "Docente_ID": a.teacher_id,
                "Materia": a.subject,
                "Docente": a.teacher_name,
                "Timeslot": ts.timeslot_id,
                "Dia": ts.day,
                "Periodo": ts.period,
                "Hora": ts.label,
            }
        )
    return pd.DataFrame(data)


def timetable_grid(df_schedule: pd.DataFrame, class_group_id: int) -> pd.DataFrame:
    """Matriz periodo x día para un grupo; las celdas con choque muestran ambas materias."""
    df_group = df_schedule[df_schedule["Grupo"] == class_group_id].copy()
    if df_group.empty:
        return pd.DataFrame()
    df_group["Celda"] = df_group["Materia"] + " (" + df_group["Docente"] + ")"
    grid = df_group.pivot_table(
        index="Periodo", columns="Dia", values="Celda", aggfunc=lambda cells: " / ".join(cells)
    )
    return grid.sort_index().fillna("")


def print_schedule(df_schedule: pd.DataFrame) -> None:
    for r in df_schedule.itertuples(index=False):
        print(
            f"Grupo: {r.Grupo}  Docente ID: {r.Docente_ID}  Materia: {r.Materia}"
            f"  Docente: {r.Docente}  Hora: {r.Hora}"
        )


def export_outputs(df_schedule: pd.DataFrame, eval_res: EvaluationResult, result: SearchResult, out_dir: Path):
    out_dir.mkdir(parents=True, exist_ok=True)
    df_schedule.to_csv(out_dir / "schedule.csv", index=False)
    conflicts = pd.DataFrame([{"tipo": k, "valor": v} for k, v in eval_res.as_dict().items()])
    conflicts.to_csv(out_dir / "conflicts.csv", index=False)
    if result.history:
        pd.DataFrame(result.history).to_csv(out_dir / "history.csv", index=False)
    metrics = {
        "best_fitness": result.best.fitness,
        "clashes": eval_res.clashes,
        "generations": result.generations,
        "stop_reason": result.stop_reason,
        "time_sec": result.elapsed,
        "chromosome": " ".join(str(v) for v in to_flat(result.best.genes)),
    }
    pd.DataFrame([metrics]).to_csv(out_dir / "metrics.csv", index=False)


def main():
    parser = argparse.ArgumentParser(description="Generación de horarios por algoritmo genético")
    parser.add_argument("--config", default="config.yaml", help="Ruta al archivo de configuración")
    parser.add_argument("--data_dir", default="data", help="Directorio con los CSV de entrada")
    parser.add_argument("--out_dir", default="outputs", help="Directorio de salida")
    parser.add_argument("--seed", type=int, default=None, help="Semilla (reemplaza la del config)")
    parser.add_argument("--generations", type=int, default=None, help="Tope de generaciones")
    args = parser.parse_args()

    cfg: GAConfig = load_config(args.config)
    if args.seed is not None:
        cfg.seed = args.seed
    if args.generations is not None:
        cfg.max_generations = args.generations

    print("Cargando datos...")
    catalog = load_catalog(args.data_dir, cfg.periods_per_day)
    print(
        f"Asignaciones: {catalog.num_assignments} | Timeslots: {catalog.num_timeslots}"
        f" | Población: {cfg.population_size} | Generaciones máx.: {cfg.max_generations}"
    )

    solver = GeneticSolver(catalog, cfg)
    result = solver.evolve()

    eval_res = count_clashes(decode(result.best.genes, catalog), catalog, cfg)

    print()
    if result.solved:
        print(f"Solución encontrada en {result.generations} generaciones")
    else:
        print(f"Sin solución válida tras {result.generations} generaciones ({result.stop_reason})")
    print(f"Fitness final: {result.best.fitness:.5f} | Choques: {eval_res.clashes} | Tiempo: {result.elapsed:.2f}s")
    print()

    df_schedule = schedule_to_dataframe(result.best, catalog)
    print_schedule(df_schedule)
    for msg in eval_res.violations:
        print(f"  - {msg}")

    out_dir = Path(args.out_dir)
    export_outputs(df_schedule, eval_res, result, out_dir)
    print(f"Se guardaron resultados en {out_dir}/schedule.csv y {out_dir}/conflicts.csv")


if __name__ == "__main__":
    main()
