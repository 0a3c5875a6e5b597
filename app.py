# app.py
import pandas as pd
import streamlit as st

from timetable_ga.config import GAConfig
from timetable_ga.data_loader import load_data, build_catalog
from timetable_ga.encoding import decode, chromosome_to_string
from timetable_ga.evaluation import count_clashes
from timetable_ga.errors import ConfigurationError
from timetable_ga.ga import GeneticSolver
from run import schedule_to_dataframe, timetable_grid

# --- CONFIGURACIÓN DE PÁGINA ---
st.set_page_config(page_title="Horarios por Algoritmo Genético", layout="wide", initial_sidebar_state="expanded")


def style_grid(df):
    """Resalta en rojo las celdas con más de una clase."""
    def highlight(val):
        if isinstance(val, str) and " / " in val:
            return "background-color: #ff4b4b; color: white; font-weight: bold;"
        return ""
    return df.style.map(highlight)


def sidebar_config() -> GAConfig:
    with st.sidebar:
        st.title("🧬 Parámetros del AG")
        cfg = GAConfig(
            population_size=st.number_input("Población", 2, 1000, 100),
            mutation_rate=st.slider("Tasa de mutación", 0.0, 1.0, 0.05),
            crossover_rate=st.slider("Tasa de cruce", 0.0, 1.0, 0.95),
            elitism_count=st.number_input("Élite", 0, 1000, 5),
            tournament_size=st.number_input("Tamaño de torneo", 1, 1000, 10),
            max_generations=st.number_input("Generaciones máx.", 0, 100000, 1000),
            seed=st.number_input("Semilla", 0, 10**9, 42),
            log_every=0,
        )
        st.markdown("---")
        st.info("Sistema de Optimización de Horarios\nAlgoritmo Genético")
    return cfg


def main():
    if "bundle" not in st.session_state:
        st.session_state.bundle = load_data("data")
    bundle = st.session_state.bundle
    cfg = sidebar_config()

    tab_datos, tab_run, tab_horario = st.tabs(["Catálogo", "Ejecutar", "Horario por Grupo"])

    with tab_datos:
        st.subheader("Asignaciones (orden = orden de genes)")
        st.dataframe(bundle.asignaciones, height=300, use_container_width=True)
        st.subheader("Timeslots")
        st.dataframe(bundle.horas, height=300, use_container_width=True)

    with tab_run:
        if st.button("🚀 Ejecutar búsqueda"):
            catalog = build_catalog(bundle, cfg.periods_per_day)
            try:
                solver = GeneticSolver(catalog, cfg, verbose=False)
            except ConfigurationError as e:
                st.error(f"Configuración inválida: {e}")
            else:
                with st.spinner("Evolucionando..."):
                    result = solver.evolve()
                st.session_state.catalog = catalog
                st.session_state.result = result

        result = st.session_state.get("result")
        if result is not None:
            catalog = st.session_state.catalog
            eval_res = count_clashes(decode(result.best.genes, catalog), catalog, cfg)
            c1, c2, c3 = st.columns(3)
            c1.metric("Generaciones", result.generations)
            c2.metric("Fitness", f"{result.best.fitness:.5f}")
            c3.metric("Choques", eval_res.clashes)
            if result.history:
                df_hist = pd.DataFrame(result.history).set_index("gen")
                st.line_chart(df_hist[["best_fitness", "avg_fitness"]])
            st.markdown("##### Cromosoma")
            st.code(chromosome_to_string(result.best.genes))
            st.markdown("##### Choques por regla")
            st.table(pd.DataFrame([eval_res.as_dict()]))
            for msg in eval_res.violations:
                st.write(f"- {msg}")

    with tab_horario:
        result = st.session_state.get("result")
        if result is None:
            st.warning("Ejecute la búsqueda primero.")
        else:
            catalog = st.session_state.catalog
            df_schedule = schedule_to_dataframe(result.best, catalog)
            sel = st.selectbox("Seleccione Grupo:", catalog.class_group_ids)
            st.dataframe(style_grid(timetable_grid(df_schedule, sel)), use_container_width=True)
            csv = df_schedule.to_csv(index=False).encode("utf-8")
            st.download_button("📥 Descargar CSV", data=csv, file_name="horario_final.csv", mime="text/csv")


if __name__ == "__main__":
    main()
