"""
Check the database connection and print what the dashboard would show.
Run with: python -m srag_dashboard.scripts.check_db
"""
from sqlalchemy import inspect
from srag_dashboard.core.db import get_engine
from srag_dashboard.repositories import CaseRepository
from srag_dashboard.services.charts import ChartsService
from srag_dashboard.services.metrics import MetricsService

def main():
    try:
        engine = get_engine()
        insp = inspect(engine)

        print("Database Connection: SUCCESS\n")
        if "srag_cases" not in insp.get_table_names():
            print("  Table srag_cases not found, run the seed first")
            return

        repo = CaseRepository(engine)
        print(f"srag_cases: {repo.count()} rows")
        print("States:", ", ".join(ChartsService(repo).get_available_states()) or "-")

        print("\nDashboard metrics:")
        metrics = MetricsService(repo).get_dashboard_metrics()
        for name, metric in vars(metrics).items():
            print(f"  - {name}: {metric.value} ({metric.context})")

    except Exception as e:
        print("Database Connection: FAILED")
        print(f"Error: {e}")

if __name__ == "__main__":
    main()
