from losers.config import Settings
from losers.context import AppContext


def run_migrations():
    context = AppContext.from_settings(Settings())
    print("Running database migrations...")
    context.create_all()
    context.dispose()
    print("Migrations completed successfully.")


if __name__ == "__main__":
    run_migrations()
