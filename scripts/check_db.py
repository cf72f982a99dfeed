from sqlalchemy import inspect
from app.database import engine, DATABASE_URL

def check_db():
    inspector = inspect(engine)
    tables = inspector.get_table_names()
    if not tables:
        print(f"Error: no tables found in {DATABASE_URL}")
        return

    print("Tables in DB:")
    for table in tables:
        print(f" - {table}")
        for col in inspector.get_columns(table):
            print(f"   * {col['name']} ({col['type']})")
        for constraint in inspector.get_unique_constraints(table):
            print(f"   ! unique {constraint['name']}: {', '.join(constraint['column_names'])}")

if __name__ == "__main__":
    check_db()
