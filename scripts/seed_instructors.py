from datetime import date
from app.database import SessionLocal, init_db
from app.models.instructor import Instructor
from app.models.staff_leave import StaffLeave, LeaveStatus, LeaveType
from app.services.pto_balance_service import BalanceSynchronizer
from app.services.pto_storage import PtoStorage

INSTRUCTORS = [
    {"name": "Sarah Mitchell", "nationality": "American", "credentials": "CELTA", "school_id": 1},
    {"name": "Omar Haddad", "nationality": "Jordanian", "credentials": "DELTA", "school_id": 1},
    {"name": "Grace Okafor", "nationality": "British", "credentials": "MA TESOL", "school_id": 2},
]

# (instructor name, leave type, start, end, pto days, r&r days, status)
LEAVE = [
    ("Sarah Mitchell", LeaveType.PTO, date(2025, 3, 2), date(2025, 3, 6), 5, 0, LeaveStatus.APPROVED),
    ("Sarah Mitchell", LeaveType.RR, date(2025, 7, 13), date(2025, 7, 24), 0, 10, LeaveStatus.APPROVED),
    ("Omar Haddad", LeaveType.PTO, date(2025, 4, 20), date(2025, 4, 24), 5, 0, LeaveStatus.PENDING),
    ("Grace Okafor", LeaveType.PTO, date(2024, 12, 29), date(2025, 1, 2), 4, 0, LeaveStatus.APPROVED),
]

db = SessionLocal()

def seed_instructor(data):
    # Skip existing names so the script can be re-run
    existing = db.query(Instructor).filter(Instructor.name == data["name"]).first()
    if existing:
        print(f"Instructor {data['name']} already exists. Skipping.")
        return existing

    instructor = Instructor(**data)
    db.add(instructor)
    db.commit()
    db.refresh(instructor)
    print(f"Created instructor -> {instructor.name}")
    return instructor

def seed_leave(instructor, leave_type, start, end, pto_days, rr_days, status):
    existing = db.query(StaffLeave).filter(
        StaffLeave.instructor_id == instructor.id,
        StaffLeave.start_date == start,
        StaffLeave.leave_type == leave_type.value,
    ).first()
    if existing:
        return
    db.add(StaffLeave(
        instructor_id=instructor.id,
        leave_type=leave_type.value,
        start_date=start,
        end_date=end,
        pto_days=pto_days,
        rr_days=rr_days,
        status=status.value,
    ))
    db.commit()
    print(f"Created {leave_type.value} leave for {instructor.name} starting {start}")

if __name__ == "__main__":
    init_db()
    try:
        by_name = {data["name"]: seed_instructor(data) for data in INSTRUCTORS}
        for name, *leave in LEAVE:
            seed_leave(by_name[name], *leave)

        synchronizer = BalanceSynchronizer(PtoStorage(db))
        for year in sorted({start.year for _, _, start, *_ in LEAVE}):
            outcomes = synchronizer.synchronize_all(year)
            print(f"Synced {sum(o.succeeded for o in outcomes)}/{len(outcomes)} balances for {year}")
    finally:
        db.close()
