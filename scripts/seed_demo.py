#!/usr/bin/env python3
"""
Demo Seed Script

Seeds one institution with three courses and a job posting, then walks a
student through the admissions lifecycle against the configured store:
apply x2, hit the quota, get admitted twice, choose one offer.

Run: python scripts/seed_demo.py
"""
import sys
sys.path.insert(0, '.')

from admissions_portal.core.errors import QuotaExceeded
from admissions_portal.db import COLLECTIONS
from admissions_portal.models import ApplicationStatus, DocumentType, utcnow
from admissions_portal.services import get_services

STUDENT_ID = "demo-student"
INSTITUTION_ID = "demo-institution"


def seed_catalog(store):
    """Insert the demo institution and its courses (idempotent)."""
    print("\n[1] Seeding catalog...")
    store.put(COLLECTIONS["institutions"], INSTITUTION_ID, {
        "name": "Demo University",
        "location": "Maseru",
    })
    for course_id, name, faculty in [
        ("demo-cs", "BSc Computer Science", "Science"),
        ("demo-ds", "BSc Data Science", "Science"),
        ("demo-law", "LLB Law", "Law"),
    ]:
        store.put(COLLECTIONS["courses"], course_id, {
            "institution_id": INSTITUTION_ID,
            "name": name,
            "faculty_name": faculty,
            "requirements": "High school transcript",
            "capacity": 50,
            "duration": "4 years",
            "status": "active",
        })
    store.put(COLLECTIONS["jobs"], "demo-job", {
        "title": "Graduate Software Developer",
        "company_name": "Demo Tech",
        "location": "Maseru",
        "type": "Full-time",
        "status": "active",
        "created_at": utcnow(),
    })
    print("    ✅ 1 institution, 3 courses, 1 job posting")


def run_lifecycle(services):
    print("\n[2] Uploading transcript...")
    doc = services.documents.upload(
        STUDENT_ID, DocumentType.high_school_transcript, "demo/transcript.pdf", "transcript.pdf"
    )
    print(f"    ✅ Document {doc.id} ({doc.status.value})")

    print("\n[3] Applying...")
    apps = []
    for course_id in ("demo-cs", "demo-ds"):
        app = services.applications.submit(STUDENT_ID, services.catalog.get_course(course_id))
        apps.append(app)
        print(f"    ✅ {app.course_name}: {app.status.value}")
    try:
        services.applications.submit(STUDENT_ID, services.catalog.get_course("demo-law"))
        print("    ❌ Third application was accepted")
    except QuotaExceeded as e:
        print(f"    ✅ Third application refused: {e.message}")

    print("\n[4] Institution admits both...")
    for app in apps:
        update = services.applications.update_status(
            app.id, ApplicationStatus.admitted, institution_id=INSTITUTION_ID
        )
        print(f"    ✅ {app.course_name}: admitted (selection required: {update.selection_required})")

    print("\n[5] Student chooses the first offer...")
    result = services.admissions.reconcile(STUDENT_ID, apps[0].id)
    print(f"    ✅ Accepted: {result.accepted.course_name}")
    for declined in result.declined:
        print(f"    ✅ Declined: {declined.course_name}")

    print(f"\n[6] Unread notifications: {services.notifications.unread_count(STUDENT_ID)}")
    for n in services.notifications.list(STUDENT_ID):
        print(f"    - {n.message}")


def main():
    print("=" * 50)
    print("ADMISSIONS PORTAL - DEMO")
    print("=" * 50)
    services = get_services()
    seed_catalog(services.store)
    run_lifecycle(services)
    print("\n" + "=" * 50)
    print("Demo complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
