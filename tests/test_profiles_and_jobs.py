"""
Student profile + job listing tests
"""

from datetime import date

from admissions_portal.db import COLLECTIONS


class TestStudentProfile:

    def test_unsaved_profile_is_empty(self, services):
        profile = services.profiles.get("s1")
        assert profile.id == "s1"
        assert profile.name is None
        assert profile.updated_at is None

    def test_update_sets_fields_and_stamps(self, services):
        profile = services.profiles.update("s1", {
            "name": "Lerato Mokoena",
            "phone": "+266 5800 0000",
            "high_school": "Maseru High",
            "graduation_year": 2025,
            "address": "Maseru",
            "date_of_birth": date(2007, 5, 14),
        })
        assert profile.name == "Lerato Mokoena"
        assert profile.date_of_birth == date(2007, 5, 14)
        assert profile.updated_at is not None

        stored = services.profiles.get("s1")
        assert stored.high_school == "Maseru High"
        assert stored.date_of_birth == date(2007, 5, 14)

    def test_partial_update_keeps_other_fields(self, services):
        services.profiles.update("s1", {"name": "Lerato", "phone": "123"})
        first = services.profiles.get("s1").updated_at
        services.profiles.update("s1", {"phone": "456", "address": None, "role": "admin"})

        profile = services.profiles.get("s1")
        assert profile.name == "Lerato"
        assert profile.phone == "456"
        assert profile.address is None
        assert profile.updated_at >= first

        stored = services.store.get(COLLECTIONS["students"], "s1")
        assert "role" not in stored


class TestJobs:

    def test_only_active_jobs_newest_first(self, services):
        jobs = services.catalog.list_jobs()
        assert [j.id for j in jobs] == ["j2", "j1"]
        assert jobs[0].company_name == "LeBank"
