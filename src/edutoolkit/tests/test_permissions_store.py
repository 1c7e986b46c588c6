"""
Tests for course access grants.
"""

import pytest
from datetime import date, datetime, timedelta, timezone
from unittest.mock import patch

from edutoolkit.model.access import CourseAccess
from edutoolkit.repositories.access import CourseAccessRepository
from edutoolkit.repositories.base import NotFoundError
from edutoolkit.services import permissions_store as store


class TestGrantAccess:
    
    def test_grant_returns_new_id(self, test_db):
        grant_id = store.grant_access(test_db, "course-1", "teacher@school.edu", "DOCENTE")
        
        assert grant_id is not None
        grant = CourseAccessRepository(test_db).get_by_id(grant_id)
        assert grant.course_id == "course-1"
        assert grant.email == "teacher@school.edu"
        assert grant.role_in_course == "DOCENTE"
        assert grant.expires_at is None
    
    def test_second_grant_is_noop(self, test_db):
        first = store.grant_access(test_db, "course-1", "teacher@school.edu")
        second = store.grant_access(test_db, "course-1", "teacher@school.edu", "EDITOR")
        
        assert first is not None
        assert second is None
        assert test_db.query(CourseAccess).count() == 1
        assert CourseAccessRepository(test_db).get_by_id(first).role_in_course == "DOCENTE"
    
    def test_same_email_on_other_course_is_separate_grant(self, test_db):
        assert store.grant_access(test_db, "course-1", "teacher@school.edu") is not None
        assert store.grant_access(test_db, "course-2", "teacher@school.edu") is not None
        assert test_db.query(CourseAccess).count() == 2
    
    def test_email_is_normalized(self, test_db):
        grant_id = store.grant_access(test_db, "course-1", "  User@Email.COM ")
        
        assert CourseAccessRepository(test_db).get_by_id(grant_id).email == "user@email.com"
        assert store.has_access(test_db, "course-1", "user@email.com")
        assert store.grant_access(test_db, "course-1", "user@email.com") is None
    
    def test_concurrent_grant_loses_on_unique_index(self, test_db):
        """Both callers pass the existence check; the database keeps one row."""
        store.grant_access(test_db, "course-1", "teacher@school.edu")
        
        with patch.object(CourseAccessRepository, "find_grant", return_value=None):
            second = store.grant_access(test_db, "course-1", "teacher@school.edu")
        
        assert second is None
        assert test_db.query(CourseAccess).count() == 1
    
    def test_name_is_stored_trimmed(self, test_db):
        grant_id = store.grant_access(test_db, "course-1", "t@school.edu", name="  Ana Pérez ")
        assert CourseAccessRepository(test_db).get_by_id(grant_id).name == "Ana Pérez"


class TestExpiration:
    
    def test_end_of_day(self):
        assert store.end_of_day(date(2026, 3, 14)) == datetime(2026, 3, 14, 23, 59, 59, 999000, tzinfo=timezone.utc)
    
    def test_valid_until_last_instant(self, test_db):
        boundary = store.end_of_day(date(2026, 3, 14))
        store.grant_access(test_db, "course-1", "t@school.edu", expires_at=boundary)
        
        assert store.has_access(test_db, "course-1", "t@school.edu", now=boundary - timedelta(days=3))
        assert store.has_access(test_db, "course-1", "t@school.edu", now=boundary)
        assert not store.has_access(test_db, "course-1", "t@school.edu", now=boundary + timedelta(milliseconds=1))
    
    def test_expired_grant_is_kept(self, test_db):
        past = datetime.now(timezone.utc) - timedelta(days=1)
        grant_id = store.grant_access(test_db, "course-1", "t@school.edu", expires_at=past)
        
        assert not store.has_access(test_db, "course-1", "t@school.edu")
        assert [g.id for g in store.get_all_permissions(test_db)] == [grant_id]
        assert [g.id for g in store.get_course_permissions(test_db, "course-1")] == [grant_id]
    
    def test_no_grant_means_no_access(self, test_db):
        assert not store.has_access(test_db, "course-1", "nobody@school.edu")
    
    def test_update_expiration(self, test_db):
        past = datetime.now(timezone.utc) - timedelta(days=1)
        grant_id = store.grant_access(test_db, "course-1", "t@school.edu", expires_at=past)
        assert not store.has_access(test_db, "course-1", "t@school.edu")
        
        store.update_access_expiration(test_db, grant_id, None)
        assert store.has_access(test_db, "course-1", "t@school.edu")
        
        store.update_access_expiration(test_db, grant_id, past)
        assert not store.has_access(test_db, "course-1", "t@school.edu")
    
    def test_update_expiration_of_missing_grant(self, test_db):
        with pytest.raises(NotFoundError):
            store.update_access_expiration(test_db, "missing", None)


class TestAuthorizedCourses:
    
    def test_expired_courses_are_filtered(self, test_db):
        now = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)
        store.grant_access(test_db, "active", "t@school.edu")
        store.grant_access(test_db, "future", "t@school.edu", expires_at=now + timedelta(days=30))
        store.grant_access(test_db, "expired", "t@school.edu", expires_at=now - timedelta(seconds=1))
        store.grant_access(test_db, "other", "someone@school.edu")
        
        courses = store.get_authorized_courses_for_user(test_db, " T@School.edu", now=now)
        
        assert sorted(courses) == ["active", "future"]
    
    def test_no_grants(self, test_db):
        assert store.get_authorized_courses_for_user(test_db, "t@school.edu") == []


class TestRevoke:
    
    def test_revoke_deletes(self, test_db):
        grant_id = store.grant_access(test_db, "course-1", "t@school.edu")
        
        assert store.revoke_access(test_db, grant_id) is True
        assert not store.has_access(test_db, "course-1", "t@school.edu")
        assert test_db.query(CourseAccess).count() == 0
    
    def test_revoke_missing_is_harmless(self, test_db):
        assert store.revoke_access(test_db, "missing") is False
    
    def test_regrant_after_revoke(self, test_db):
        grant_id = store.grant_access(test_db, "course-1", "t@school.edu")
        store.revoke_access(test_db, grant_id)
        assert store.grant_access(test_db, "course-1", "t@school.edu") is not None


class TestSuggestions:
    
    def test_dedupes_and_keeps_most_recent_name(self, test_db):
        store.grant_access(test_db, "c1", "a@school.edu", name="Old Name")
        store.grant_access(test_db, "c2", "b@school.edu")
        store.grant_access(test_db, "c3", "a@school.edu", name="New Name")
        
        suggestions = store.get_recent_access_suggestions(test_db)
        
        assert len(suggestions) == 2
        by_email = {s["email"]: s["name"] for s in suggestions}
        assert by_email == {"a@school.edu": "New Name", "b@school.edu": ""}
        assert suggestions[0]["email"] == "a@school.edu"
    
    def test_blank_recent_name_falls_back_to_older(self, test_db):
        store.grant_access(test_db, "c1", "a@school.edu", name="Ana")
        store.grant_access(test_db, "c2", "a@school.edu")
        
        assert store.get_recent_access_suggestions(test_db) == [{"email": "a@school.edu", "name": "Ana"}]
    
    def test_scan_is_limited(self, test_db):
        for i in range(5):
            store.grant_access(test_db, f"c{i}", f"user{i}@school.edu")
        
        suggestions = store.get_recent_access_suggestions(test_db, limit=3)
        
        assert [s["email"] for s in suggestions] == ["user4@school.edu", "user3@school.edu", "user2@school.edu"]


class TestUserName:
    
    def test_first_non_blank_name(self, test_db):
        store.grant_access(test_db, "c1", "a@school.edu", name="   ")
        store.grant_access(test_db, "c2", "a@school.edu", name="Ana")
        
        assert store.get_user_name_from_permissions(test_db, "A@school.edu") == "Ana"
    
    def test_no_name(self, test_db):
        store.grant_access(test_db, "c1", "a@school.edu")
        assert store.get_user_name_from_permissions(test_db, "a@school.edu") is None
        assert store.get_user_name_from_permissions(test_db, "nobody@school.edu") is None
