from click.testing import CliRunner
import pytest
from unittest.mock import patch

from edutoolkit.cli.cli import cli
from edutoolkit.model.access import CourseAccess
from edutoolkit.model.auth import UserProfile


@pytest.fixture
def runner(test_db):
    def sessions():
        yield test_db
    
    with patch("edutoolkit.cli.permissions.get_db", sessions), \
         patch("edutoolkit.cli.users.get_db", sessions):
        yield CliRunner()


def test_grant_with_expiry(runner, test_db):
    result = runner.invoke(cli, ["permissions", "grant", "course-1", " T@School.edu ",
                                 "--role", "VIEWER", "--expires", "2030-01-31", "--name", "Ana"])
    
    assert result.exit_code == 0, result.output
    grant = test_db.query(CourseAccess).one()
    assert grant.email == "t@school.edu"
    assert grant.role_in_course == "VIEWER"
    assert (grant.expires_at.hour, grant.expires_at.minute, grant.expires_at.second) == (23, 59, 59)
    assert grant.expires_at.microsecond == 999000


def test_grant_twice(runner):
    runner.invoke(cli, ["permissions", "grant", "course-1", "t@school.edu"])
    result = runner.invoke(cli, ["permissions", "grant", "course-1", "t@school.edu"])
    
    assert result.exit_code == 0
    assert "already has access" in result.output


def test_list_and_revoke(runner, test_db):
    runner.invoke(cli, ["permissions", "grant", "course-1", "t@school.edu"])
    grant_id = test_db.query(CourseAccess).one().id
    
    result = runner.invoke(cli, ["permissions", "list", "--course", "course-1"])
    assert grant_id in result.output
    assert "active" in result.output
    
    result = runner.invoke(cli, ["permissions", "revoke", grant_id])
    assert "Revoked" in result.output
    assert test_db.query(CourseAccess).count() == 0


def test_promote_existing_profile(runner, test_db):
    test_db.add(UserProfile(uid="u1", email="t@school.edu", role_global="DOCENTE"))
    test_db.commit()
    
    result = runner.invoke(cli, ["users", "promote", "t@school.edu", "--role", "SUPER_ADMIN"])
    
    assert result.exit_code == 0, result.output
    assert test_db.query(UserProfile).one().role_global == "SUPER_ADMIN"


def test_promote_unknown_profile(runner):
    result = runner.invoke(cli, ["users", "promote", "x@school.edu"])
    
    assert result.exit_code != 0
    assert "sign in once" in result.output
