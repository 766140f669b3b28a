"""
Unit Tests for ClassScheduleService
Tests for: slot validation, room and faculty clashes, timetable filters
"""
import pytest
from sqlalchemy import func, select

from app.core.exceptions import (
    CourseNotFoundError,
    FacultyNotFoundError,
    ScheduleConflictError,
    ScheduleNotFoundError,
    ValidationError,
)
from app.core.security import get_password_hash
from app.models.class_schedule import ClassSchedule, Weekday
from app.models.faculty import Faculty
from app.models.user import User, UserRole
from app.schemas.class_schedule import ClassScheduleCreate
from app.services.class_schedule_service import ClassScheduleService


def _slot(course_id, faculty_id, **overrides) -> ClassScheduleCreate:
    data = {
        "course_id": str(course_id),
        "faculty_id": str(faculty_id),
        "room": "room 101",
        "day_of_week": "Monday",
        "start_time": "09:00",
        "end_time": "10:00",
        "section": "A",
    }
    data.update(overrides)
    return ClassScheduleCreate(**data)


async def _second_faculty(db) -> Faculty:
    user = User(
        email="lab.incharge@example.edu",
        hashed_password=get_password_hash("another-pass"),
        full_name="Dr. Lab Incharge",
        role=UserRole.FACULTY,
        is_active=True,
    )
    db.add(user)
    await db.flush()
    profile = Faculty(
        user_id=user.id,
        faculty_code="EE-900",
        department="Electrical",
        office="Block B, 3",
        specialization="Control Systems",
        office_hours="Thu 14:00-16:00",
    )
    db.add(profile)
    await db.commit()
    return profile


async def _count(db) -> int:
    return (await db.execute(select(func.count()).select_from(ClassSchedule))).scalar_one()


@pytest.fixture
def schedules(db_session) -> ClassScheduleService:
    return ClassScheduleService(db_session)


class TestCreateSchedule:
    """Test admitting new slots"""

    async def test_creates_slot_with_normalised_room(self, schedules, make_course, faculty_profile, faculty_user):
        course_id = (await make_course(code="EC301")).id

        schedule = await schedules.create_schedule(
            _slot(course_id, faculty_profile.id, room="lab 2", day_of_week="wednesday", section="b"),
            actor_id=faculty_user.id,
        )

        assert schedule.room == "Lab 02"
        assert schedule.day_of_week == Weekday.WEDNESDAY
        assert schedule.section == "B"
        assert schedule.course.course_code == "EC301"
        assert schedule.faculty.user.email == faculty_user.email

    async def test_end_must_follow_start(self, schedules, db_session, make_course, faculty_profile, faculty_user):
        course_id = (await make_course()).id

        with pytest.raises(ValidationError) as exc_info:
            await schedules.create_schedule(
                _slot(course_id, faculty_profile.id, start_time="11:00", end_time="11:00"),
                actor_id=faculty_user.id,
            )

        assert exc_info.value.details == {"field": "end_time"}
        assert await _count(db_session) == 0

    async def test_unknown_course(self, schedules, faculty_profile, faculty_user):
        with pytest.raises(CourseNotFoundError):
            await schedules.create_schedule(_slot("missing", faculty_profile.id), actor_id=faculty_user.id)

    async def test_unknown_faculty(self, schedules, make_course, faculty_user):
        course_id = (await make_course()).id

        with pytest.raises(FacultyNotFoundError):
            await schedules.create_schedule(_slot(course_id, "missing"), actor_id=faculty_user.id)


class TestClashes:
    """Room and faculty double booking"""

    async def test_room_clash(self, schedules, db_session, make_course, faculty_profile, faculty_user):
        first = await make_course()
        second = await make_course()
        first_id, second_id = first.id, second.id
        other = await _second_faculty(db_session)
        booked = await schedules.create_schedule(_slot(first_id, faculty_profile.id), actor_id=faculty_user.id)
        booked_id = booked.id

        with pytest.raises(ScheduleConflictError) as exc_info:
            await schedules.create_schedule(
                _slot(second_id, other.id, room="ROOM 101", start_time="09:30", end_time="11:00"),
                actor_id=faculty_user.id,
            )

        assert exc_info.value.details == {"resource": "room", "conflicting_schedule_id": booked_id}
        assert "09:00-10:00" in exc_info.value.message
        assert await _count(db_session) == 1

    async def test_faculty_clash(self, schedules, db_session, make_course, faculty_profile, faculty_user):
        course_id = (await make_course()).id
        await schedules.create_schedule(_slot(course_id, faculty_profile.id), actor_id=faculty_user.id)

        with pytest.raises(ScheduleConflictError) as exc_info:
            await schedules.create_schedule(
                _slot(course_id, faculty_profile.id, room="room 202", section="B", start_time="09:45", end_time="10:30"),
                actor_id=faculty_user.id,
            )

        assert exc_info.value.details["resource"] == "faculty"

    @pytest.mark.parametrize("overrides", [
        {"start_time": "10:00", "end_time": "11:00"},
        {"day_of_week": "Tuesday"},
    ])
    async def test_back_to_back_and_other_days_are_fine(
        self, schedules, db_session, make_course, faculty_profile, faculty_user, overrides
    ):
        course_id = (await make_course()).id
        await schedules.create_schedule(_slot(course_id, faculty_profile.id), actor_id=faculty_user.id)

        await schedules.create_schedule(_slot(course_id, faculty_profile.id, **overrides), actor_id=faculty_user.id)

        assert await _count(db_session) == 2

    async def test_replace_does_not_clash_with_itself(self, schedules, make_course, faculty_profile, faculty_user):
        course_id = (await make_course()).id
        schedule = await schedules.create_schedule(_slot(course_id, faculty_profile.id), actor_id=faculty_user.id)

        replaced = await schedules.replace_schedule(
            schedule.id, _slot(course_id, faculty_profile.id, end_time="10:30"), actor_id=faculty_user.id
        )

        assert replaced.id == schedule.id
        assert replaced.end_time.strftime("%H:%M") == "10:30"


class TestListSchedules:
    """Timetable views"""

    async def test_filters(
        self, schedules, db_session, make_course, faculty_profile, faculty_user, student_user, other_student
    ):
        course = await make_course(students={student_user: "A", other_student: "B"})
        unrelated = await make_course()
        course_id, unrelated_id = course.id, unrelated.id
        other = await _second_faculty(db_session)
        other_id = other.id

        friday_a = await schedules.create_schedule(
            _slot(course_id, faculty_profile.id, day_of_week="Friday"), actor_id=faculty_user.id
        )
        monday_a = await schedules.create_schedule(
            _slot(course_id, faculty_profile.id, room="room 102"), actor_id=faculty_user.id
        )
        tuesday_b = await schedules.create_schedule(
            _slot(course_id, other_id, section="B", day_of_week="Tuesday"), actor_id=faculty_user.id
        )
        elsewhere = await schedules.create_schedule(
            _slot(unrelated_id, other_id, day_of_week="Thursday"), actor_id=faculty_user.id
        )

        def ids(result):
            return [s.id for s in result]

        assert ids(await schedules.list_schedules(faculty_id=faculty_profile.id)) == [monday_a.id, friday_a.id]
        assert ids(await schedules.list_schedules(course_id=course_id)) == [monday_a.id, tuesday_b.id, friday_a.id]
        assert ids(await schedules.list_schedules(student_id=student_user.id)) == [monday_a.id, friday_a.id]
        assert ids(await schedules.list_schedules(student_id=other_student.id)) == [tuesday_b.id]
        assert len(await schedules.list_schedules()) == 4
        assert elsewhere.id in ids(await schedules.list_schedules(faculty_id=other_id))

    async def test_student_without_enrollments(self, schedules, student_user):
        assert await schedules.list_schedules(student_id=student_user.id) == []

    async def test_delete(self, schedules, make_course, faculty_profile, faculty_user):
        course_id = (await make_course()).id
        schedule_id = (await schedules.create_schedule(
            _slot(course_id, faculty_profile.id), actor_id=faculty_user.id
        )).id

        await schedules.delete_schedule(schedule_id, actor_id=faculty_user.id)

        with pytest.raises(ScheduleNotFoundError):
            await schedules.get_schedule(schedule_id)
