"""
Unit Tests for Class Schedules API Endpoints
"""
from httpx import AsyncClient

BASE = '/api/v1/class-schedules'


def _body(course_id: str, faculty_id: str, **overrides) -> dict:
    body = {
        'course_id': course_id,
        'faculty_id': faculty_id,
        'room': 'room 101',
        'day_of_week': 'monday',
        'start_time': '09:00',
        'end_time': '10:00',
        'section': 'a',
    }
    body.update(overrides)
    return body


class TestCreateSchedule:

    async def test_create(self, client: AsyncClient, faculty_headers, faculty_user, faculty_profile, make_course):
        course = await make_course(code='EC301')
        course_id, faculty_id = course.id, faculty_profile.id

        response = await client.post(BASE, json=_body(course_id, faculty_id), headers=faculty_headers)

        assert response.status_code == 201
        data = response.json()
        assert data['day_of_week'] == 'Monday'
        assert data['start_time'] == '09:00:00'
        assert data['room'] == 'ROOM 101'
        assert data['section'] == 'A'
        assert data['course']['course_code'] == 'EC301'
        assert data['faculty']['id'] == faculty_id
        assert data['faculty']['email'] == faculty_user.email
        assert data['faculty']['department'] == 'Electrical'

    async def test_student_cannot_create(self, client: AsyncClient, auth_headers, faculty_profile, make_course):
        course_id = (await make_course()).id

        response = await client.post(BASE, json=_body(course_id, faculty_profile.id), headers=auth_headers)

        assert response.status_code == 403

    async def test_conflict(self, client: AsyncClient, faculty_headers, faculty_profile, make_course):
        course_id, faculty_id = (await make_course()).id, faculty_profile.id
        first = await client.post(BASE, json=_body(course_id, faculty_id), headers=faculty_headers)

        response = await client.post(
            BASE, json=_body(course_id, faculty_id, section='b', start_time='09:30', end_time='10:30'),
            headers=faculty_headers,
        )

        assert response.status_code == 409
        error = response.json()['error']
        assert error['code'] == 'SCHEDULE_CONFLICT'
        assert error['details']['conflicting_schedule_id'] == first.json()['id']

    async def test_end_before_start(self, client: AsyncClient, faculty_headers, faculty_profile, make_course):
        course_id = (await make_course()).id

        response = await client.post(
            BASE, json=_body(course_id, faculty_profile.id, start_time='14:00', end_time='13:00'),
            headers=faculty_headers,
        )

        assert response.status_code == 400
        assert response.json()['error']['details'] == {'field': 'end_time'}

    async def test_unknown_day(self, client: AsyncClient, faculty_headers, faculty_profile, make_course):
        course_id = (await make_course()).id

        response = await client.post(
            BASE, json=_body(course_id, faculty_profile.id, day_of_week='Funday'), headers=faculty_headers
        )

        assert response.status_code == 400
        assert response.json()['error']['code'] == 'VALIDATION_ERROR'

    async def test_unknown_faculty(self, client: AsyncClient, faculty_headers, make_course):
        course_id = (await make_course()).id

        response = await client.post(BASE, json=_body(course_id, 'nobody'), headers=faculty_headers)

        assert response.status_code == 404
        assert response.json()['error']['code'] == 'FACULTY_NOT_FOUND'


class TestListSchedules:

    async def _timetable(self, client, headers, course_id, faculty_id):
        ids = {}
        for section, day in (('A', 'Tuesday'), ('B', 'Monday')):
            response = await client.post(
                BASE, json=_body(course_id, faculty_id, section=section, day_of_week=day), headers=headers
            )
            ids[section] = response.json()['id']
        return ids

    async def test_filter_by_faculty_and_course(
        self, client: AsyncClient, faculty_headers, faculty_profile, make_course
    ):
        course_id, faculty_id = (await make_course()).id, faculty_profile.id
        ids = await self._timetable(client, faculty_headers, course_id, faculty_id)

        by_faculty = await client.get(BASE, params={'faculty_id': faculty_id}, headers=faculty_headers)
        by_course = await client.get(BASE, params={'course_id': course_id}, headers=faculty_headers)
        by_other_course = await client.get(BASE, params={'course_id': 'none'}, headers=faculty_headers)

        assert [s['id'] for s in by_faculty.json()['schedules']] == [ids['B'], ids['A']]
        assert by_course.json()['total'] == 2
        assert by_other_course.json() == {'schedules': [], 'total': 0}

    async def test_student_defaults_to_own_timetable(
        self, client: AsyncClient, auth_headers, faculty_headers, student_user, faculty_profile, make_course
    ):
        course_id = (await make_course(students={student_user: 'A'})).id
        ids = await self._timetable(client, faculty_headers, course_id, faculty_profile.id)

        own = await client.get(BASE, headers=auth_headers)
        explicit = await client.get(BASE, params={'student_id': student_user.id}, headers=auth_headers)

        assert [s['id'] for s in own.json()['schedules']] == [ids['A']]
        assert explicit.json() == own.json()

    async def test_student_may_browse_by_course(
        self, client: AsyncClient, auth_headers, faculty_headers, faculty_profile, make_course
    ):
        course_id = (await make_course()).id
        await self._timetable(client, faculty_headers, course_id, faculty_profile.id)

        response = await client.get(BASE, params={'course_id': course_id}, headers=auth_headers)

        assert response.json()['total'] == 2

    async def test_student_cannot_see_another_students_timetable(
        self, client: AsyncClient, auth_headers, other_student
    ):
        response = await client.get(BASE, params={'student_id': other_student.id}, headers=auth_headers)

        assert response.status_code == 403


class TestEditSchedule:

    async def test_replace(self, client: AsyncClient, faculty_headers, faculty_profile, make_course):
        course_id, faculty_id = (await make_course()).id, faculty_profile.id
        schedule_id = (await client.post(BASE, json=_body(course_id, faculty_id), headers=faculty_headers)).json()['id']

        response = await client.put(
            f'{BASE}/{schedule_id}',
            json=_body(course_id, faculty_id, room='lab 3', day_of_week='Thursday', end_time='11:00'),
            headers=faculty_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data['id'] == schedule_id
        assert (data['room'], data['day_of_week'], data['end_time']) == ('Lab 03', 'Thursday', '11:00:00')

    async def test_delete(self, client: AsyncClient, faculty_headers, faculty_profile, make_course):
        course_id = (await make_course()).id
        schedule_id = (await client.post(
            BASE, json=_body(course_id, faculty_profile.id), headers=faculty_headers
        )).json()['id']

        response = await client.delete(f'{BASE}/{schedule_id}', headers=faculty_headers)
        missing = await client.get(f'{BASE}/{schedule_id}', headers=faculty_headers)

        assert response.status_code == 204
        assert missing.status_code == 404
        assert missing.json()['error']['code'] == 'SCHEDULE_NOT_FOUND'
