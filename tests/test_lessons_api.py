from datetime import timedelta

from .test_people_api import create_student, create_teacher


async def configure_lesson(client, teacher_id, start_date, weekdays=(1,), shift="morning", instrument="Piano"):
    response = await client.post("/lessons/configure", json={
        "instrument": instrument,
        "shift": shift,
        "teacherId": teacher_id,
        "startDate": start_date.isoformat(),
        "weekdays": list(weekdays),
    })
    assert response.status_code == 201, response.text
    return response.json()


class TestConfigureLesson:

    async def test_generates_default_lookahead(self, client, next_monday):
        teacher_id = await create_teacher(client)

        data = await configure_lesson(client, teacher_id, next_monday, weekdays=[1, 3])

        assert data["message"] == "Lesson configured successfully"
        assert data["generatedOccurrences"] == 8

        occurrences = (await client.get(f"/lessons/{data['id']}/occurrences")).json()["occurrences"]
        assert occurrences[0]["date"] == next_monday.isoformat()
        assert occurrences[1]["date"] == (next_monday + timedelta(days=2)).isoformat()
        assert {o["status"] for o in occurrences} == {"scheduled"}

    async def test_unknown_teacher(self, client, next_monday):
        response = await client.post("/lessons/configure", json={
            "instrument": "Piano",
            "shift": "morning",
            "teacherId": 999,
            "startDate": next_monday.isoformat(),
            "weekdays": [1],
        })

        assert response.status_code == 404
        assert (await client.get("/lessons")).json()["lessons"] == []

    async def test_invalid_weekday_leaves_nothing_behind(self, client, next_monday):
        teacher_id = await create_teacher(client)

        response = await client.post("/lessons/configure", json={
            "instrument": "Piano",
            "shift": "morning",
            "teacherId": teacher_id,
            "startDate": next_monday.isoformat(),
            "weekdays": [1, 7],
        })

        assert response.status_code == 400
        assert (await client.get("/lessons")).json()["lessons"] == []

    async def test_invalid_shift(self, client, next_monday):
        teacher_id = await create_teacher(client)

        response = await client.post("/lessons/configure", json={
            "instrument": "Piano",
            "shift": "night",
            "teacherId": teacher_id,
            "startDate": next_monday.isoformat(),
            "weekdays": [1],
        })

        assert response.status_code == 400

    async def test_missing_fields(self, client, next_monday):
        teacher_id = await create_teacher(client)

        response = await client.post("/lessons/configure", json={
            "shift": "morning",
            "teacherId": teacher_id,
            "startDate": next_monday.isoformat(),
            "weekdays": [],
        })

        assert response.status_code == 400
        assert response.json()["type"] == "InvalidInputError"


class TestLessonQueries:

    async def test_list_includes_totals(self, client, next_monday):
        teacher_id = await create_teacher(client)
        lesson = await configure_lesson(client, teacher_id, next_monday, weekdays=[3, 1])
        student_id = await create_student(client)
        await client.post(f"/lessons/{lesson['id']}/students/{student_id}")

        lessons = (await client.get("/lessons")).json()["lessons"]

        assert len(lessons) == 1
        assert lessons[0]["teacherName"] == "Carlos Lima"
        assert lessons[0]["weekdays"] == [3, 1]
        assert lessons[0]["totalStudents"] == 1
        assert lessons[0]["totalOccurrences"] == 8
        assert lessons[0]["totalCancelled"] == 0

    async def test_details(self, client, next_monday):
        teacher_id = await create_teacher(client)
        lesson = await configure_lesson(client, teacher_id, next_monday, shift="evening", instrument="Drums")
        student_id = await create_student(client)
        await client.post(f"/lessons/{lesson['id']}/students/{student_id}")

        data = (await client.get(f"/lessons/{lesson['id']}")).json()

        assert data["instrument"] == "Drums"
        assert data["shift"] == "evening"
        assert data["teacherSpecialty"] == "Guitar"
        assert [s["id"] for s in data["students"]] == [student_id]

    async def test_missing_lesson(self, client):
        assert (await client.get("/lessons/999")).status_code == 404
        assert (await client.get("/lessons/999/occurrences")).status_code == 404

    async def test_occurrence_range(self, client, next_monday):
        teacher_id = await create_teacher(client)
        lesson = await configure_lesson(client, teacher_id, next_monday)

        response = await client.get(f"/lessons/{lesson['id']}/occurrences", params={
            "from": (next_monday + timedelta(days=7)).isoformat(),
            "to": (next_monday + timedelta(days=14)).isoformat(),
        })

        assert response.status_code == 200
        assert [o["date"] for o in response.json()["occurrences"]] == [
            (next_monday + timedelta(days=7)).isoformat(),
            (next_monday + timedelta(days=14)).isoformat(),
        ]

    async def test_update_and_delete(self, client, next_monday):
        teacher_id = await create_teacher(client)
        lesson = await configure_lesson(client, teacher_id, next_monday)

        update = await client.put(f"/lessons/{lesson['id']}", json={"shift": "afternoon", "weekdays": [5]})
        assert update.status_code == 200
        data = (await client.get(f"/lessons/{lesson['id']}")).json()
        assert data["shift"] == "afternoon"
        assert data["weekdays"] == [5]

        delete = await client.delete(f"/lessons/{lesson['id']}")
        assert delete.status_code == 200
        assert (await client.get(f"/lessons/{lesson['id']}")).status_code == 404

    async def test_teacher_lessons(self, client, next_monday):
        teacher_id = await create_teacher(client)
        await configure_lesson(client, teacher_id, next_monday)

        lessons = (await client.get(f"/teachers/{teacher_id}/lessons")).json()["lessons"]

        assert len(lessons) == 1
        assert lessons[0]["weekdays"] == [1]


class TestGenerateOccurrences:

    async def test_extends_without_duplicates(self, client, next_monday):
        teacher_id = await create_teacher(client)
        lesson = await configure_lesson(client, teacher_id, next_monday, weekdays=[1, 3])

        again = await client.post(f"/lessons/{lesson['id']}/generate-occurrences")
        assert again.status_code == 200
        assert again.json()["occurrences"] == []

        longer = await client.post(f"/lessons/{lesson['id']}/generate-occurrences", json={"weeks": 6})
        assert longer.status_code == 200
        assert len(longer.json()["occurrences"]) == 4

        occurrences = (await client.get(f"/lessons/{lesson['id']}/occurrences")).json()["occurrences"]
        assert len(occurrences) == 12
        assert len({o["date"] for o in occurrences}) == 12

    async def test_week_limits(self, client, next_monday):
        teacher_id = await create_teacher(client)
        lesson = await configure_lesson(client, teacher_id, next_monday)

        for weeks in (0, 53):
            response = await client.post(f"/lessons/{lesson['id']}/generate-occurrences", json={"weeks": weeks})
            assert response.status_code == 400

    async def test_unknown_lesson(self, client):
        response = await client.post("/lessons/999/generate-occurrences", json={"weeks": 2})

        assert response.status_code == 404


class TestEnrollment:

    async def test_enroll_twice(self, client, next_monday):
        teacher_id = await create_teacher(client)
        lesson = await configure_lesson(client, teacher_id, next_monday)
        student_id = await create_student(client)

        first = await client.post(f"/lessons/{lesson['id']}/students/{student_id}")
        second = await client.post(f"/lessons/{lesson['id']}/students/{student_id}")

        assert first.status_code == 201
        assert second.status_code == 409

    async def test_capacity(self, client, next_monday):
        teacher_id = await create_teacher(client, maxStudents=1)
        lesson = await configure_lesson(client, teacher_id, next_monday)
        first = await create_student(client)
        second = await create_student(client, name="Pedro", email="pedro@school.test")

        await client.post(f"/lessons/{lesson['id']}/students/{first}")
        response = await client.post(f"/lessons/{lesson['id']}/students/{second}")

        assert response.status_code == 409

    async def test_unenroll(self, client, next_monday):
        teacher_id = await create_teacher(client)
        lesson = await configure_lesson(client, teacher_id, next_monday)
        student_id = await create_student(client)
        await client.post(f"/lessons/{lesson['id']}/students/{student_id}")

        assert len((await client.get(f"/students/{student_id}/lessons")).json()["lessons"]) == 1

        removed = await client.delete(f"/lessons/{lesson['id']}/students/{student_id}")
        missing = await client.delete(f"/lessons/{lesson['id']}/students/{student_id}")

        assert removed.status_code == 200
        assert missing.status_code == 404
        assert (await client.get(f"/students/{student_id}/lessons")).json()["lessons"] == []

    async def test_unknown_student(self, client, next_monday):
        teacher_id = await create_teacher(client)
        lesson = await configure_lesson(client, teacher_id, next_monday)

        response = await client.post(f"/lessons/{lesson['id']}/students/999")

        assert response.status_code == 404
