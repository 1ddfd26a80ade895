from datetime import date, timedelta

from .test_lessons_api import configure_lesson
from .test_people_api import create_teacher


async def first_occurrence(client, lesson_id):
    occurrences = (await client.get(f"/lessons/{lesson_id}/occurrences")).json()["occurrences"]
    return occurrences[0]


class TestOccurrenceLifecycle:

    async def test_cancel(self, client, next_monday):
        teacher_id = await create_teacher(client)
        lesson = await configure_lesson(client, teacher_id, next_monday)
        occurrence = await first_occurrence(client, lesson["id"])

        response = await client.put(f"/occurrences/{occurrence['id']}/cancel", json={"reason": "Holiday"})
        repeat = await client.put(f"/occurrences/{occurrence['id']}/cancel")

        assert response.status_code == 200
        assert repeat.status_code == 200
        data = (await client.get(f"/occurrences/{occurrence['id']}")).json()
        assert data["status"] == "cancelled"
        assert data["instrument"] == "Piano"
        assert data["teacherName"] == "Carlos Lima"

        lessons = (await client.get("/lessons")).json()["lessons"]
        assert lessons[0]["totalCancelled"] == 1

    async def test_reschedule(self, client, next_monday):
        teacher_id = await create_teacher(client)
        lesson = await configure_lesson(client, teacher_id, next_monday)
        occurrence = await first_occurrence(client, lesson["id"])
        new_date = next_monday + timedelta(days=1)

        response = await client.put(f"/occurrences/{occurrence['id']}/reschedule", json={
            "newDate": new_date.isoformat(),
            "reason": "Concert",
        })

        assert response.status_code == 200
        new_id = response.json()["newOccurrenceId"]

        source = (await client.get(f"/occurrences/{occurrence['id']}")).json()
        assert source["status"] == "rescheduled"
        assert source["newDate"] == new_date.isoformat()
        assert source["reason"] == "Concert"

        replacement = (await client.get(f"/occurrences/{new_id}")).json()
        assert replacement["status"] == "scheduled"
        assert replacement["date"] == new_date.isoformat()

    async def test_reschedule_into_past(self, client, next_monday):
        teacher_id = await create_teacher(client)
        lesson = await configure_lesson(client, teacher_id, next_monday)
        occurrence = await first_occurrence(client, lesson["id"])

        response = await client.put(f"/occurrences/{occurrence['id']}/reschedule", json={
            "newDate": date.today().isoformat(),
        })

        assert response.status_code == 400
        assert response.json()["error"] == "New date invalid"
        assert (await client.get(f"/occurrences/{occurrence['id']}")).json()["status"] == "scheduled"

    async def test_reschedule_without_date(self, client, next_monday):
        teacher_id = await create_teacher(client)
        lesson = await configure_lesson(client, teacher_id, next_monday)
        occurrence = await first_occurrence(client, lesson["id"])

        response = await client.put(f"/occurrences/{occurrence['id']}/reschedule", json={"reason": "?"})

        assert response.status_code == 400

    async def test_reschedule_onto_existing_occurrence(self, client, next_monday):
        teacher_id = await create_teacher(client)
        lesson = await configure_lesson(client, teacher_id, next_monday)
        occurrence = await first_occurrence(client, lesson["id"])

        response = await client.put(f"/occurrences/{occurrence['id']}/reschedule", json={
            "newDate": (next_monday + timedelta(days=7)).isoformat(),
        })

        assert response.status_code == 409

    async def test_reschedule_unknown(self, client):
        response = await client.put("/occurrences/999/reschedule", json={
            "newDate": (date.today() + timedelta(days=3)).isoformat(),
        })

        assert response.status_code == 404

    async def test_held(self, client, next_monday):
        teacher_id = await create_teacher(client)
        lesson = await configure_lesson(client, teacher_id, next_monday)
        occurrence = await first_occurrence(client, lesson["id"])

        held = await client.put(f"/occurrences/{occurrence['id']}/held")
        again = await client.put(f"/occurrences/{occurrence['id']}/held")

        assert held.status_code == 200
        assert again.status_code == 409


class TestWeeklyAgenda:

    async def test_week_of_anchor(self, client, next_monday):
        teacher_id = await create_teacher(client)
        await configure_lesson(client, teacher_id, next_monday, weekdays=[1, 5])

        response = await client.get("/agenda/weekly", params={"from": (next_monday + timedelta(days=2)).isoformat()})

        assert response.status_code == 200
        data = response.json()
        assert data["weekStart"] == next_monday.isoformat()
        assert data["weekEnd"] == (next_monday + timedelta(days=6)).isoformat()
        assert [o["date"] for o in data["occurrences"]] == [
            next_monday.isoformat(),
            (next_monday + timedelta(days=4)).isoformat(),
        ]
        assert data["occurrences"][0]["teacherSpecialty"] == "Guitar"

    async def test_bad_anchor(self, client):
        response = await client.get("/agenda/weekly", params={"from": "not-a-date"})

        assert response.status_code == 400
