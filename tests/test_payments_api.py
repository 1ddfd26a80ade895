from datetime import date
from decimal import Decimal

import pytest

from music_school.services.payment_service import revenue_share
from .test_lessons_api import configure_lesson
from .test_people_api import create_student, create_teacher


@pytest.mark.parametrize("amount, percentage, expected", [
    ("100.00", 70, "70.00"),
    ("33.33", 50, "16.67"),
    ("10.01", 33, "3.30"),
    ("80.00", None, "0.00"),
])
def test_revenue_share(amount, percentage, expected):
    assert revenue_share(Decimal(amount), percentage) == Decimal(expected)


async def create_payment(client, student_id, amount="100.00", due_date="2024-03-10"):
    response = await client.post("/payments", json={
        "studentId": student_id,
        "amount": amount,
        "dueDate": due_date,
    })
    assert response.status_code == 201, response.text
    return response.json()["id"]


class TestPaymentsAPI:

    async def test_create_and_get(self, client):
        student_id = await create_student(client)
        payment_id = await create_payment(client, student_id, amount="150.5")

        data = (await client.get(f"/payments/{payment_id}")).json()

        assert data["amount"] == "150.50"
        assert data["status"] == "pending"
        assert data["studentName"] == "Julia Reis"
        assert data["paymentDate"] is None

    @pytest.mark.parametrize("amount", ["0", "-10.00"])
    async def test_amount_must_be_positive(self, client, amount):
        student_id = await create_student(client)

        response = await client.post("/payments", json={
            "studentId": student_id, "amount": amount, "dueDate": "2024-03-10"
        })

        assert response.status_code == 400

    async def test_unknown_student(self, client):
        response = await client.post("/payments", json={
            "studentId": 999, "amount": "10.00", "dueDate": "2024-03-10"
        })

        assert response.status_code == 404

    async def test_list_latest_due_first(self, client):
        student_id = await create_student(client)
        await create_payment(client, student_id, due_date="2024-01-10")
        await create_payment(client, student_id, due_date="2024-02-10")

        payments = (await client.get("/payments")).json()["payments"]

        assert [p["dueDate"] for p in payments] == ["2024-02-10", "2024-01-10"]

    async def test_process_uses_first_enrollment_teacher(self, client, next_monday):
        first_teacher = await create_teacher(client, revenueSharePercentage=70)
        second_teacher = await create_teacher(client, email="other@school.test", revenueSharePercentage=40)
        first_lesson = await configure_lesson(client, first_teacher, next_monday)
        second_lesson = await configure_lesson(client, second_teacher, next_monday)
        student_id = await create_student(client)
        await client.post(f"/lessons/{first_lesson['id']}/students/{student_id}")
        await client.post(f"/lessons/{second_lesson['id']}/students/{student_id}")
        payment_id = await create_payment(client, student_id)

        response = await client.post(f"/payments/{payment_id}/pay", json={"paymentDate": "2024-03-05"})

        assert response.status_code == 200
        assert response.json()["revenueShareAmount"] == "70.00"
        data = (await client.get(f"/payments/{payment_id}")).json()
        assert data["status"] == "paid"
        assert data["paymentDate"] == "2024-03-05"
        assert data["revenueShareAmount"] == "70.00"

    async def test_process_without_enrollment(self, client):
        student_id = await create_student(client)
        payment_id = await create_payment(client, student_id)

        response = await client.post(f"/payments/{payment_id}/pay")

        assert response.json()["revenueShareAmount"] == "0.00"
        data = (await client.get(f"/payments/{payment_id}")).json()
        assert data["paymentDate"] == date.today().isoformat()

    async def test_cancelled_payment_cannot_be_processed(self, client):
        student_id = await create_student(client)
        payment_id = await create_payment(client, student_id)
        await client.put(f"/payments/{payment_id}", json={"status": "cancelled"})

        response = await client.post(f"/payments/{payment_id}/pay")

        assert response.status_code == 409

    async def test_delete(self, client):
        student_id = await create_student(client)
        payment_id = await create_payment(client, student_id)

        assert (await client.delete(f"/payments/{payment_id}")).status_code == 200
        assert (await client.get(f"/payments/{payment_id}")).status_code == 404


class TestReportsAPI:

    async def test_summary(self, client, next_monday):
        teacher_id = await create_teacher(client)
        await configure_lesson(client, teacher_id, next_monday)
        student_id = await create_student(client)
        paid = await create_payment(client, student_id, amount="120.00")
        await create_payment(client, student_id, amount="80.00")
        await client.post(f"/payments/{paid}/pay")

        data = (await client.get("/reports/summary")).json()

        assert data == {
            "totalStudents": 1,
            "totalTeachers": 1,
            "totalConfiguredLessons": 1,
            "monthlyRevenue": "120.00",
        }


class TestHealthAPI:

    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_database_health(self, client):
        response = await client.get("/health/db")

        assert response.json() == {"status": "healthy", "database": "sqlite"}

    async def test_process_time_header(self, client):
        response = await client.get("/health")

        assert "x-process-time" in response.headers
