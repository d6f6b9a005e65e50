import unittest

from tests.helpers import FAR_DATE, ApiTestCase


class BookingsApiTest(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.branch = self.make_location("Branch A")
        self.make_block(self.branch)

    def _book(self, start="09:00", headers=None, **extra):
        body = {"date": FAR_DATE, "startTime": start, "branchId": self.branch}
        body.update(extra)
        return self.client.post("/api/bookings", json=body, headers=headers or self.as_client)

    def test_requires_login(self):
        self.assertEqual(self.client.get("/api/bookings").status_code, 401)
        resp = self.client.post("/api/bookings", json={"date": FAR_DATE, "startTime": "09:00", "branchId": self.branch})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.get_json(), {"error": "Authentication required"})

    def test_invalid_token_is_rejected(self):
        self.assertEqual(self.client.get("/api/bookings", headers=self.auth("garbage")).status_code, 401)

    def test_create_booking(self):
        resp = self._book("09:15")
        self.assertEqual(resp.status_code, 200)
        booking = resp.get_json()
        self.assertEqual(booking["startTime"], "09:15")
        self.assertEqual(booking["endTime"], "10:45")
        self.assertEqual(booking["duration"], 90)
        self.assertEqual(booking["bookingType"], "app")
        self.assertEqual(booking["userId"], self.client_id)
        self.assertEqual(booking["userName"], "Client One")
        self.assertEqual(booking["branchName"], "Branch A")
        self.assertIsNone(booking["manualClientName"])

    def test_conflict_leaves_one_row(self):
        self.assertEqual(self._book("09:00").status_code, 200)
        resp = self._book("09:00", headers=self.as_admin)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.get_json(), {"error": "This time is already booked"})
        self.assertEqual(self.count_bookings(date=FAR_DATE), 1)

    def test_partial_overlap_conflicts(self):
        self.assertEqual(self._book("09:00").status_code, 200)
        self.assertEqual(self._book("10:29").status_code, 409)
        self.assertEqual(self._book("07:31").status_code, 409)
        self.assertEqual(self._book("10:30").status_code, 200)
        self.assertEqual(self._book("07:30").status_code, 200)
        self.assertEqual(self.count_bookings(date=FAR_DATE), 3)

    def test_manual_booking(self):
        resp = self._book(headers=self.as_admin, manualClientName="Walk In")
        self.assertEqual(resp.status_code, 200)
        booking = resp.get_json()
        self.assertEqual(booking["bookingType"], "manual")
        self.assertEqual(booking["manualClientName"], "Walk In")
        self.assertIsNone(booking["userId"])

    def test_manual_booking_by_client_is_forbidden(self):
        resp = self._book(manualClientName="My Friend")
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(self.count_bookings(), 0)

    def test_validation(self):
        self.assertEqual(self.client.post("/api/bookings", json={}, headers=self.as_client).status_code, 400)
        self.assertEqual(self._book("25:00").status_code, 400)
        self.assertEqual(self._book("23:00").status_code, 400)
        resp = self.client.post(
            "/api/bookings",
            json={"date": FAR_DATE, "startTime": "09:00", "branchId": "missing"},
            headers=self.as_client,
        )
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(self.count_bookings(), 0)

    def test_non_text_names_are_rejected(self):
        for extra in ({"manualClientName": 5}, {"branchName": ["Branch A"]}):
            resp = self._book(headers=self.as_admin, **extra)
            self.assertEqual(resp.status_code, 400, extra)
            self.assertIn("must be text", resp.get_json()["error"])
        self.assertEqual(self.count_bookings(), 0)

    def test_client_sees_only_own_bookings(self):
        self._book("09:00", headers=self.as_admin, manualClientName="Walk In")
        self._book("12:00")

        mine = self.client.get(f"/api/bookings?userId={self.admin_id}", headers=self.as_client).get_json()
        self.assertEqual([b["startTime"] for b in mine], ["12:00"])

        everything = self.client.get(f"/api/bookings?date={FAR_DATE}", headers=self.as_admin).get_json()
        self.assertEqual([b["startTime"] for b in everything], ["09:00", "12:00"])
        by_user = self.client.get(f"/api/bookings?userId={self.client_id}", headers=self.as_admin).get_json()
        self.assertEqual(len(by_user), 1)

    def test_cancel_own_booking_reopens_slot(self):
        booking_id = self._book("09:00").get_json()["id"]
        self.assertEqual(self.client.get(f"/api/availability/slots?date={FAR_DATE}").get_json(), [])

        resp = self.client.delete(f"/api/bookings/{booking_id}", headers=self.as_client)
        self.assertEqual(resp.status_code, 200)
        slots = self.client.get(f"/api/availability/slots?date={FAR_DATE}").get_json()
        self.assertEqual(len(slots), 3)

    def test_cannot_cancel_someone_elses_booking(self):
        other_id, other_token = self.make_user("other@example.com")
        booking_id = self._book("09:00", headers=self.auth(other_token)).get_json()["id"]

        self.assertEqual(self.client.delete(f"/api/bookings/{booking_id}", headers=self.as_client).status_code, 403)
        self.assertEqual(self.count_bookings(user_id=other_id), 1)
        self.assertEqual(self.client.delete(f"/api/bookings/{booking_id}", headers=self.as_admin).status_code, 200)
        self.assertEqual(self.client.delete(f"/api/bookings/{booking_id}", headers=self.as_admin).status_code, 404)


if __name__ == '__main__':
    unittest.main()
