import unittest

from tests.helpers import ApiTestCase


class LocationsApiTest(ApiTestCase):
    def test_list_active_only_by_default(self):
        self.make_location("Beta", "B St")
        self.make_location("Alpha", "A St")
        self.make_location("Closed", "C St", active=False)

        names = [loc["name"] for loc in self.client.get("/api/locations").get_json()]
        self.assertEqual(names, ["Alpha", "Beta"])
        everything = self.client.get("/api/locations?includeInactive=true").get_json()
        self.assertEqual(len(everything), 3)

    def test_create_update_delete(self):
        body = {"name": "Gym North", "address": "North Rd 5"}
        self.assertEqual(self.client.post("/api/locations", json=body, headers=self.as_client).status_code, 403)

        resp = self.client.post("/api/locations", json=body, headers=self.as_admin)
        self.assertEqual(resp.status_code, 200)
        location = resp.get_json()
        self.assertTrue(location["isActive"])

        resp = self.client.put(f"/api/locations/{location['id']}", json={"name": "Gym N"}, headers=self.as_admin)
        self.assertEqual(resp.get_json()["name"], "Gym N")
        self.assertEqual(resp.get_json()["address"], "North Rd 5")

        resp = self.client.delete(f"/api/locations/{location['id']}", headers=self.as_admin)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get("/api/locations").get_json(), [])
        inactive = self.client.get("/api/locations?includeInactive=true").get_json()
        self.assertFalse(inactive[0]["isActive"])

    def test_validation_and_missing(self):
        resp = self.client.post("/api/locations", json={"name": "No Address"}, headers=self.as_admin)
        self.assertEqual(resp.status_code, 400)
        resp = self.client.put("/api/locations/missing", json={"name": "X"}, headers=self.as_admin)
        self.assertEqual(resp.status_code, 404)

    def test_deactivated_branch_keeps_slot_name_but_refuses_blocks(self):
        branch = self.make_location("Old Gym")
        self.make_block(branch)
        self.client.delete(f"/api/locations/{branch}", headers=self.as_admin)

        slots = self.client.get("/api/availability/slots?date=2099-01-05").get_json()
        self.assertEqual({s["branchName"] for s in slots}, {"Old Gym"})

        body = {"date": "2099-01-06", "startTime": "09:00", "endTime": "11:00", "branchId": branch}
        self.assertEqual(self.client.post("/api/availability", json=body, headers=self.as_admin).status_code, 400)


if __name__ == '__main__':
    unittest.main()
