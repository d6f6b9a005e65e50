# Shared fixtures for the API test cases.
import unittest

from fitcoach import create_app, db
from fitcoach.auth.tokens import issue_token
from fitcoach.models import AvailabilityBlock, Booking, Location, User

TEST_CONFIG = {
    "TESTING": True,
    "SECRET_KEY": "test-secret",
    "SQLALCHEMY_DATABASE_URI": "sqlite://",
    "COACH_TIMEZONE": "UTC",
    "SESSION_DURATION_MINUTES": 90,
    "SLOT_STEP_MINUTES": 15,
}

FAR_DATE = "2099-01-05"


class ApiTestCase(unittest.TestCase):
    config = TEST_CONFIG

    def setUp(self):
        self.app = create_app(self.config)
        self.client = self.app.test_client()
        self.admin_id, self.admin_token = self.make_user("coach@example.com", role="ADMIN", name="Coach")
        self.client_id, self.client_token = self.make_user("client@example.com", name="Client One")

    def tearDown(self):
        with self.app.app_context():
            db.session.remove()
            db.drop_all()

    def make_user(self, email, role="CLIENT", name="User", password="secret"):
        with self.app.app_context():
            user = User(email=email, name=name, role=role)
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
            return user.id, issue_token(user)

    def make_location(self, name="Branch A", address="Main St 1", active=True):
        with self.app.app_context():
            location = Location(name=name, address=address, is_active=active)
            db.session.add(location)
            db.session.commit()
            return location.id

    def make_block(self, branch_id, date=FAR_DATE, start="09:00", end="11:00"):
        with self.app.app_context():
            block = AvailabilityBlock(date=date, start_time=start, end_time=end, branch_id=branch_id)
            db.session.add(block)
            db.session.commit()
            return block.id

    def count_bookings(self, **filters):
        with self.app.app_context():
            return Booking.query.filter_by(**filters).count()

    def auth(self, token):
        return {"Authorization": f"Bearer {token}"}

    @property
    def as_admin(self):
        return self.auth(self.admin_token)

    @property
    def as_client(self):
        return self.auth(self.client_token)
