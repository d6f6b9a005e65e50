import os
import shutil
import tempfile
import threading
import unittest

from fitcoach import db
from fitcoach.errors import SlotConflict
from fitcoach.models import Booking, User
from fitcoach.scheduling import engine
from tests.helpers import FAR_DATE, TEST_CONFIG, ApiTestCase

WORKERS = 8


class ConcurrentBookingTest(ApiTestCase):
    """Simultaneous bookings against a shared on-disk database."""

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.config = dict(
            TEST_CONFIG,
            SQLALCHEMY_DATABASE_URI=f"sqlite:///{os.path.join(self.tmpdir, 'fitcoach.db')}",
            SQLALCHEMY_ENGINE_OPTIONS={"connect_args": {"timeout": 30}},
        )
        super().setUp()
        self.branch = self.make_location("Branch A")
        self.make_block(self.branch, start="09:00", end="12:00")

    def tearDown(self):
        super().tearDown()
        with self.app.app_context():
            db.engine.dispose()
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def _race(self, starts):
        barrier = threading.Barrier(len(starts))
        outcomes = []
        lock = threading.Lock()

        def book(start):
            with self.app.app_context():
                caller = db.session.get(User, self.client_id)
                barrier.wait(timeout=10)
                try:
                    engine.create_booking(caller, FAR_DATE, start, self.branch)
                    result = "ok"
                except SlotConflict:
                    result = "conflict"
                except Exception as exc:
                    result = exc
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=book, args=(start,)) for start in starts]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=60)
        return outcomes

    def test_overlapping_starts_leave_one_booking(self):
        # 09:00..09:35 every 5 minutes; each pair overlaps
        starts = [f"09:{m:02d}" for m in range(0, 5 * WORKERS, 5)]
        outcomes = self._race(starts)

        self.assertEqual(len(outcomes), WORKERS)
        self.assertEqual(outcomes.count("ok"), 1, outcomes)
        self.assertEqual(outcomes.count("conflict"), WORKERS - 1, outcomes)
        self.assertEqual(self.count_bookings(date=FAR_DATE), 1)

    def test_same_start_leaves_one_booking(self):
        outcomes = self._race(["10:00"] * WORKERS)

        self.assertEqual(outcomes.count("ok"), 1, outcomes)
        self.assertEqual(self.count_bookings(date=FAR_DATE), 1)

    def test_disjoint_starts_all_succeed(self):
        outcomes = self._race(["09:00", "10:30"])

        self.assertEqual(outcomes, ["ok", "ok"])
        with self.app.app_context():
            rows = Booking.query.filter_by(date=FAR_DATE).order_by(Booking.start_time).all()
            self.assertEqual([(b.start_time, b.end_time) for b in rows], [("09:00", "10:30"), ("10:30", "12:00")])


if __name__ == '__main__':
    unittest.main()
