from datetime import datetime

import pytest
from flask_jwt_extended import create_access_token

from config import TestingConfig
from fitlog import create_app, db
from fitlog.errors import REPORTER_EXTENSION_KEY
from fitlog.models.user import UserProfile
from fitlog.schemas import WorkoutLogPayload
from fitlog.services.workout_logs import submit_workout_log


@pytest.fixture
def app():
    """Fresh in-memory database per test, with an app context pushed."""
    app = create_app(TestingConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    def _make(user_id="alice"):
        token = create_access_token(identity=user_id)
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def reporter(app):
    return app.extensions[REPORTER_EXTENSION_KEY]


@pytest.fixture
def failures(reporter):
    """Every FailureEvent emitted on the app's reporter during the test."""
    events = []
    receiver = reporter.subscribe(events.append)
    yield events
    reporter.unsubscribe(receiver)


@pytest.fixture
def workout():
    def _make(title="Morning session", calories=300, exercises=None, **extra):
        return WorkoutLogPayload(
            workout_title=title,
            duration=extra.pop("duration", 30),
            calories=calories,
            exercises=exercises or [],
            **extra,
        )

    return _make


@pytest.fixture
def make_profile(workout):
    """Create a profile by logging one workout for ``user_id`` at ``when``."""

    def _make(user_id="alice", when=datetime(2025, 11, 17, 9, 0)):
        result = submit_workout_log(user_id, workout(), now=when)
        assert result.log_id is not None
        return db.session.get(UserProfile, user_id)

    return _make
