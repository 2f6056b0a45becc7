import os, sys, pytest
# Ensure backend directory is on path so 'broresolve' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from broresolve import create_app, get_db
from broresolve.models.authz import Base
# Import all model modules to ensure tables are registered before create_all
import broresolve.models.ticket  # noqa: F401
import broresolve.models.audit  # noqa: F401

TEST_SECRET = 'test-secret-key-with-enough-bytes-for-hs256'


@pytest.fixture(scope='session', autouse=True)
def app_instance(tmp_path_factory):
    app = create_app({
        'DATABASE_URL': 'sqlite+pysqlite:///:memory:',
        'JWT_SECRET_KEY': TEST_SECRET,
        'UPLOAD_DIR': str(tmp_path_factory.mktemp('uploads')),
        'ENFORCE_SINGLE_UPVOTE': False,
    })
    # After app and blueprints are registered, ensure all tables exist
    with app.app_context():
        engine = get_db().get_bind()
        Base.metadata.create_all(engine)
    yield app


@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()


@pytest.fixture()
def db(app_instance):
    with app_instance.app_context():
        yield get_db()
