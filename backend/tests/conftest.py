"""
UniDirectory - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator, List
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['LOG_LEVEL'] = 'WARNING'

from unidirectory.main import create_app
from unidirectory.core.config import settings
from unidirectory.core.database import Base, get_db
from unidirectory.core.security import TokenIssuer, get_password_hash
from unidirectory.models import Favorite, University, User

fake = Faker()

TEST_PASSWORD = 'testpassword123'

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def app():
    """Fresh application instance"""
    return create_app()


@pytest.fixture
async def client(app, db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def token_issuer() -> TokenIssuer:
    return TokenIssuer.from_settings(settings)


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user"""
    user = User(
        email=fake.unique.email(),
        password=get_password_hash(TEST_PASSWORD, rounds=4),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user: User, token_issuer: TokenIssuer) -> dict:
    """Generate authentication headers for test user"""
    token = token_issuer.issue(test_user.id, test_user.email)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
async def universities(db_session: AsyncSession) -> List[University]:
    """A small directory with a predictable mix of countries and names"""
    rows = [
        University(name='Harvard University', country='United States', state_province='Massachusetts',
                   website='https://www.harvard.edu'),
        University(name='Massachusetts Institute of Technology', country='United States',
                   state_province='Massachusetts', website='https://web.mit.edu'),
        University(name='Stanford University', country='United States', state_province='California',
                   website='https://www.stanford.edu'),
        University(name='University of Toronto', country='Canada', state_province='Ontario',
                   website='https://www.utoronto.ca'),
        University(name='McGill University', country='Canada', state_province='Quebec',
                   website='https://www.mcgill.ca'),
        University(name='University of Oxford', country='United Kingdom', state_province=None,
                   website='https://www.ox.ac.uk'),
        University(name='100% Online College', country='United States', state_province=None,
                   website='https://example.edu'),
    ]
    db_session.add_all(rows)
    await db_session.commit()
    for row in rows:
        await db_session.refresh(row)
    return rows


@pytest.fixture
async def favorite(db_session: AsyncSession, universities: List[University]) -> Favorite:
    """A single favorite pointing at the first university"""
    fav = Favorite(university_id=universities[0].id)
    db_session.add(fav)
    await db_session.commit()
    await db_session.refresh(fav)
    return fav


@pytest.fixture
def user_password() -> str:
    """Plaintext password of test_user"""
    return TEST_PASSWORD
