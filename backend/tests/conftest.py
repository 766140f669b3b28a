"""
Campus Ops - Test Configuration and Fixtures

Note: a failing service call rolls the session back, which expires every ORM
object it holds. Tests keep ids in locals before exercising failure paths and
read state back through the services afterwards.
"""
import os
from datetime import date, datetime, timedelta
from typing import AsyncGenerator, Callable, Optional
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from faker import Faker

# Set testing environment
os.environ['TESTING'] = 'true'
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['LOG_FILE'] = ''
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['DB_CREATE_TABLES_ON_STARTUP'] = 'false'

from app.main import app
from app.core.database import Base, get_db
from app.core.security import get_password_hash, create_access_token
from app.core.types import utcnow
from app.models.course import Course, CourseUnit, Enrollment
from app.models.faculty import Faculty
from app.models.inventory import InventoryItem, ItemKind
from app.models.project import Project, ProjectStatus
from app.models.user import User, UserRole
from app.schemas.resource_request import ResourceRequestCreate
from app.services.request_lifecycle import RequestLifecycleService

fake = Faker()

TEST_PASSWORD = 'testpassword123'

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
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
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(db: AsyncSession, role: UserRole) -> User:
    user = User(
        email=fake.unique.email(),
        hashed_password=get_password_hash(TEST_PASSWORD),
        full_name=fake.name(),
        role=role,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def headers_for(user: User) -> dict:
    """Bearer headers for a user"""
    token = create_access_token({
        'sub': str(user.id),
        'email': user.email,
        'role': user.role.value
    })
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
async def student_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, UserRole.STUDENT)


@pytest.fixture
async def other_student(db_session: AsyncSession) -> User:
    return await _create_user(db_session, UserRole.STUDENT)


@pytest.fixture
async def faculty_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, UserRole.FACULTY)


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, UserRole.ADMIN)


@pytest.fixture
def auth_headers(student_user: User) -> dict:
    """Generate authentication headers for the student"""
    return headers_for(student_user)


@pytest.fixture
def other_student_headers(other_student: User) -> dict:
    return headers_for(other_student)


@pytest.fixture
def faculty_headers(faculty_user: User) -> dict:
    return headers_for(faculty_user)


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    """Generate authentication headers for admin user"""
    return headers_for(admin_user)


@pytest.fixture
def make_item(db_session: AsyncSession) -> Callable:
    """Factory for inventory items; available defaults to total"""
    async def _make(
        total: int = 5,
        available: Optional[int] = None,
        kind: ItemKind = ItemKind.LAB_COMPONENT,
        name: Optional[str] = None,
        **fields,
    ) -> InventoryItem:
        item = InventoryItem(
            kind=kind,
            name=name or fake.unique.word().title(),
            category=fields.pop('category', 'Microcontrollers'),
            total_quantity=total,
            available_quantity=total if available is None else available,
            **fields,
        )
        db_session.add(item)
        await db_session.commit()
        await db_session.refresh(item)
        return item
    return _make


@pytest.fixture
def make_project(db_session: AsyncSession, student_user: User) -> Callable:
    """Factory for projects owned by the student"""
    async def _make(status: ProjectStatus = ProjectStatus.ONGOING, owner: Optional[User] = None) -> Project:
        project = Project(
            owner_id=(owner or student_user).id,
            name=fake.catch_phrase(),
            status=status,
        )
        db_session.add(project)
        await db_session.commit()
        await db_session.refresh(project)
        return project
    return _make


@pytest.fixture
async def faculty_profile(db_session: AsyncSession, faculty_user: User) -> Faculty:
    """Faculty profile for faculty_user, needed for class schedules"""
    profile = Faculty(
        user_id=faculty_user.id,
        faculty_code=f"EE-{fake.unique.random_int(100, 999)}",
        department="Electrical",
        office="Block B, 12",
        specialization="Power Electronics",
        office_hours="Fri 09:00-11:00",
    )
    db_session.add(profile)
    await db_session.commit()
    await db_session.refresh(profile)
    return profile


@pytest.fixture
def make_course(db_session: AsyncSession, faculty_user: User) -> Callable:
    """Factory for spring-term courses created by faculty_user; `students` maps users to sections"""
    async def _make(code: Optional[str] = None, units: int = 2, created_by: Optional[User] = None,
                    students: Optional[dict] = None) -> Course:
        course = Course(
            course_code=code or f"EC{fake.unique.random_int(100, 999)}",
            course_name=fake.catch_phrase(),
            course_description="Lectures and lab sessions",
            start_date=date(2026, 1, 5),
            end_date=date(2026, 5, 1),
            created_by=(created_by or faculty_user).id,
            units=[
                CourseUnit(unit_number=n, unit_name=f"Unit {n}", unit_description="Topics and readings")
                for n in range(1, units + 1)
            ],
            enrollments=[
                Enrollment(student_id=student.id, section=section)
                for student, section in (students or {}).items()
            ],
        )
        db_session.add(course)
        await db_session.commit()
        await db_session.refresh(course)
        return course
    return _make


@pytest.fixture
async def ongoing_project(make_project) -> Project:
    return await make_project(ProjectStatus.ONGOING)


@pytest.fixture
def lifecycle(db_session: AsyncSession) -> RequestLifecycleService:
    return RequestLifecycleService(db_session)


def request_data(item_id: str, project_id: str, quantity: int = 1, **overrides) -> ResourceRequestCreate:
    """A valid create body; override any field"""
    data = {
        'component_id': str(item_id),
        'project_id': str(project_id),
        'quantity': quantity,
        'purpose': 'Line follower robot prototype',
        'required_date': utcnow() + timedelta(days=7),
    }
    data.update(overrides)
    return ResourceRequestCreate(**data)


def iso(dt: datetime) -> str:
    return dt.replace(microsecond=0).isoformat()
