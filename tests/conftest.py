"""
Test configuration and fixtures.

Each test gets its own SQLite database file through aiosqlite; the app's
get_db dependency is overridden to hand out sessions bound to it. Celery
runs eagerly and redis is absent, so the blacklist and rate limiter fail open.
"""
import os
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Set testing environment before the settings object is built
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./unused.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing-only-0123456789'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['CELERY_TASK_ALWAYS_EAGER'] = 'true'
os.environ['REDIS_URL'] = ''
os.environ['SMTP_HOST'] = ''
os.environ['ENVIRONMENT'] = 'development'
os.environ['DEBUG'] = 'false'

from app.main import app
from core.database import Base, get_db
from core.security import create_access_token, hash_password
from models import Comment, CommentTarget, Project, SubTask, Task, TaskStatus, User, UserRole

API = '/api/v1'


def utc(days: float = 0) -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=days)


@pytest.fixture
async def session_maker(tmp_path):
    engine = create_async_engine(f'sqlite+aiosqlite:///{tmp_path / "test.db"}')
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Session for arranging and inspecting data outside of requests"""
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def create_user(db_session: AsyncSession):
    """Factory fixture to insert users directly"""
    async def _create_user(name: str, role: UserRole, password: str = 'secret123') -> User:
        user = User(
            name=name,
            email=f"{name.lower().replace(' ', '.')}@example.com",
            password_hash=hash_password(password),
            role=role,
        )
        db_session.add(user)
        await db_session.commit()
        return user
    return _create_user


@pytest.fixture
async def manager(create_user) -> User:
    return await create_user('Maria Manager', UserRole.MANAGER)


@pytest.fixture
async def developer(create_user) -> User:
    return await create_user('Dev One', UserRole.DEVELOPER)


@pytest.fixture
async def other_developer(create_user) -> User:
    return await create_user('Dev Two', UserRole.DEVELOPER)


def auth_headers_for(user: User) -> dict:
    token = create_access_token({'sub': str(user.id), 'role': user.role.value})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def manager_headers(manager: User) -> dict:
    return auth_headers_for(manager)


@pytest.fixture
def developer_headers(developer: User) -> dict:
    return auth_headers_for(developer)


@pytest.fixture
def other_developer_headers(other_developer: User) -> dict:
    return auth_headers_for(other_developer)


@pytest.fixture
def create_project(db_session: AsyncSession, manager: User):
    """Factory fixture to create projects in the database"""
    async def _create_project(**kwargs) -> Project:
        defaults = {
            'title': 'Website relaunch',
            'description': 'Rebuild the marketing site',
            'deadline': utc(30),
            'created_by': manager.id,
        }
        defaults.update(kwargs)
        project = Project(**defaults)
        db_session.add(project)
        await db_session.commit()
        return project
    return _create_project


@pytest.fixture
def create_task(db_session: AsyncSession, manager: User, developer: User):
    """Factory fixture to create tasks in the database"""
    async def _create_task(project: Project, **kwargs) -> Task:
        defaults = {
            'project_id': project.id,
            'title': 'Build landing page',
            'description': 'Hero, pricing and footer sections',
            'deadline': utc(7),
            'assigned_to': developer.id,
            'created_by': manager.id,
        }
        defaults.update(kwargs)
        task = Task(**defaults)
        db_session.add(task)
        await db_session.commit()
        return task
    return _create_task


@pytest.fixture
def create_subtask(db_session: AsyncSession, developer: User):
    async def _create_subtask(task: Task, **kwargs) -> SubTask:
        defaults = {
            'task_id': task.id,
            'title': 'Write copy',
            'deadline': utc(3),
            'created_by': developer.id,
        }
        defaults.update(kwargs)
        subtask = SubTask(**defaults)
        db_session.add(subtask)
        await db_session.commit()
        return subtask
    return _create_subtask


@pytest.fixture
def create_comment(db_session: AsyncSession):
    async def _create_comment(author: User, target_id, target_type: CommentTarget = CommentTarget.TASK,
                              content: str = 'Looks good') -> Comment:
        comment = Comment(content=content, author_id=author.id, target_id=target_id, target_type=target_type)
        db_session.add(comment)
        await db_session.commit()
        return comment
    return _create_comment


__all__ = ['API', 'utc', 'auth_headers_for', 'TaskStatus']
