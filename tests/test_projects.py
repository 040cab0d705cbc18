import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from models import Comment, CommentTarget, SubTask, Task
from tests.conftest import API, utc


@pytest.mark.asyncio
async def test_manager_creates_project(client: AsyncClient, manager, manager_headers):
    response = await client.post(f'{API}/projects', headers=manager_headers, json={
        'title': 'Mobile app',
        'description': 'First iOS release',
        'start_date': '2026-01-01T00:00:00Z',
        'deadline': '2026-06-30T00:00:00Z',
    })

    assert response.status_code == 201
    project = response.json()['project']
    assert project['title'] == 'Mobile app'
    assert project['status'] == 'planning'
    assert project['created_by'] == str(manager.id)
    assert project['creator']['name'] == manager.name


@pytest.mark.asyncio
async def test_developer_cannot_create_project(client: AsyncClient, developer_headers):
    response = await client.post(f'{API}/projects', headers=developer_headers, json={
        'title': 'Side quest',
        'description': 'Not allowed',
        'deadline': '2026-06-30T00:00:00Z',
    })

    assert response.status_code == 403
    assert response.json() == {'success': False, 'error': 'Access denied. manager role required.'}


@pytest.mark.asyncio
async def test_create_project_requires_title(client: AsyncClient, manager_headers):
    response = await client.post(f'{API}/projects', headers=manager_headers, json={
        'description': 'No title',
        'deadline': '2026-06-30T00:00:00Z',
    })

    assert response.status_code == 400
    assert response.json()['error'].startswith('title')


@pytest.mark.asyncio
async def test_create_project_deadline_before_start(client: AsyncClient, manager_headers):
    response = await client.post(f'{API}/projects', headers=manager_headers, json={
        'title': 'Backwards',
        'description': 'Ends before it starts',
        'start_date': '2026-06-01T00:00:00Z',
        'deadline': '2026-05-01T00:00:00Z',
    })

    assert response.status_code == 400
    assert 'deadline can not be before start_date' in response.json()['error']


@pytest.mark.asyncio
async def test_list_projects(client: AsyncClient, developer_headers, create_project):
    await create_project(title='Alpha')
    await create_project(title='Beta')

    response = await client.get(f'{API}/projects', headers=developer_headers)

    assert response.status_code == 200
    titles = {project['title'] for project in response.json()['projects']}
    assert titles == {'Alpha', 'Beta'}


@pytest.mark.asyncio
async def test_get_project_not_found(client: AsyncClient, manager_headers):
    response = await client.get(f'{API}/projects/00000000-0000-0000-0000-000000000000', headers=manager_headers)

    assert response.status_code == 404
    assert response.json() == {'success': False, 'error': 'Project not found'}


@pytest.mark.asyncio
async def test_update_project_status(client: AsyncClient, manager_headers, create_project):
    project = await create_project()

    response = await client.put(f'{API}/projects/{project.id}', headers=manager_headers,
                                json={'status': 'in-progress', 'title': 'Renamed'})

    assert response.status_code == 200
    data = response.json()['project']
    assert data['status'] == 'in-progress'
    assert data['title'] == 'Renamed'
    assert data['description'] == project.description


@pytest.mark.asyncio
async def test_update_project_rejects_null_title(client: AsyncClient, manager_headers, create_project):
    project = await create_project()

    response = await client.put(f'{API}/projects/{project.id}', headers=manager_headers, json={'title': None})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_delete_project_cascades(client: AsyncClient, db_session, manager, manager_headers,
                                       create_project, create_task, create_subtask, create_comment):
    project = await create_project()
    task = await create_task(project)
    subtask = await create_subtask(task)
    await create_comment(manager, task.id)
    await create_comment(manager, subtask.id, CommentTarget.SUBTASK)

    response = await client.delete(f'{API}/projects/{project.id}', headers=manager_headers)

    assert response.status_code == 200
    assert response.json()['message'] == 'Project deleted successfully'

    for model in (Task, SubTask, Comment):
        count = await db_session.scalar(select(func.count()).select_from(model))
        assert count == 0

    response = await client.get(f'{API}/projects/{project.id}', headers=manager_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_project_timestamps_carry_utc_offset(client: AsyncClient, manager_headers, create_project):
    project = await create_project()

    response = await client.get(f'{API}/projects/{project.id}', headers=manager_headers)

    data = response.json()['project']
    for field in ('start_date', 'deadline', 'created_at', 'updated_at'):
        assert data[field].endswith(('Z', '+00:00')), field
    assert data['creator']['id'] == str(project.created_by)


@pytest.mark.asyncio
async def test_update_project_deadline_before_existing_start(client: AsyncClient, manager_headers,
                                                            create_project):
    project = await create_project(start_date=utc(5), deadline=utc(30))

    response = await client.put(f'{API}/projects/{project.id}', headers=manager_headers,
                                json={'deadline': utc(1).isoformat()})

    assert response.status_code == 400
    assert response.json() == {'success': False, 'error': 'deadline can not be before start_date'}
