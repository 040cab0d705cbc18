import pytest
from httpx import AsyncClient

from models import CommentTarget, TaskStatus, UserRole
from tests.conftest import API, utc


@pytest.mark.asyncio
async def test_manager_dashboard(client: AsyncClient, manager_headers, create_user, create_project, create_task):
    busy = await create_project(title='Busy')
    await create_project(title='Empty')
    await create_task(busy, title='One', status=TaskStatus.COMPLETED, completed_at=utc())
    await create_task(busy, title='Two')
    await create_task(busy, title='Three', status=TaskStatus.IN_PROGRESS)

    someone_else = await create_user('Other Manager', UserRole.MANAGER)
    await create_project(title='Not mine', created_by=someone_else.id)

    response = await client.get(f'{API}/dashboard/manager', headers=manager_headers)

    assert response.status_code == 200
    data = response.json()
    assert data['success'] is True
    assert data['stats'] == {
        'total_projects': 2,
        'total_tasks': 3,
        'completed_tasks': 1,
        'completion_rate': 33,
    }
    progress = {project['title']: project for project in data['projects']}
    assert progress['Busy']['task_count'] == 3
    assert progress['Busy']['completed_task_count'] == 1
    assert progress['Busy']['progress'] == 33
    assert progress['Empty']['progress'] == 0


@pytest.mark.asyncio
async def test_manager_dashboard_denied_for_developer(client: AsyncClient, developer_headers):
    response = await client.get(f'{API}/dashboard/manager', headers=developer_headers)

    assert response.status_code == 403
    assert response.json()['error'] == 'Access denied. manager role required.'


@pytest.mark.asyncio
async def test_developer_dashboard(client: AsyncClient, manager, developer_headers, other_developer,
                                   create_project, create_task, create_subtask, create_comment):
    project = await create_project()
    late = await create_task(project, title='Late', deadline=utc(-2))
    await create_task(project, title='Going', deadline=utc(4), status=TaskStatus.IN_PROGRESS)
    await create_task(project, title='Done', deadline=utc(6), status=TaskStatus.COMPLETED, completed_at=utc())
    await create_task(project, title='Someone else', assigned_to=other_developer.id)

    await create_subtask(late, title='a')
    await create_subtask(late, title='b', status=TaskStatus.COMPLETED, completed_at=utc())
    await create_comment(manager, late.id, content='Status?')
    await create_comment(manager, late.id, CommentTarget.SUBTASK, content='Not counted')

    response = await client.get(f'{API}/dashboard/developer', headers=developer_headers)

    assert response.status_code == 200
    data = response.json()
    assert data['stats'] == {
        'total_tasks': 3,
        'completed_tasks': 1,
        'in_progress_tasks': 1,
        'pending_tasks': 1,
        'overdue_tasks': 1,
    }
    assert [task['title'] for task in data['tasks']] == ['Late', 'Going', 'Done']

    first = data['tasks'][0]
    assert first['timeliness'] == 'overdue'
    assert first['subtask_count'] == 2
    assert first['completed_subtask_count'] == 1
    assert first['comment_count'] == 1


@pytest.mark.asyncio
async def test_developer_dashboard_denied_for_manager(client: AsyncClient, manager_headers):
    response = await client.get(f'{API}/dashboard/developer', headers=manager_headers)

    assert response.status_code == 403
    assert response.json()['error'] == 'Access denied. developer role required.'
