from unittest.mock import patch

import pytest
from httpx import AsyncClient

from models import CommentTarget
from tests.conftest import API


@pytest.mark.asyncio
async def test_comment_on_task_notifies_participants(client: AsyncClient, manager, developer_headers,
                                                     create_project, create_task):
    task = await create_task(await create_project())

    with patch('services.comment.send_comment_notification') as notify:
        response = await client.post(f'{API}/comments', headers=developer_headers, json={
            'content': 'Started on this',
            'target_id': str(task.id),
            'target_type': 'Task',
        })

    assert response.status_code == 201
    comment = response.json()['comment']
    assert comment['content'] == 'Started on this'
    assert comment['target_type'] == 'Task'
    assert comment['author']['name'] == 'Dev One'

    # the assignee wrote it, so only the creator hears about it
    notify.delay.assert_called_once()
    assert notify.delay.call_args.kwargs['user_email'] == manager.email


@pytest.mark.asyncio
async def test_comment_on_subtask(client: AsyncClient, developer_headers, create_project, create_task,
                                  create_subtask):
    subtask = await create_subtask(await create_task(await create_project()))

    response = await client.post(f'{API}/comments', headers=developer_headers, json={
        'content': 'Blocked on review',
        'target_id': str(subtask.id),
        'target_type': 'SubTask',
    })

    assert response.status_code == 201
    assert response.json()['comment']['target_type'] == 'SubTask'


@pytest.mark.asyncio
async def test_comment_on_missing_target(client: AsyncClient, developer_headers):
    response = await client.post(f'{API}/comments', headers=developer_headers, json={
        'content': 'Hello?',
        'target_id': '00000000-0000-0000-0000-000000000000',
        'target_type': 'Task',
    })

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_blank_comment_rejected(client: AsyncClient, developer_headers, create_project, create_task):
    task = await create_task(await create_project())

    response = await client.post(f'{API}/comments', headers=developer_headers, json={
        'content': '   ',
        'target_id': str(task.id),
        'target_type': 'Task',
    })

    assert response.status_code == 400
    assert response.json()['success'] is False


@pytest.mark.asyncio
async def test_list_comments_requires_target(client: AsyncClient, developer_headers):
    response = await client.get(f'{API}/comments', headers=developer_headers)

    assert response.status_code == 400
    assert response.json() == {'success': False, 'error': 'Task ID and task type are required'}


@pytest.mark.asyncio
async def test_list_comments_oldest_first(client: AsyncClient, manager, developer, developer_headers,
                                          create_project, create_task, create_comment):
    task = await create_task(await create_project())
    await create_comment(manager, task.id, content='first')
    await create_comment(developer, task.id, content='second')
    await create_comment(developer, task.id, CommentTarget.SUBTASK, content='wrong thread')

    response = await client.get(f'{API}/comments', headers=developer_headers,
                                params={'target_id': str(task.id), 'target_type': 'Task'})

    assert response.status_code == 200
    assert [c['content'] for c in response.json()['comments']] == ['first', 'second']


@pytest.mark.asyncio
async def test_delete_own_comment(client: AsyncClient, developer, developer_headers,
                                  create_project, create_task, create_comment):
    task = await create_task(await create_project())
    comment = await create_comment(developer, task.id)

    response = await client.delete(f'{API}/comments/{comment.id}', headers=developer_headers)

    assert response.status_code == 200
    assert response.json()['message'] == 'Comment deleted successfully'


@pytest.mark.asyncio
async def test_cannot_delete_someone_elses_comment(client: AsyncClient, manager, developer_headers,
                                                   create_project, create_task, create_comment):
    task = await create_task(await create_project())
    comment = await create_comment(manager, task.id)

    response = await client.delete(f'{API}/comments/{comment.id}', headers=developer_headers)

    assert response.status_code == 403
    assert response.json()['error'] == 'You can only delete your own comments'
