import json
from urllib.parse import quote

import pytest
from httpx import AsyncClient

from app.middleware import is_guarded_page, role_from_user_cookie
from core.security import create_access_token


def sign_in(client: AsyncClient, user):
    client.cookies.set('token', create_access_token({'sub': str(user.id), 'role': user.role.value}))
    client.cookies.set('user', quote(json.dumps({'id': str(user.id), 'role': user.role.value})))


def test_guarded_paths():
    assert is_guarded_page('/')
    assert is_guarded_page('/login')
    assert is_guarded_page('/manager')
    assert is_guarded_page('/developer/tasks')
    assert not is_guarded_page('/api/v1/projects')
    assert not is_guarded_page('/managers')
    assert not is_guarded_page('/health')


def test_role_from_user_cookie():
    assert role_from_user_cookie(quote(json.dumps({'role': 'manager'}))) == 'manager'
    assert role_from_user_cookie(None) == 'developer'
    assert role_from_user_cookie('{not json') == 'developer'
    assert role_from_user_cookie(quote(json.dumps({'role': 'admin'}))) == 'developer'


@pytest.mark.asyncio
async def test_anonymous_visitor_sent_to_login(client: AsyncClient):
    for path in ('/', '/manager', '/developer'):
        response = await client.get(path)
        assert response.status_code == 303
        assert response.headers['location'] == '/login'


@pytest.mark.asyncio
async def test_login_page_renders(client: AsyncClient):
    response = await client.get('/login')

    assert response.status_code == 200
    assert 'text/html' in response.headers['content-type']


@pytest.mark.asyncio
async def test_signed_in_visitor_skips_login(client: AsyncClient, manager):
    sign_in(client, manager)

    response = await client.get('/login')

    assert response.status_code == 303
    assert response.headers['location'] == '/manager'


@pytest.mark.asyncio
async def test_home_redirects_to_role_dashboard(client: AsyncClient, developer):
    sign_in(client, developer)

    response = await client.get('/')

    assert response.status_code == 303
    assert response.headers['location'] == '/developer'


@pytest.mark.asyncio
async def test_manager_page_renders(client: AsyncClient, manager, create_project):
    await create_project(title='Visible on the board')
    sign_in(client, manager)

    response = await client.get('/manager')

    assert response.status_code == 200
    assert 'Visible on the board' in response.text


@pytest.mark.asyncio
async def test_developer_page_renders(client: AsyncClient, developer, create_project, create_task):
    await create_task(await create_project(), title='Ship the thing')
    sign_in(client, developer)

    response = await client.get('/developer')

    assert response.status_code == 200
    assert 'Ship the thing' in response.text


@pytest.mark.asyncio
async def test_wrong_role_page_redirects(client: AsyncClient, developer):
    sign_in(client, developer)

    response = await client.get('/manager')

    assert response.status_code == 303
    assert response.headers['location'] == '/developer'


@pytest.mark.asyncio
async def test_stale_token_sent_to_login(client: AsyncClient):
    client.cookies.set('token', 'expired-or-forged')

    response = await client.get('/manager')

    assert response.status_code == 303
    assert response.headers['location'] == '/login'


@pytest.mark.asyncio
async def test_api_routes_not_redirected(client: AsyncClient):
    response = await client.get('/api/v1/projects')

    assert response.status_code == 401
    assert response.json()['error'] == 'Unauthorized'
