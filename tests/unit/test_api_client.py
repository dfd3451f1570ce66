import json
from unittest.mock import MagicMock

import pytest
import requests

from studyaid.exceptions import RemoteAPIError
from studyaid.services.api_client import StudyApiClient


def make_response(status_code=200, body=None, headers=None, raw=None):
    response = requests.Response()
    response.status_code = status_code
    if raw is not None:
        response._content = raw
    else:
        response._content = json.dumps(body).encode() if body is not None else b''
    response.headers.update(headers or {})
    return response


@pytest.fixture
def http():
    return MagicMock()


@pytest.fixture
def client(http):
    return StudyApiClient(base_url='http://api.test/api/', token='tok', timeout=5, http=http)


def test_sends_bearer_token_and_parses_json(client, http):
    http.request.return_value = make_response(body={'id': 'lec-1'})

    assert client.get_lecture('lec-1') == {'id': 'lec-1'}

    args, kwargs = http.request.call_args
    assert args == ('GET', 'http://api.test/api/lectures/lec-1')
    assert kwargs['headers'] == {'Authorization': 'Bearer tok'}
    assert kwargs['timeout'] == 5


def test_no_auth_header_without_token(http):
    http.request.return_value = make_response(body={'token': 'abc'})
    StudyApiClient(base_url='http://api.test/api', http=http).login('a@b.c', 'pw')
    assert http.request.call_args.kwargs['headers'] == {}
    assert http.request.call_args.kwargs['json'] == {'email': 'a@b.c', 'password': 'pw'}


def test_server_message_is_surfaced(client, http):
    http.request.return_value = make_response(400, {'message': 'Title already used'})

    with pytest.raises(RemoteAPIError) as exc:
        client.create_quiz({'title': 'x'})

    assert exc.value.message == 'Title already used'
    assert exc.value.status_code == 400


def test_generic_message_when_server_sends_none(client, http):
    http.request.return_value = make_response(500, raw=b'<html>oops</html>')

    with pytest.raises(RemoteAPIError) as exc:
        client.create_quiz({'title': 'x'})

    assert exc.value.message == 'Failed to create quiz. Please try again.'
    assert exc.value.status_code == 500


def test_connection_error_has_no_status(client, http):
    http.request.side_effect = requests.ConnectionError('refused')

    with pytest.raises(RemoteAPIError) as exc:
        client.submit_review('card-1', 4)

    assert exc.value.message == 'Failed to submit review'
    assert exc.value.status_code is None
    # single attempt, no retry
    assert http.request.call_count == 1


def test_empty_body_returns_none(client, http):
    http.request.return_value = make_response(204)
    assert client.delete_quiz('quiz-1') is None


def test_create_lecture_without_files_sends_json(client, http):
    http.request.return_value = make_response(201, {'id': 'lec-1'})
    client.create_lecture('Biology', 'Intro')
    kwargs = http.request.call_args.kwargs
    assert kwargs['json'] == {'title': 'Biology', 'description': 'Intro'}
    assert 'files' not in kwargs


def test_create_lecture_with_files_sends_multipart(client, http):
    http.request.return_value = make_response(201, {'id': 'lec-1'})
    part = ('cells.pdf', b'%PDF', 'application/pdf')
    client.create_lecture('Biology', None, [part])
    kwargs = http.request.call_args.kwargs
    assert kwargs['data'] == {'title': 'Biology'}
    assert kwargs['files'] == [('files', part)]


def test_download_returns_bytes_and_type(client, http):
    http.request.return_value = make_response(raw=b'hello', headers={'Content-Type': 'text/plain'})
    assert client.download_file('abc.txt') == (b'hello', 'text/plain')
    assert http.request.call_args.args[1] == 'http://api.test/api/uploads/abc.txt'
