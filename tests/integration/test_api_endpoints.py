import inspect
import time

import pytest
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from studyaid.exceptions import RemoteAPIError
from studyaid.main import app
from studyaid.services.session import session_registry
from tests.fixtures.sample_data import flashcard_set_data, make_jwt, quiz_data

MB = 1024 * 1024


@pytest.mark.integration
def test_health(client):
    r = client.get('/health')
    assert r.status_code == 200
    assert r.json()['status'] == 'healthy'


@pytest.mark.integration
def test_protected_routes_require_login(client, session, api_client):
    session.token = None
    session.is_authenticated = False
    r = client.get('/api/lectures/')
    assert r.status_code == 401
    assert r.json()['error'] == 'unauthorized'
    api_client.list_lectures.assert_not_called()


@pytest.mark.integration
def test_session_status_and_logout(client):
    r = client.get('/api/auth/session')
    assert r.json()['isAuthenticated'] is True
    assert r.json()['isAdmin'] is False

    r = client.post('/api/auth/logout')
    assert r.status_code == 200
    assert r.json()['isAuthenticated'] is False


@pytest.mark.integration
def test_login_failure_surfaces_server_message(client, session, api_client):
    session.token = None
    session.is_authenticated = False
    api_client.login.side_effect = RemoteAPIError('Invalid credentials', status_code=401)
    r = client.post('/api/auth/login', json={'email': 'a@b.c', 'password': 'nope'})
    assert r.status_code == 401
    assert r.json()['message'] == 'Invalid credentials'


@pytest.mark.integration
def test_list_lectures_uses_camel_case(client, api_client, sample_lecture):
    api_client.list_lectures.return_value = [sample_lecture]
    r = client.get('/api/lectures/')
    assert r.status_code == 200
    lecture = r.json()[0]
    assert lecture['files'][0]['originalName'] == 'cells.pdf'
    assert lecture['_count']['files'] == 1


@pytest.mark.integration
def test_upload_too_many_files_is_rejected(client, api_client):
    files = [('files', (f'notes{i}.pdf', b'x' * MB, 'application/pdf')) for i in range(6)]
    r = client.post('/api/lectures/upload', data={'title': 'Biology'}, files=files)
    assert r.status_code == 400
    assert r.json()['message'] == 'Maximum 5 files allowed'
    api_client.create_lecture.assert_not_called()


@pytest.mark.integration
def test_upload_wrong_type_is_rejected(client, api_client):
    files = [('files', ('photo.png', b'png', 'image/png'))]
    r = client.post('/api/lectures/upload', data={'title': 'Biology'}, files=files)
    assert r.status_code == 400
    assert r.json()['message'] == 'Only PDF, TXT, DOC, and DOCX files are allowed'


@pytest.mark.integration
def test_upload_creates_lecture_with_files(client, api_client):
    api_client.create_lecture.return_value = {'id': 'lec-2'}
    files = [('files', ('cells.pdf', b'%PDF-1.4', 'application/pdf'))]
    r = client.post('/api/lectures/upload', data={'title': 'Biology'}, files=files)
    assert r.status_code == 201
    title, description, parts = api_client.create_lecture.call_args.args
    assert title == 'Biology'
    assert description is None
    assert parts == [('cells.pdf', b'%PDF-1.4', 'application/pdf')]


@pytest.mark.integration
def test_review_rating_advances_and_writes_after_response(client, api_client):
    api_client.get_flashcard_set.return_value = flashcard_set_data()

    r = client.post('/api/flashcards/set-1/review')
    assert r.json()['card']['back'] is None

    r = client.post('/api/flashcards/set-1/review/flip')
    assert r.json()['card']['back'] == 'Mitochondria'

    r = client.post('/api/flashcards/set-1/review/rate', json={'confidence': 4})
    assert r.status_code == 200
    body = r.json()
    assert body['index'] == 1
    assert body['state'] == 'front-shown'
    assert body['pendingReviews'] == 1
    api_client.submit_review.assert_called_once_with('card-1', 4)

    r = client.get('/api/flashcards/set-1/review')
    assert r.json()['pendingReviews'] == 0


@pytest.mark.integration
def test_review_write_failure_does_not_fail_rating(client, api_client):
    api_client.get_flashcard_set.return_value = flashcard_set_data()
    api_client.submit_review.side_effect = RemoteAPIError('Failed to submit review', status_code=500)

    r = client.post('/api/flashcards/set-1/review/rate', json={'confidence': 2})

    assert r.status_code == 200
    assert r.json()['index'] == 1
    assert client.get('/api/flashcards/set-1/review').json()['index'] == 1


@pytest.mark.integration
def test_review_rejects_out_of_range_confidence(client, api_client):
    api_client.get_flashcard_set.return_value = flashcard_set_data()
    r = client.post('/api/flashcards/set-1/review/rate', json={'confidence': 9})
    assert r.status_code == 400
    api_client.submit_review.assert_not_called()


@pytest.mark.integration
def test_incomplete_quiz_submit_is_rejected_locally(client, api_client):
    api_client.get_quiz.return_value = quiz_data()
    client.post('/api/quizzes/quiz-1/attempt')
    client.post('/api/quizzes/quiz-1/attempt/answer', json={'answer': 'Mitochondria'})

    r = client.post('/api/quizzes/quiz-1/attempt/submit')

    assert r.status_code == 400
    assert r.json()['message'] == 'Please answer all questions before submitting.'
    api_client.submit_attempt.assert_not_called()
    assert client.get('/api/quizzes/quiz-1/attempt').json()['state'] == 'answering'


@pytest.mark.integration
def test_quiz_attempt_end_to_end(client, api_client):
    api_client.get_quiz.return_value = quiz_data()
    r = client.post('/api/quizzes/quiz-1/attempt')
    assert r.json()['totalQuestions'] == 4
    assert 'answer' not in r.json()['question']

    for answer in ['Mitochondria', 'ATP', 'Ribosome', 'ATP']:
        client.post('/api/quizzes/quiz-1/attempt/answer', json={'answer': answer})
        client.post('/api/quizzes/quiz-1/attempt/next')

    r = client.post('/api/quizzes/quiz-1/attempt/submit')

    assert r.status_code == 200
    body = r.json()
    assert body['state'] == 'graded'
    assert body['score'] == 75.0
    assert [q['isCorrect'] for q in body['breakdown']] == [True, False, True, True]
    api_client.submit_attempt.assert_called_once()


@pytest.mark.integration
def test_quiz_submit_failure_allows_retry(client, api_client):
    api_client.get_quiz.return_value = quiz_data()
    api_client.submit_attempt.side_effect = RemoteAPIError('db down', status_code=500)
    client.post('/api/quizzes/quiz-1/attempt')
    for answer in ['Mitochondria', 'DNA', 'Ribosome', 'ATP']:
        client.post('/api/quizzes/quiz-1/attempt/answer', json={'answer': answer})
        client.post('/api/quizzes/quiz-1/attempt/next')

    r = client.post('/api/quizzes/quiz-1/attempt/submit')
    assert r.status_code == 502
    assert r.json()['message'] == 'Failed to submit quiz. Please try again.'

    api_client.submit_attempt.side_effect = None
    r = client.post('/api/quizzes/quiz-1/attempt/submit')
    assert r.status_code == 200
    assert r.json()['score'] == 100.0


@pytest.mark.integration
def test_create_quiz_with_dangling_answer_is_rejected(client, api_client):
    body = {
        'title': 'Cells',
        'lectureId': 'lec-1',
        'questions': [{'question': 'Q?', 'options': [{'value': 'A'}, {'value': 'B'}], 'answer': 'C'}],
    }
    r = client.post('/api/quizzes/', json=body)
    assert r.status_code == 400
    assert r.json()['message'] == 'Please fill in all required fields before creating the quiz.'
    api_client.create_quiz.assert_not_called()


@pytest.mark.integration
def test_remote_not_found_keeps_status(client, api_client):
    api_client.get_quiz.side_effect = RemoteAPIError('Quiz not found', status_code=404)
    r = client.get('/api/quizzes/missing')
    assert r.status_code == 404
    assert r.json()['message'] == 'Quiz not found'


@pytest.mark.integration
def test_admin_routes_need_admin_token(client, session, api_client):
    r = client.get('/api/admin/analytics')
    assert r.status_code == 401

    api_client.admin_analytics.return_value = {'totalUsers': 3, 'activeUsersLast30Days': 2}
    client.post('/api/auth/admin/login', json={'token': make_jwt(time.time() + 3600)})
    r = client.get('/api/admin/analytics')
    assert r.status_code == 200
    assert r.json()['totalUsers'] == 3
    assert r.json()['activeUsersLast30Days'] == 2


@pytest.mark.integration
def test_logout_releases_session_context():
    app.dependency_overrides.clear()
    before = len(session_registry)
    with TestClient(app) as anonymous:
        for _ in range(5):
            anonymous.cookies.clear()
            anonymous.get('/api/auth/session')
        assert len(session_registry) == before + 5

        r = anonymous.post('/api/auth/logout')
        assert r.status_code == 200
        assert len(session_registry) == before + 4


@pytest.mark.integration
def test_api_routes_run_in_threadpool():
    api_routes = [
        route for route in app.routes
        if isinstance(route, APIRoute) and route.path.startswith('/api/')
    ]
    assert api_routes
    blocking = [route.path for route in api_routes if inspect.iscoroutinefunction(route.endpoint)]
    assert blocking == []
