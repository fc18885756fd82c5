"""
Integration Tests for the Student Self-service API (/api/me)
"""

from conftest import assert_success_response, assert_error_response
from fitcoach.models import AuditLog, Student


class TestProfile:

    def test_profile_includes_trainer(self, client, student_headers):
        data = assert_success_response(client.get('/api/me/profile', headers=student_headers))

        assert data['full_name'] == 'Carla Dias'
        assert data['trainer_name'] == 'Bruno Lima'

    def test_update_profile_is_audited(self, client, student_headers):
        data = assert_success_response(client.put('/api/me/profile', headers=student_headers, json={
            'goal': 'Run 10k', 'full_name': 'Carla D. Dias',
        }))

        assert data['goal'] == 'Run 10k'
        me = assert_success_response(client.get('/api/auth/me', headers=student_headers))
        assert me['user']['full_name'] == 'Carla D. Dias'
        assert AuditLog.query.filter_by(action='student.profile_update').count() == 1

    def test_email_cannot_be_changed(self, client, student_headers):
        response = client.put('/api/me/profile', headers=student_headers, json={'email': 'new@example.com'})
        assert_error_response(response, 400, 'BAD_REQUEST')


class TestMyTraining:

    def test_only_own_workouts(self, client, session, trainer_headers, student_headers, student, tenant):
        other = Student(tenant_id=tenant.id, full_name='Davi Reis', email='davi@example.com')
        session.add(other)
        session.commit()

        mine = assert_success_response(client.post('/api/workouts', headers=trainer_headers, json={
            'name': 'Carla A', 'student_id': str(student.id), 'exercises': [{'name': 'Deadlift'}],
        }), 201)
        theirs = assert_success_response(client.post('/api/workouts', headers=trainer_headers, json={
            'name': 'Davi A', 'student_id': str(other.id),
        }), 201)

        listed = assert_success_response(client.get('/api/me/workouts', headers=student_headers))
        assert [w['name'] for w in listed] == ['Carla A']

        detail = assert_success_response(client.get(f"/api/me/workouts/{mine['id']}", headers=student_headers))
        assert [e['name'] for e in detail['exercises']] == ['Deadlift']

        response = client.get(f"/api/me/workouts/{theirs['id']}", headers=student_headers)
        assert_error_response(response, 404, 'NOT_FOUND')

    def test_logs_and_evolution(self, client, trainer_headers, student_headers, student):
        assert_success_response(client.post('/api/me/workout-logs', headers=student_headers, json={
            'workout_name': 'Morning run', 'duration_minutes': 30,
        }), 201)
        client.post(f'/api/students/{student.id}/measurements', headers=trainer_headers,
                    json={'measured_on': '2024-05-01', 'weight': 62.0})

        logs = assert_success_response(client.get('/api/me/workout-logs', headers=student_headers))
        assert logs['streak'] == 1
        assert [log['workout_name'] for log in logs['logs']] == ['Morning run']

        evolution = assert_success_response(client.get('/api/me/evolution', headers=student_headers))
        assert evolution['streak'] == 1
        assert len(evolution['recent_logs']) == 1
        assert [m['weight'] for m in evolution['measurements']] == [62.0]
        assert evolution['assessments'] == []

        notifications = assert_success_response(client.get('/api/notifications', headers=student_headers))
        assert notifications['notifications'][0]['title'] == 'Workout completed'
