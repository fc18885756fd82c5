"""
Integration Tests for Student and Staff Management

Roster, invitations, measurements, tenant isolation and staff accounts.
"""

from conftest import assert_success_response, assert_error_response, make_headers
from fitcoach.models import AuditLog, Student, User


class TestStudentRoster:

    def test_create_and_list(self, client, admin_headers, trainer):
        created = assert_success_response(client.post('/api/students', headers=admin_headers, json={
            'full_name': 'Eva Rocha',
            'email': 'EVA@example.com',
            'trainer_id': str(trainer.id),
            'gender': 'F',
            'age': 28,
        }), 201)

        assert created['student']['email'] == 'eva@example.com'
        assert created['student']['enrollment_status'] == 'pending_activation'
        assert 'activate?token=' in created['activation_link']
        assert created['expires_at']

        students = assert_success_response(client.get('/api/students', headers=admin_headers))
        assert [s['full_name'] for s in students] == ['Eva Rocha']

    def test_filters(self, client, admin_headers, student):
        client.post('/api/students', headers=admin_headers, json={'full_name': 'Eva Rocha', 'email': 'eva@example.com'})

        active = assert_success_response(client.get('/api/students?status=active', headers=admin_headers))
        assert [s['full_name'] for s in active] == ['Carla Dias']

        found = assert_success_response(client.get('/api/students?search=ROCHA', headers=admin_headers))
        assert [s['email'] for s in found] == ['eva@example.com']

        response = client.get('/api/students?status=graduated', headers=admin_headers)
        assert_error_response(response, 400, 'BAD_REQUEST')

    def test_duplicate_email_conflicts(self, client, admin_headers, student):
        response = client.post('/api/students', headers=admin_headers, json={
            'full_name': 'Carla Again', 'email': 'carla@example.com',
        })
        assert_error_response(response, 409, 'CONFLICT')

    def test_unknown_trainer(self, client, session, admin_headers, other_tenant):
        outsider = User(full_name='Out Trainer', email='out@other.com', role='trainer', tenant_id=other_tenant.id)
        outsider.set_password('OutPass123')
        session.add(outsider)
        session.commit()

        response = client.post('/api/students', headers=admin_headers, json={
            'full_name': 'Eva Rocha', 'email': 'eva@example.com', 'trainer_id': str(outsider.id),
        })
        assert_error_response(response, 404, 'NOT_FOUND')

    def test_update_and_delete(self, client, admin_headers, student):
        updated = assert_success_response(client.put(
            f'/api/students/{student.id}', headers=admin_headers, json={'goal': 'Marathon', 'weight': 60.5}
        ))
        assert updated['goal'] == 'Marathon'
        assert updated['weight'] == 60.5

        assert_success_response(client.delete(f'/api/students/{student.id}', headers=admin_headers))
        assert_error_response(client.get(f'/api/students/{student.id}', headers=admin_headers), 404, 'NOT_FOUND')
        assert {a.action for a in AuditLog.query.all()} == {'student.update', 'student.delete'}

    def test_resend_for_active_student_conflicts(self, client, admin_headers, student):
        response = client.post(f'/api/students/{student.id}/invitation', headers=admin_headers)
        assert_error_response(response, 409, 'CONFLICT')

    def test_student_role_is_forbidden(self, client, student_headers):
        assert_error_response(client.get('/api/students', headers=student_headers), 403, 'FORBIDDEN')

    def test_super_admin_has_no_roster(self, client, super_admin_headers):
        assert_error_response(client.get('/api/students', headers=super_admin_headers), 403, 'FORBIDDEN')


class TestTenantIsolation:

    def test_other_tenant_sees_not_found(self, client, session, other_tenant, student):
        outsider = User(full_name='Out Admin', email='admin@other.com', role='admin', tenant_id=other_tenant.id)
        outsider.set_password('OutPass123')
        session.add(outsider)
        session.commit()
        headers = make_headers(outsider)

        assert_error_response(client.get(f'/api/students/{student.id}', headers=headers), 404, 'NOT_FOUND')
        assert_error_response(
            client.put(f'/api/students/{student.id}', headers=headers, json={'goal': 'x'}), 404, 'NOT_FOUND'
        )
        assert assert_success_response(client.get('/api/students', headers=headers)) == []
        assert session.get(Student, student.id).goal is None


class TestMeasurements:

    def test_add_and_list_chronologically(self, client, trainer_headers, student):
        for day, weight in (('2024-06-01', 61.0), ('2024-05-01', 62.5)):
            assert_success_response(client.post(
                f'/api/students/{student.id}/measurements', headers=trainer_headers,
                json={'measured_on': day, 'weight': weight},
            ), 201)

        data = assert_success_response(client.get(f'/api/students/{student.id}/measurements', headers=trainer_headers))
        assert [m['measured_on'] for m in data] == ['2024-05-01', '2024-06-01']

    def test_measurement_requires_date(self, client, trainer_headers, student):
        response = client.post(f'/api/students/{student.id}/measurements', headers=trainer_headers, json={'weight': 60})
        assert_error_response(response, 400, 'BAD_REQUEST')


class TestStaff:

    def test_admin_creates_trainer(self, client, admin_headers):
        data = assert_success_response(client.post('/api/staff', headers=admin_headers, json={
            'full_name': 'Felipe Costa', 'email': 'felipe@irongym.com', 'temporary_password': 'TempPass123',
        }), 201)

        assert data['role'] == 'trainer'
        assert data['must_change_password'] is True

        staff = assert_success_response(client.get('/api/staff', headers=admin_headers))
        assert 'felipe@irongym.com' in [m['email'] for m in staff]

    def test_trainer_cannot_manage_staff(self, client, trainer_headers):
        assert_error_response(client.get('/api/staff', headers=trainer_headers), 403, 'FORBIDDEN')

    def test_deactivated_trainer_cannot_log_in(self, client, admin_headers, trainer):
        assert_success_response(client.patch(
            f'/api/staff/{trainer.id}/status', headers=admin_headers, json={'is_active': False}
        ))

        response = client.post('/api/auth/login', json={'email': 'bruno@irongym.com', 'password': 'TrainerPass123'})
        assert_error_response(response, 403, 'FORBIDDEN')

    def test_cannot_change_own_status(self, client, admin, admin_headers):
        response = client.patch(f'/api/staff/{admin.id}/status', headers=admin_headers, json={'is_active': False})
        assert_error_response(response, 400, 'BAD_REQUEST')
