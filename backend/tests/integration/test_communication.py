"""
Integration Tests for Chat, Notifications and Automatic Message Settings
"""

from conftest import assert_success_response, assert_error_response


def open_conversation(client, trainer_headers, student):
    return assert_success_response(client.post(
        '/api/chat/conversations', headers=trainer_headers, json={'student_id': str(student.id)}
    ))


class TestChat:

    def test_conversation_round_trip(self, client, trainer_headers, student_headers, student):
        conversation = open_conversation(client, trainer_headers, student)
        url = f"/api/chat/conversations/{conversation['id']}"

        assert_success_response(client.post(f'{url}/messages', headers=trainer_headers, json={'content': 'Hi Carla!'}), 201)
        assert_success_response(client.post(f'{url}/messages', headers=student_headers, json={'content': 'Hi Bruno!'}), 201)

        inbox = assert_success_response(client.get('/api/chat/conversations', headers=student_headers))
        assert inbox[0]['last_message'] == 'Hi Bruno!'
        assert inbox[0]['student_unread_count'] == 1
        assert inbox[0]['trainer_name'] == 'Bruno Lima'

        messages = assert_success_response(client.get(f'{url}/messages', headers=student_headers))
        assert [m['content'] for m in messages] == ['Hi Carla!', 'Hi Bruno!']

        read = assert_success_response(client.post(f'{url}/read', headers=student_headers))
        assert read['updated'] == 1

    def test_contacts(self, client, trainer_headers, student_headers, student):
        staff_view = assert_success_response(client.get('/api/chat/contacts', headers=trainer_headers))
        student_view = assert_success_response(client.get('/api/chat/contacts', headers=student_headers))

        assert [c['name'] for c in staff_view] == ['Carla Dias']
        assert [c['name'] for c in student_view] == ['Bruno Lima']

    def test_blank_message_rejected(self, client, trainer_headers, student):
        conversation = open_conversation(client, trainer_headers, student)
        response = client.post(
            f"/api/chat/conversations/{conversation['id']}/messages", headers=trainer_headers, json={'content': '   '}
        )
        assert_error_response(response, 400, 'BAD_REQUEST')

    def test_bad_after_parameter(self, client, trainer_headers, student):
        conversation = open_conversation(client, trainer_headers, student)
        response = client.get(
            f"/api/chat/conversations/{conversation['id']}/messages?after=yesterday", headers=trainer_headers
        )
        assert_error_response(response, 400, 'BAD_REQUEST')

    def test_super_admin_has_no_chat(self, client, super_admin_headers):
        assert_error_response(client.get('/api/chat/conversations', headers=super_admin_headers), 403, 'FORBIDDEN')


class TestNotifications:

    def test_message_creates_notification(self, client, trainer_headers, student_headers, student):
        conversation = open_conversation(client, trainer_headers, student)
        client.post(f"/api/chat/conversations/{conversation['id']}/messages",
                    headers=trainer_headers, json={'content': 'Tomorrow at 7?'})

        data = assert_success_response(client.get('/api/notifications', headers=student_headers))
        assert data['unread_count'] == 1
        notification = data['notifications'][0]
        assert notification['type'] == 'message'

        assert_success_response(client.post(f"/api/notifications/{notification['id']}/read", headers=student_headers))
        count = assert_success_response(client.get('/api/notifications/unread-count', headers=student_headers))
        assert count['unread_count'] == 0

    def test_read_all(self, client, student_headers):
        data = assert_success_response(client.post('/api/notifications/read-all', headers=student_headers))
        assert data['updated'] == 0

    def test_cannot_read_someone_elses(self, client, trainer_headers, student_headers, student):
        conversation = open_conversation(client, trainer_headers, student)
        client.post(f"/api/chat/conversations/{conversation['id']}/messages",
                    headers=trainer_headers, json={'content': 'Hello'})
        notification = assert_success_response(client.get('/api/notifications', headers=student_headers))['notifications'][0]

        response = client.post(f"/api/notifications/{notification['id']}/read", headers=trainer_headers)
        assert_error_response(response, 404, 'NOT_FOUND')


class TestMessageConfig:

    def test_defaults_then_update(self, client, admin_headers):
        config = assert_success_response(client.get('/api/message-config', headers=admin_headers))
        assert config['reminder_now_active'] is True
        assert config['motivational_streak_days'] == 7

        updated = assert_success_response(client.put('/api/message-config', headers=admin_headers, json={
            'reminder_now_active': False, 'motivational_streak_days': 5,
        }))
        assert updated['reminder_now_active'] is False
        assert updated['motivational_streak_days'] == 5

    def test_variables_and_preview(self, client, trainer_headers):
        variables = assert_success_response(client.get('/api/message-config/variables', headers=trainer_headers))
        assert '{name}' in [v['variable'] for v in variables]

        rendered = assert_success_response(client.post('/api/message-config/preview', headers=trainer_headers, json={
            'template': 'Hi {name}, see you at {time}!', 'variables': {'name': 'Ana'},
        }))
        assert rendered['rendered'] == 'Hi Ana, see you at --:--!'

    def test_students_cannot_configure(self, client, student_headers):
        assert_error_response(client.get('/api/message-config', headers=student_headers), 403, 'FORBIDDEN')
