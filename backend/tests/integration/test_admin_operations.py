"""
Integration Tests for the Back Office and Tenant Billing
"""

from conftest import assert_success_response, assert_error_response
from fitcoach.models import Invoice, Plan, Subscription

NEW_TENANT = {
    'name': 'Flex Studio',
    'type': 'academy',
    'plan': 'pro',
    'owner_name': 'Gil Souza',
    'owner_email': 'Gil@Flex.com',
    'owner_password': 'OwnerPass123',
}


class TestTenants:

    def test_create_and_list(self, client, super_admin_headers, tenant, admin, student):
        created = assert_success_response(client.post('/api/admin/tenants', headers=super_admin_headers, json=NEW_TENANT), 201)
        assert created['owner']['email'] == 'gil@flex.com'
        assert created['tenant']['slug'].startswith('flex-studio-')

        tenants = assert_success_response(client.get('/api/admin/tenants', headers=super_admin_headers))
        by_name = {t['name']: t for t in tenants}
        assert by_name['Iron Gym']['active_students_count'] == 1
        assert by_name['Iron Gym']['owner_email'] == 'ana@irongym.com'
        assert by_name['Flex Studio']['active_students_count'] == 0

        login = client.post('/api/auth/login', json={'email': 'gil@flex.com', 'password': 'OwnerPass123'})
        assert_success_response(login)

    def test_duplicate_owner_email(self, client, super_admin_headers, admin):
        response = client.post('/api/admin/tenants', headers=super_admin_headers,
                               json=dict(NEW_TENANT, owner_email='ana@irongym.com'))
        assert_error_response(response, 409, 'CONFLICT')

    def test_suspend_blocks_login(self, client, super_admin_headers, tenant, admin):
        data = assert_success_response(client.patch(
            f'/api/admin/tenants/{tenant.id}/status', headers=super_admin_headers, json={'status': 'suspended'}
        ))
        assert data['status'] == 'suspended'

        response = client.post('/api/auth/login', json={'email': 'ana@irongym.com', 'password': 'AdminPass123'})
        assert_error_response(response, 403, 'FORBIDDEN')

    def test_invalid_status(self, client, super_admin_headers, tenant):
        response = client.patch(f'/api/admin/tenants/{tenant.id}/status', headers=super_admin_headers,
                                json={'status': 'deleted'})
        assert_error_response(response, 400, 'BAD_REQUEST')

    def test_update_branding(self, client, super_admin_headers, tenant):
        data = assert_success_response(client.put(
            f'/api/admin/tenants/{tenant.id}', headers=super_admin_headers, json={'primary_color': '#ff6600'}
        ))
        assert data['primary_color'] == '#ff6600'

    def test_tenant_admin_is_forbidden(self, client, admin_headers):
        assert_error_response(client.get('/api/admin/tenants', headers=admin_headers), 403, 'FORBIDDEN')


class TestAuditAndKpis:

    def test_audit_logs_paginated_and_filtered(self, client, super_admin_headers):
        for i in range(3):
            client.post('/api/admin/tenants', headers=super_admin_headers, json=dict(
                NEW_TENANT, name=f'Studio {i}', owner_email=f'owner{i}@example.com'
            ))

        page = assert_success_response(client.get('/api/admin/audit-logs?per_page=2', headers=super_admin_headers))
        assert len(page) == 2
        rest = assert_success_response(client.get('/api/admin/audit-logs?per_page=2&page=2', headers=super_admin_headers))
        assert len(rest) == 1

        none = assert_success_response(client.get('/api/admin/audit-logs?action=tenant.status', headers=super_admin_headers))
        assert none == []

    def test_kpis(self, client, session, super_admin_headers, tenant):
        plan = Plan(name='Pro', slug='pro', price_cents=9900)
        session.add(plan)
        session.flush()
        session.add_all([
            Subscription(tenant_id=tenant.id, plan_id=plan.id, status='active'),
            Invoice(tenant_id=tenant.id, amount_paid_cents=9900, status='paid'),
        ])
        session.commit()

        kpis = assert_success_response(client.get('/api/admin/kpis', headers=super_admin_headers))
        assert kpis['mrr'] == 99.0
        assert kpis['active_subscribers'] == 1
        assert kpis['churn_rate_percent'] == 0
        assert kpis['ltv_estimated'] == 99.0

    def test_plans(self, client, super_admin_headers):
        created = assert_success_response(client.post('/api/admin/plans', headers=super_admin_headers, json={
            'name': 'Starter', 'slug': 'starter', 'price_cents': 4900, 'features': ['Chat'],
        }), 201)
        assert created['price'] == 49.0

        duplicate = client.post('/api/admin/plans', headers=super_admin_headers, json={
            'name': 'Starter', 'slug': 'starter', 'price_cents': 4900,
        })
        assert_error_response(duplicate, 409, 'CONFLICT')


class TestTenantBilling:

    def test_subscription_and_invoices(self, client, session, admin_headers, tenant):
        plan = Plan(name='Pro', slug='pro', price_cents=9900)
        session.add(plan)
        session.flush()
        session.add_all([
            Subscription(tenant_id=tenant.id, plan_id=plan.id, status='active'),
            Invoice(tenant_id=tenant.id, amount_paid_cents=9900, status='paid', method='pix'),
        ])
        session.commit()

        subscription = assert_success_response(client.get('/api/billing/subscription', headers=admin_headers))
        assert subscription['plan']['slug'] == 'pro'

        invoices = assert_success_response(client.get('/api/billing/invoices', headers=admin_headers))
        assert [i['amount'] for i in invoices] == [99.0]

        plans = assert_success_response(client.get('/api/billing/plans', headers=admin_headers))
        assert [p['slug'] for p in plans] == ['pro']

    def test_portal_url(self, app, client, admin_headers):
        app.config['BILLING_PORTAL_URL'] = 'https://billing.example.com/portal'
        data = assert_success_response(client.get('/api/billing/portal', headers=admin_headers))
        assert data['url'] == 'https://billing.example.com/portal'

    def test_delete_account_requires_confirmation(self, client, admin_headers):
        response = client.delete('/api/billing/account', headers=admin_headers, json={'confirmation': 'yes'})
        assert_error_response(response, 400, 'BAD_REQUEST')

    def test_delete_account(self, client, admin_headers):
        assert_success_response(client.delete('/api/billing/account', headers=admin_headers, json={'confirmation': 'DELETE'}))

        response = client.post('/api/auth/login', json={'email': 'ana@irongym.com', 'password': 'AdminPass123'})
        assert_error_response(response, 401, 'UNAUTHORIZED')

    def test_trainer_cannot_see_billing(self, client, trainer_headers):
        assert_error_response(client.get('/api/billing/invoices', headers=trainer_headers), 403, 'FORBIDDEN')
