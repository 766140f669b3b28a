"""
Unit Tests for the Lab Components and Library Items catalogues
"""
import pytest
from httpx import AsyncClient

from app.models.inventory import ItemKind
from app.services.inventory_store import InventoryStore

LAB = '/api/v1/lab-components'
LIBRARY = '/api/v1/library-items'


class TestCreateItem:
    """Test POST on the catalogues"""

    async def test_admin_creates_component(self, client: AsyncClient, admin_auth_headers):
        response = await client.post(LAB, json={
            'name': 'Arduino Uno',
            'category': 'micro controllers',
            'location': 'lab 2 cupboard',
            'total_quantity': 10,
            'specification': 'Voltage: 5V. Clock = 16 MHz',
        }, headers=admin_auth_headers)

        assert response.status_code == 201
        data = response.json()
        assert data['kind'] == 'lab_component'
        assert data['category'] == 'Micro Controllers'
        assert data['location'] == 'Lab 02 Cupboard'
        assert data['total_quantity'] == 10
        assert data['available_quantity'] == 10
        assert data['availability'] == 'AVAILABLE'
        assert data['specification_rows'] == [
            {'attribute': 'Voltage', 'value': '5V'},
            {'attribute': 'Clock', 'value': '16 MHz'},
        ]

    async def test_rows_are_stored_as_text(self, client: AsyncClient, admin_auth_headers):
        response = await client.post(LIBRARY, json={
            'name': 'The Art of Computer Programming',
            'location': 'library rack 3',
            'specification_rows': [
                {'attribute': 'Author', 'value': 'Knuth'},
                {'attribute': '', 'value': ''},
                {'attribute': 'Edition', 'value': '3'},
            ],
        }, headers=admin_auth_headers)

        assert response.status_code == 201
        data = response.json()
        assert data['kind'] == 'library_item'
        assert data['location'] == 'LIBRARY RACK 03'
        assert data['specification'] == 'Author: Knuth. Edition: 3'

    async def test_student_cannot_create(self, client: AsyncClient, auth_headers):
        response = await client.post(LAB, json={'name': 'Breadboard'}, headers=auth_headers)
        assert response.status_code == 403

    async def test_faculty_cannot_create(self, client: AsyncClient, faculty_headers):
        response = await client.post(LAB, json={'name': 'Breadboard'}, headers=faculty_headers)
        assert response.status_code == 403

    async def test_negative_total(self, client: AsyncClient, admin_auth_headers):
        response = await client.post(LAB, json={'name': 'Breadboard', 'total_quantity': -1}, headers=admin_auth_headers)
        assert response.status_code == 400


class TestListItems:
    """Test GET on the catalogues"""

    async def test_catalogues_are_separate(self, client: AsyncClient, auth_headers, make_item):
        component = await make_item(name='Servo Motor')
        book = await make_item(name='Signals And Systems', kind=ItemKind.LIBRARY_ITEM, category='Textbooks')
        component_id, book_id = component.id, book.id

        labs = await client.get(LAB, headers=auth_headers)
        books = await client.get(LIBRARY, headers=auth_headers)

        assert [i['id'] for i in labs.json()['items']] == [component_id]
        assert [i['id'] for i in books.json()['items']] == [book_id]
        assert (await client.get(f'{LAB}/{book_id}', headers=auth_headers)).status_code == 404

    async def test_category_and_search(self, client: AsyncClient, auth_headers, make_item):
        await make_item(name='Ultrasonic Sensor', category='Sensors')
        await make_item(name='Stepper Motor', category='Actuators')

        by_category = await client.get(LAB, params={'category': 'sensors'}, headers=auth_headers)
        by_search = await client.get(LAB, params={'search': 'motor'}, headers=auth_headers)

        assert [i['name'] for i in by_category.json()['items']] == ['Ultrasonic Sensor']
        assert [i['name'] for i in by_search.json()['items']] == ['Stepper Motor']

    async def test_inactive_hidden_from_students(self, client: AsyncClient, auth_headers, admin_auth_headers, make_item):
        await make_item(name='Old Multimeter', is_active=False)

        student_view = await client.get(LAB, params={'include_inactive': True}, headers=auth_headers)
        admin_view = await client.get(LAB, params={'include_inactive': True}, headers=admin_auth_headers)

        assert student_view.json()['total'] == 0
        assert admin_view.json()['total'] == 1

    async def test_availability_tiers(self, client: AsyncClient, auth_headers, make_item):
        low = await make_item(total=10, available=1)
        empty = await make_item(total=4, available=0)
        low_id, empty_id = low.id, empty.id

        assert (await client.get(f'{LAB}/{low_id}', headers=auth_headers)).json()['availability'] == 'LOW_STOCK'
        assert (await client.get(f'{LAB}/{empty_id}', headers=auth_headers)).json()['availability'] == 'OUT_OF_STOCK'

    async def test_requires_login(self, client: AsyncClient):
        assert (await client.get(LAB)).status_code == 401


class TestUpdateItem:
    """Test PATCH and DELETE on the catalogues"""

    async def test_restock_keeps_loans(self, client: AsyncClient, db_session, admin_auth_headers, make_item):
        item_id = (await make_item(total=5, available=2)).id

        response = await client.patch(f'{LAB}/{item_id}', json={'total_quantity': 8}, headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json()['total_quantity'] == 8
        assert response.json()['available_quantity'] == 5
        assert await InventoryStore(db_session).held_quantity(item_id) == 3

    async def test_restock_below_loans(self, client: AsyncClient, db_session, admin_auth_headers, make_item):
        item_id = (await make_item(total=5, available=2)).id

        response = await client.patch(
            f'{LAB}/{item_id}', json={'total_quantity': 2, 'name': 'Renamed'}, headers=admin_auth_headers
        )

        assert response.status_code == 400
        assert response.json()['error']['details'] == {'field': 'total_quantity'}
        item = await InventoryStore(db_session).get(item_id)
        assert (item.total_quantity, item.available_quantity) == (5, 2)
        assert item.name != 'Renamed'

    async def test_edit_fields(self, client: AsyncClient, admin_auth_headers, make_item):
        item_id = (await make_item()).id

        response = await client.patch(f'{LAB}/{item_id}', json={
            'category': 'power supplies',
            'specification_rows': [{'attribute': 'Output', 'value': '12V'}],
        }, headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json()['category'] == 'Power Supplies'
        assert response.json()['specification'] == 'Output: 12V'

    @pytest.mark.parametrize('field', ['name', 'category', 'total_quantity', 'is_active'])
    async def test_null_for_required_column(self, client: AsyncClient, auth_headers, admin_auth_headers, make_item, field):
        item_id = (await make_item(name='Logic Analyzer', total=3)).id

        response = await client.patch(f'{LAB}/{item_id}', json={field: None}, headers=admin_auth_headers)

        assert response.status_code == 400
        assert response.json()['error']['code'] == 'VALIDATION_ERROR'
        assert field in response.json()['error']['message']
        unchanged = (await client.get(f'{LAB}/{item_id}', headers=auth_headers)).json()
        assert (unchanged['name'], unchanged['total_quantity'], unchanged['is_active']) == ('Logic Analyzer', 3, True)

    async def test_null_clears_optional_column(self, client: AsyncClient, admin_auth_headers, make_item):
        item_id = (await make_item(location='LAB 01')).id

        response = await client.patch(f'{LAB}/{item_id}', json={'location': None}, headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json()['location'] is None

    async def test_deactivate(self, client: AsyncClient, auth_headers, admin_auth_headers, make_item):
        item_id = (await make_item()).id

        response = await client.delete(f'{LAB}/{item_id}', headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json()['is_active'] is False
        assert (await client.get(LAB, headers=auth_headers)).json()['total'] == 0
        assert (await client.get(f'{LAB}/{item_id}', headers=auth_headers)).status_code == 200

    async def test_delete_other_kind_is_404(self, client: AsyncClient, admin_auth_headers, make_item):
        book_id = (await make_item(kind=ItemKind.LIBRARY_ITEM)).id

        response = await client.delete(f'{LAB}/{book_id}', headers=admin_auth_headers)

        assert response.status_code == 404
