from dc_registry.models.exceptions.registry_errors import CastError, InvalidArgument, NotFound, StateConflict
from dc_registry.models.query_filters import QueryFilters
from tests.fixtures.data_centers import make_record


def test_get_by_id(test_client, data_center_service_mock, data_center):
    data_center_service_mock.by_id.return_value = data_center

    response = test_client.get(f'/data-centers/{data_center.id}')

    assert response.status_code == 200
    assert response.json()['centerId'] == 'collab'
    assert response.json()['id'] == data_center.id
    data_center_service_mock.by_id.assert_awaited_once_with(data_center.id)


def test_get_by_id_not_found(test_client, data_center_service_mock):
    data_center_service_mock.by_id.side_effect = NotFound('Data center with id 5f1b2c3d4e5f6a7b8c9d0e1f not found')

    response = test_client.get('/data-centers/5f1b2c3d4e5f6a7b8c9d0e1f')

    assert response.status_code == 404
    assert response.json() == {
        'error': 'Not found', 'message': 'Data center with id 5f1b2c3d4e5f6a7b8c9d0e1f not found'
    }


def test_get_by_malformed_id(test_client, data_center_service_mock):
    data_center_service_mock.by_id.side_effect = CastError("Cast to ObjectId failed for value 'XYZ'", 'XYZ')

    response = test_client.get('/data-centers/XYZ')

    assert response.status_code == 404
    assert response.json() == {'error': 'Not found', 'message': 'Id not found'}


def test_search(test_client, data_center_service_mock, data_center):
    data_center_service_mock.adv_search_by_query.return_value = [data_center]
    query = {'country': {'$in': ['CA', 'US']}}

    response = test_client.post('/data-centers/search', json=query)

    assert response.status_code == 200
    assert [dc['centerId'] for dc in response.json()] == ['collab']
    data_center_service_mock.adv_search_by_query.assert_awaited_once_with(query)


def test_search_invalid_query(test_client, data_center_service_mock):
    data_center_service_mock.adv_search_by_query.side_effect = InvalidArgument('Invalid search query: unknown operator')

    response = test_client.post('/data-centers/search', json={'country': {'$bogus': 1}})

    assert response.status_code == 400
    assert response.json() == {'error': 'InvalidArgument', 'message': 'Invalid search query: unknown operator'}


def test_list_without_filters(test_client, data_center_service_mock):
    data_center_service_mock.get_many.return_value = []

    response = test_client.get('/data-centers')

    assert response.status_code == 200
    assert response.json() == []
    data_center_service_mock.get_many.assert_awaited_once_with(
        QueryFilters(country=[], name=[], centerId=[], type=[])
    )


def test_list_with_filters(test_client, data_center_service_mock, data_center):
    data_center_service_mock.get_many.return_value = [data_center]

    response = test_client.get('/data-centers?country=CA,US&name=Foo')

    assert response.status_code == 200
    data_center_service_mock.get_many.assert_awaited_once_with(
        QueryFilters(country=['CA', 'US'], name=['Foo'], centerId=[], type=[])
    )


def test_list_with_center_id_and_type(test_client, data_center_service_mock):
    data_center_service_mock.get_many.return_value = []

    test_client.get('/data-centers?centerId=collab,aws-toronto&type=RDPC')

    data_center_service_mock.get_many.assert_awaited_once_with(
        QueryFilters(country=[], name=[], centerId=['collab', 'aws-toronto'], type=['RDPC'])
    )


def test_create(test_client, data_center_service_mock, data_center):
    data_center_service_mock.create.return_value = data_center

    response = test_client.post('/data-centers', json=make_record())

    assert response.status_code == 201
    assert response.json()['id'] == data_center.id
    data_center_service_mock.create.assert_awaited_once_with(make_record())


def test_create_duplicate(test_client, data_center_service_mock):
    data_center_service_mock.create.side_effect = StateConflict('A data center with centerId collab already exists')

    response = test_client.post('/data-centers', json=make_record())

    assert response.status_code == 409
    assert response.json()['error'] == 'StateConflict'


def test_create_invalid(test_client, data_center_service_mock):
    data_center_service_mock.create.side_effect = InvalidArgument('Invalid data center: email: value is not valid')

    response = test_client.post('/data-centers', json=make_record(email='nope'))

    assert response.status_code == 400
    assert response.json() == {'error': 'InvalidArgument', 'message': 'Invalid data center: email: value is not valid'}


def test_update(test_client, data_center_service_mock, data_center):
    data_center_service_mock.update.return_value = data_center
    record = make_record(id=data_center.id, name='Renamed')

    response = test_client.put('/data-centers', json=record)

    assert response.status_code == 200
    data_center_service_mock.update.assert_awaited_once_with(record)


def test_update_missing(test_client, data_center_service_mock):
    data_center_service_mock.update.side_effect = NotFound('Data center with id 5f1b2c3d4e5f6a7b8c9d0e1f not found')

    response = test_client.put('/data-centers', json=make_record(id='5f1b2c3d4e5f6a7b8c9d0e1f'))

    assert response.status_code == 404
    assert response.json()['error'] == 'Not found'


def test_delete(test_client, data_center_service_mock):
    response = test_client.delete('/data-centers/5f1b2c3d4e5f6a7b8c9d0e1f')

    assert response.status_code == 204
    assert response.content == b''
    data_center_service_mock.delete_dc.assert_awaited_once_with('5f1b2c3d4e5f6a7b8c9d0e1f')


def test_delete_missing(test_client, data_center_service_mock):
    data_center_service_mock.delete_dc.side_effect = NotFound('Data center with id XYZ not found')

    response = test_client.delete('/data-centers/XYZ')

    assert response.status_code == 404
    assert response.json() == {'error': 'Not found', 'message': 'Data center with id XYZ not found'}
