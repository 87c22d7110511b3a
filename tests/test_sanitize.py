"""
Tests for request key sanitization (MongoDB operator injection).
"""

import pytest
from flask import g, jsonify, request
from werkzeug.datastructures import MultiDict

from yelpcamp.sanitize import sanitize_in_place, sanitize_key, sanitize_multidict


class TestSanitizeKey:

    @pytest.mark.parametrize('key, expected', [
        ('$where', '_where'),
        ('$gt', '_gt'),
        ('profile.admin', 'profile_admin'),
        ('$a.b.c', '_a_b_c'),
        ('price$', 'price$'),
        ('title', 'title'),
    ])
    def test_rewrites(self, key, expected):
        assert sanitize_key(key) == expected


class TestSanitizeData:

    def test_multidict_keeps_values_and_repeats(self):
        data = MultiDict([('$ne', '1'), ('tag', 'a'), ('tag', 'b')])
        clean, changed = sanitize_multidict(data)
        assert clean.getlist('_ne') == ['1']
        assert clean.getlist('tag') == ['a', 'b']
        assert changed == ['$ne']

    def test_nested_json_rewritten(self):
        document = {
            'username': {'$ne': None},
            'items': [{'a.b': 1}],
            'title': 'ok',
        }
        changed = sanitize_in_place(document)
        assert document == {
            'username': {'_ne': None},
            'items': [{'a_b': 1}],
            'title': 'ok',
        }
        assert sorted(changed) == ['$ne', 'a.b']

    def test_values_untouched(self):
        document = {'body': '$where is just text.'}
        assert sanitize_in_place(document) == []
        assert document['body'] == '$where is just text.'


class TestSanitizeStage:

    @pytest.fixture
    def echo_app(self, app):
        @app.route('/_echo', methods=['GET', 'POST'])
        def echo():
            return jsonify(
                args=sorted(request.args.keys()),
                form=sorted(request.form.keys()),
                json=request.get_json(silent=True),
                sanitized=g.state.sanitized_keys,
            )
        return app

    def test_query_and_form_keys_rewritten(self, echo_app):
        response = echo_app.test_client().post(
            '/_echo?$where=1&sort.by=title',
            data={'username[$ne]': 'x', '$gt': '', 'title': 'Pines'},
        )
        body = response.json
        assert body['args'] == ['_where', 'sort_by']
        assert body['form'] == ['_gt', 'title', 'username[$ne]']
        assert set(body['sanitized']) == {'$where', 'sort.by', '$gt'}

    def test_json_body_rewritten(self, echo_app):
        response = echo_app.test_client().post('/_echo', json={'user': {'$gt': ''}})
        assert response.json['json'] == {'user': {'_gt': ''}}

    def test_clean_request_unchanged(self, echo_app):
        response = echo_app.test_client().get('/_echo?page=2')
        assert response.json['args'] == ['page']
        assert response.json['sanitized'] == []

    def test_sanitized_login_cannot_inject_operator(self, client):
        response = client.post('/login', data={'username': 'camper', 'password.$ne': 'x'})
        # Rewritten to password_$ne, so no password reaches the form.
        assert response.status_code == 200
        assert b'Password is required.' in response.data
