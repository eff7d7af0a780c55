import re
from unittest.mock import patch

from sharedkey.auth import Authenticator, encode_query, rfc1123_now
from sharedkey.utils import SharedKeySigner, SigningRequest

DATE = "Wed, 01 Jan 2014 00:00:00 GMT"


def test_rfc1123_now_format():
    assert re.fullmatch(r"[A-Z][a-z]{2}, \d{2} [A-Z][a-z]{2} \d{4} \d{2}:\d{2}:\d{2} GMT",
                        rfc1123_now())


def test_encode_query_escapes_values():
    assert encode_query({'popreceipt': 'AB+/=', 'visibilitytimeout': 60}) == \
        'popreceipt=AB%2B%2F%3D&visibilitytimeout=60'


def test_sign_lease_matches_pinned_signature(emulator_account):
    auth = Authenticator(emulator_account, api_version='2013-08-15')
    headers, url = auth.sign(
        'PUT', emulator_account.endpoint('blob'), path='/nonexistent-container',
        query={'restype': 'container', 'comp': 'lease'},
        headers={'x-ms-date': DATE, 'x-ms-lease-action': 'acquire',
                 'x-ms-lease-duration': '60'})
    assert url == ('http://127.0.0.1:10000/devstoreaccount1/nonexistent-container'
                   '?restype=container&comp=lease')
    assert headers['x-ms-version'] == '2013-08-15'
    assert headers['Authorization'] == \
        'SharedKey devstoreaccount1:QGTeKKO+o+ZzU/PIIcVXh3Ynq8PzSppj8aac+xtIhiw='


def test_sign_sets_version_and_date(emulator_account):
    auth = Authenticator(emulator_account)
    with patch('sharedkey.auth.rfc1123_now', return_value=DATE):
        headers, url = auth.sign('GET', emulator_account.endpoint('blob'),
                                 path='/nonexistent-container', query={'restype': 'container'})
    assert headers['x-ms-version'] == '2014-02-14'
    assert headers['x-ms-date'] == DATE
    assert headers['Authorization'] == \
        'SharedKey devstoreaccount1:UoQtDCILGqGRjafD+mAcmrnuwg6ayGBFXq7Y6eYxhcE='


def test_sign_does_not_mutate_caller_headers(emulator_account):
    auth = Authenticator(emulator_account)
    caller = {'x-ms-date': DATE}
    auth.sign('GET', emulator_account.endpoint('blob'), headers=caller)
    assert caller == {'x-ms-date': DATE}


def test_content_length_for_put_body(emulator_account):
    auth = Authenticator(emulator_account)
    headers, url = auth.sign('PUT', emulator_account.endpoint('blob'), path='/c',
                             headers={'x-ms-date': DATE}, payload=b'hello')
    request = SigningRequest.from_url('PUT', url, {k: v for k, v in headers.items()
                                                   if k != 'Authorization'})
    signature = SharedKeySigner.sign(request, emulator_account.name, emulator_account.key, {}, '5')
    assert headers['Authorization'].endswith(':' + signature)


def test_endpoint_trailing_slash(emulator_account):
    auth = Authenticator(emulator_account)
    _, url = auth.sign('GET', 'http://127.0.0.1:10000/devstoreaccount1/', path='/c')
    assert url == 'http://127.0.0.1:10000/devstoreaccount1/c'
